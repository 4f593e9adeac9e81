"""
Client-side validation for dialog drafts.

Each validator returns every failing field in validation order. Pages surface
only the first one, so order matters: it mirrors the order of the form.
"""

from collections.abc import Callable

from console.models.forms import (
    CustomerForm,
    DraftForm,
    JobForm,
    RefundForm,
    StockItemForm,
    TechnicianForm,
    WarrantyForm,
)
from shared.resilient_api import FieldError

Validator = Callable[[DraftForm, bool], list[FieldError]]


def _blank(value: str | None) -> bool:
    return not (value or "").strip()


def _required(errors: list[FieldError], form: DraftForm, field: str, label: str) -> None:
    if _blank(getattr(form, field)):
        errors.append(FieldError(field, f"{label} is required"))


def validate_customer(form: CustomerForm, creating: bool = True) -> list[FieldError]:
    errors: list[FieldError] = []
    _required(errors, form, "first_name", "First name")
    _required(errors, form, "last_name", "Last name")
    _required(errors, form, "email", "Email")
    _required(errors, form, "phone", "Phone")
    return errors


def validate_job(form: JobForm, creating: bool = True) -> list[FieldError]:
    errors: list[FieldError] = []
    _required(errors, form, "title", "Job title")
    _required(errors, form, "customer_id", "Customer")
    return errors


def validate_stock_item(form: StockItemForm, creating: bool = True) -> list[FieldError]:
    errors: list[FieldError] = []
    _required(errors, form, "sku", "SKU")
    _required(errors, form, "name", "Name")
    _required(errors, form, "category", "Category")

    if form.quantity < 0:
        errors.append(FieldError("quantity", "Quantity cannot be negative"))
    if form.min_quantity < 0:
        errors.append(FieldError("min_quantity", "Minimum quantity cannot be negative"))
    if form.max_quantity <= 0:
        errors.append(FieldError("max_quantity", "Maximum quantity must be greater than 0"))
    if form.unit_price < 0:
        errors.append(FieldError("unit_price", "Unit price cannot be negative"))
    if form.min_quantity > form.max_quantity:
        errors.append(
            FieldError("min_quantity", "Minimum quantity cannot be greater than maximum quantity")
        )
    return errors


def validate_refund(form: RefundForm, creating: bool = True) -> list[FieldError]:
    errors: list[FieldError] = []
    _required(errors, form, "customer_id", "Customer")
    _required(errors, form, "refund_method", "Refund method")
    _required(errors, form, "reason", "Reason")
    if form.amount <= 0:
        errors.append(FieldError("amount", "Amount must be greater than 0"))
    return errors


def validate_warranty(form: WarrantyForm, creating: bool = True) -> list[FieldError]:
    errors: list[FieldError] = []
    _required(errors, form, "repair_ticket_id", "Repair ticket")
    _required(errors, form, "customer_id", "Customer")
    _required(errors, form, "device_info", "Device info")
    _required(errors, form, "repair_details", "Repair details")
    if form.warranty_period <= 0:
        errors.append(FieldError("warranty_period", "Warranty period must be greater than 0"))
    return errors


def validate_technician(form: TechnicianForm, creating: bool = True) -> list[FieldError]:
    errors: list[FieldError] = []
    _required(errors, form, "first_name", "First name")
    _required(errors, form, "last_name", "Last name")
    _required(errors, form, "email", "Email")
    # Existing technicians keep their password unless a new one is typed
    if creating:
        _required(errors, form, "password", "Password")
    return errors
