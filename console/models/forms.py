"""
Draft forms for the create/edit dialogs.

A draft holds what the user typed; `to_payload()` turns it into the request
body the API expects (trimmed strings, camelCase keys, empty optional text
left out).
"""

from typing import Any, ClassVar, Self

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class DraftForm(BaseModel):
    """Base class for dialog drafts."""
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    # Text fields sent as absent when blank
    OPTIONAL_TEXT: ClassVar[tuple[str, ...]] = ()
    # Fixed fields added to create requests only
    CREATE_EXTRAS: ClassVar[dict[str, Any]] = {}
    # Fields only sent when creating
    CREATE_ONLY: ClassVar[tuple[str, ...]] = ()

    def to_payload(self, creating: bool = True) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        for name, value in self:
            if not creating and name in self.CREATE_ONLY:
                continue
            if isinstance(value, str):
                value = value.strip()
                if not value and name in self.OPTIONAL_TEXT:
                    continue
            if value is None:
                continue
            payload[to_camel(name)] = value

        if creating:
            payload.update(self.CREATE_EXTRAS)
        return payload

    @classmethod
    def from_item(cls, item: Any) -> Self:
        """Pre-populate an edit draft from a loaded entity."""
        values: dict[str, Any] = {}
        for name, field in cls.model_fields.items():
            value = getattr(item, name, None)
            if value is None:
                continue
            if field.annotation is str:
                if isinstance(value, list):
                    value = ", ".join(str(v) for v in value)
                elif not isinstance(value, str):
                    value = str(value)
            values[name] = value
        return cls(**values)


class CustomerForm(DraftForm):
    OPTIONAL_TEXT = ("notes",)
    CREATE_EXTRAS = {"status": "ACTIVE", "source": "WALK_IN"}

    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    customer_type: str = "INDIVIDUAL"
    notes: str = ""


class JobForm(DraftForm):
    OPTIONAL_TEXT = ("due_date",)

    title: str = ""
    description: str = ""
    customer_id: str = ""
    priority: str = "MEDIUM"
    due_date: str = ""
    assigned_technician: str = ""
    status: str = "PENDING"

    def to_payload(self, creating: bool = True) -> dict[str, Any]:
        payload = super().to_payload(creating)
        # The API takes the technician as assignedToId, null when unassigned
        technician = payload.pop("assignedTechnician", "")
        payload["assignedToId"] = technician or None
        if creating:
            payload.pop("status", None)
        return payload


class StockItemForm(DraftForm):
    OPTIONAL_TEXT = ("description", "supplier", "location")

    sku: str = ""
    name: str = ""
    category: str = ""
    description: str = ""
    quantity: int = 0
    min_quantity: int = 5
    max_quantity: int = 100
    unit_price: float = 0.0
    supplier: str = ""
    location: str = ""


class RefundForm(DraftForm):
    OPTIONAL_TEXT = ("order_id", "invoice_id", "reference_number", "notes")

    customer_id: str = ""
    order_id: str = ""
    invoice_id: str = ""
    amount: float = 0.0
    currency: str = "USD"
    reason: str = ""
    refund_method: str = ""
    reference_number: str = ""
    notes: str = ""
    status: str | None = None

    @classmethod
    def from_item(cls, item: Any) -> Self:
        form = super().from_item(item)
        customer = getattr(item, "customer", None)
        if customer is not None and not form.customer_id:
            form.customer_id = customer.id
        return form


class WarrantyForm(DraftForm):
    OPTIONAL_TEXT = ("warranty_start_date", "warranty_end_date", "terms_conditions")

    repair_ticket_id: str = ""
    customer_id: str = ""
    device_info: str = ""
    repair_details: str = ""
    warranty_period: int = 12
    warranty_start_date: str = ""
    warranty_end_date: str = ""
    terms_conditions: str = ""


class TechnicianForm(DraftForm):
    OPTIONAL_TEXT = ("password", "phone", "title", "department", "availability")
    CREATE_ONLY = ("password",)

    first_name: str = ""
    last_name: str = ""
    email: str = ""
    password: str = ""
    phone: str = ""
    title: str = ""
    department: str = ""
    skills: str = ""
    hourly_rate: str = ""
    availability: str = ""
    is_active: bool = True

    def to_payload(self, creating: bool = True) -> dict[str, Any]:
        payload = super().to_payload(creating)
        skills = payload.pop("skills", "")
        payload["skills"] = [s.strip() for s in skills.split(",") if s.strip()]
        rate = payload.pop("hourlyRate", "")
        payload["hourlyRate"] = float(rate) if rate else None
        return payload
