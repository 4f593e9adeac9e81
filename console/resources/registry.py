"""
Resource descriptors.

One ResourceSpec per console page. The page controller and ResourceAPI are
generic; everything resource-specific (routes, models, validation, filters)
lives here.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel

from console.models import (
    Customer,
    CustomerForm,
    CustomerStats,
    DraftForm,
    Job,
    JobForm,
    JobStats,
    Refund,
    RefundForm,
    RefundStats,
    StockItem,
    StockItemForm,
    StockStats,
    Technician,
    TechnicianForm,
    TechnicianStats,
    Warranty,
    WarrantyForm,
    WarrantyStats,
    stock_status,
)
from console.resources.filters import Matcher
from console.validators import (
    Validator,
    validate_customer,
    validate_job,
    validate_refund,
    validate_stock_item,
    validate_technician,
    validate_warranty,
)

# Warranties this close to their end date count as expiring soon
EXPIRING_SOON_DAYS = 30


class InsertPosition(str, Enum):
    START = "start"
    END = "end"


@dataclass(frozen=True)
class ResourceEndpoints:
    list: str
    stats: str
    create: str
    item: str
    # Key holding the list in paginated replies
    list_key: str | None = None

    def item_path(self, item_id: str) -> str:
        return self.item.format(id=item_id)


@dataclass(frozen=True)
class ResourceSpec:
    name: str
    label: str
    permission: str
    endpoints: ResourceEndpoints
    model: type[BaseModel]
    stats_model: type[BaseModel]
    form: type[DraftForm]
    validator: Validator
    search_fields: tuple[str, ...]
    filters: tuple[str, ...] = ()
    matchers: dict[str, Matcher] = field(default_factory=dict)
    insert_position: InsertPosition = InsertPosition.START
    error_code_fields: dict[str, tuple[str, str]] = field(default_factory=dict)
    actions: tuple[str, ...] = ()

    @property
    def label_lower(self) -> str:
        return self.label.lower()


# =============================================================================
# Filter matchers
# =============================================================================


def _active_status(item: Any, value: str) -> bool:
    """ACTIVE/INACTIVE against the boolean is_active flag."""
    return item.is_active == (value.upper() == "ACTIVE")


def _stock_status(item: Any, value: str) -> bool:
    return stock_status(item) == value


def _warranty_status(item: Any, value: str) -> bool:
    if value == "active":
        return item.is_active and not item.is_expired
    if value == "expired":
        return item.is_expired
    if value == "expiring_soon":
        return item.is_active and not item.is_expired and item.days_remaining <= EXPIRING_SOON_DAYS
    return False


# =============================================================================
# Registry
# =============================================================================


RESOURCES: dict[str, ResourceSpec] = {
    "customers": ResourceSpec(
        name="customers",
        label="Customer",
        permission="customers",
        endpoints=ResourceEndpoints(
            list="/customers",
            stats="/customers/stats",
            create="/customers",
            item="/customers/{id}",
            list_key="customers",
        ),
        model=Customer,
        stats_model=CustomerStats,
        form=CustomerForm,
        validator=validate_customer,
        search_fields=("first_name", "last_name", "email", "phone"),
        filters=("customer_type", "status"),
        matchers={"status": _active_status},
    ),
    "jobs": ResourceSpec(
        name="jobs",
        label="Job",
        permission="jobs",
        endpoints=ResourceEndpoints(
            list="/jobs/list",
            stats="/jobs/stats",
            create="/jobs",
            item="/jobs/{id}",
            list_key="jobs",
        ),
        model=Job,
        stats_model=JobStats,
        form=JobForm,
        validator=validate_job,
        search_fields=("title", "job_id", "customer_name", "customer_email", "assigned_technician"),
        filters=("status", "priority"),
    ),
    "stock": ResourceSpec(
        name="stock",
        label="Stock item",
        permission="inventory",
        endpoints=ResourceEndpoints(
            list="/inventory/stock-items",
            stats="/inventory/stats",
            create="/inventory/stock-items",
            item="/inventory/stock-items/{id}",
            list_key="items",
        ),
        model=StockItem,
        stats_model=StockStats,
        form=StockItemForm,
        validator=validate_stock_item,
        search_fields=("name", "sku", "category", "supplier", "location"),
        filters=("category", "status"),
        matchers={"status": _stock_status},
        insert_position=InsertPosition.END,
        error_code_fields={
            "DUPLICATE_ITEM_NAME": ("name", "An item with this name already exists"),
            "DUPLICATE_ITEM_SKU": ("sku", "An item with this SKU already exists"),
        },
    ),
    "refunds": ResourceSpec(
        name="refunds",
        label="Refund",
        permission="refunds",
        endpoints=ResourceEndpoints(
            list="/refunds",
            stats="/refunds/stats",
            create="/refunds",
            item="/refunds/{id}",
            list_key="refunds",
        ),
        model=Refund,
        stats_model=RefundStats,
        form=RefundForm,
        validator=validate_refund,
        search_fields=(
            "reason",
            "reference_number",
            "customer.first_name",
            "customer.last_name",
            "customer.email",
        ),
        filters=("status",),
        actions=("approve", "process"),
    ),
    "warranties": ResourceSpec(
        name="warranties",
        label="Warranty",
        permission="warranties",
        endpoints=ResourceEndpoints(
            list="/warranties",
            stats="/warranties/stats",
            create="/warranties",
            item="/warranties/{id}",
            list_key="warranties",
        ),
        model=Warranty,
        stats_model=WarrantyStats,
        form=WarrantyForm,
        validator=validate_warranty,
        search_fields=(
            "device_info",
            "repair_details",
            "repair_ticket.title",
            "customer.first_name",
            "customer.last_name",
        ),
        filters=("status",),
        matchers={"status": _warranty_status},
    ),
    "technicians": ResourceSpec(
        name="technicians",
        label="Technician",
        permission="technicians",
        endpoints=ResourceEndpoints(
            list="/technicians",
            stats="/technicians/stats/overview",
            create="/technicians",
            item="/technicians/{id}",
            list_key="technicians",
        ),
        model=Technician,
        stats_model=TechnicianStats,
        form=TechnicianForm,
        validator=validate_technician,
        search_fields=("first_name", "last_name", "email", "title", "department"),
        filters=("department", "status"),
        matchers={"status": _active_status},
    ),
}


def get_resource(name: str) -> ResourceSpec:
    """Look up a resource descriptor; raises KeyError for unknown names."""
    try:
        return RESOURCES[name]
    except KeyError:
        raise KeyError(f"Unknown resource: {name}") from None
