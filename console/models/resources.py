"""Pydantic models for the resources managed by the console pages."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """
    Base for API payloads.

    camelCase on the wire, snake_case in Python; unknown server fields are kept.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        coerce_numbers_to_str=True,
    )


class PersonRef(ApiModel):
    """Nested customer/user reference embedded in other resources."""

    id: str
    first_name: str = ""
    last_name: str = ""
    email: str | None = None
    phone: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


# =============================================================================
# Customers
# =============================================================================


class CustomerType(str, Enum):
    INDIVIDUAL = "INDIVIDUAL"
    BUSINESS = "BUSINESS"


class Customer(ApiModel):
    id: str
    first_name: str = ""
    last_name: str = ""
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    customer_type: str = CustomerType.INDIVIDUAL.value
    notes: str | None = None
    is_active: bool = True
    status: str | None = None
    total_spent: float = 0.0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class CustomerStats(ApiModel):
    total: int = 0
    active: int = 0
    inactive: int = 0
    blocked: int = 0
    new_this_month: int = 0
    total_revenue: float = 0.0
    total_repairs: int = 0
    average_spent_per_customer: float = 0.0


# =============================================================================
# Jobs
# =============================================================================


class JobStatus(str, Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    ON_HOLD = "ON_HOLD"
    COMPLETED = "COMPLETED"


class Priority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class Job(ApiModel):
    id: str
    job_id: str | None = None
    customer_id: str | None = None
    customer_name: str | None = None
    customer_email: str | None = None
    assigned_technician: str | None = None
    status: str = JobStatus.PENDING.value
    title: str = ""
    description: str | None = None
    priority: str = Priority.MEDIUM.value
    due_date: str | None = None
    total_cost: float = 0.0
    created_at: datetime | None = None

    @property
    def display_name(self) -> str:
        return self.title or self.job_id or self.id


class JobStats(ApiModel):
    total: int = 0
    in_progress: int = 0
    completed: int = 0
    on_hold: int = 0
    percentage_change: float = 0.0


# =============================================================================
# Stock
# =============================================================================


class StockStatus(str, Enum):
    IN_STOCK = "in_stock"
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"
    DISCONTINUED = "discontinued"


class StockItem(ApiModel):
    id: str
    sku: str = ""
    name: str = ""
    category: str = ""
    description: str | None = None
    quantity: int = 0
    min_quantity: int = 0
    max_quantity: int = 0
    unit_price: float = 0.0
    supplier: str | None = None
    location: str | None = None
    last_updated: str | None = None
    status: str | None = None

    @property
    def display_name(self) -> str:
        return self.name or self.sku


def stock_status(item: StockItem) -> str:
    """Derived stock level; an explicit discontinued status wins."""
    if item.status == StockStatus.DISCONTINUED.value:
        return StockStatus.DISCONTINUED.value
    if item.quantity <= 0:
        return StockStatus.OUT_OF_STOCK.value
    if item.quantity <= item.min_quantity:
        return StockStatus.LOW_STOCK.value
    return StockStatus.IN_STOCK.value


class StockStats(ApiModel):
    total_items: int = 0
    total_value: float = 0.0
    low_stock_items: int = 0
    out_of_stock_items: int = 0
    categories_count: int = 0
    average_item_value: float = 0.0


# =============================================================================
# Refunds
# =============================================================================


class RefundStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    PROCESSED = "PROCESSED"
    REJECTED = "REJECTED"


class Refund(ApiModel):
    id: str
    amount: float = 0.0
    currency: str = "USD"
    reason: str = ""
    status: str = RefundStatus.PENDING.value
    refund_method: str | None = None
    reference_number: str | None = None
    notes: str | None = None
    customer: PersonRef | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def display_name(self) -> str:
        return self.reference_number or self.id


class RefundStats(ApiModel):
    total: int = 0
    pending: int = 0
    approved: int = 0
    processed: int = 0
    rejected: int = 0
    total_amount: float = 0.0
    pending_amount: float = 0.0
    approved_amount: float = 0.0
    processed_amount: float = 0.0
    rejected_amount: float = 0.0


# =============================================================================
# Warranties
# =============================================================================


class RepairTicketRef(ApiModel):
    id: str
    title: str = ""
    device_brand: str | None = None
    device_model: str | None = None
    device_serial: str | None = None


class Warranty(ApiModel):
    id: str
    repair_ticket_id: str | None = None
    repair_ticket: RepairTicketRef | None = None
    customer_id: str | None = None
    customer: PersonRef | None = None
    device_info: str = ""
    repair_details: str = ""
    warranty_period: int = 0
    warranty_start_date: str | None = None
    warranty_end_date: str | None = None
    terms_conditions: str | None = None
    is_active: bool = True
    is_expired: bool = False
    days_remaining: int = 0

    @property
    def display_name(self) -> str:
        return self.device_info or self.id


class WarrantyStats(ApiModel):
    total_warranties: int = 0
    active_warranties: int = 0
    expiring_soon: int = 0
    expired: int = 0
    average_warranty_period: float = 0.0


# =============================================================================
# Technicians
# =============================================================================


class Technician(ApiModel):
    id: str
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str | None = None
    title: str | None = None
    department: str | None = None
    is_active: bool = True
    skills: list[str] | str | None = None
    hourly_rate: float | None = None
    availability: str | None = None

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class TechnicianStats(ApiModel):
    total_technicians: int = 0
    active_technicians: int = 0
    technicians_with_jobs: int = 0
    top_performers: list[dict] = Field(default_factory=list)
