"""Pydantic models for console resources, drafts and notifications."""

from console.models.forms import (
    CustomerForm,
    DraftForm,
    JobForm,
    RefundForm,
    StockItemForm,
    TechnicianForm,
    WarrantyForm,
)
from console.models.notifications import (
    Notification,
    NotificationCategory,
    NotificationFrequency,
    NotificationPriority,
    NotificationSettings,
    NotificationType,
)
from console.models.resources import (
    ApiModel,
    Customer,
    CustomerStats,
    CustomerType,
    Job,
    JobStats,
    JobStatus,
    PersonRef,
    Priority,
    Refund,
    RefundStats,
    RefundStatus,
    RepairTicketRef,
    StockItem,
    StockStats,
    StockStatus,
    Technician,
    TechnicianStats,
    Warranty,
    WarrantyStats,
    stock_status,
)

__all__ = [
    # Resources
    "ApiModel",
    "Customer",
    "CustomerStats",
    "CustomerType",
    "Job",
    "JobStats",
    "JobStatus",
    "PersonRef",
    "Priority",
    "Refund",
    "RefundStats",
    "RefundStatus",
    "RepairTicketRef",
    "StockItem",
    "StockStats",
    "StockStatus",
    "Technician",
    "TechnicianStats",
    "Warranty",
    "WarrantyStats",
    "stock_status",
    # Drafts
    "CustomerForm",
    "DraftForm",
    "JobForm",
    "RefundForm",
    "StockItemForm",
    "TechnicianForm",
    "WarrantyForm",
    # Notifications
    "Notification",
    "NotificationCategory",
    "NotificationFrequency",
    "NotificationPriority",
    "NotificationSettings",
    "NotificationType",
]
