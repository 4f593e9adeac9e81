"""Notification and notification-settings models."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import Field
from pydantic.alias_generators import to_camel

from console.models.resources import ApiModel


class NotificationType(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class NotificationCategory(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ORDER = "order"
    REPAIR = "repair"
    INVENTORY = "inventory"
    PAYMENT = "payment"
    WARRANTY = "warranty"
    REFUND = "refund"


class NotificationPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Notification(ApiModel):
    id: str
    title: str
    message: str
    type: NotificationType = NotificationType.INFO
    category: NotificationCategory = NotificationCategory.SYSTEM
    priority: NotificationPriority = NotificationPriority.MEDIUM
    action_url: str | None = None
    action_text: str | None = None
    timestamp: datetime | None = None
    read: bool = False
    user_id: str | None = None
    organization_id: str | None = None


class NotificationFrequency(str, Enum):
    IMMEDIATE = "immediate"
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"


DEFAULT_CHANNELS = ("email", "push", "in_app")
DEFAULT_QUIET_HOURS_START = "22:00"
DEFAULT_QUIET_HOURS_END = "08:00"
DEFAULT_TIMEZONE = "UTC"

_BOOLEAN_FIELDS = (
    "email",
    "sms",
    "push",
    "low_stock",
    "job_completion",
    "payment_reminders",
    "new_user",
    "order_update",
    "repair_update",
    "warranty_expiry",
    "system_maintenance",
    "quiet_hours_enabled",
)


def _parse_channels(value: Any) -> list[str]:
    if isinstance(value, str):
        return [c.strip() for c in value.split(",") if c.strip()]
    if isinstance(value, (list, tuple)):
        return [str(c) for c in value]
    return []


class NotificationSettings(ApiModel):
    """
    A user's notification preferences, always handled as a whole record.

    `email`/`sms`/`push` and `channels` are separate settings on the server
    and are edited independently.
    """

    email: bool = True
    sms: bool = False
    push: bool = True
    low_stock: bool = True
    job_completion: bool = True
    payment_reminders: bool = True
    new_user: bool = True
    order_update: bool = True
    repair_update: bool = True
    warranty_expiry: bool = True
    system_maintenance: bool = True
    quiet_hours_enabled: bool = False
    quiet_hours_start: str = DEFAULT_QUIET_HOURS_START
    quiet_hours_end: str = DEFAULT_QUIET_HOURS_END
    timezone: str = DEFAULT_TIMEZONE
    frequency: NotificationFrequency = NotificationFrequency.IMMEDIATE
    channels: list[str] = Field(default_factory=lambda: list(DEFAULT_CHANNELS))

    @classmethod
    def from_server(cls, data: dict[str, Any] | None) -> "NotificationSettings":
        """
        Build settings from a server record, filling defaults for falsy fields.

        Args:
            data: camelCase record as returned by the settings endpoint

        Returns:
            Complete settings; never raises on missing keys
        """
        data = data or {}

        def pick(name: str) -> Any:
            return data.get(to_camel(name), data.get(name))

        values: dict[str, Any] = {name: bool(pick(name)) for name in _BOOLEAN_FIELDS}
        values["quiet_hours_start"] = pick("quiet_hours_start") or DEFAULT_QUIET_HOURS_START
        values["quiet_hours_end"] = pick("quiet_hours_end") or DEFAULT_QUIET_HOURS_END
        values["timezone"] = pick("timezone") or DEFAULT_TIMEZONE

        frequency = pick("frequency")
        try:
            values["frequency"] = NotificationFrequency(frequency)
        except ValueError:
            values["frequency"] = NotificationFrequency.IMMEDIATE

        channels = _parse_channels(pick("channels"))
        values["channels"] = channels or list(DEFAULT_CHANNELS)

        return cls(**values)

    def to_wire(self) -> dict[str, Any]:
        """Complete camelCase record with `channels` comma-joined."""
        record = self.model_dump(by_alias=True, mode="json")
        record["channels"] = ",".join(self.channels)
        return record
