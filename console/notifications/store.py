"""In-memory notification list shared by the console for one session."""

import logging
from collections.abc import Callable

from console.models import Notification

logger = logging.getLogger(__name__)

NotificationListener = Callable[[Notification], None]


class NotificationStore:
    """
    Session-scoped notification list.

    Notifications are kept in arrival order. Beyond `max_items` the oldest
    are dropped.
    """

    def __init__(self, max_items: int = 100):
        self.max_items = max_items
        self._items: list[Notification] = []
        self._listeners: list[NotificationListener] = []

    @property
    def notifications(self) -> list[Notification]:
        return list(self._items)

    @property
    def unread_count(self) -> int:
        return sum(1 for n in self._items if not n.read)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, notification_id: object) -> bool:
        return any(n.id == notification_id for n in self._items)

    def subscribe(self, listener: NotificationListener) -> Callable[[], None]:
        """Call `listener` for every new notification; returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def add(self, notification: Notification) -> bool:
        """
        Append a notification.

        Returns:
            False if a notification with the same id is already held
        """
        if notification.id in self:
            return False

        self._items.append(notification)
        if len(self._items) > self.max_items:
            del self._items[: len(self._items) - self.max_items]

        for listener in list(self._listeners):
            try:
                listener(notification)
            except Exception as e:
                logger.error(f"Notification listener failed: {e}", exc_info=True)

        return True

    def mark_as_read(self, notification_id: str) -> None:
        self._items = [
            n.model_copy(update={"read": True}) if n.id == notification_id else n
            for n in self._items
        ]

    def mark_all_as_read(self) -> None:
        self._items = [n.model_copy(update={"read": True}) for n in self._items]

    def remove(self, notification_id: str) -> None:
        self._items = [n for n in self._items if n.id != notification_id]

    def clear(self) -> None:
        self._items = []
