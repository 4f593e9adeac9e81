"""Transient user-facing messages (the console's toast surface)."""

import logging
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum

logger = logging.getLogger(__name__)


class ToastLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class Toast:
    level: ToastLevel
    message: str
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))


ToastListener = Callable[[Toast], None]

_LOG_LEVELS = {
    ToastLevel.SUCCESS: logging.INFO,
    ToastLevel.INFO: logging.INFO,
    ToastLevel.WARNING: logging.WARNING,
    ToastLevel.ERROR: logging.WARNING,
}


class Toaster:
    """
    Records toasts and fans them out to listeners.

    The application shell subscribes to render them; history is bounded.
    """

    def __init__(self, max_history: int = 50):
        self._history: deque[Toast] = deque(maxlen=max_history)
        self._listeners: list[ToastListener] = []

    @property
    def history(self) -> list[Toast]:
        return list(self._history)

    def subscribe(self, listener: ToastListener) -> Callable[[], None]:
        """Register a listener; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def show(self, level: ToastLevel, message: str) -> Toast:
        toast = Toast(level=level, message=message)
        self._history.append(toast)
        logger.log(_LOG_LEVELS[level], f"Toast [{level.value}]: {message}")

        for listener in list(self._listeners):
            try:
                listener(toast)
            except Exception as e:
                logger.error(f"Toast listener failed: {e}", exc_info=True)

        return toast

    def success(self, message: str) -> Toast:
        return self.show(ToastLevel.SUCCESS, message)

    def error(self, message: str) -> Toast:
        return self.show(ToastLevel.ERROR, message)

    def warning(self, message: str) -> Toast:
        return self.show(ToastLevel.WARNING, message)

    def info(self, message: str) -> Toast:
        return self.show(ToastLevel.INFO, message)

    def clear(self) -> None:
        self._history.clear()
