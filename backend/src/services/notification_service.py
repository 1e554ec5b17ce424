"""Transient, non-blocking user notifications (toasts)."""
import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

from core.config import get_settings
from models.base import utc_now

logger = logging.getLogger(__name__)


class NotificationLevel(StrEnum):
    """Severity of a notification."""

    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


_LOG_LEVELS = {
    NotificationLevel.SUCCESS: logging.INFO,
    NotificationLevel.INFO: logging.INFO,
    NotificationLevel.WARNING: logging.WARNING,
    NotificationLevel.ERROR: logging.WARNING,
}


@dataclass(frozen=True)
class Notification:
    """A message shown briefly to the user."""

    level: NotificationLevel
    message: str
    created_at: datetime = field(default_factory=utc_now)


class Notifier:
    """
    Collects notifications for the UI to display.

    Only the most recent notifications are kept; older ones are dropped
    without ever blocking the caller.
    """

    def __init__(self, history_size: int | None = None) -> None:
        if history_size is None:
            history_size = get_settings().notification_history_size
        self._notifications: deque[Notification] = deque(maxlen=history_size)

    def notify(self, level: NotificationLevel, message: str) -> Notification:
        """Record a notification."""
        notification = Notification(level=level, message=message)
        self._notifications.append(notification)
        logger.log(_LOG_LEVELS[level], "notification: %s", message, extra={"level": level.value})
        return notification

    def success(self, message: str) -> Notification:
        """Record a success notification."""
        return self.notify(NotificationLevel.SUCCESS, message)

    def info(self, message: str) -> Notification:
        """Record an informational notification."""
        return self.notify(NotificationLevel.INFO, message)

    def warning(self, message: str) -> Notification:
        """Record a warning notification."""
        return self.notify(NotificationLevel.WARNING, message)

    def error(self, message: str) -> Notification:
        """Record an error notification."""
        return self.notify(NotificationLevel.ERROR, message)

    def recent(self) -> list[Notification]:
        """Notifications still retained, oldest first."""
        return list(self._notifications)

    @property
    def latest(self) -> Notification | None:
        """Most recent notification, if any."""
        return self._notifications[-1] if self._notifications else None

    def clear(self) -> None:
        """Dismiss every notification."""
        self._notifications.clear()
