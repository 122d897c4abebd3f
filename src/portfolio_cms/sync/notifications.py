# ABOUTME: Transient user-visible notifications raised by store operations.
# ABOUTME: Collected in memory and pushed to listeners such as the CLI printer.

import threading
from collections import deque
from collections.abc import Callable
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from portfolio_cms.models.base import utc_now


class NotificationLevel(str, Enum):
    """Severity of a notification."""

    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


class Notification(BaseModel):
    """A dismissible message for the user."""

    level: NotificationLevel
    title: str
    message: str
    created_at: datetime = Field(default_factory=utc_now)


NotificationListener = Callable[[Notification], None]


class Notifier:
    """Keeps recent notifications and forwards each one to registered listeners."""

    MAX_HISTORY = 50

    def __init__(self) -> None:
        self._history: deque[Notification] = deque(maxlen=self.MAX_HISTORY)
        self._listeners: list[NotificationListener] = []
        self._lock = threading.Lock()

    def add_listener(self, listener: NotificationListener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def info(self, title: str, message: str) -> Notification:
        return self._publish(NotificationLevel.INFO, title, message)

    def success(self, title: str, message: str) -> Notification:
        return self._publish(NotificationLevel.SUCCESS, title, message)

    def error(self, title: str, message: str) -> Notification:
        return self._publish(NotificationLevel.ERROR, title, message)

    def drain(self) -> list[Notification]:
        """Return and forget every notification raised so far."""
        with self._lock:
            notifications = list(self._history)
            self._history.clear()
        return notifications

    def _publish(self, level: NotificationLevel, title: str, message: str) -> Notification:
        notification = Notification(level=level, title=title, message=message)
        with self._lock:
            self._history.append(notification)
            listeners = list(self._listeners)
        for listener in listeners:
            listener(notification)
        return notification
