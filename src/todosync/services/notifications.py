"""Notification sinks.

The list controller reports every outcome the user should see as a
``Notification``. Sinks decide how to display it: the console sink prints
with rich, the memory sink just records.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum

from pydantic import BaseModel

from todosync.utils.ui.formatters import format_error, format_info, format_success


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


class Notification(BaseModel):
    """A human-readable message with a severity."""

    level: NotificationLevel
    message: str


class NotificationSink(ABC):
    """Receives notifications produced by the list controller."""

    @abstractmethod
    def notify(self, notification: Notification) -> None:
        """Deliver one notification."""

    def success(self, message: str) -> None:
        self.notify(Notification(level=NotificationLevel.SUCCESS, message=message))

    def error(self, message: str) -> None:
        self.notify(Notification(level=NotificationLevel.ERROR, message=message))

    def info(self, message: str) -> None:
        self.notify(Notification(level=NotificationLevel.INFO, message=message))


class ConsoleNotificationSink(NotificationSink):
    """Prints notifications to the terminal."""

    def __init__(self, show_success: bool = True):
        self.show_success = show_success

    def notify(self, notification: Notification) -> None:
        if notification.level is NotificationLevel.ERROR:
            format_error(notification.message)
        elif notification.level is NotificationLevel.SUCCESS:
            if self.show_success:
                format_success(notification.message)
        else:
            format_info(notification.message)


class MemoryNotificationSink(NotificationSink):
    """Keeps notifications in a list, oldest first."""

    def __init__(self):
        self.notifications: list[Notification] = []

    def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)

    @property
    def errors(self) -> list[str]:
        return [
            n.message for n in self.notifications if n.level is NotificationLevel.ERROR
        ]

    @property
    def successes(self) -> list[str]:
        return [
            n.message
            for n in self.notifications
            if n.level is NotificationLevel.SUCCESS
        ]

    def clear(self) -> None:
        self.notifications.clear()
