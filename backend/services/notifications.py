"""
Notification surface used by the post settings menu.
"""

import logging
from datetime import datetime
from enum import Enum
from typing import Iterable, List, NamedTuple, Protocol

logger = logging.getLogger(__name__)


class NotificationType(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


class Notification(NamedTuple):
    type: NotificationType
    message: str
    created_at: datetime


class Notifier(Protocol):
    """Anything that can show messages to the user. Fire and forget."""

    def show_success(self, message: str) -> None: ...

    def show_error(self, message: str) -> None: ...

    def show_errors(self, messages: Iterable[str]) -> None: ...


class NotificationCenter:
    """In-memory notifier that keeps every message and logs it."""

    def __init__(self):
        self.notifications: List[Notification] = []

    def show_success(self, message: str) -> None:
        self._add(NotificationType.SUCCESS, message)

    def show_error(self, message: str) -> None:
        self._add(NotificationType.ERROR, message)

    def show_errors(self, messages: Iterable[str]) -> None:
        for message in messages:
            self.show_error(message)

    @property
    def successes(self) -> List[str]:
        return [n.message for n in self.notifications if n.type == NotificationType.SUCCESS]

    @property
    def errors(self) -> List[str]:
        return [n.message for n in self.notifications if n.type == NotificationType.ERROR]

    def clear(self) -> None:
        self.notifications.clear()

    def _add(self, notification_type: NotificationType, message: str) -> None:
        self.notifications.append(Notification(notification_type, message, datetime.now()))
        if notification_type == NotificationType.ERROR:
            logger.warning(f"Notification [{notification_type.value}]: {message}")
        else:
            logger.info(f"Notification [{notification_type.value}]: {message}")
