"""Fire-and-forget status messages for users.

The managers report the outcome of user actions ("Friend request sent!",
"Friend removed") here. Messages expire on their own after a short TTL;
nothing in the engine waits on or reads them back.
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from threading import Lock
from uuid import uuid4

from encore.core.config import settings

logger = logging.getLogger(__name__)


class NotificationType(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


@dataclass(frozen=True)
class Notification:
    id: str
    type: NotificationType
    message: str
    created_at: float = field(default_factory=time.monotonic)


class NotificationCenter:
    """Per-user queue of short-lived notifications."""

    def __init__(self, ttl_seconds: float = 4.0) -> None:
        self.ttl_seconds = ttl_seconds
        self._by_user: dict[str, list[Notification]] = {}
        self._lock = Lock()

    def _live(self, user_id: str) -> list[Notification]:
        """Drop the user's expired notifications. Caller holds the lock."""
        cutoff = time.monotonic() - self.ttl_seconds
        live = [n for n in self._by_user.get(user_id, []) if n.created_at > cutoff]
        self._by_user[user_id] = live
        return live

    def show(self, user_id: str, type: NotificationType, message: str) -> Notification:
        with self._lock:
            live = self._live(user_id)
            notification = Notification(id=uuid4().hex, type=type, message=message)
            live.append(notification)
        logger.debug(f"Notify {user_id} [{type.value}]: {message}")
        return notification

    def success(self, user_id: str, message: str) -> Notification:
        return self.show(user_id, NotificationType.SUCCESS, message)

    def error(self, user_id: str, message: str) -> Notification:
        return self.show(user_id, NotificationType.ERROR, message)

    def hide(self, user_id: str, notification_id: str) -> None:
        with self._lock:
            self._by_user[user_id] = [
                n for n in self._by_user.get(user_id, []) if n.id != notification_id
            ]

    def active(self, user_id: str) -> list[Notification]:
        """Return the user's unexpired notifications, oldest first."""
        with self._lock:
            return list(self._live(user_id))


notification_center = NotificationCenter(ttl_seconds=settings.notification_ttl_seconds)
