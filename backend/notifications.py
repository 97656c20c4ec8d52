"""Transient status messages: at most one is live, and each one expires on its own."""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from config import NOTIFICATION_SECONDS
from timers import cancel_task, start_task

logger = logging.getLogger(__name__)


class NotificationKind(Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    kind: NotificationKind
    message: str
    created_at: float = field(default_factory=time.time)

    @classmethod
    def success(cls, message: str) -> "Notification":
        return cls(NotificationKind.SUCCESS, message)

    @classmethod
    def error(cls, message: str) -> "Notification":
        return cls(NotificationKind.ERROR, message)

    @property
    def is_error(self) -> bool:
        return self.kind is NotificationKind.ERROR


class NotificationCenter:
    def __init__(self, ttl: float = NOTIFICATION_SECONDS):
        self.ttl = ttl
        self._current: Optional[Notification] = None
        self._expiry: Optional[asyncio.Task] = None
        self._listeners: List[Callable[[Optional[Notification]], None]] = []

    @property
    def current(self) -> Optional[Notification]:
        return self._current

    def subscribe(self, listener: Callable[[Optional[Notification]], None]) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def post(self, notification: Notification) -> None:
        """Show ``notification`` in place of the current one and restart the expiry clock."""
        cancel_task(self._expiry)
        self._current = notification
        self._expiry = start_task(lambda: self._expire(notification))
        logger.debug("Notification (%s): %s", notification.kind.value, notification.message)
        self._changed()

    def success(self, message: str) -> Notification:
        notification = Notification.success(message)
        self.post(notification)
        return notification

    def error(self, message: str) -> Notification:
        notification = Notification.error(message)
        self.post(notification)
        return notification

    def clear(self) -> None:
        cancel_task(self._expiry)
        self._expiry = None
        if self._current is None:
            return
        self._current = None
        self._changed()

    async def _expire(self, notification: Notification):
        await asyncio.sleep(self.ttl)
        # a replacement has its own timer
        if self._current is not notification:
            return
        self._current = None
        self._expiry = None
        self._changed()

    def _changed(self):
        for listener in list(self._listeners):
            listener(self._current)
