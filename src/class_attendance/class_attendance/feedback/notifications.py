from __future__ import annotations

import uuid
from typing import Callable, Optional

from ..common.datetime_utils import now_local
from ..common.scheduling import Scheduler, TimerHandle
from ..core.constants import NOTIFICATION_TTL_MS
from ..core.enums import NotificationCategory
from .model import Notification


class NotificationQueue:
    """Independent, self-expiring toast notifications.

    Each notification owns its own expiry timer, started when it is enqueued.
    There is no cap and no deduplication; order is call order.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        *,
        ttl_ms: int = NOTIFICATION_TTL_MS,
        clock: Callable[[], object] = now_local,
    ):
        self._scheduler = scheduler
        self._ttl_seconds = int(ttl_ms) / 1000.0
        self._clock = clock
        self._items: dict[str, Notification] = {}
        self._timers: dict[str, TimerHandle] = {}

    @property
    def items(self) -> tuple[Notification, ...]:
        return tuple(self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, notification_id: object) -> bool:
        return notification_id in self._items

    def enqueue(self, message: str, category: NotificationCategory = NotificationCategory.INFO) -> str:
        notification_id = uuid.uuid4().hex
        self._items[notification_id] = Notification(
            notification_id=notification_id,
            message=message,
            category=NotificationCategory(category),
            created_at=self._clock(),
        )
        self._timers[notification_id] = self._scheduler.call_later(
            self._ttl_seconds, lambda: self._expire(notification_id)
        )
        return notification_id

    def dismiss(self, notification_id: str) -> bool:
        timer: Optional[TimerHandle] = self._timers.pop(notification_id, None)
        if timer is not None:
            timer.cancel()
        return self._items.pop(notification_id, None) is not None

    def _expire(self, notification_id: str) -> None:
        self._timers.pop(notification_id, None)
        self._items.pop(notification_id, None)

    def clear(self) -> None:
        for timer in self._timers.values():
            timer.cancel()
        self._timers.clear()
        self._items.clear()
