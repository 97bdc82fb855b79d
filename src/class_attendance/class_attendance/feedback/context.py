from __future__ import annotations

import logging
from typing import Optional

from ..common.scheduling import LoopScheduler, Scheduler
from ..core.constants import NOTIFICATION_TTL_MS, OVERLAY_TTL_MS
from ..core.enums import NotificationCategory
from ..core.exceptions import FeedbackNotMountedError
from .model import FeedbackSnapshot, OverlayState
from .notifications import NotificationQueue
from .overlay import SuccessOverlay

log = logging.getLogger(__name__)


class FeedbackContext:
    """Feedback channel injected into every component that reports outcomes.

    One context per admin session. ``mount()`` builds the notification queue
    and the success overlay; ``unmount()`` cancels their timers.
    """

    def __init__(
        self,
        scheduler: Optional[Scheduler] = None,
        *,
        notification_ttl_ms: int = NOTIFICATION_TTL_MS,
        overlay_ttl_ms: int = OVERLAY_TTL_MS,
    ):
        self._scheduler = scheduler or LoopScheduler()
        self._notification_ttl_ms = notification_ttl_ms
        self._overlay_ttl_ms = overlay_ttl_ms
        self._queue: Optional[NotificationQueue] = None
        self._overlay: Optional[SuccessOverlay] = None

    def __enter__(self) -> "FeedbackContext":
        self.mount()
        return self

    def __exit__(self, *exc) -> None:
        self.unmount()

    @property
    def mounted(self) -> bool:
        return self._queue is not None

    def mount(self) -> None:
        if self.mounted:
            return
        self._queue = NotificationQueue(self._scheduler, ttl_ms=self._notification_ttl_ms)
        self._overlay = SuccessOverlay(self._scheduler, ttl_ms=self._overlay_ttl_ms)

    def unmount(self) -> None:
        if self._queue is not None:
            self._queue.clear()
        if self._overlay is not None:
            self._overlay.hide()
        self._queue = None
        self._overlay = None

    def _require(self) -> tuple[NotificationQueue, SuccessOverlay]:
        if self._queue is None or self._overlay is None:
            raise FeedbackNotMountedError("FeedbackContext is not mounted")
        return self._queue, self._overlay

    @property
    def notifications(self) -> NotificationQueue:
        return self._require()[0]

    @property
    def overlay(self) -> SuccessOverlay:
        return self._require()[1]

    def notify(self, message: str, category: NotificationCategory = NotificationCategory.INFO) -> str:
        queue, _ = self._require()
        category = NotificationCategory(category)
        if category == NotificationCategory.ERROR:
            log.warning("notify[%s]: %s", category.value, message)
        else:
            log.info("notify[%s]: %s", category.value, message)
        return queue.enqueue(message, category)

    def celebrate(self, message: str) -> None:
        _, overlay = self._require()
        log.info("celebrate: %s", message)
        overlay.trigger(message)

    def dismiss(self, notification_id: str) -> bool:
        queue, _ = self._require()
        return queue.dismiss(notification_id)

    def snapshot(self) -> FeedbackSnapshot:
        if not self.mounted:
            return FeedbackSnapshot(notifications=(), overlay=OverlayState())
        queue, overlay = self._require()
        return FeedbackSnapshot(notifications=queue.items, overlay=overlay.state)
