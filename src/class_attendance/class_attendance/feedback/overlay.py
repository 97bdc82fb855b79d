from __future__ import annotations

from typing import Optional

from ..common.scheduling import Scheduler, TimerHandle
from ..core.constants import OVERLAY_TTL_MS
from .model import OverlayState


class SuccessOverlay:
    """Singleton high-salience success surface.

    Re-triggering while visible replaces the message and restarts the hide
    timer; the superseded timer never fires.
    """

    def __init__(self, scheduler: Scheduler, *, ttl_ms: int = OVERLAY_TTL_MS):
        self._scheduler = scheduler
        self._ttl_seconds = int(ttl_ms) / 1000.0
        self._state = OverlayState()
        self._pending: Optional[TimerHandle] = None

    @property
    def state(self) -> OverlayState:
        return self._state

    @property
    def visible(self) -> bool:
        return self._state.visible

    @property
    def message(self) -> str:
        return self._state.message

    def trigger(self, message: str) -> None:
        self._cancel_pending()
        self._state = OverlayState(message=message, visible=True)
        self._pending = self._scheduler.call_later(self._ttl_seconds, self._on_timer)

    def hide(self) -> None:
        self._cancel_pending()
        self._state = OverlayState()

    def _on_timer(self) -> None:
        self._pending = None
        self._state = OverlayState()

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
