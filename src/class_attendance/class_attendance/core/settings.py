from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .constants import (
    DEFAULT_RECORDED_BY,
    DEFAULT_REMOTE_TIMEOUT_SECONDS,
    DEFAULT_SESSION_IDLE_SECONDS,
    NOTIFICATION_TTL_MS,
    OVERLAY_TTL_MS,
    UNASSIGNED_LABEL,
)


@dataclass(frozen=True)
class AppSettings:
    """Runtime options read from the active settings module."""

    notification_ttl_ms: int = NOTIFICATION_TTL_MS
    overlay_ttl_ms: int = OVERLAY_TTL_MS
    remote_timeout_seconds: float = DEFAULT_REMOTE_TIMEOUT_SECONDS
    unassigned_label: str = UNASSIGNED_LABEL
    discard_unsynced_on_switch: bool = True
    recorded_by: str = DEFAULT_RECORDED_BY
    # 0 keeps admin sessions until logout.
    session_idle_seconds: float = DEFAULT_SESSION_IDLE_SECONDS

    @classmethod
    def from_module(cls, settings: Any) -> "AppSettings":
        return cls(
            notification_ttl_ms=int(getattr(settings, "NOTIFICATION_TTL_MS", NOTIFICATION_TTL_MS)),
            overlay_ttl_ms=int(getattr(settings, "OVERLAY_TTL_MS", OVERLAY_TTL_MS)),
            remote_timeout_seconds=float(getattr(settings, "REMOTE_TIMEOUT_SECONDS", DEFAULT_REMOTE_TIMEOUT_SECONDS)),
            unassigned_label=str(getattr(settings, "UNASSIGNED_LABEL", UNASSIGNED_LABEL)),
            discard_unsynced_on_switch=bool(getattr(settings, "DISCARD_UNSYNCED_ON_SWITCH", True)),
            recorded_by=str(getattr(settings, "RECORDED_BY", DEFAULT_RECORDED_BY)),
            session_idle_seconds=float(getattr(settings, "SESSION_IDLE_SECONDS", DEFAULT_SESSION_IDLE_SECONDS)),
        )
