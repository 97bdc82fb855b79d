from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.enums import NotificationCategory


@dataclass(frozen=True)
class Notification:
    notification_id: str
    message: str
    category: NotificationCategory
    created_at: datetime

    def to_dict(self) -> dict:
        return {
            "id": self.notification_id,
            "message": self.message,
            "category": self.category.value,
            "created_at": self.created_at.isoformat(timespec="seconds"),
        }


@dataclass(frozen=True)
class OverlayState:
    message: str = ""
    visible: bool = False

    def to_dict(self) -> dict:
        return {"message": self.message, "visible": self.visible}


@dataclass(frozen=True)
class FeedbackSnapshot:
    """Read-model of everything the feedback surfaces currently show."""

    notifications: tuple[Notification, ...]
    overlay: OverlayState

    def to_dict(self) -> dict:
        return {
            "notifications": [n.to_dict() for n in self.notifications],
            "overlay": self.overlay.to_dict(),
        }
