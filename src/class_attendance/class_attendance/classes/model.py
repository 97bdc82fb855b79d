from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from ..core.enums import CascadeStatus
from ..core.exceptions import DomainError


@dataclass(frozen=True)
class ClassEntity:
    class_id: str
    name: str
    age_range: str = ""
    room: Optional[str] = None
    schedule: Optional[str] = None
    color: Optional[str] = None
    image_url: Optional[str] = None
    show_image: bool = True
    status: str = "active"

    @classmethod
    def from_record(cls, r: Mapping) -> "ClassEntity":
        return cls(
            class_id=str(r["id"]),
            name=r.get("name") or "",
            age_range=r.get("age_range") or "",
            room=r.get("room"),
            schedule=r.get("schedule"),
            color=r.get("color"),
            image_url=r.get("image_url"),
            show_image=bool(r.get("show_image", True)),
            status=r.get("status") or "active",
        )


@dataclass(frozen=True)
class CascadeResult:
    """Outcome of a class delete followed by unassigning its teachers.

    ``partial_failure`` means the class is gone but ``failed_unassigns``
    still reference ``class_name``; pass the result to ``retry_cascade``.
    """

    status: CascadeStatus
    class_id: str
    class_name: str = ""
    unassigned: tuple[str, ...] = ()
    failed_unassigns: tuple[str, ...] = ()
    error: Optional[DomainError] = None

    @property
    def ok(self) -> bool:
        return self.status == CascadeStatus.OK

    @property
    def class_deleted(self) -> bool:
        return self.status != CascadeStatus.ABORTED

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "class_id": self.class_id,
            "class_name": self.class_name,
            "unassigned": list(self.unassigned),
            "failed_unassigns": list(self.failed_unassigns),
            "error": str(self.error) if self.error else None,
        }
