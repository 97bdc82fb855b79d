from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

from ..core.constants import UNASSIGNED_LABEL


@dataclass(frozen=True)
class Teacher:
    teacher_id: str
    first_name: str
    last_name: str
    # Denormalized: the class *name*, not its id. Empty when unassigned.
    class_name: Optional[str] = None
    role: str = "teacher"
    status: str = "active"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @classmethod
    def from_record(cls, r: Mapping) -> "Teacher":
        return cls(
            teacher_id=str(r["id"]),
            first_name=r.get("first_name") or "",
            last_name=r.get("last_name") or "",
            class_name=r.get("class_name"),
            role=r.get("role") or "teacher",
            status=r.get("status") or "active",
        )

    def to_dict(self) -> dict:
        return {
            "id": self.teacher_id,
            "name": self.full_name,
            "class_name": self.class_name or "",
            "role": self.role,
        }


def is_unassigned(teacher: Teacher, unassigned_label: str = UNASSIGNED_LABEL) -> bool:
    return not teacher.class_name or teacher.class_name == unassigned_label


def candidate_teachers(teachers: Iterable[Teacher], unassigned_label: str = UNASSIGNED_LABEL) -> list[Teacher]:
    """Teachers that can be offered for assignment to a class."""

    return [t for t in teachers if is_unassigned(t, unassigned_label)]
