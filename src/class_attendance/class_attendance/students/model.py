from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Mapping, Optional

from ..common.datetime_utils import coerce_date


@dataclass(frozen=True)
class Student:
    """Member enrolled in a class."""

    student_id: str
    first_name: str
    last_name: str
    class_id: Optional[str] = None
    birth_date: Optional[date] = None
    guardian_name: Optional[str] = None
    guardian_phone: Optional[str] = None
    guardian_email: Optional[str] = None
    status: str = "active"
    notes: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @classmethod
    def from_record(cls, r: Mapping) -> "Student":
        birth_date = r.get("birth_date")
        return cls(
            student_id=str(r["id"]),
            first_name=r.get("first_name") or "",
            last_name=r.get("last_name") or "",
            class_id=r.get("class_id"),
            birth_date=coerce_date(birth_date) if birth_date else None,
            guardian_name=r.get("guardian_name"),
            guardian_phone=r.get("guardian_phone"),
            guardian_email=r.get("guardian_email"),
            status=r.get("status") or "active",
            notes=r.get("notes"),
        )
