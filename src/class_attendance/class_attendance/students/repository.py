from __future__ import annotations

from typing import Any, Mapping, Sequence

from ..core.constants import STUDENTS
from ..store.repository import RecordStore
from .model import Student


class StudentRepository:
    def __init__(self, store: RecordStore):
        self._store = store

    async def list_by_class(self, class_id: str) -> Sequence[Student]:
        """Roster of a class, ordered by last name."""

        rows = await self._store.get_records(STUDENTS, {"class_id": class_id}, order_by=("last_name", "first_name"))
        return [Student.from_record(r) for r in rows]

    async def add(self, fields: Mapping[str, Any]) -> Student:
        row = await self._store.insert_record(STUDENTS, fields)
        return Student.from_record(row)

    async def update(self, student_id: str, fields: Mapping[str, Any]) -> None:
        await self._store.update_record(STUDENTS, student_id, fields)
