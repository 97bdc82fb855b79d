from __future__ import annotations

from typing import Sequence

from ..core.constants import TEACHERS
from ..store.repository import RecordStore
from .model import Teacher


class TeacherRepository:
    def __init__(self, store: RecordStore):
        self._store = store

    async def list_all(self) -> Sequence[Teacher]:
        rows = await self._store.get_records(TEACHERS, order_by=("last_name", "first_name"))
        return [Teacher.from_record(r) for r in rows]

    async def list_by_class_name(self, class_name: str) -> Sequence[Teacher]:
        rows = await self._store.get_records(TEACHERS, {"class_name": class_name})
        return [Teacher.from_record(r) for r in rows]

    async def set_class_name(self, teacher_id: str, class_name: str) -> None:
        await self._store.update_record(TEACHERS, teacher_id, {"class_name": class_name})
