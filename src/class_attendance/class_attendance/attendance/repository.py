from __future__ import annotations

from datetime import date
from typing import Sequence

from ..core.constants import STUDENT_ATTENDANCE
from ..store.repository import RecordStore
from .model import AttendanceEntry


class AttendanceRepository:
    """Attendance rows in the record store, keyed by (member, class, date)."""

    def __init__(self, store: RecordStore):
        self._store = store

    async def list_for_class_and_date(self, class_id: str, session_date: date) -> Sequence[AttendanceEntry]:
        rows = await self._store.get_records(
            STUDENT_ATTENDANCE,
            {"class_id": class_id, "session_date": session_date},
        )
        return [AttendanceEntry.from_record(r) for r in rows]

    async def upsert_entries(self, entries: Sequence[AttendanceEntry]) -> None:
        await self._store.upsert_batch(STUDENT_ATTENDANCE, [e.to_record() for e in entries])

    async def list_for_date(self, session_date: date) -> Sequence[AttendanceEntry]:
        rows = await self._store.get_records(STUDENT_ATTENDANCE, {"session_date": session_date})
        return [AttendanceEntry.from_record(r) for r in rows]
