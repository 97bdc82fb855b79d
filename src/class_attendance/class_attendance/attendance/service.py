from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Optional, Sequence

from ..classes.repository import ClassRepository
from ..common.scheduling import with_timeout
from ..common.validators import require_id
from ..core.constants import DEFAULT_RECORDED_BY, DEFAULT_REMOTE_TIMEOUT_SECONDS
from ..core.enums import AttendanceStatus, DayStatus, NotificationCategory
from ..core.exceptions import LoadError, RemoteStoreError, SyncError
from ..feedback.context import FeedbackContext
from ..students.model import Student
from ..students.repository import StudentRepository
from .board_store import AttendanceBoardStore
from .model import AttendanceBoard, ClassDayStatus, DaySummary, summarize
from .repository import AttendanceRepository
from .sync import AttendanceSyncEngine, PublishResult

log = logging.getLogger(__name__)


class AttendanceService:
    """Attendance tab of one admin session: roster, board and publishing."""

    def __init__(
        self,
        students: StudentRepository,
        classes: ClassRepository,
        attendance: AttendanceRepository,
        board_store: AttendanceBoardStore,
        sync_engine: AttendanceSyncEngine,
        feedback: FeedbackContext,
        *,
        timeout: Optional[float] = DEFAULT_REMOTE_TIMEOUT_SECONDS,
        recorded_by: str = DEFAULT_RECORDED_BY,
    ):
        self._students = students
        self._classes = classes
        self._attendance = attendance
        self._board_store = board_store
        self._sync = sync_engine
        self._feedback = feedback
        self._timeout = timeout
        self._recorded_by = recorded_by

        self._class_id: Optional[str] = None
        self._session_date: Optional[date] = None
        self._roster: Optional[list[Student]] = None
        self._roster_generation = 0
        self._roster_error: Optional[LoadError] = None

    @property
    def class_id(self) -> Optional[str]:
        return self._class_id

    @property
    def session_date(self) -> Optional[date]:
        return self._session_date

    @property
    def roster(self) -> Optional[Sequence[Student]]:
        return self._roster

    @property
    def board(self) -> Optional[AttendanceBoard]:
        return self._board_store.board

    @property
    def board_store(self) -> AttendanceBoardStore:
        return self._board_store

    @property
    def busy(self) -> bool:
        if self._class_id is None or self._session_date is None:
            return False
        return self._sync.is_busy(self._class_id, self._session_date)

    async def _load_roster(self, class_id: str) -> Optional[list[Student]]:
        self._roster_generation += 1
        generation = self._roster_generation
        self._roster = None
        self._roster_error = None
        try:
            roster = list(await with_timeout(self._students.list_by_class(class_id), self._timeout, what="load roster"))
        except RemoteStoreError as e:
            if generation != self._roster_generation:
                return None
            log.warning("roster load failed for class %s: %s", class_id, e)
            self._roster_error = LoadError(f"Could not load students: {e}")
            self._feedback.notify("Error loading students", NotificationCategory.ERROR)
            return None

        if generation != self._roster_generation:
            return None
        self._roster = roster
        return roster

    async def select_class(
        self,
        class_id: str,
        session_date: date,
        *,
        discard_unsynced: Optional[bool] = None,
    ) -> Optional[AttendanceBoard]:
        """Make (class_id, session_date) active, loading roster and board together."""

        class_id = require_id(class_id, "Class")
        if not self._board_store.guard_switch(discard_unsynced):
            return None

        self._class_id = class_id
        self._session_date = session_date
        _, board = await asyncio.gather(
            self._load_roster(class_id),
            self._board_store.load(class_id, session_date),
        )
        return board

    async def change_date(
        self,
        session_date: date,
        *,
        discard_unsynced: Optional[bool] = None,
    ) -> Optional[AttendanceBoard]:
        if self._class_id is None:
            self._feedback.notify("Select a class first", NotificationCategory.WARNING)
            return None
        if not self._board_store.guard_switch(discard_unsynced):
            return None

        self._session_date = session_date
        return await self._board_store.load(self._class_id, session_date)

    def toggle(self, member_id: str, status: AttendanceStatus) -> Optional[AttendanceBoard]:
        return self._board_store.toggle(member_id, status)

    def status_of(self, member_id: str) -> AttendanceStatus:
        return self._board_store.status_of(member_id)

    def view(self) -> list[dict]:
        """Roster rows with their current status, in roster order."""

        return [
            {
                "member_id": s.student_id,
                "name": s.full_name,
                "status": self.status_of(s.student_id).value,
            }
            for s in self._roster or []
        ]

    async def publish(self, recorded_by: Optional[str] = None) -> PublishResult:
        board = self._board_store.board
        if self._class_id is None or self._session_date is None or board is None or self._roster is None:
            error = SyncError("Attendance cannot be saved until students and attendance are loaded")
            self._feedback.notify(str(error), NotificationCategory.ERROR)
            return PublishResult(ok=False, error=error)

        result = await self._sync.publish(
            self._class_id,
            self._session_date,
            [s.student_id for s in self._roster],
            board,
            recorded_by or self._recorded_by,
        )
        if result.ok:
            self._board_store.mark_synced(board)
        return result

    def day_summary(self) -> Optional[DaySummary]:
        """Counters for the active class and date; None until both roster and board are loaded."""

        board = self._board_store.board
        if board is None or self._roster is None:
            return None
        return summarize(board, [s.student_id for s in self._roster])

    async def class_statuses(self, session_date: date) -> Optional[list[ClassDayStatus]]:
        """Every class marked done or pending for ``session_date``."""

        try:
            classes, entries = await asyncio.gather(
                with_timeout(self._classes.list_all(), self._timeout, what="load classes"),
                with_timeout(self._attendance.list_for_date(session_date), self._timeout, what="load day attendance"),
            )
        except RemoteStoreError as e:
            log.warning("class statuses for %s failed: %s", session_date, e)
            self._feedback.notify("Error loading class statuses", NotificationCategory.ERROR)
            return None

        recorded: dict[str, int] = {}
        for e in entries:
            recorded[e.class_id] = recorded.get(e.class_id, 0) + 1
        return [
            ClassDayStatus(
                class_id=c.class_id,
                name=c.name,
                status=DayStatus.DONE if recorded.get(c.class_id) else DayStatus.PENDING,
                recorded=recorded.get(c.class_id, 0),
            )
            for c in classes
        ]
