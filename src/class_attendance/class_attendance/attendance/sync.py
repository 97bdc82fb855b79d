from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from ..common.scheduling import with_timeout
from ..core.constants import DEFAULT_RECORDED_BY, DEFAULT_REMOTE_TIMEOUT_SECONDS
from ..core.enums import NotificationCategory
from ..core.exceptions import RemoteStoreError, SyncError, ValidationError
from ..feedback.context import FeedbackContext
from .model import AttendanceBoard, AttendanceEntry, status_of
from .repository import AttendanceRepository

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class PublishResult:
    ok: bool
    entries: tuple[AttendanceEntry, ...] = ()
    error: Optional[SyncError] = None

    @property
    def written(self) -> int:
        return len(self.entries) if self.ok else 0


def build_entries(
    class_id: str,
    session_date: date,
    roster: Iterable[str],
    board: AttendanceBoard,
    recorded_by: Optional[str] = None,
) -> list[AttendanceEntry]:
    """One entry per roster member, absent when the board has none.

    Duplicate member ids in the roster collapse into their first position.
    """

    if board.key != (class_id, session_date):
        raise ValidationError("Attendance board does not belong to this class and date")

    entries: list[AttendanceEntry] = []
    seen: set[str] = set()
    for member_id in roster:
        if member_id in seen:
            continue
        seen.add(member_id)
        entries.append(
            AttendanceEntry(
                member_id=member_id,
                class_id=class_id,
                session_date=session_date,
                status=status_of(board, member_id),
                recorded_by=recorded_by,
            )
        )
    return entries


class AttendanceSyncEngine:
    """Writes a whole day of attendance for a roster as one batch upsert."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        feedback: FeedbackContext,
        *,
        timeout: Optional[float] = DEFAULT_REMOTE_TIMEOUT_SECONDS,
    ):
        self._attendance = attendance
        self._feedback = feedback
        self._timeout = timeout
        self._in_flight: set[tuple[str, date]] = set()

    @property
    def busy(self) -> bool:
        return bool(self._in_flight)

    def is_busy(self, class_id: str, session_date: date) -> bool:
        return (class_id, session_date) in self._in_flight

    async def publish(
        self,
        class_id: str,
        session_date: date,
        roster: Iterable[str],
        board: AttendanceBoard,
        recorded_by: Optional[str] = DEFAULT_RECORDED_BY,
    ) -> PublishResult:
        key = (class_id, session_date)
        if key in self._in_flight:
            error = SyncError("Attendance for this class and date is already being saved")
            self._feedback.notify(str(error), NotificationCategory.WARNING)
            return PublishResult(ok=False, error=error)

        try:
            entries = build_entries(class_id, session_date, roster, board, recorded_by)
        except ValidationError as e:
            self._feedback.notify(str(e), NotificationCategory.ERROR)
            return PublishResult(ok=False, error=SyncError(str(e)))

        if not entries:
            self._feedback.notify("No students enrolled, nothing to save", NotificationCategory.INFO)
            return PublishResult(ok=True)

        self._in_flight.add(key)
        try:
            await with_timeout(self._attendance.upsert_entries(entries), self._timeout, what="save attendance")
        except RemoteStoreError as e:
            log.warning("publishing %d attendance entries for %s %s failed: %s", len(entries), class_id, session_date, e)
            self._feedback.notify("Error saving attendance", NotificationCategory.ERROR)
            return PublishResult(ok=False, entries=tuple(entries), error=SyncError(f"Could not save attendance: {e}"))
        finally:
            self._in_flight.discard(key)

        log.info("published %d attendance entries for %s %s", len(entries), class_id, session_date)
        self._feedback.notify("Attendance saved", NotificationCategory.SUCCESS)
        return PublishResult(ok=True, entries=tuple(entries))
