from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from ..common.scheduling import with_timeout
from ..core.constants import DEFAULT_REMOTE_TIMEOUT_SECONDS
from ..core.enums import AttendanceStatus, NotificationCategory
from ..core.exceptions import LoadError, RemoteStoreError
from ..feedback.context import FeedbackContext
from .model import AttendanceBoard, toggle
from .repository import AttendanceRepository

log = logging.getLogger(__name__)


class AttendanceBoardStore:
    """Holds the attendance board of the active (class, date) for one session.

    Every ``load`` takes a new generation number; a result that resolves after
    a newer load was issued is dropped, so a late response for a date the
    admin already left never overwrites the current board.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        feedback: FeedbackContext,
        *,
        timeout: Optional[float] = DEFAULT_REMOTE_TIMEOUT_SECONDS,
        discard_unsynced: bool = True,
    ):
        self._attendance = attendance
        self._feedback = feedback
        self._timeout = timeout
        self._discard_unsynced = bool(discard_unsynced)

        self._generation = 0
        self._active: Optional[tuple[str, date]] = None
        self._board: Optional[AttendanceBoard] = None
        self._synced: Optional[AttendanceBoard] = None
        self._load_error: Optional[LoadError] = None
        self._loading = False

    @property
    def board(self) -> Optional[AttendanceBoard]:
        return self._board

    @property
    def active_key(self) -> Optional[tuple[str, date]]:
        return self._active

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def load_error(self) -> Optional[LoadError]:
        return self._load_error

    @property
    def has_unsynced_changes(self) -> bool:
        if self._board is None:
            return False
        if self._synced is None:
            return True
        return not self._board.same_statuses(self._synced)

    def guard_switch(self, discard_unsynced: Optional[bool] = None) -> bool:
        """Decide what happens to local edits before the board is replaced.

        Returns False when the switch must not happen.
        """

        discard = self._discard_unsynced if discard_unsynced is None else bool(discard_unsynced)
        if not self.has_unsynced_changes:
            return True
        if not discard:
            self._feedback.notify(
                "There are unsaved attendance changes. Publish them before switching.",
                NotificationCategory.WARNING,
            )
            return False

        log.info("discarding unsynced attendance edits for %s", self._active)
        self._feedback.notify("Unsaved attendance changes were discarded", NotificationCategory.WARNING)
        self._board = None
        self._synced = None
        return True

    async def load(
        self,
        class_id: str,
        session_date: date,
        *,
        discard_unsynced: Optional[bool] = None,
    ) -> Optional[AttendanceBoard]:
        """Replace the board with the stored entries for (class_id, session_date).

        Returns None when the switch was refused, the read failed, or a newer
        load superseded this one.
        """

        if not self.guard_switch(discard_unsynced):
            return None

        self._generation += 1
        generation = self._generation
        self._active = (class_id, session_date)
        self._board = None
        self._synced = None
        self._load_error = None
        self._loading = True

        try:
            entries = await with_timeout(
                self._attendance.list_for_class_and_date(class_id, session_date),
                self._timeout,
                what="load attendance",
            )
        except RemoteStoreError as e:
            if generation != self._generation:
                log.debug("ignoring failure of superseded attendance load #%s", generation)
                return None
            log.warning("attendance load failed for %s %s: %s", class_id, session_date, e)
            self._loading = False
            self._load_error = LoadError(f"Could not load attendance: {e}")
            self._feedback.notify("Error loading attendance", NotificationCategory.ERROR)
            return None

        if generation != self._generation:
            log.debug("dropping stale attendance load #%s (current #%s)", generation, self._generation)
            return None

        board = AttendanceBoard.from_entries(class_id, session_date, entries)
        self._board = board
        self._synced = board
        self._loading = False
        return board

    def status_of(self, member_id: str) -> AttendanceStatus:
        if self._board is None:
            return AttendanceStatus.ABSENT
        return self._board.status_of(member_id)

    def toggle(self, member_id: str, status: AttendanceStatus) -> Optional[AttendanceBoard]:
        if self._board is None:
            self._feedback.notify("Attendance is not loaded yet", NotificationCategory.WARNING)
            return None
        self._board = toggle(self._board, member_id, status)
        return self._board

    def mark_synced(self, board: AttendanceBoard) -> None:
        """Record ``board`` as the stored state if it is still the active pair."""

        if self._active == board.key:
            self._synced = board
