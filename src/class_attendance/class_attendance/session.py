from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from .attendance.service import AttendanceService
from .classes.service import ClassService
from .feedback.context import FeedbackContext
from .students.service import StudentService
from .teachers.service import TeacherAssignmentService

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdminSession:
    """Everything owned by one admin's browser session.

    Nothing here is shared across sessions; all of it runs on one event loop.
    """

    session_id: str
    feedback: FeedbackContext
    attendance: AttendanceService
    classes: ClassService
    teachers: TeacherAssignmentService
    students: StudentService

    def close(self) -> None:
        self.feedback.unmount()


class SessionRegistry:
    """Opens, looks up and closes admin sessions by id.

    Sessions unused for ``idle_seconds`` are closed the next time any
    session is opened or looked up through ``get_or_open``.
    """

    def __init__(
        self,
        factory: Callable[[str], AdminSession],
        *,
        idle_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._factory = factory
        self._idle_seconds = idle_seconds if idle_seconds and idle_seconds > 0 else None
        self._clock = clock
        self._sessions: dict[str, AdminSession] = {}
        self._last_seen: dict[str, float] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def get(self, session_id: str) -> Optional[AdminSession]:
        return self._sessions.get(session_id)

    def get_or_open(self, session_id: str) -> AdminSession:
        now = self._clock()
        self.evict_idle(now)
        session = self._sessions.get(session_id)
        if session is None:
            session = self._factory(session_id)
            self._sessions[session_id] = session
            log.info("admin session %s opened", session_id)
        self._last_seen[session_id] = now
        return session

    def evict_idle(self, now: Optional[float] = None) -> list[str]:
        """Close every session idle for longer than the limit; returns their ids."""

        if self._idle_seconds is None:
            return []
        now = self._clock() if now is None else now
        expired = [sid for sid, seen in self._last_seen.items() if now - seen > self._idle_seconds]
        for sid in expired:
            log.info("admin session %s idle, closing", sid)
            self.close(sid)
        return expired

    def close(self, session_id: str) -> bool:
        session = self._sessions.pop(session_id, None)
        self._last_seen.pop(session_id, None)
        if session is None:
            return False
        session.close()
        log.info("admin session %s closed", session_id)
        return True

    def close_all(self) -> None:
        for session_id in list(self._sessions):
            self.close(session_id)
