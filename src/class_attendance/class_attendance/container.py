from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.board_store import AttendanceBoardStore
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .attendance.sync import AttendanceSyncEngine
from .classes.repository import ClassRepository
from .classes.service import ClassService
from .common.runtime import LoopRunner
from .common.scheduling import LoopScheduler, Scheduler
from .core.settings import AppSettings
from .database.connection import DatabaseConnection
from .feedback.context import FeedbackContext
from .session import AdminSession, SessionRegistry
from .store.mysql_record_store import MySQLRecordStore
from .store.repository import RecordStore
from .students.repository import StudentRepository
from .students.service import StudentService
from .teachers.repository import TeacherRepository
from .teachers.service import TeacherAssignmentService


@dataclass(frozen=True)
class Container:
    settings: AppSettings
    store: RecordStore

    classes_repo: ClassRepository
    students_repo: StudentRepository
    teachers_repo: TeacherRepository
    attendance_repo: AttendanceRepository

    runner: LoopRunner
    sessions: SessionRegistry

    def shutdown(self) -> None:
        if self.runner.running:
            self.runner.call(self.sessions.close_all)
        self.runner.stop()


def open_admin_session(
    session_id: str,
    *,
    settings: AppSettings,
    scheduler: Scheduler,
    classes_repo: ClassRepository,
    students_repo: StudentRepository,
    teachers_repo: TeacherRepository,
    attendance_repo: AttendanceRepository,
) -> AdminSession:
    timeout = settings.remote_timeout_seconds
    feedback = FeedbackContext(
        scheduler,
        notification_ttl_ms=settings.notification_ttl_ms,
        overlay_ttl_ms=settings.overlay_ttl_ms,
    )
    feedback.mount()

    board_store = AttendanceBoardStore(
        attendance_repo,
        feedback,
        timeout=timeout,
        discard_unsynced=settings.discard_unsynced_on_switch,
    )
    sync_engine = AttendanceSyncEngine(attendance_repo, feedback, timeout=timeout)

    return AdminSession(
        session_id=session_id,
        feedback=feedback,
        attendance=AttendanceService(
            students_repo,
            classes_repo,
            attendance_repo,
            board_store,
            sync_engine,
            feedback,
            timeout=timeout,
            recorded_by=settings.recorded_by,
        ),
        classes=ClassService(classes_repo, teachers_repo, feedback, timeout=timeout),
        teachers=TeacherAssignmentService(
            teachers_repo,
            feedback,
            timeout=timeout,
            unassigned_label=settings.unassigned_label,
        ),
        students=StudentService(students_repo, feedback, timeout=timeout),
    )


def build_container(
    *,
    db_config: Optional[dict] = None,
    settings: Optional[AppSettings] = None,
    store: Optional[RecordStore] = None,
    runner: Optional[LoopRunner] = None,
) -> Container:
    settings = settings or AppSettings()
    if store is None:
        if db_config is None:
            raise ValueError("db_config is required when no record store is given")
        store = MySQLRecordStore(DatabaseConnection.from_dict(db_config))

    runner = (runner or LoopRunner()).start()
    scheduler = LoopScheduler(runner.loop)

    classes_repo = ClassRepository(store)
    students_repo = StudentRepository(store)
    teachers_repo = TeacherRepository(store)
    attendance_repo = AttendanceRepository(store)

    sessions = SessionRegistry(
        lambda session_id: open_admin_session(
            session_id,
            settings=settings,
            scheduler=scheduler,
            classes_repo=classes_repo,
            students_repo=students_repo,
            teachers_repo=teachers_repo,
            attendance_repo=attendance_repo,
        ),
        idle_seconds=settings.session_idle_seconds,
    )

    return Container(
        settings=settings,
        store=store,
        classes_repo=classes_repo,
        students_repo=students_repo,
        teachers_repo=teachers_repo,
        attendance_repo=attendance_repo,
        runner=runner,
        sessions=sessions,
    )
