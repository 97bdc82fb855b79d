from __future__ import annotations

from datetime import date

import pytest

from src.class_attendance.class_attendance.attendance.board_store import AttendanceBoardStore
from src.class_attendance.class_attendance.attendance.repository import AttendanceRepository
from src.class_attendance.class_attendance.attendance.service import AttendanceService
from src.class_attendance.class_attendance.attendance.sync import AttendanceSyncEngine
from src.class_attendance.class_attendance.classes.repository import ClassRepository
from src.class_attendance.class_attendance.core.enums import AttendanceStatus, DayStatus, NotificationCategory
from src.class_attendance.class_attendance.students.repository import StudentRepository

DAY = date(2026, 2, 1)
NEXT = date(2026, 2, 8)


def _service(store, feedback, **kwargs) -> AttendanceService:
    attendance = AttendanceRepository(store)
    return AttendanceService(
        StudentRepository(store),
        ClassRepository(store),
        attendance,
        AttendanceBoardStore(attendance, feedback, **kwargs),
        AttendanceSyncEngine(attendance, feedback),
        feedback,
    )


@pytest.fixture
def roster(store):
    store.seed(
        "students",
        {"id": "A", "first_name": "Ana", "last_name": "Alvarez", "class_id": "C1"},
        {"id": "B", "first_name": "Ben", "last_name": "Brooks", "class_id": "C1"},
        {"id": "C", "first_name": "Cy", "last_name": "Cole", "class_id": "C1"},
        {"id": "X", "first_name": "Xena", "last_name": "Xu", "class_id": "C2"},
    )
    return store


@pytest.mark.asyncio
async def test_mark_and_publish_whole_roster(roster, feedback):
    service = _service(roster, feedback)
    await service.select_class("C1", DAY)

    service.toggle("A", AttendanceStatus.PRESENT)
    service.toggle("B", AttendanceStatus.LATE)
    result = await service.publish()

    assert result.ok
    stored = {r["member_id"]: r["status"] for r in roster.rows("student_attendance")}
    assert stored == {"A": "present", "B": "late", "C": "absent"}
    assert not service.board_store.has_unsynced_changes

    reloaded = _service(roster, feedback)
    await reloaded.select_class("C1", DAY)
    assert [row["status"] for row in reloaded.view()] == ["present", "late", "absent"]


@pytest.mark.asyncio
async def test_view_lists_roster_by_last_name(store, feedback):
    store.seed(
        "students",
        {"id": "Z", "first_name": "Zoe", "last_name": "Zimmer", "class_id": "C1"},
        {"id": "M", "first_name": "Max", "last_name": "Meyer", "class_id": "C1"},
    )
    service = _service(store, feedback)

    await service.select_class("C1", DAY)

    assert [row["name"] for row in service.view()] == ["Max Meyer", "Zoe Zimmer"]
    assert {row["status"] for row in service.view()} == {"absent"}


@pytest.mark.asyncio
async def test_change_date_loads_that_day_only(roster, feedback):
    roster.seed(
        "student_attendance",
        {"member_id": "A", "class_id": "C1", "session_date": NEXT, "status": "excused", "recorded_by": "admin"},
    )
    service = _service(roster, feedback)
    await service.select_class("C1", DAY)
    assert service.status_of("A") == AttendanceStatus.ABSENT

    await service.change_date(NEXT)

    assert service.session_date == NEXT
    assert service.status_of("A") == AttendanceStatus.EXCUSED


@pytest.mark.asyncio
async def test_change_date_without_class_warns(store, feedback, notified):
    service = _service(store, feedback)

    assert await service.change_date(DAY) is None
    assert notified(feedback, NotificationCategory.WARNING) == ["Select a class first"]


@pytest.mark.asyncio
async def test_publish_refused_after_failed_load(roster, feedback, notified):
    roster.fail_on("get_records", "student_attendance")
    service = _service(roster, feedback)
    await service.select_class("C1", DAY)

    result = await service.publish()

    assert not result.ok
    assert notified(feedback, NotificationCategory.ERROR) == [
        "Error loading attendance",
        "Attendance cannot be saved until students and attendance are loaded",
    ]
    assert not any(c[0] == "upsert_batch" for c in roster.calls)


@pytest.mark.asyncio
async def test_roster_failure_is_one_error(roster, feedback, notified):
    roster.fail_on("get_records", "students")
    service = _service(roster, feedback)

    board = await service.select_class("C1", DAY)

    assert board is not None
    assert service.roster is None
    assert notified(feedback, NotificationCategory.ERROR) == ["Error loading students"]


@pytest.mark.asyncio
async def test_switching_class_with_edits_is_refused_when_configured(roster, feedback, notified):
    service = _service(roster, feedback, discard_unsynced=False)
    await service.select_class("C1", DAY)
    service.toggle("A", AttendanceStatus.PRESENT)

    assert await service.select_class("C2", DAY) is None

    assert service.class_id == "C1"
    assert service.status_of("A") == AttendanceStatus.PRESENT
    assert len(notified(feedback, NotificationCategory.WARNING)) == 1


@pytest.mark.asyncio
async def test_edit_after_publish_is_unsynced(roster, feedback):
    service = _service(roster, feedback)
    await service.select_class("C1", DAY)
    service.toggle("A", AttendanceStatus.PRESENT)
    published = service.board

    result = await service.publish()
    service.toggle("B", AttendanceStatus.LATE)

    assert result.ok
    assert service.board is not published
    assert service.board_store.has_unsynced_changes


@pytest.mark.asyncio
async def test_change_date_keeps_edits_when_request_says_so(roster, feedback, notified):
    service = _service(roster, feedback)
    await service.select_class("C1", DAY)
    service.toggle("A", AttendanceStatus.PRESENT)

    assert await service.change_date(NEXT, discard_unsynced=False) is None

    assert service.session_date == DAY
    assert service.status_of("A") == AttendanceStatus.PRESENT
    assert len(notified(feedback, NotificationCategory.WARNING)) == 1


@pytest.mark.asyncio
async def test_select_class_discards_when_request_says_so(roster, feedback):
    service = _service(roster, feedback, discard_unsynced=False)
    await service.select_class("C1", DAY)
    service.toggle("A", AttendanceStatus.PRESENT)

    assert await service.select_class("C2", DAY, discard_unsynced=True) is not None

    assert service.class_id == "C2"
    assert [row["member_id"] for row in service.view()] == ["X"]


@pytest.mark.asyncio
async def test_day_summary_follows_board(roster, feedback):
    service = _service(roster, feedback)
    assert service.day_summary() is None

    await service.select_class("C1", DAY)
    service.toggle("A", AttendanceStatus.PRESENT)
    service.toggle("B", AttendanceStatus.LATE)

    summary = service.day_summary()
    assert (summary.attended, summary.absent, summary.total) == (2, 1, 3)


@pytest.mark.asyncio
async def test_class_statuses_mark_recorded_classes_done(roster, feedback):
    roster.seed(
        "classes",
        {"id": "C1", "name": "Sunbeams"},
        {"id": "C2", "name": "Valiants"},
    )
    roster.seed(
        "student_attendance",
        {"member_id": "A", "class_id": "C1", "session_date": DAY, "status": "absent", "recorded_by": "admin"},
        {"member_id": "X", "class_id": "C2", "session_date": NEXT, "status": "present", "recorded_by": "admin"},
    )
    service = _service(roster, feedback)

    statuses = await service.class_statuses(DAY)

    assert [(s.class_id, s.status, s.recorded) for s in statuses] == [
        ("C1", DayStatus.DONE, 1),
        ("C2", DayStatus.PENDING, 0),
    ]


@pytest.mark.asyncio
async def test_class_statuses_failure_is_one_error(roster, feedback, notified):
    roster.fail_on("get_records", "student_attendance")
    service = _service(roster, feedback)

    assert await service.class_statuses(DAY) is None
    assert notified(feedback, NotificationCategory.ERROR) == ["Error loading class statuses"]
