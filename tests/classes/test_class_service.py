from __future__ import annotations

import pytest

from src.class_attendance.class_attendance.classes.repository import ClassRepository
from src.class_attendance.class_attendance.classes.service import ClassService
from src.class_attendance.class_attendance.core.enums import CascadeStatus, NotificationCategory
from src.class_attendance.class_attendance.core.exceptions import IntegrityError, ValidationError
from src.class_attendance.class_attendance.teachers.repository import TeacherRepository


@pytest.fixture
def school(store):
    store.seed(
        "classes",
        {"id": "C1", "name": "Sunbeams", "age_range": "3-5"},
        {"id": "C2", "name": "Valiants", "age_range": "8-11"},
    )
    store.seed(
        "teachers",
        {"id": "T1", "first_name": "Tom", "last_name": "Hall", "class_name": "Sunbeams"},
        {"id": "T2", "first_name": "Tia", "last_name": "Reyes", "class_name": "Sunbeams"},
        {"id": "T3", "first_name": "Uma", "last_name": "Stone", "class_name": "Valiants"},
    )
    return store


@pytest.fixture
def service(school, feedback) -> ClassService:
    return ClassService(ClassRepository(school), TeacherRepository(school), feedback)


def _referencing(store, class_name: str) -> list[str]:
    return sorted(r["id"] for r in store.rows("teachers") if r.get("class_name") == class_name)


@pytest.mark.asyncio
async def test_delete_class_unassigns_every_teacher(service, school, feedback, notified):
    result = await service.delete_class("C1")

    assert result.status == CascadeStatus.OK
    assert result.unassigned == ("T1", "T2")
    assert "C1" not in school.tables["classes"]
    assert _referencing(school, "Sunbeams") == []
    assert _referencing(school, "Valiants") == ["T3"]
    assert notified(feedback, NotificationCategory.SUCCESS) == ["Class deleted"]
    assert service.pending_cascade("C1") is None


@pytest.mark.asyncio
async def test_delete_class_without_teachers(school, feedback):
    school.seed("classes", {"id": "C3", "name": "Empty"})
    service = ClassService(ClassRepository(school), TeacherRepository(school), feedback)

    result = await service.delete_class("C3")

    assert result.ok
    assert result.unassigned == ()


@pytest.mark.asyncio
async def test_failed_unassign_is_partial_failure(service, school, feedback, notified):
    school.fail_on("update_record", "teachers", record_id="T2")

    result = await service.delete_class("C1")

    assert result.status == CascadeStatus.PARTIAL_FAILURE
    assert result.class_deleted
    assert result.unassigned == ("T1",)
    assert result.failed_unassigns == ("T2",)
    assert isinstance(result.error, IntegrityError)
    assert result.error.teacher_ids == ("T2",)
    assert _referencing(school, "Sunbeams") == ["T2"]
    assert len(notified(feedback, NotificationCategory.ERROR)) == 1
    assert notified(feedback, NotificationCategory.SUCCESS) == []
    assert service.pending_cascade("C1") == result


@pytest.mark.asyncio
async def test_unassign_failure_does_not_stop_the_rest(service, school):
    school.fail_on("update_record", "teachers", record_id="T1")

    result = await service.delete_class("C1")

    assert result.failed_unassigns == ("T1",)
    assert result.unassigned == ("T2",)


@pytest.mark.asyncio
async def test_retry_unassigns_only_leftover_teachers(service, school, feedback, notified):
    school.fail_on("update_record", "teachers", record_id="T2")
    partial = await service.delete_class("C1")
    school.calls.clear()

    result = await service.retry_cascade(partial)

    assert result.status == CascadeStatus.OK
    assert result.unassigned == ("T1", "T2")
    assert school.calls == [("update_record", "teachers", "T2")]
    assert _referencing(school, "Sunbeams") == []
    assert service.pending_cascade("C1") is None
    assert notified(feedback, NotificationCategory.SUCCESS) == ["Teachers unassigned from the deleted class"]


@pytest.mark.asyncio
async def test_retry_of_finished_cascade_is_a_no_op(service, school):
    done = await service.delete_class("C1")
    school.calls.clear()

    assert await service.retry_cascade(done) is done
    assert school.calls == []


@pytest.mark.asyncio
async def test_failed_read_aborts_before_deleting(service, school, feedback, notified):
    school.fail_on("get_records", "teachers")

    result = await service.delete_class("C1")

    assert result.status == CascadeStatus.ABORTED
    assert not result.class_deleted
    assert "C1" in school.tables["classes"]
    assert _referencing(school, "Sunbeams") == ["T1", "T2"]
    assert notified(feedback, NotificationCategory.ERROR) == ["Error deleting the class"]


@pytest.mark.asyncio
async def test_failed_delete_aborts_without_unassigning(service, school):
    school.fail_on("delete_record", "classes")

    result = await service.delete_class("C1")

    assert result.status == CascadeStatus.ABORTED
    assert "C1" in school.tables["classes"]
    assert _referencing(school, "Sunbeams") == ["T1", "T2"]


@pytest.mark.asyncio
async def test_unknown_class_aborts(service, school):
    result = await service.delete_class("nope")

    assert result.status == CascadeStatus.ABORTED
    assert not any(c[0] == "delete_record" for c in school.calls)


@pytest.mark.asyncio
async def test_update_details_keeps_editable_fields(service, school, feedback, notified):
    ok = await service.update_details("C2", {"room": "B12", "id": "hijack"})

    assert ok
    assert school.tables["classes"]["C2"]["room"] == "B12"
    assert school.tables["classes"]["C2"]["id"] == "C2"
    assert notified(feedback, NotificationCategory.SUCCESS) == ["Class settings updated"]


@pytest.mark.asyncio
async def test_update_details_rejects_blank_name(service):
    with pytest.raises(ValidationError):
        await service.update_details("C2", {"name": "  "})
