from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional

from ..common.scheduling import with_timeout
from ..common.validators import require_id, require_non_empty
from ..core.constants import DEFAULT_REMOTE_TIMEOUT_SECONDS
from ..core.enums import CascadeStatus, NotificationCategory
from ..core.exceptions import IntegrityError, LoadError, RemoteStoreError, SyncError
from ..feedback.context import FeedbackContext
from ..teachers.repository import TeacherRepository
from .model import CascadeResult
from .repository import ClassRepository

log = logging.getLogger(__name__)

EDITABLE_FIELDS = ("name", "age_range", "room", "schedule", "color", "image_url", "show_image", "status")


class ClassService:
    """Class settings and the class -> teacher delete cascade.

    The store has no cascading delete for the name-based teacher reference,
    so deleting a class is two steps: delete the record, then unassign each
    teacher that still carries the class name. A failure in the second step
    is reported as a partial failure and can be retried.
    """

    def __init__(
        self,
        classes: ClassRepository,
        teachers: TeacherRepository,
        feedback: FeedbackContext,
        *,
        timeout: Optional[float] = DEFAULT_REMOTE_TIMEOUT_SECONDS,
    ):
        self._classes = classes
        self._teachers = teachers
        self._feedback = feedback
        self._timeout = timeout
        self._pending: dict[str, CascadeResult] = {}

    def pending_cascade(self, class_id: str) -> Optional[CascadeResult]:
        """Last partial cascade for a deleted class, if teachers are still left over."""

        return self._pending.get(class_id)

    async def update_details(self, class_id: str, fields: Mapping[str, Any]) -> bool:
        data = {k: v for k, v in fields.items() if k in EDITABLE_FIELDS}
        if "name" in data:
            data["name"] = require_non_empty(data["name"], "Class name")
        try:
            await with_timeout(
                self._classes.update(require_id(class_id, "Class"), data),
                self._timeout,
                what="update class",
            )
        except RemoteStoreError as e:
            log.warning("updating class %s failed: %s", class_id, e)
            self._feedback.notify("Error updating the class", NotificationCategory.ERROR)
            return False

        self._feedback.notify("Class settings updated", NotificationCategory.SUCCESS)
        return True

    def _aborted(self, class_id: str, error, class_name: str = "") -> CascadeResult:
        self._feedback.notify("Error deleting the class", NotificationCategory.ERROR)
        return CascadeResult(status=CascadeStatus.ABORTED, class_id=class_id, class_name=class_name, error=error)

    async def delete_class(self, class_id: str) -> CascadeResult:
        class_id = require_id(class_id, "Class")

        try:
            entity = await with_timeout(self._classes.get_by_id(class_id), self._timeout, what="load class")
            if entity is None:
                return self._aborted(class_id, LoadError(f"Class {class_id} does not exist"))
            assigned = []
            if entity.name:
                assigned = await with_timeout(
                    self._teachers.list_by_class_name(entity.name),
                    self._timeout,
                    what="load class teachers",
                )
        except RemoteStoreError as e:
            log.warning("reading class %s before delete failed: %s", class_id, e)
            return self._aborted(class_id, LoadError(str(e)))

        try:
            await with_timeout(self._classes.delete(class_id), self._timeout, what="delete class")
        except RemoteStoreError as e:
            log.warning("deleting class %s failed: %s", class_id, e)
            return self._aborted(class_id, SyncError(str(e)), entity.name)

        log.info("class %s (%r) deleted, unassigning %d teacher(s)", class_id, entity.name, len(assigned))
        result = await self._unassign_all(class_id, entity.name, [t.teacher_id for t in assigned])
        self._remember(result)
        if result.ok:
            self._feedback.notify("Class deleted", NotificationCategory.SUCCESS)
        return result

    async def retry_cascade(self, result: CascadeResult) -> CascadeResult:
        """Unassign the teachers a previous cascade could not."""

        if result.status != CascadeStatus.PARTIAL_FAILURE:
            return result
        retried = await self._unassign_all(result.class_id, result.class_name, result.failed_unassigns)
        retried = CascadeResult(
            status=retried.status,
            class_id=retried.class_id,
            class_name=retried.class_name,
            unassigned=result.unassigned + retried.unassigned,
            failed_unassigns=retried.failed_unassigns,
            error=retried.error,
        )
        self._remember(retried)
        if retried.ok:
            self._feedback.notify("Teachers unassigned from the deleted class", NotificationCategory.SUCCESS)
        return retried

    def _remember(self, result: CascadeResult) -> None:
        if result.status == CascadeStatus.PARTIAL_FAILURE:
            self._pending[result.class_id] = result
        else:
            self._pending.pop(result.class_id, None)

    async def _unassign_all(self, class_id: str, class_name: str, teacher_ids: Iterable[str]) -> CascadeResult:
        unassigned: list[str] = []
        failed: list[str] = []
        for teacher_id in teacher_ids:
            try:
                await with_timeout(self._teachers.set_class_name(teacher_id, ""), self._timeout, what="unassign teacher")
            except RemoteStoreError as e:
                log.warning("unassigning teacher %s from deleted class %r failed: %s", teacher_id, class_name, e)
                failed.append(teacher_id)
            else:
                unassigned.append(teacher_id)

        if not failed:
            return CascadeResult(
                status=CascadeStatus.OK,
                class_id=class_id,
                class_name=class_name,
                unassigned=tuple(unassigned),
            )

        error = IntegrityError(
            f"Class deleted, but {len(failed)} teacher(s) are still assigned to {class_name!r}",
            class_name=class_name,
            teacher_ids=tuple(failed),
        )
        self._feedback.notify(str(error), NotificationCategory.ERROR)
        return CascadeResult(
            status=CascadeStatus.PARTIAL_FAILURE,
            class_id=class_id,
            class_name=class_name,
            unassigned=tuple(unassigned),
            failed_unassigns=tuple(failed),
            error=error,
        )
