from __future__ import annotations

import logging
from typing import Callable, Optional

from ..common.scheduling import with_timeout
from ..common.validators import require_id, require_non_empty
from ..core.constants import DEFAULT_REMOTE_TIMEOUT_SECONDS, UNASSIGNED_LABEL
from ..core.enums import NotificationCategory
from ..core.exceptions import RemoteStoreError
from ..feedback.context import FeedbackContext
from .model import Teacher, candidate_teachers
from .repository import TeacherRepository

log = logging.getLogger(__name__)

Confirm = Callable[[str], bool]

UNASSIGN_PROMPT = "Remove this teacher from the class?"


class TeacherAssignmentService:
    """Assigns teachers to classes by class name.

    A teacher holds one class reference at most; assigning overwrites it
    without checking the previous class (last write wins).
    """

    def __init__(
        self,
        teachers: TeacherRepository,
        feedback: FeedbackContext,
        *,
        timeout: Optional[float] = DEFAULT_REMOTE_TIMEOUT_SECONDS,
        unassigned_label: str = UNASSIGNED_LABEL,
    ):
        self._teachers = teachers
        self._feedback = feedback
        self._timeout = timeout
        self._unassigned_label = unassigned_label

    async def assign(self, teacher_id: str, class_name: str) -> bool:
        teacher_id = require_id(teacher_id, "Teacher")
        class_name = require_non_empty(class_name, "Class name")
        try:
            await with_timeout(
                self._teachers.set_class_name(teacher_id, class_name),
                self._timeout,
                what="assign teacher",
            )
        except RemoteStoreError as e:
            log.warning("assigning teacher %s to %r failed: %s", teacher_id, class_name, e)
            self._feedback.notify("Error assigning the teacher", NotificationCategory.ERROR)
            return False

        self._feedback.notify("Teacher assigned", NotificationCategory.SUCCESS)
        return True

    async def unassign(self, teacher_id: str, *, confirm: Confirm) -> bool:
        """Clear the teacher's class, only once ``confirm`` accepts the prompt."""

        teacher_id = require_id(teacher_id, "Teacher")
        if not confirm(UNASSIGN_PROMPT):
            return False
        try:
            await with_timeout(self._teachers.set_class_name(teacher_id, ""), self._timeout, what="unassign teacher")
        except RemoteStoreError as e:
            log.warning("unassigning teacher %s failed: %s", teacher_id, e)
            self._feedback.notify("Error removing the teacher", NotificationCategory.ERROR)
            return False

        self._feedback.notify("Teacher removed from the class", NotificationCategory.SUCCESS)
        return True

    async def _list_all(self) -> Optional[list[Teacher]]:
        try:
            return list(await with_timeout(self._teachers.list_all(), self._timeout, what="load teachers"))
        except RemoteStoreError as e:
            log.warning("loading teachers failed: %s", e)
            self._feedback.notify("Error loading teachers", NotificationCategory.ERROR)
            return None

    async def list_candidates(self) -> list[Teacher]:
        teachers = await self._list_all()
        return candidate_teachers(teachers or [], self._unassigned_label)

    async def list_assigned(self, class_name: str) -> list[Teacher]:
        teachers = await self._list_all()
        return [t for t in teachers or [] if t.class_name == class_name]
