from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from ..common.scheduling import with_timeout
from ..common.validators import require_id, require_non_empty
from ..core.constants import DEFAULT_REMOTE_TIMEOUT_SECONDS
from ..core.enums import NotificationCategory
from ..core.exceptions import RemoteStoreError
from ..feedback.context import FeedbackContext
from .model import Student
from .repository import StudentRepository

log = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "first_name",
    "last_name",
    "birth_date",
    "guardian_name",
    "guardian_phone",
    "guardian_email",
    "status",
    "notes",
)


def _clean(fields: Mapping[str, Any]) -> dict:
    return {k: v for k, v in fields.items() if k in EDITABLE_FIELDS}


class StudentService:
    def __init__(
        self,
        students: StudentRepository,
        feedback: FeedbackContext,
        *,
        timeout: Optional[float] = DEFAULT_REMOTE_TIMEOUT_SECONDS,
    ):
        self._students = students
        self._feedback = feedback
        self._timeout = timeout

    async def enroll(self, class_id: str, fields: Mapping[str, Any]) -> Optional[Student]:
        """Create a student in ``class_id``; success is shown on the overlay."""

        data = _clean(fields)
        data["first_name"] = require_non_empty(data.get("first_name", ""), "First name")
        data["last_name"] = require_non_empty(data.get("last_name", ""), "Last name")
        data["class_id"] = require_id(class_id, "Class")

        try:
            student = await with_timeout(self._students.add(data), self._timeout, what="enroll student")
        except RemoteStoreError as e:
            log.warning("enrolling student in %s failed: %s", class_id, e)
            self._feedback.notify("Error saving the student", NotificationCategory.ERROR)
            return None

        self._feedback.celebrate("Student enrolled")
        return student

    async def update(self, student_id: str, fields: Mapping[str, Any]) -> bool:
        data = _clean(fields)
        for name in ("first_name", "last_name"):
            if name in data:
                data[name] = require_non_empty(data[name], name.replace("_", " ").capitalize())

        try:
            await with_timeout(
                self._students.update(require_id(student_id, "Student"), data),
                self._timeout,
                what="update student",
            )
        except RemoteStoreError as e:
            log.warning("updating student %s failed: %s", student_id, e)
            self._feedback.notify("Error saving the student", NotificationCategory.ERROR)
            return False

        self._feedback.notify("Student updated", NotificationCategory.SUCCESS)
        return True
