from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Attendance status of one member for one class and date."""

    PRESENT = "present"
    LATE = "late"
    EXCUSED = "excused"
    ABSENT = "absent"


class NotificationCategory(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class CascadeStatus(str, Enum):
    """Outcome of deleting a class and unassigning its teachers."""

    OK = "ok"
    PARTIAL_FAILURE = "partial_failure"
    ABORTED = "aborted"


class DayStatus(str, Enum):
    """Whether any attendance was recorded for a class on a given day."""

    DONE = "done"
    PENDING = "pending"
