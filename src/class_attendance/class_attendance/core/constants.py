"""Defaults shared by the feedback, attendance and store layers."""

NOTIFICATION_TTL_MS = 4000
OVERLAY_TTL_MS = 2200
DEFAULT_REMOTE_TIMEOUT_SECONDS = 15.0
DEFAULT_RECORDED_BY = "admin"
DEFAULT_SESSION_IDLE_SECONDS = 3600.0

# Teachers carrying this class name are treated as free for assignment.
UNASSIGNED_LABEL = "General"

CLASSES = "classes"
STUDENTS = "students"
TEACHERS = "teachers"
STUDENT_ATTENDANCE = "student_attendance"
