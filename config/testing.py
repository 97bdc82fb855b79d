import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "class_attendance_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

NOTIFICATION_TTL_MS = 4000
OVERLAY_TTL_MS = 2200
REMOTE_TIMEOUT_SECONDS = 2.0
UNASSIGNED_LABEL = "General"
RECORDED_BY = "admin"
SESSION_IDLE_SECONDS = 3600.0
DISCARD_UNSYNCED_ON_SWITCH = True

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
