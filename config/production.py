import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "class_attendance"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

NOTIFICATION_TTL_MS = int(os.getenv("NOTIFICATION_TTL_MS", "4000"))
OVERLAY_TTL_MS = int(os.getenv("OVERLAY_TTL_MS", "2200"))
REMOTE_TIMEOUT_SECONDS = float(os.getenv("REMOTE_TIMEOUT_SECONDS", "15"))
UNASSIGNED_LABEL = os.getenv("UNASSIGNED_LABEL", "General")
RECORDED_BY = os.getenv("RECORDED_BY", "admin")
# Admin sessions idle this long are closed; 0 keeps them until logout
SESSION_IDLE_SECONDS = float(os.getenv("SESSION_IDLE_SECONDS", "3600"))
DISCARD_UNSYNCED_ON_SWITCH = bool(int(os.getenv("DISCARD_UNSYNCED_ON_SWITCH", "1")))

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
