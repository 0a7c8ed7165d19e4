import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hostel_attendance_test"),
    "connection_timeout": 2,
    "lock_wait_timeout": 2,
}

HOSTELS_FILE = os.getenv("HOSTELS_FILE", "")

EMBEDDING_TIMEOUT_SECONDS = 2.0
EMBEDDING_WORKERS = 2

DUPLICATE_CHECK_SLACK_DAYS = 0

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
