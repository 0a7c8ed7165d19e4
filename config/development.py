import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hostel_attendance"),
    "connection_timeout": int(os.getenv("DB_CONNECT_TIMEOUT", "10")),
    "lock_wait_timeout": int(os.getenv("DB_LOCK_WAIT_TIMEOUT", "5")),
}

# Hostel boundaries served to clients and used by the geofence check.
HOSTELS_FILE = os.getenv("HOSTELS_FILE", "")

EMBEDDING_TIMEOUT_SECONDS = float(os.getenv("EMBEDDING_TIMEOUT_SECONDS", "15"))
EMBEDDING_WORKERS = int(os.getenv("EMBEDDING_WORKERS", "2"))

# Days of slack on each side of the duplicate-check window (0 = exact calendar day).
DUPLICATE_CHECK_SLACK_DAYS = int(os.getenv("DUPLICATE_CHECK_SLACK_DAYS", "0"))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
