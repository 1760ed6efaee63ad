import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_kiosk_test"),
    "connection_timeout": 2,
}

QR_PAYLOAD_TYPE = "KIOSK_ATTENDANCE"

# Inline writes keep tests deterministic.
AUDIT_WORKERS = 0

SCAN_COOLDOWN_SECONDS = 3

LOG_LEVEL = "WARNING"
DEBUG = False
TESTING = True

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
