import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_kiosk"),
    "connection_timeout": int(os.getenv("DB_TIMEOUT_SECONDS", "5")),
}

QR_PAYLOAD_TYPE = os.getenv("QR_PAYLOAD_TYPE", "KIOSK_ATTENDANCE")

AUDIT_WORKERS = int(os.getenv("AUDIT_WORKERS", "1"))

SCAN_COOLDOWN_SECONDS = int(os.getenv("SCAN_COOLDOWN_SECONDS", "3"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
