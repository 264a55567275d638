import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "onpoint_payroll"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Payslips are recomputed after this many seconds (forceRefresh bypasses it).
PAYSLIP_CACHE_TTL_SECONDS = int(os.getenv("PAYSLIP_CACHE_TTL_SECONDS", "7200"))
AUTO_CLOSE_HOUR = int(os.getenv("AUTO_CLOSE_HOUR", "22"))

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
