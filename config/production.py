import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "onpoint_payroll"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

PAYSLIP_CACHE_TTL_SECONDS = int(os.getenv("PAYSLIP_CACHE_TTL_SECONDS", "7200"))
AUTO_CLOSE_HOUR = int(os.getenv("AUTO_CLOSE_HOUR", "22"))

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
