import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "payroll_console"),
    "connect_timeout": int(os.getenv("DB_CONNECT_TIMEOUT", "10")),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

READ_RETRY_ATTEMPTS = int(os.getenv("READ_RETRY_ATTEMPTS", "3"))
READ_RETRY_BACKOFF = float(os.getenv("READ_RETRY_BACKOFF", "0.5"))

PAYROLL_POLICY = {
    "standard_monthly_hours": os.getenv("PAYROLL_STANDARD_MONTHLY_HOURS"),
    "overtime_multiplier": os.getenv("PAYROLL_OVERTIME_MULTIPLIER"),
    "integrity_bonus_amount": os.getenv("PAYROLL_INTEGRITY_BONUS_AMOUNT"),
    "integrity_bonus_threshold": os.getenv("PAYROLL_INTEGRITY_BONUS_THRESHOLD"),
    "integrity_penalty_amount": os.getenv("PAYROLL_INTEGRITY_PENALTY_AMOUNT"),
    "integrity_penalty_threshold": os.getenv("PAYROLL_INTEGRITY_PENALTY_THRESHOLD"),
    "default_annual_leave_allowance": os.getenv("ANNUAL_LEAVE_ALLOWANCE"),
}
