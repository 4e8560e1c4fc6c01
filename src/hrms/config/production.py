import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hrms_db"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

DB_CONFLICT_RETRIES = int(os.getenv("DB_CONFLICT_RETRIES", "3"))

PAYROLL_POLICY = {
    "tax_threshold": os.getenv("PAYROLL_TAX_THRESHOLD", "5000"),
    "tax_rate": os.getenv("PAYROLL_TAX_RATE", "0.1"),
}
