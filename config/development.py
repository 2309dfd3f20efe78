import os

from .config import db_config, env_bool, env_int

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "mysql")
DB_CONFIG = db_config()

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = env_bool("AUTO_INIT_DB", "1")
# Optional: also seed demo data on startup
AUTO_SEED_DB = env_bool("AUTO_SEED_DB", "0")

# Empty = server-local time
TIMEZONE = os.getenv("TIMEZONE", "")
LATE_GRACE_MINUTES = env_int("LATE_GRACE_MINUTES", "0") or 0
EARLY_ARRIVAL_MINUTES = env_int("EARLY_ARRIVAL_MINUTES")

ABSENCE_SCHEDULER_ENABLED = env_bool("ABSENCE_SCHEDULER_ENABLED", "0")
ABSENCE_SCHEDULER_RUN_AT = os.getenv("ABSENCE_SCHEDULER_RUN_AT", "00:05")
