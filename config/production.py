import os

from .config import db_config, env_bool, env_int

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "mysql")
DB_CONFIG = db_config()

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = env_bool("AUTO_INIT_DB", "0")
AUTO_SEED_DB = env_bool("AUTO_SEED_DB", "0")

TIMEZONE = os.getenv("TIMEZONE", "")
LATE_GRACE_MINUTES = env_int("LATE_GRACE_MINUTES", "0") or 0
EARLY_ARRIVAL_MINUTES = env_int("EARLY_ARRIVAL_MINUTES")

ABSENCE_SCHEDULER_ENABLED = env_bool("ABSENCE_SCHEDULER_ENABLED", "1")
ABSENCE_SCHEDULER_RUN_AT = os.getenv("ABSENCE_SCHEDULER_RUN_AT", "00:05")
