import os

from .config import db_config

SECRET_KEY = "test-secret"

# Tests run against the in-memory repositories
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "memory")
DB_CONFIG = db_config("12345")

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False
AUTO_SEED_DB = False

TIMEZONE = ""
LATE_GRACE_MINUTES = 0
EARLY_ARRIVAL_MINUTES = None

ABSENCE_SCHEDULER_ENABLED = False
ABSENCE_SCHEDULER_RUN_AT = "00:05"
