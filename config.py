import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./ledger.db")
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")

    # Ledger date/time strings are rendered in this timezone
    BUSINESS_TIMEZONE = data.get("BUSINESS_TIMEZONE", "Asia/Kolkata")

    # Sequential ID allocation
    ID_ALLOCATION_MAX_ATTEMPTS = int(data.get("ID_ALLOCATION_MAX_ATTEMPTS", 10))
    USE_SEQUENCE_COUNTERS = bool(data.get("USE_SEQUENCE_COUNTERS", True))

    # Bill and order listing pagination
    DEFAULT_PAGE_SIZE = int(data.get("DEFAULT_PAGE_SIZE", 10))
    MAX_PAGE_SIZE = int(data.get("MAX_PAGE_SIZE", 100))

    # Legacy bill ID backfill
    BACKFILL_ENABLED = bool(data.get("BACKFILL_ENABLED", True))
