import os

# -----------------------------
# Runtime configuration
# -----------------------------

DB_FILE = os.getenv("DB_FILE", "budget.duckdb")
LOG_FILE = os.getenv("LOG_FILE", "budget.log")

OLLAMA_BASE_URL = os.getenv("OLLAMA_BASE_URL")
OLLAMA_MODEL = os.getenv("OLLAMA_MODEL", "qwen2.5:14b")

# "Today" is the civil date at this fixed UTC offset, never server-local time.
REFERENCE_UTC_OFFSET_HOURS = int(os.getenv("REFERENCE_UTC_OFFSET_HOURS", "-3"))

LOW_BALANCE_THRESHOLD = int(os.getenv("LOW_BALANCE_THRESHOLD", "100"))


def non_negative_int(name, default):
    value = int(os.getenv(name, default))
    if value < 0:
        raise ValueError(f"{name} must be zero or positive, got {value}")
    return value


PROJECTION_HORIZON_DAYS = non_negative_int("PROJECTION_HORIZON_DAYS", "30")

DEFAULT_GROUP_ID = 1
