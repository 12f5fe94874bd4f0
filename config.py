import os
from pathlib import Path

BASE_DIR = Path(__file__).parent

# Path to the SQLite database file backing the key-value store. Can be
# overridden using the WUZZLER_DB_PATH environment variable; set it to an
# empty string to keep everything in memory.
DB_PATH = os.environ.get("WUZZLER_DB_PATH", str(BASE_DIR / "data" / "wuzzler.sqlite3"))

# Directory holding the date-keyed puzzle content files.
CONTENT_DIR = os.environ.get("WUZZLER_CONTENT_DIR", str(BASE_DIR / "content"))

# Full-state saves are coalesced to one write per this many seconds of inactivity.
SAVE_DEBOUNCE_SECONDS = float(os.environ.get("WUZZLER_SAVE_DEBOUNCE_SECONDS", "0.5"))

# Elapsed-time clock tick interval.
TICK_SECONDS = float(os.environ.get("WUZZLER_TICK_SECONDS", "1.0"))

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
