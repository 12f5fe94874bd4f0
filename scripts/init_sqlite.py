#!/usr/bin/env python3
"""Initialize the key-value SQLite database from db/schema.sql."""
import sqlite3
import sys
import os
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from db import DEFAULT_SCHEMA  # noqa: E402

REQUIRED_TABLES = ["kv_store"]


def init_db(db_path: str, schema_path: str = None, reset: bool = False) -> None:
    """Create (or with `reset`, wipe and recreate) the database at `db_path`."""
    db_file = Path(db_path).resolve()
    db_file.parent.mkdir(parents=True, exist_ok=True)

    schema_file = Path(schema_path) if schema_path else DEFAULT_SCHEMA
    if not schema_file.exists():
        raise FileNotFoundError(f"Schema file not found: {schema_file}")

    conn = sqlite3.connect(str(db_file))
    try:
        if reset:
            tables = [r[0] for r in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")]
            for table in tables:
                conn.execute(f"DROP TABLE IF EXISTS {table}")
        conn.commit()
        conn.executescript(schema_file.read_text())
        conn.commit()

        created = {r[0] for r in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
        missing = [t for t in REQUIRED_TABLES if t not in created]
        if missing:
            raise RuntimeError(f"Missing tables after init: {missing}")
    finally:
        conn.close()

    # Docker volumes are often mounted for a different user
    os.chmod(str(db_file), 0o666)


if __name__ == "__main__":
    db_path = sys.argv[1] if len(sys.argv) > 1 else "./data/wuzzler.sqlite3"
    reset = "--reset" in sys.argv[2:]
    try:
        init_db(db_path, reset=reset)
    except (sqlite3.Error, RuntimeError, FileNotFoundError) as e:
        print(f"[INIT] ✗ Error: Failed to initialize database: {e}", file=sys.stderr)
        sys.exit(1)
    print(f"[INIT] ✓ Database initialized at {db_path}")
