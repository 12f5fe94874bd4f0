from pathlib import Path
from typing import Dict, Optional
import aiosqlite


DEFAULT_SCHEMA = Path(__file__).parent / "schema.sql"


async def connect(db_path: str, pragmas: Optional[Dict[str, str]] = None) -> aiosqlite.Connection:
    """Open an aiosqlite connection and apply sensible pragmas.

    - Sets `row_factory` to `aiosqlite.Row` for named access.
    - Disables implicit transactions; callers issue BEGIN/COMMIT themselves.
    - Applies any additional PRAGMA settings supplied in `pragmas`.

    Returns an open connection; caller is responsible for closing it.
    """
    conn = await aiosqlite.connect(db_path, isolation_level=None)
    conn.row_factory = aiosqlite.Row

    # DELETE journal mode; WAL misbehaves on Docker volume mounts
    await conn.execute("PRAGMA journal_mode=DELETE")
    if pragmas:
        for k, v in pragmas.items():
            await conn.execute(f"PRAGMA {k} = {v}")
    return conn


async def apply_schema(conn: aiosqlite.Connection, schema_path: Optional[str] = None) -> None:
    """Run the SQL schema against an open connection.

    If `schema_path` is not provided this function uses `schema.sql`
    next to this module (i.e. `db/schema.sql`).
    """
    schema_file = Path(schema_path) if schema_path else DEFAULT_SCHEMA
    if not schema_file.exists():
        raise FileNotFoundError(f"Schema file not found: {schema_file}")
    await conn.executescript(schema_file.read_text())
