from pathlib import Path
from typing import Optional
import asyncio
import logging

import aiosqlite

from db import connect, apply_schema
from utils.time import now_utc, to_iso
from .exceptions import KeyValueStoreError, StoreClosed, UnexpectedResult
from .kv_store import KeyValueStore, check_key

logger = logging.getLogger(__name__)

# (key, value) to upsert, or (key, None) to delete
PendingWrite = tuple[str, Optional[str]]


class SqliteKeyValueStore(KeyValueStore):
    """
    aiosqlite-backed store with a write-behind queue.

    `init()` loads every row into memory; reads are served from that copy
    and writes update it immediately, then queue the change for a background
    task that commits it through aiosqlite. Callers on the event loop never
    wait on disk I/O. `flush()` waits for the queue to drain and `close()`
    drains it before closing the connection.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path
        self.db: Optional[aiosqlite.Connection] = None
        self._data: dict[str, str] = {}
        self._pending: asyncio.Queue[PendingWrite] = asyncio.Queue()
        self._writer: Optional[asyncio.Task] = None
        self._closed = False
        logger.info(f"[STORE] SqliteKeyValueStore initialized with db_path: {db_path}")

    async def init(self) -> None:
        """Open the connection, make sure the schema exists and load all rows. Call this after construction."""
        if self.db is not None:
            return
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        try:
            self.db = await connect(self.db_path)
            await apply_schema(self.db)
            async with self.db.execute("SELECT key, value FROM kv_store") as cursor:
                rows = await cursor.fetchall()
        except aiosqlite.Error as exc:
            raise KeyValueStoreError(f"failed to open {self.db_path}") from exc

        for row in rows:
            if not isinstance(row["value"], str):
                raise UnexpectedResult(f"non-text value stored under {row['key']}")
            self._data[row["key"]] = row["value"]

        self._closed = False
        self._writer = asyncio.create_task(self._write_loop())
        logger.info(f"[STORE] Database connection established to {self.db_path} ({len(self._data)} keys)")

    async def flush(self) -> None:
        """Wait until every queued write has been committed."""
        if self._writer is not None:
            await self._pending.join()

    async def close(self) -> None:
        """Commit queued writes, then close the database connection."""
        self._closed = True
        await self.flush()
        if self._writer is not None:
            self._writer.cancel()
            try:
                await self._writer
            except asyncio.CancelledError:
                pass
            self._writer = None
        if self.db:
            await self.db.close()
            self.db = None

    def _check_open(self) -> None:
        if self._closed or self.db is None:
            raise StoreClosed(f"store for {self.db_path} is not open; call init() first")

    # -------------------------------------------------
    # Blob access
    # -------------------------------------------------

    def get(self, key: str) -> Optional[str]:
        self._check_open()
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._check_open()
        check_key(key)
        self._data[key] = value
        self._pending.put_nowait((key, value))

    def delete(self, key: str) -> None:
        self._check_open()
        if self._data.pop(key, None) is not None:
            self._pending.put_nowait((key, None))

    def keys(self, prefix: str = "") -> list[str]:
        self._check_open()
        return sorted(k for k in self._data if k.startswith(prefix))

    # -------------------------------------------------
    # Background writer
    # -------------------------------------------------

    async def _write_loop(self) -> None:
        while True:
            batch = [await self._pending.get()]
            while not self._pending.empty():
                batch.append(self._pending.get_nowait())
            try:
                await self._commit(batch)
            except KeyValueStoreError as e:
                logger.error(f"[STORE] {e}")
            finally:
                for _ in batch:
                    self._pending.task_done()

    async def _commit(self, batch: list[PendingWrite]) -> None:
        """Apply a batch of writes in one transaction."""
        stamp = to_iso(now_utc())
        try:
            await self.db.execute("BEGIN")
            for key, value in batch:
                if value is None:
                    await self.db.execute("DELETE FROM kv_store WHERE key = ?", (key,))
                else:
                    await self.db.execute(
                        """
                        INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)
                        ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                        """,
                        (key, value, stamp),
                    )
            await self.db.execute("COMMIT")
        except aiosqlite.Error as exc:
            try:
                await self.db.execute("ROLLBACK")
            except aiosqlite.Error:
                logger.debug("[STORE] rollback after failed batch also failed")
            raise KeyValueStoreError(f"failed to commit {len(batch)} write(s) to {self.db_path}") from exc
