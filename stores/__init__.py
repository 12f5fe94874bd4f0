# Abstractions
from .kv_store import KeyValueStore

# Exceptions
from .exceptions import (
    StoreError,
    UnexpectedResult,
    KeyValueStoreError,
    StoreClosed,
    InvalidKey,
    ContentError,
    ContentNotFound,
    MalformedContent,
)

# Concrete implementations
from .memory_kv_store import MemoryKeyValueStore
from .sqlite_kv_store import SqliteKeyValueStore

__all__ = [
    # Abstractions
    "KeyValueStore",
    # Implementations
    "MemoryKeyValueStore",
    "SqliteKeyValueStore",
    # Exceptions
    "StoreError",
    "UnexpectedResult",
    "KeyValueStoreError",
    "StoreClosed",
    "InvalidKey",
    "ContentError",
    "ContentNotFound",
    "MalformedContent",
    # Runtime helpers
    "init_store",
    "get_kv_store",
    "close_store",
]


# Runtime singleton and initialization helpers
from typing import Optional
kv_store: Optional[KeyValueStore] = None


async def init_store(db_path: Optional[str]) -> KeyValueStore:
    """Initialize the module-level store for this process.

    Safe to call multiple times; initialization is idempotent. An empty
    `db_path` selects the in-memory store. Must run on the event loop that
    will use the store, since the SQLite writer task lives there.
    """
    global kv_store

    if kv_store is not None:
        return kv_store

    if db_path:
        store = SqliteKeyValueStore(db_path)
        await store.init()
        kv_store = store
    else:
        kv_store = MemoryKeyValueStore()
    return kv_store


def get_kv_store() -> KeyValueStore:
    """Get the key-value store installed by `init_store`."""
    if kv_store is None:
        raise RuntimeError("Key-value store not initialized; await init_store() at startup")
    return kv_store


async def close_store() -> None:
    global kv_store
    if kv_store is not None:
        await kv_store.close()
        kv_store = None
