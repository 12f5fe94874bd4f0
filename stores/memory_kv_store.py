from typing import Optional
import logging

from .exceptions import StoreClosed
from .kv_store import KeyValueStore, check_key

logger = logging.getLogger(__name__)


class MemoryKeyValueStore(KeyValueStore):
    """Process-local store. Used by tests and when no database path is configured."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})
        self._closed = False

    def _check_open(self) -> None:
        if self._closed:
            raise StoreClosed("store has been closed")

    def get(self, key: str) -> Optional[str]:
        self._check_open()
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._check_open()
        check_key(key)
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._check_open()
        self._data.pop(key, None)

    def keys(self, prefix: str = "") -> list[str]:
        self._check_open()
        return sorted(k for k in self._data if k.startswith(prefix))

    async def close(self) -> None:
        self._closed = True
        logger.debug("memory store closed with %d keys", len(self._data))
