from typing import Optional
from abc import ABC, abstractmethod
import json

from .exceptions import InvalidKey


# =========================
# KeyValueStore Interface
# =========================

class KeyValueStore(ABC):
    """
    Abstract blob store holding JSON-encoded game state, daily meta records
    and settings.

    Invariants:
    - Values are strings (JSON documents); the store never interprets them
    - `delete` of a missing key is a no-op
    - `keys(prefix)` returns every stored key starting with `prefix`
    """

    # -------------------------------------------------
    # Blob access
    # -------------------------------------------------

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None if the key is absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store `value` under `key`, replacing any previous value.

        Raises:
            InvalidKey: If the key is empty.
        """

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove `key`. Missing keys are ignored."""

    @abstractmethod
    def keys(self, prefix: str = "") -> list[str]:
        """Return all keys starting with `prefix` (read-only)."""

    async def close(self) -> None:
        """Release any underlying resources. Later calls raise `StoreClosed`."""

    # -------------------------------------------------
    # Settings helpers
    # -------------------------------------------------

    def get_flag(self, key: str, default: bool) -> bool:
        """Read a boolean setting stored as a JSON literal."""
        raw = self.get(key)
        if raw is None:
            return default
        try:
            value = json.loads(raw)
        except ValueError:
            return default
        return value if isinstance(value, bool) else default

    def set_flag(self, key: str, value: bool) -> None:
        self.set(key, json.dumps(bool(value)))


def check_key(key: str) -> None:
    if not isinstance(key, str) or not key:
        raise InvalidKey(f"Invalid store key: {key!r}")
