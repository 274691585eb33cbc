"""In-memory store"""

import time
from typing import Any


class MemoryStore:
    """Keeps cache entries in a dict for the lifetime of the process

    Entries are stored as ``[value, expires_at]`` pairs where ``expires_at``
    is an epoch timestamp or None.
    """

    def __init__(self) -> None:
        self._store: dict[str, list[Any]] = {}

    def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        expires_at = time.time() + ttl if ttl else None
        self._store[key] = [value, expires_at]

    def get(self, key: str) -> Any:
        entry = self._store.get(key)
        if entry is None or self._is_expired(entry):
            return None
        return entry[0]

    def has(self, key: str) -> bool:
        return self.get(key) is not None

    def delete(self, key: str) -> None:
        self._store.pop(key, None)

    def expunge(self) -> None:
        self._store = {
            key: entry
            for key, entry in self._store.items()
            if not self._is_expired(entry)
        }

    def clear(self) -> None:
        self._store = {}

    @staticmethod
    def _is_expired(entry: list[Any]) -> bool:
        expires_at = entry[1]
        return expires_at is not None and expires_at < time.time()
