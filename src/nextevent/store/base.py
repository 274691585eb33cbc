"""Store protocol for the SDK's key-value cache.

Any object satisfying this protocol can be handed to the Client as cache,
e.g. an adapter around redis or a framework cache.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Store(Protocol):
    """Protocol for key-value caches used to keep access tokens."""

    def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        """Store value under key, optionally expiring after ttl seconds."""
        ...

    def get(self, key: str) -> Any:
        """Return the value under key, or None."""
        ...

    def has(self, key: str) -> bool:
        """Check whether key holds a value."""
        ...

    def delete(self, key: str) -> None:
        """Remove key from the store."""
        ...

    def expunge(self) -> None:
        """Drop all expired entries."""
        ...

    def clear(self) -> None:
        """Remove all entries."""
        ...
