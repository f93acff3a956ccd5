"""Storage protocol for the response cache."""

from __future__ import annotations

from typing import Any, Optional, Protocol, runtime_checkable


@runtime_checkable
class CacheBackend(Protocol):
    """Key/value store with per-entry expiry.

    Implementations must never return an expired entry: an expired key is
    treated exactly like a missing one.
    """

    def get(self, key: str) -> Optional[Any]:
        """Return the stored value, or ``None`` on a miss or expiry."""
        ...

    def set(self, key: str, value: Any, ttl_seconds: float) -> None:
        """Store *value* under *key* for *ttl_seconds* from now."""
        ...

    def delete(self, key: str) -> None:
        """Remove *key* if present."""
        ...

    def clear(self) -> None:
        """Remove every entry."""
        ...
