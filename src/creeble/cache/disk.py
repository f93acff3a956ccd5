"""Disk-backed TTL cache using :mod:`diskcache`.

Survives process restarts, which helps scripts that repeatedly read the
same content. Expiry is enforced by :mod:`diskcache` itself: an expired key
reads as a miss.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import diskcache


class DiskCache:
    """:class:`~creeble.cache.CacheBackend` stored under *directory*.

    Args:
        directory: Root directory; entries live in a ``responses/``
            subdirectory created on demand.
    """

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory) / "responses"
        self._cache = diskcache.Cache(str(self._directory))

    @property
    def directory(self) -> Path:
        return self._directory

    def get(self, key: str) -> Optional[Any]:
        return self._cache.get(key)

    def set(self, key: str, value: Any, ttl_seconds: float) -> None:
        self._cache.set(key, value, expire=ttl_seconds)

    def delete(self, key: str) -> None:
        self._cache.delete(key)

    def clear(self) -> None:
        self._cache.clear()

    def close(self) -> None:
        """Close the underlying :class:`diskcache.Cache` and release file handles."""
        self._cache.close()

    def __len__(self) -> int:
        return len(self._cache)
