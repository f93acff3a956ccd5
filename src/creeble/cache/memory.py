"""In-process TTL cache backed by :class:`cachetools.TLRUCache`.

Each entry carries its own TTL, so one store can serve callers with
different ``ttl_seconds``. Expired entries are purged on every write and
whenever the size is read; when ``maxsize`` is reached the least recently
used entry is dropped.
"""

from __future__ import annotations

import threading
import time
from typing import Any, Callable, NamedTuple, Optional

from cachetools import TLRUCache

DEFAULT_MAXSIZE = 1024


class CacheEntry(NamedTuple):
    """A cached value and the TTL it was stored with."""

    value: Any
    ttl_seconds: float


def _expires_at(key: str, entry: CacheEntry, now: float) -> float:
    return now + entry.ttl_seconds


class MemoryCache:
    """:class:`~creeble.cache.CacheBackend` holding entries in memory.

    Access is serialised with a lock because worker threads share the store
    during concurrent pagination.

    Args:
        maxsize: Maximum number of entries kept.
        clock: Returns the current time in seconds. Defaults to
            :func:`time.monotonic`; tests pass a fake clock.
    """

    def __init__(
        self,
        maxsize: int = DEFAULT_MAXSIZE,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._entries: TLRUCache = TLRUCache(maxsize=maxsize, ttu=_expires_at, timer=clock)
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
        if entry is None:
            return None
        return entry.value

    def set(self, key: str, value: Any, ttl_seconds: float) -> None:
        with self._lock:
            # Entries whose TTL is already over are skipped by TLRUCache.
            self._entries[key] = CacheEntry(value, ttl_seconds)

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            self._entries.expire()
            return len(self._entries)
