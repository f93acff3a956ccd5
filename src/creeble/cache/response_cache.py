"""GET response cache layered on a :class:`~creeble.cache.CacheBackend`.

Only GET requests are cached. Mutating requests are passed through and do
not invalidate existing entries, so a cached list may be stale for up to
``ttl_seconds`` after a form submission.

Cache keys are SHA-256 hashes of ``METHOD|path|normalized_params`` where
parameters are serialised with sorted keys, so identical requests resolve
to the same entry regardless of parameter ordering. ``None`` values are
dropped first, matching :func:`~creeble.client.encoding.flatten_params`.
"""

from __future__ import annotations

import hashlib
import json
import logging
from typing import Any, Optional

from creeble.cache.base import CacheBackend
from creeble.cache.memory import MemoryCache
from creeble.models import CacheConfig

logger = logging.getLogger(__name__)


def _drop_none(value: Any) -> Any:
    """Strip what the query encoder never sends (``None`` and empty containers)."""
    if isinstance(value, dict):
        cleaned = {k: _drop_none(v) for k, v in value.items() if v is not None}
        return {k: v for k, v in cleaned.items() if v != {} and v != []}
    if isinstance(value, (list, tuple)):
        return [_drop_none(v) for v in value if v is not None]
    return value


def make_cache_key(method: str, path: str, params: Optional[dict[str, Any]] = None) -> str:
    """Build a deterministic, parameter-order-independent cache key."""
    parts = [method.upper(), path]
    normalized = _drop_none(params or {})
    if normalized:
        parts.append(json.dumps(normalized, sort_keys=True, default=str))
    raw = "|".join(parts)
    return hashlib.sha256(raw.encode()).hexdigest()


class ResponseCache:
    """Best-effort cache for parsed GET response bodies.

    Args:
        config: ``enabled`` flag and ``ttl_seconds``.
        backend: Storage to use. Defaults to a fresh :class:`MemoryCache`.

    Example::

        cache = ResponseCache(CacheConfig(enabled=True, ttl_seconds=60))
        cache.set("GET", "/v1/blog", {"page": 1}, {"data": []})
        cache.get("GET", "/v1/blog", {"page": 1})
    """

    def __init__(self, config: CacheConfig, backend: Optional[CacheBackend] = None) -> None:
        self._config = config
        self._backend: CacheBackend = backend if backend is not None else MemoryCache()

    @property
    def enabled(self) -> bool:
        return self._config.enabled

    @property
    def backend(self) -> CacheBackend:
        return self._backend

    def get(self, method: str, path: str, params: Optional[dict[str, Any]] = None) -> Optional[Any]:
        """Return the cached body for a GET request, or ``None``.

        Lookups run even when caching is disabled, so entries written while
        it was enabled stay readable until they expire.
        """
        if method.upper() != "GET":
            return None
        hit = self._backend.get(make_cache_key(method, path, params))
        if hit is not None:
            logger.debug("Cache hit: %s %s", method.upper(), path)
        return hit

    def set(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]],
        body: Any,
    ) -> None:
        """Store *body* for a GET request when caching is enabled."""
        if not self._config.enabled or method.upper() != "GET":
            return
        self._backend.set(make_cache_key(method, path, params), body, self._config.ttl_seconds)

    def clear(self) -> None:
        """Remove all entries from the backend."""
        self._backend.clear()

    def close(self) -> None:
        """Release backend resources if the backend holds any."""
        close = getattr(self._backend, "close", None)
        if callable(close):
            close()
