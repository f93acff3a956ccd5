"""Response caching for creeble.

This package provides :class:`ResponseCache`, a transparent GET cache used
by :class:`~creeble.client.HttpClient`, and the pluggable storage it
delegates to:

* :class:`CacheBackend` -- the protocol any store must satisfy
  (``get`` / ``set`` / ``delete`` / ``clear``).
* :class:`MemoryCache` -- in-process :mod:`cachetools` TLRU store (default).
* :class:`DiskCache` -- persistent store backed by :mod:`diskcache`.

Cached entries are keyed by HTTP method, request path and normalized query
parameters, and expire after :attr:`~creeble.models.CacheConfig.ttl_seconds`.
"""

from creeble.cache.base import CacheBackend
from creeble.cache.disk import DiskCache
from creeble.cache.memory import MemoryCache
from creeble.cache.response_cache import ResponseCache, make_cache_key

__all__ = ["CacheBackend", "DiskCache", "MemoryCache", "ResponseCache", "make_cache_key"]
