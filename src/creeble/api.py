"""Top-level client for the Creeble content API.

:class:`Creeble` wires configuration, the HTTP client, the response cache,
and the endpoint groups together::

    from creeble import Creeble

    with Creeble("napi_...", cache={"enabled": True}) as creeble:
        creeble.data.recent("cms-abc123", limit=3)
        creeble.get_all_rows_by_database("cms-abc123", "Posts")
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import httpx

from creeble.cache import CacheBackend, DiskCache, MemoryCache, ResponseCache
from creeble.client import HttpClient
from creeble.config import resolve_config
from creeble.endpoint_helper import EndpointHelper
from creeble.endpoints import Data, Forms, Projects
from creeble.exceptions import CreebleError
from creeble.models import ClientConfig

_SIMPLE_KEYS = {
    "id": "id",
    "title": "title",
    "database": "database",
    "database_id": "database_id",
    "content": "html_content",
    "created_at": "created_at",
    "updated_at": "updated_at",
    "notion_url": "notion_url",
}


def _build_cache(config: ClientConfig, backend: Optional[CacheBackend]) -> ResponseCache:
    if backend is None:
        if config.cache.directory:
            backend = DiskCache(Path(config.cache.directory))
        else:
            backend = MemoryCache()
    return ResponseCache(config.cache, backend)


class Creeble:
    """Creeble API client.

    Args:
        api_key: API key. Falls back to ``CREEBLE_API_KEY`` or the project
            config file.
        base_url: Override for ``https://creeble.io``.
        config: A fully resolved :class:`~creeble.models.ClientConfig`;
            when given, *api_key*, *base_url* and *options* are ignored.
        cache_backend: Storage for the GET cache. Defaults to
            :class:`~creeble.cache.DiskCache` when ``cache.directory`` is
            configured, otherwise :class:`~creeble.cache.MemoryCache`.
        transport: Optional httpx transport (tests, proxies).
        **options: Further config fields, e.g. ``debug=True`` or
            ``cache={"enabled": True, "ttl_seconds": 60}``.

    Raises:
        ConfigError: If no API key is available or the config is invalid.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        *,
        config: Optional[ClientConfig] = None,
        cache_backend: Optional[CacheBackend] = None,
        transport: Optional[httpx.BaseTransport] = None,
        **options: Any,
    ) -> None:
        self._config = config or resolve_config(api_key=api_key, base_url=base_url, **options)
        self.client = HttpClient(
            self._config,
            cache=_build_cache(self._config, cache_backend),
            transport=transport,
        )
        self.data = Data(self.client)
        self.forms = Forms(self.client)
        self.projects = Projects(self.client)

    def __enter__(self) -> Creeble:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        self.client.close()

    @property
    def config(self) -> ClientConfig:
        return self._config

    def set_debug(self, enabled: bool) -> None:
        """Enable or disable request/response debug logging."""
        self._config = self._config.model_copy(update={"debug": enabled})
        self.client.set_debug(enabled)

    def clear_cache(self) -> None:
        self.client.cache.clear()

    def ping(self) -> bool:
        """Test the API connection. Any error reads as ``False``."""
        try:
            self.client.get("/ping")
        except CreebleError:
            return False
        return True

    # ------------------------------------------------------------------ #
    # Shortcuts
    # ------------------------------------------------------------------ #

    def get(self, endpoint: str, params: Optional[dict[str, Any]] = None) -> Any:
        """Shortcut for :meth:`Data.list <creeble.endpoints.data.Data.list>`."""
        return self.data.list(endpoint, params)

    def find(self, endpoint: str, item_id: str) -> Any:
        """Shortcut for :meth:`Data.get <creeble.endpoints.data.Data.get>`."""
        return self.data.get(endpoint, item_id)

    def endpoint(self, name: str) -> EndpointHelper:
        return EndpointHelper(name, self.data)

    def get_rows_by_database(self, endpoint: str, database_name: str) -> list[Any]:
        return self.endpoint(endpoint).get_rows_by_database(database_name)

    def get_rows_by_database_paginated(
        self,
        endpoint: str,
        database_name: str,
        page: int = 1,
        limit: int = 20,
        filters: Optional[dict[str, Any]] = None,
    ) -> Any:
        return self.endpoint(endpoint).get_rows_by_database_paginated(database_name, page, limit, filters)

    def get_all_rows_by_database(
        self, endpoint: str, database_name: str, filters: Optional[dict[str, Any]] = None,
    ) -> list[Any]:
        return self.endpoint(endpoint).get_all_rows_by_database(database_name, filters)

    def get_databases(self, endpoint: str) -> list[Any]:
        return self.endpoint(endpoint).get_databases()

    def get_database_names(self, endpoint: str) -> list[str]:
        return self.endpoint(endpoint).get_database_names()

    def get_row_by_field(self, endpoint: str, database_name: str, field: str, value: Any) -> Optional[dict[str, Any]]:
        return self.endpoint(endpoint).get_row_by_field(database_name, field, value)

    def get_all_rows(self, endpoint: str) -> list[Any]:
        return self.endpoint(endpoint).get_all_rows()

    @staticmethod
    def simplify_item(item: dict[str, Any]) -> dict[str, Any]:
        """Flatten a Notion-backed item into plain ``{name: value}`` pairs.

        Top-level metadata is kept (``html_content`` becomes ``content``),
        each property is reduced to its ``value`` (or ``html``), and keys
        whose value is ``None`` are dropped.
        """
        simplified: dict[str, Any] = {key: item.get(source) for key, source in _SIMPLE_KEYS.items()}
        for name, prop in (item.get("properties") or {}).items():
            if isinstance(prop, dict):
                value = prop.get("value")
                simplified[name] = value if value is not None else prop.get("html")
            else:
                simplified[name] = prop
        return {key: value for key, value in simplified.items() if value is not None}
