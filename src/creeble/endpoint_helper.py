"""Fluent wrapper binding the data operations to a single endpoint.

Example::

    posts = creeble.endpoint("cms-abc123")
    posts.recent(5)
    posts.get_all_rows_by_database("Posts")
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from creeble.endpoints.data import Data
from creeble.exceptions import CreebleError
from creeble.pagination import DEFAULT_MAX_CONCURRENT, DEFAULT_MAX_ITEMS, DEFAULT_PAGE_SIZE

logger = logging.getLogger(__name__)


def _items(body: Any) -> list[Any]:
    if isinstance(body, dict):
        return body.get("data") or []
    return []


class EndpointHelper:
    """:class:`~creeble.endpoints.data.Data` operations scoped to *endpoint_name*.

    Also carries the Notion database helpers: a project exposes its
    databases as ``type=pages`` entries and their rows as ``type=rows``
    entries filterable by ``database``.
    """

    def __init__(self, endpoint_name: str, data: Data) -> None:
        self._endpoint = endpoint_name
        self._data = data

    @property
    def name(self) -> str:
        return self._endpoint

    def list(self, params: Optional[dict[str, Any]] = None) -> Any:
        return self._data.list(self._endpoint, params)

    def get(self, item_id: str) -> Any:
        return self._data.get(self._endpoint, item_id)

    def search(self, query: str, filters: Optional[dict[str, Any]] = None) -> Any:
        return self._data.search(self._endpoint, query, filters)

    def paginate(self, page: int = 1, limit: int = 20, filters: Optional[dict[str, Any]] = None) -> Any:
        return self._data.paginate(self._endpoint, page, limit, filters)

    def filter(self, filters: dict[str, Any]) -> Any:
        return self._data.filter(self._endpoint, filters)

    def sort_by(self, field: str, direction: str = "asc", filters: Optional[dict[str, Any]] = None) -> Any:
        return self._data.sort_by(self._endpoint, field, direction, filters)

    def recent(self, limit: int = 10) -> Any:
        return self._data.recent(self._endpoint, limit)

    def find_by(self, field: str, value: Any, type: str = "pages") -> Optional[dict[str, Any]]:
        return self._data.find_by(self._endpoint, field, value, type)

    def find_page_by(self, field: str, value: Any) -> Optional[dict[str, Any]]:
        return self._data.find_page_by(self._endpoint, field, value)

    def find_row_by(self, field: str, value: Any) -> Optional[dict[str, Any]]:
        return self._data.find_row_by(self._endpoint, field, value)

    def exists(self, item_id: str) -> bool:
        return self._data.exists(self._endpoint, item_id)

    def list_lightweight(self, filters: Optional[dict[str, Any]] = None) -> Any:
        return self._data.list_lightweight(self._endpoint, filters)

    def list_fields(self, fields: Sequence[str], filters: Optional[dict[str, Any]] = None) -> Any:
        return self._data.list_fields(self._endpoint, fields, filters)

    def get_all_pages(self, filters: Optional[dict[str, Any]] = None, limit: int = DEFAULT_PAGE_SIZE) -> list[Any]:
        return self._data.get_all_pages(self._endpoint, filters, limit)

    def get_all_pages_concurrent(
        self,
        filters: Optional[dict[str, Any]] = None,
        max_concurrent: int = DEFAULT_MAX_CONCURRENT,
    ) -> list[Any]:
        return self._data.get_all_pages_concurrent(self._endpoint, filters, max_concurrent)

    def get_all_pages_optimized(
        self,
        filters: Optional[dict[str, Any]] = None,
        prefer_concurrent: bool = True,
        max_items: int = DEFAULT_MAX_ITEMS,
    ) -> list[Any]:
        return self._data.get_all_pages_optimized(
            self._endpoint, filters, prefer_concurrent=prefer_concurrent, max_items=max_items,
        )

    # ------------------------------------------------------------------ #
    # Notion database helpers
    # ------------------------------------------------------------------ #

    def get_rows_by_database(self, database_name: str) -> list[Any]:
        """Rows of one database (first page, server-side filtered)."""
        return _items(self.list({"type": "rows", "database": database_name}))

    def get_rows_by_database_paginated(
        self,
        database_name: str,
        page: int = 1,
        limit: int = 20,
        filters: Optional[dict[str, Any]] = None,
    ) -> Any:
        """One page of a database's rows, with the pagination envelope."""
        return self.paginate(page, limit, {**(filters or {}), "type": "rows", "database": database_name})

    def get_all_rows_by_database(self, database_name: str, filters: Optional[dict[str, Any]] = None) -> list[Any]:
        """Every row of a database across all pages."""
        return self.get_all_pages({**(filters or {}), "type": "rows", "database": database_name})

    def get_databases(self) -> list[Any]:
        return _items(self.list({"type": "pages"}))

    def get_database_names(self) -> list[str]:
        return [db.get("title") or "Untitled" for db in self.get_databases() if isinstance(db, dict)]

    def get_row_by_field(self, database_name: str, field: str, value: Any) -> Optional[dict[str, Any]]:
        """Find a row by field value.

        Uses server-side filtering first. If that request fails, falls back to
        scanning the database's rows for ``properties[field].value == value``.
        """
        try:
            return self.find_by(field, value, "rows")
        except CreebleError as exc:
            logger.debug("Server-side lookup failed (%s); scanning %s rows", exc, database_name)
        for row in self.get_rows_by_database(database_name):
            prop = (row.get("properties") or {}).get(field) if isinstance(row, dict) else None
            if isinstance(prop, dict) and prop.get("value") == value:
                return row
        return None

    def get_all_rows(self) -> list[Any]:
        """Rows of every database combined (first page)."""
        return _items(self.list({"type": "rows"}))
