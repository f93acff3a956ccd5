"""Data endpoint: list, search, filter, and paginate project content."""

from __future__ import annotations

from typing import Any, Optional, Sequence

from creeble.client import HttpClient
from creeble.client.encoding import endpoint_path
from creeble.exceptions import CreebleError
from creeble.pagination import (
    DEFAULT_MAX_CONCURRENT,
    DEFAULT_MAX_ITEMS,
    DEFAULT_PAGE_SIZE,
    Paginator,
)

LIGHTWEIGHT_FIELDS = ("id", "title")


class Data:
    """Read access to the items of a project endpoint.

    Every list-style method returns the raw response body
    (``{"data": [...], "pagination": {...}}``); the ``get_all_pages*``
    methods return the merged list of items across pages.
    """

    def __init__(self, client: HttpClient) -> None:
        self._client = client

    def list(self, endpoint: str, params: Optional[dict[str, Any]] = None) -> Any:
        """List items from *endpoint* (e.g. ``"cms-abc123"``) with query *params*."""
        return self._client.get(endpoint_path(endpoint), params or {})

    def get(self, endpoint: str, item_id: str) -> Any:
        """Fetch a single item by id."""
        return self._client.get(endpoint_path(endpoint, item_id))

    def search(self, endpoint: str, query: str, filters: Optional[dict[str, Any]] = None) -> Any:
        return self.list(endpoint, {**(filters or {}), "search": query})

    def paginate(
        self,
        endpoint: str,
        page: int = 1,
        limit: int = 20,
        filters: Optional[dict[str, Any]] = None,
    ) -> Any:
        """Fetch one page (1-based) of *limit* items."""
        return self.list(endpoint, {**(filters or {}), "page": page, "limit": limit})

    def filter(self, endpoint: str, filters: dict[str, Any]) -> Any:
        """List items matching field filters, e.g. ``{"status": "published"}``."""
        return self.list(endpoint, filters)

    def sort_by(
        self,
        endpoint: str,
        field: str,
        direction: str = "asc",
        filters: Optional[dict[str, Any]] = None,
    ) -> Any:
        direction = direction.lower()
        if direction not in ("asc", "desc"):
            raise ValueError(f"direction must be 'asc' or 'desc', got {direction!r}")
        return self.list(endpoint, {**(filters or {}), "sort": field, "order": direction})

    def recent(self, endpoint: str, limit: int = 10) -> Any:
        """Most recently created items first."""
        return self.sort_by(endpoint, "created_at", "desc", {"limit": limit})

    def find_by(self, endpoint: str, field: str, value: Any, type: str = "pages") -> Optional[dict[str, Any]]:
        """Return the first item whose *field* equals *value*, or ``None``.

        Filtering happens server-side; only one item is requested.
        """
        body = self.list(endpoint, {field: value, "type": type, "limit": 1})
        items = body.get("data") if isinstance(body, dict) else None
        if not items:
            return None
        return items[0]

    def find_page_by(self, endpoint: str, field: str, value: Any) -> Optional[dict[str, Any]]:
        return self.find_by(endpoint, field, value, "pages")

    def find_row_by(self, endpoint: str, field: str, value: Any) -> Optional[dict[str, Any]]:
        return self.find_by(endpoint, field, value, "rows")

    def exists(self, endpoint: str, item_id: str) -> bool:
        """Return whether an item can be fetched.

        Any API error, including network failures, is reported as ``False``.
        """
        try:
            self.get(endpoint, item_id)
        except CreebleError:
            return False
        return True

    # ------------------------------------------------------------------ #
    # Payload projection
    # ------------------------------------------------------------------ #

    def list_fields(
        self,
        endpoint: str,
        fields: Sequence[str],
        filters: Optional[dict[str, Any]] = None,
    ) -> Any:
        """List items returning only *fields* (``fields=id,title,...``)."""
        return self.list(endpoint, {**(filters or {}), "fields": ",".join(fields)})

    def list_lightweight(self, endpoint: str, filters: Optional[dict[str, Any]] = None) -> Any:
        """List ids and titles only; suited to dropdowns and selectors."""
        return self.list_fields(endpoint, LIGHTWEIGHT_FIELDS, filters)

    # ------------------------------------------------------------------ #
    # Whole-collection fetches
    # ------------------------------------------------------------------ #

    def paginator(
        self,
        endpoint: str,
        filters: Optional[dict[str, Any]] = None,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> Paginator:
        return Paginator(lambda params: self.list(endpoint, params), filters, limit)

    def get_all_pages(
        self,
        endpoint: str,
        filters: Optional[dict[str, Any]] = None,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> list[Any]:
        """Fetch every matching item one page at a time."""
        return self.paginator(endpoint, filters, limit).sequential()

    def get_all_pages_concurrent(
        self,
        endpoint: str,
        filters: Optional[dict[str, Any]] = None,
        max_concurrent: int = DEFAULT_MAX_CONCURRENT,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> list[Any]:
        """Fetch every matching item, requesting up to *max_concurrent* pages at once."""
        return self.paginator(endpoint, filters, limit).concurrent(max_concurrent)

    def get_all_pages_optimized(
        self,
        endpoint: str,
        filters: Optional[dict[str, Any]] = None,
        prefer_concurrent: bool = True,
        max_items: int = DEFAULT_MAX_ITEMS,
        max_concurrent: int = DEFAULT_MAX_CONCURRENT,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> list[Any]:
        """Probe the dataset size and pick the sequential or concurrent strategy.

        Raises:
            TooManyItemsError: If more than *max_items* items match.
        """
        return self.paginator(endpoint, filters, limit).optimized(
            prefer_concurrent=prefer_concurrent,
            max_items=max_items,
            max_concurrent=max_concurrent,
        )
