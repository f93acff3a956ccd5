"""Whole-collection fetch strategies over a paginated list endpoint.

:class:`Paginator` turns a single-page fetch function into three ways of
collecting every item matching a filter set:

* :meth:`Paginator.sequential` -- one page at a time until the server
  reports no further pages.
* :meth:`Paginator.concurrent` -- page 1 first to learn the page count,
  then the remaining pages in fixed-width batches on a thread pool. A
  failure inside a batch restarts the whole fetch sequentially.
* :meth:`Paginator.optimized` -- a cheap ``fields=id`` probe decides
  between the two, and refuses datasets above a caller-supplied ceiling.

Items are always returned in server page order.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Optional

from creeble.exceptions import CreebleError, TooManyItemsError
from creeble.models import PageResponse

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 25
MAX_PAGE_SIZE = 100
DEFAULT_MAX_CONCURRENT = 3
DEFAULT_MAX_ITEMS = 1000
SEQUENTIAL_PAGE_THRESHOLD = 3
"""Datasets with at most this many pages are always fetched sequentially."""

PROBE_FIELDS = "id"

FetchPage = Callable[[dict[str, Any]], Any]


def clamp_page_size(limit: int) -> int:
    """Clamp *limit* into ``1..MAX_PAGE_SIZE``."""
    return max(1, min(int(limit), MAX_PAGE_SIZE))


class Paginator:
    """Collects every page of a list query.

    Args:
        fetch_page: Performs one list request with the given query params
            and returns the decoded body (``{"data": [...], "pagination": {...}}``).
        filters: Query params applied to every page request.
        page_size: Items per page, clamped to :data:`MAX_PAGE_SIZE`.
    """

    def __init__(
        self,
        fetch_page: FetchPage,
        filters: Optional[dict[str, Any]] = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self._fetch_page = fetch_page
        self._filters = dict(filters or {})
        self._page_size = clamp_page_size(page_size)

    @property
    def page_size(self) -> int:
        return self._page_size

    def fetch(self, page: int, **extra: Any) -> PageResponse:
        """Fetch and parse a single page."""
        params = {**self._filters, **extra, "page": page, "limit": self._page_size}
        return PageResponse.model_validate(self._fetch_page(params))

    # ------------------------------------------------------------------ #
    # Strategies
    # ------------------------------------------------------------------ #

    def sequential(self) -> list[Any]:
        """Fetch pages 1, 2, ... until the server reports the last page.

        Completion is read from ``pagination.has_more_pages`` when present;
        otherwise a page shorter than the page size marks the end. An empty
        page always ends the loop.
        """
        items: list[Any] = []
        page = 1
        while True:
            response = self.fetch(page)
            items.extend(response.data)
            if not self._has_more(response):
                break
            page += 1
        logger.debug("Sequential fetch collected %d items over %d pages", len(items), page)
        return items

    def concurrent(self, max_concurrent: int = DEFAULT_MAX_CONCURRENT) -> list[Any]:
        """Fetch page 1, then the remaining pages in batches of *max_concurrent*.

        Each batch is joined before the next is issued. If any request in a
        batch fails, the batch failure is logged and the whole fetch is
        restarted with :meth:`sequential`; if that also fails, its error is
        raised with the batch failure attached as ``__cause__``.
        """
        width = max(1, int(max_concurrent))
        first = self.fetch(1)
        total_pages = self._total_pages(first)
        if total_pages <= 1:
            return list(first.data)

        items: list[Any] = list(first.data)
        remaining = list(range(2, total_pages + 1))
        try:
            with ThreadPoolExecutor(max_workers=width) as pool:
                for start in range(0, len(remaining), width):
                    batch = remaining[start:start + width]
                    logger.debug("Fetching pages %s concurrently", batch)
                    # map() yields in submission order, so pages stay ordered.
                    for response in pool.map(self.fetch, batch):
                        items.extend(response.data)
        except CreebleError as exc:
            logger.warning(
                "Concurrent fetch failed (%s); restarting sequentially", exc,
            )
            try:
                return self.sequential()
            except CreebleError as fallback_exc:
                raise fallback_exc from exc
        return items

    def optimized(
        self,
        prefer_concurrent: bool = True,
        max_items: int = DEFAULT_MAX_ITEMS,
        max_concurrent: int = DEFAULT_MAX_CONCURRENT,
    ) -> list[Any]:
        """Probe the dataset size, then pick a strategy.

        Raises:
            TooManyItemsError: If the probe reports more than *max_items*
                items. No further pages are requested.
        """
        probe = self.fetch(1, fields=PROBE_FIELDS)
        total = probe.total_items
        if total > max_items:
            raise TooManyItemsError(total, max_items)

        total_pages = self._total_pages(probe)
        if total_pages <= SEQUENTIAL_PAGE_THRESHOLD or not prefer_concurrent:
            logger.debug("Optimized fetch: %d items / %d pages, sequential", total, total_pages)
            return self.sequential()
        logger.debug("Optimized fetch: %d items / %d pages, concurrent", total, total_pages)
        return self.concurrent(max_concurrent)

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def _has_more(self, response: PageResponse) -> bool:
        if not response.data:
            return False
        pagination = response.pagination
        if pagination is not None and pagination.has_more_pages is not None:
            return pagination.has_more_pages
        return len(response.data) >= self._page_size

    def _total_pages(self, response: PageResponse) -> int:
        if response.pagination is None:
            return 1
        return response.pagination.total_pages(self._page_size)
