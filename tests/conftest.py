"""Shared test fixtures for creeble.

Provides a fake Creeble content API served through
:class:`httpx.MockTransport`, isolation from ``CREEBLE_*`` environment
variables, and a ready-to-use :class:`~creeble.Creeble` client wired to the
fake API. These fixtures are automatically discovered by pytest.
"""

from __future__ import annotations

import math
import threading
from typing import Any, Optional

import httpx
import pytest

from creeble import Creeble
from creeble.config import ENV_API_KEY, ENV_BASE_URL, ENV_CACHE_TTL, ENV_DEBUG
from creeble.log import configure_logging


# ---------------------------------------------------------------------------
# Environment isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _isolate_environment(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Clear CREEBLE_* variables and run each test from an empty directory.

    Running from ``tmp_path`` keeps a developer's ``./creeble.json`` out of
    the resolved configuration. The package logger is reset afterwards so
    debug handlers do not leak between tests.
    """
    for var in (ENV_API_KEY, ENV_BASE_URL, ENV_DEBUG, ENV_CACHE_TTL):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    yield
    configure_logging(False)


# ---------------------------------------------------------------------------
# Fake content API
# ---------------------------------------------------------------------------


def make_items(count: int) -> list[dict[str, Any]]:
    """Build *count* item records with sequential ids."""
    return [
        {"id": f"item-{i}", "title": f"Item {i}", "status": "published"}
        for i in range(1, count + 1)
    ]


class FakeContentApi:
    """Callable handler emulating the paginated ``/api/v1/{endpoint}`` list route.

    Args:
        items: The full dataset.
        legacy: When ``True`` responses omit ``has_more_pages`` (older
            servers), so clients must infer completion from short pages.
        fail_pages: Map of page number to how many times that page should
            answer HTTP 500 before succeeding.
    """

    def __init__(
        self,
        items: list[dict[str, Any]],
        legacy: bool = False,
        fail_pages: Optional[dict[int, int]] = None,
    ) -> None:
        self.items = items
        self.legacy = legacy
        self.fail_pages = dict(fail_pages or {})
        self.requests: list[httpx.Request] = []
        self._lock = threading.Lock()

    def __call__(self, request: httpx.Request) -> httpx.Response:
        with self._lock:
            self.requests.append(request)
        params = request.url.params
        page = int(params.get("page", 1))
        limit = int(params.get("limit", 20))

        with self._lock:
            remaining_failures = self.fail_pages.get(page, 0)
            if remaining_failures:
                self.fail_pages[page] = remaining_failures - 1
        if remaining_failures:
            return httpx.Response(500, json={"message": f"page {page} unavailable"})

        start = (page - 1) * limit
        chunk = self.items[start:start + limit]
        fields = params.get("fields")
        if fields:
            wanted = fields.split(",")
            chunk = [{k: v for k, v in item.items() if k in wanted} for item in chunk]

        last_page = max(math.ceil(len(self.items) / limit), 1)
        pagination: dict[str, Any] = {
            "current_page": page,
            "per_page": limit,
            "total": len(self.items),
            "last_page": last_page,
        }
        if not self.legacy:
            pagination["has_more_pages"] = page < last_page
        return httpx.Response(200, json={"data": chunk, "pagination": pagination})

    def pages(self) -> list[int]:
        """Page numbers requested, in arrival order."""
        return [int(r.url.params.get("page", 1)) for r in self.requests]

    def probe_count(self) -> int:
        return sum(1 for r in self.requests if r.url.params.get("fields") == "id")


def make_creeble(handler: Any, **options: Any) -> Creeble:
    """Create a :class:`Creeble` client served by *handler*."""
    return Creeble("test-key", transport=httpx.MockTransport(handler), **options)


@pytest.fixture
def content_api() -> FakeContentApi:
    """A 47-item dataset (two pages of 25)."""
    return FakeContentApi(make_items(47))


@pytest.fixture
def creeble(content_api: FakeContentApi) -> Creeble:
    client = make_creeble(content_api)
    yield client
    client.close()


@pytest.fixture
def fake_api():
    """Factory fixture building :class:`FakeContentApi` handlers over *count* items."""

    def _make(count: int, **kwargs: Any) -> FakeContentApi:
        return FakeContentApi(make_items(count), **kwargs)

    return _make


@pytest.fixture
def creeble_factory():
    """Factory fixture building clients around a handler; closes them afterwards."""
    clients: list[Creeble] = []

    def _make(handler: Any, **options: Any) -> Creeble:
        client = make_creeble(handler, **options)
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.close()
