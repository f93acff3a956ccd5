"""Tests for the Data endpoint group."""

from __future__ import annotations

import httpx
import pytest

from creeble.exceptions import APIError


class _Api:
    """Records requests; answers 404 for ``/missing`` paths, else a fixed list."""

    def __init__(self, items: list[dict] | None = None) -> None:
        self.items = items if items is not None else [{"id": "p1", "title": "Hello"}]
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path.endswith("/missing"):
            return httpx.Response(404, json={"message": "Item not found"})
        if request.url.path.count("/") == 4:
            return httpx.Response(200, json={"data": {"id": request.url.path.rsplit("/", 1)[-1]}})
        return httpx.Response(200, json={"data": self.items, "pagination": {"total": len(self.items)}})

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture()
def api() -> _Api:
    return _Api()


@pytest.fixture()
def data(api, creeble_factory):
    return creeble_factory(api).data


class TestListing:
    def test_list_path(self, data, api) -> None:
        body = data.list("cms-abc123", {"status": "published"})
        assert api.last.url.path == "/api/v1/cms-abc123"
        assert api.last.url.params["status"] == "published"
        assert body["data"] == [{"id": "p1", "title": "Hello"}]

    def test_get_item(self, data, api) -> None:
        assert data.get("cms-abc123", "p1") == {"data": {"id": "p1"}}
        assert api.last.url.path == "/api/v1/cms-abc123/p1"

    def test_search_merges_filters(self, data, api) -> None:
        data.search("cms-abc123", "notion", {"type": "pages"})
        assert api.last.url.params["search"] == "notion"
        assert api.last.url.params["type"] == "pages"

    def test_paginate(self, data, api) -> None:
        data.paginate("cms-abc123", page=3, limit=10)
        assert api.last.url.params["page"] == "3"
        assert api.last.url.params["limit"] == "10"

    def test_paginate_defaults(self, data, api) -> None:
        data.paginate("cms-abc123")
        assert api.last.url.params["page"] == "1"
        assert api.last.url.params["limit"] == "20"

    def test_filter(self, data, api) -> None:
        data.filter("cms-abc123", {"category": ["news", "tech"]})
        assert api.last.url.params.get_list("category[]") == ["news", "tech"]


class TestSorting:
    def test_sort_by(self, data, api) -> None:
        data.sort_by("cms-abc123", "title", "DESC")
        assert api.last.url.params["sort"] == "title"
        assert api.last.url.params["order"] == "desc"

    def test_sort_by_rejects_bad_direction(self, data, api) -> None:
        with pytest.raises(ValueError):
            data.sort_by("cms-abc123", "title", "sideways")
        assert api.requests == []

    def test_recent(self, data, api) -> None:
        data.recent("cms-abc123", limit=3)
        params = api.last.url.params
        assert params["sort"] == "created_at"
        assert params["order"] == "desc"
        assert params["limit"] == "3"


class TestFinders:
    def test_find_by_sends_single_item_query(self, data, api) -> None:
        item = data.find_by("cms-abc123", "slug", "hello-world")
        params = api.last.url.params
        assert params["slug"] == "hello-world"
        assert params["type"] == "pages"
        assert params["limit"] == "1"
        assert item == {"id": "p1", "title": "Hello"}

    def test_find_row_by(self, data, api) -> None:
        data.find_row_by("cms-abc123", "Email", "a@b.co")
        assert api.last.url.params["type"] == "rows"

    def test_find_page_by(self, data, api) -> None:
        data.find_page_by("cms-abc123", "slug", "x")
        assert api.last.url.params["type"] == "pages"

    def test_find_by_no_match(self, creeble_factory) -> None:
        data = creeble_factory(_Api(items=[])).data
        assert data.find_by("cms-abc123", "slug", "nope") is None

    def test_exists(self, data) -> None:
        assert data.exists("cms-abc123", "p1") is True
        assert data.exists("cms-abc123", "missing") is False

    def test_errors_propagate_from_get(self, data) -> None:
        with pytest.raises(APIError) as exc_info:
            data.get("cms-abc123", "missing")
        assert exc_info.value.status_code == 404


class TestProjection:
    def test_list_fields(self, data, api) -> None:
        data.list_fields("cms-abc123", ["id", "title", "created_at"], {"type": "pages"})
        assert api.last.url.params["fields"] == "id,title,created_at"
        assert api.last.url.params["type"] == "pages"

    def test_list_lightweight(self, data, api) -> None:
        data.list_lightweight("cms-abc123")
        assert api.last.url.params["fields"] == "id,title"


class TestPaginatorFactory:
    def test_paginator_uses_endpoint_and_filters(self, creeble, content_api) -> None:
        paginator = creeble.data.paginator("cms-abc123", {"type": "rows"}, limit=500)
        assert paginator.page_size == 100
        response = paginator.fetch(1)
        assert len(response.data) == 47
        assert content_api.requests[0].url.params["type"] == "rows"
