"""Tests for the Projects endpoint group."""

from __future__ import annotations

import httpx
import pytest

PROJECT_INFO = {"name": "Blog", "status": "active", "record_count": 47, "last_synced_at": "2026-10-01T12:00:00Z"}
PROJECT_SCHEMA = {"fields": [{"name": "Title", "type": "title"}, {"name": "Tags", "type": "multi_select"}]}


def _project_api(request: httpx.Request) -> httpx.Response:
    path = request.url.path
    if path.startswith("/api/v1/unknown/"):
        return httpx.Response(404, json={"message": "Project not found"})
    if path.endswith("/info"):
        return httpx.Response(200, json=PROJECT_INFO)
    if path.endswith("/schema"):
        return httpx.Response(200, json=PROJECT_SCHEMA)
    if path.endswith("/stats"):
        return httpx.Response(200, json={"pages": 3, "rows": 44})
    return httpx.Response(404, json={})


@pytest.fixture()
def projects(creeble_factory):
    return creeble_factory(_project_api).projects


class TestProjects:
    def test_info(self, projects) -> None:
        assert projects.info("cms-abc123") == PROJECT_INFO

    def test_schema_and_fields(self, projects) -> None:
        assert projects.schema("cms-abc123") == PROJECT_SCHEMA
        assert [f["name"] for f in projects.fields("cms-abc123")] == ["Title", "Tags"]

    def test_fields_missing_from_schema(self, creeble_factory) -> None:
        client = creeble_factory(lambda request: httpx.Response(200, json={"databases": []}))
        assert client.projects.fields("cms-abc123") == []

    def test_stats(self, projects) -> None:
        assert projects.stats("cms-abc123") == {"pages": 3, "rows": 44}

    def test_exists(self, projects) -> None:
        assert projects.exists("cms-abc123") is True
        assert projects.exists("unknown") is False
