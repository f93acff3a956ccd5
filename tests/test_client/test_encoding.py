"""Tests for URL building and query encoding."""

from __future__ import annotations

import pytest

from creeble.client.encoding import build_url, endpoint_path, flatten_params


class TestEndpointPath:
    def test_plain(self) -> None:
        assert endpoint_path("cms-abc123") == "/v1/cms-abc123"

    def test_segments(self) -> None:
        assert endpoint_path("blog", "forms", "contact") == "/v1/blog/forms/contact"

    def test_segments_are_quoted(self) -> None:
        assert endpoint_path("blog", "a b/c") == "/v1/blog/a%20b%2Fc"

    def test_empty_endpoint_rejected(self) -> None:
        with pytest.raises(ValueError):
            endpoint_path("")


class TestBuildUrl:
    @pytest.mark.parametrize(
        ("base", "path", "expected"),
        [
            ("https://creeble.io", "/v1/blog", "https://creeble.io/api/v1/blog"),
            ("https://creeble.io/", "v1/blog", "https://creeble.io/api/v1/blog"),
            ("http://localhost:8000", "/ping", "http://localhost:8000/api/ping"),
        ],
    )
    def test_join(self, base: str, path: str, expected: str) -> None:
        assert build_url(base, path) == expected


class TestFlattenParams:
    def test_none_and_empty(self) -> None:
        assert flatten_params(None) == []
        assert flatten_params({"a": None}) == []

    def test_scalars(self) -> None:
        assert flatten_params({"page": 2, "search": "hello"}) == [("page", "2"), ("search", "hello")]

    def test_booleans(self) -> None:
        assert flatten_params({"published": True, "draft": False}) == [
            ("published", "true"),
            ("draft", "false"),
        ]

    def test_lists_repeat_bracket_key(self) -> None:
        assert flatten_params({"tags": ["a", None, "b"]}) == [("tags[]", "a"), ("tags[]", "b")]

    def test_nested_mapping(self) -> None:
        assert flatten_params({"filter": {"status": "live", "ids": [1, 2]}}) == [
            ("filter[status]", "live"),
            ("filter[ids][]", "1"),
            ("filter[ids][]", "2"),
        ]
