"""Canonical Pydantic models shared across creeble modules.

The models fall into two groups:

**Configuration models** -- resolved by :func:`creeble.config.resolve_config`
and passed to :class:`~creeble.api.Creeble`:
    :class:`RequestConfig`, :class:`CacheConfig`, and :class:`ClientConfig`.

**Response models** -- the pagination envelope returned by list endpoints:
    :class:`Pagination` and :class:`PageResponse`.

Item records themselves are left as plain dicts; the API does not publish a
fixed item schema. Response models use ``extra="allow"`` so that keys the
server adds later are preserved in ``model_extra``.
"""

from __future__ import annotations

import math
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_BASE_URL = "https://creeble.io"
DEFAULT_USER_AGENT = "creeble-python/0.1"


# --- Configuration ---


class RequestConfig(BaseModel):
    """HTTP request settings applied to every API call."""

    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    connect_timeout: float = Field(default=10.0, description="Connect timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    max_retries: int = Field(
        default=0, ge=0, description="Retries on connection errors and 5xx responses"
    )
    user_agent: str = DEFAULT_USER_AGENT


class CacheConfig(BaseModel):
    """GET response cache settings."""

    enabled: bool = Field(default=False, description="Enable response caching")
    ttl_seconds: int = Field(default=300, ge=0, description="Cache TTL in seconds")
    directory: Optional[str] = Field(
        default=None,
        description="Persist the cache on disk under this directory instead of in memory",
    )


class ClientConfig(BaseModel):
    """Complete client configuration.

    Example::

        ClientConfig(
            api_key="napi_...",
            cache=CacheConfig(enabled=True, ttl_seconds=60),
            debug=True,
        )
    """

    api_key: str
    base_url: str = DEFAULT_BASE_URL
    debug: bool = False
    request: RequestConfig = Field(default_factory=RequestConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)

    @field_validator("api_key")
    @classmethod
    def _api_key_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("API key is required")
        return value

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


# --- Response envelope ---


class Pagination(BaseModel):
    """Pagination metadata attached to list responses.

    Every field is optional: older API versions omit ``has_more_pages`` and
    some responses carry only ``total``.
    """

    model_config = ConfigDict(extra="allow")

    current_page: Optional[int] = None
    per_page: Optional[int] = None
    total: Optional[int] = None
    last_page: Optional[int] = None
    has_more_pages: Optional[bool] = None

    def total_pages(self, page_size: int) -> int:
        """Return the number of pages, deriving it from ``total`` when needed.

        Args:
            page_size: The page size the request was made with, used when
                the server did not echo ``per_page``.
        """
        if self.last_page is not None:
            return max(self.last_page, 1)
        if self.total is not None:
            size = self.per_page or page_size
            return max(math.ceil(self.total / size), 1)
        return 1


class PageResponse(BaseModel):
    """A single page of items as returned by ``GET /api/v1/{endpoint}``."""

    model_config = ConfigDict(extra="allow")

    data: list[Any] = Field(default_factory=list)
    pagination: Optional[Pagination] = None

    @field_validator("data", mode="before")
    @classmethod
    def _coerce_data(cls, value: Any) -> Any:
        if value is None:
            return []
        return value

    @property
    def total_items(self) -> int:
        """Total item count reported by the server, or the page length."""
        if self.pagination is not None and self.pagination.total is not None:
            return self.pagination.total
        return len(self.data)
