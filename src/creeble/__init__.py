"""creeble -- Python client for the Creeble content API.

Creeble serves Notion workspaces as a headless CMS. This package wraps its
JSON API with listing, searching, filtering and form-submission helpers, a
GET response cache, and whole-collection pagination strategies.

Typical usage::

    from creeble import Creeble

    creeble = Creeble("napi_...")
    posts = creeble.data.get_all_pages_optimized("cms-abc123", {"type": "rows"})

Modules:
    api: the :class:`Creeble` facade.
    endpoints: ``Data``, ``Forms`` and ``Projects`` endpoint groups.
    pagination: sequential, concurrent and optimized fetch strategies.
    cache: response cache and pluggable storage backends.
    client: the httpx-based request pipeline.
    config: configuration resolution from arguments, env and files.
    exceptions: error taxonomy.
"""

from creeble.api import Creeble
from creeble.endpoint_helper import EndpointHelper
from creeble.exceptions import (
    APIError,
    AuthenticationError,
    ConfigError,
    CreebleError,
    RateLimitError,
    TooManyItemsError,
    ValidationError,
)
from creeble.models import CacheConfig, ClientConfig, RequestConfig

__version__ = "0.1.0"

__all__ = [
    "APIError",
    "AuthenticationError",
    "CacheConfig",
    "ClientConfig",
    "ConfigError",
    "Creeble",
    "CreebleError",
    "EndpointHelper",
    "RateLimitError",
    "RequestConfig",
    "TooManyItemsError",
    "ValidationError",
]
