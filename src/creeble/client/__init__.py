"""HTTP client layer for creeble.

:class:`HttpClient` wraps :mod:`httpx` with API-key injection, the
request/response/error interceptor chain, GET response caching, optional
retry with exponential backoff, and mapping of HTTP failures onto
:mod:`creeble.exceptions`.

Example::

    from creeble.client import HttpClient
    from creeble.models import ClientConfig

    with HttpClient(ClientConfig(api_key="napi_...")) as client:
        body = client.get("/v1/cms-abc123")
"""

from creeble.client.http_client import API_KEY_HEADER, HttpClient

__all__ = ["API_KEY_HEADER", "HttpClient"]
