"""HTTP client with API-key auth, interceptors, caching, and retry.

This module provides :class:`HttpClient`, the transport used by every
endpoint class. It wraps :class:`httpx.Client` and runs each call through a
linear pipeline:

1. **URL building** -- ``{base_url}/api{path}``.
2. **Auth injection** -- the ``X-API-Key`` header is merged with the
   default ``Accept`` / ``Content-Type`` / ``User-Agent`` headers.
3. **Request interceptors** -- may rewrite url, headers, params, body.
4. **Cache lookup** -- GET only; a hit returns without network I/O.
5. **Transport** -- with optional retry and exponential backoff on
   connection errors and 5xx responses.
6. **Response interceptors** -- may rewrite the parsed body; the result is
   then stored in the cache (GET only, when enabled).
7. **Error interceptors** -- run on any failure, after which the failure is
   classified by :func:`~creeble.client.response.classify_error`.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, NoReturn, Optional

import httpx

from creeble.cache import ResponseCache
from creeble.client.encoding import build_url, flatten_params
from creeble.client.response import (
    InvalidJSONError,
    classify_error,
    decode_error_body,
    extract_response_data,
)
from creeble.exceptions import APIError
from creeble.hooks import HookContext, Interceptor, InterceptorChain
from creeble.log import configure_logging, log_error, log_request, log_response
from creeble.models import ClientConfig

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-API-Key"


class HttpClient:
    """Synchronous HTTP client for the Creeble API.

    The underlying :class:`httpx.Client` is created lazily on first use and
    released by :meth:`close` (or by leaving a ``with`` block). A single
    instance may be shared by worker threads during concurrent pagination.

    Args:
        config: Resolved client configuration.
        cache: Optional response cache. Defaults to an in-memory
            :class:`~creeble.cache.ResponseCache` built from ``config.cache``.
        transport: Optional httpx transport, mainly for tests
            (:class:`httpx.MockTransport`).

    Example::

        with HttpClient(config) as client:
            body = client.get("/v1/cms-abc123", params={"limit": 5})
    """

    def __init__(
        self,
        config: ClientConfig,
        cache: Optional[ResponseCache] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._config = config
        self._cache = cache if cache is not None else ResponseCache(config.cache)
        self._transport = transport
        self._client: Optional[httpx.Client] = None
        self._client_lock = threading.Lock()
        self._debug = False
        self.interceptors = InterceptorChain()
        self.set_debug(config.debug)

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    def __enter__(self) -> HttpClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the transport and any resources held by the cache backend."""
        with self._client_lock:
            if self._client is not None:
                self._client.close()
                self._client = None
        self._cache.close()

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def cache(self) -> ResponseCache:
        return self._cache

    @property
    def debug(self) -> bool:
        return self._debug

    def set_debug(self, enabled: bool) -> None:
        """Toggle request/response debug logging."""
        was_enabled = self._debug
        self._debug = enabled
        if enabled or was_enabled:
            configure_logging(enabled)
        for interceptor in (log_request, log_response, log_error):
            self.interceptors.remove(interceptor)
        if enabled:
            self.interceptors.add_request(log_request)
            self.interceptors.add_response(log_response)
            self.interceptors.add_error(log_error)

    def add_request_interceptor(self, interceptor: Interceptor) -> None:
        self.interceptors.add_request(interceptor)

    def add_response_interceptor(self, interceptor: Interceptor) -> None:
        self.interceptors.add_response(interceptor)

    def add_error_interceptor(self, interceptor: Interceptor) -> None:
        self.interceptors.add_error(interceptor)

    def _http(self) -> httpx.Client:
        client = self._client
        if client is not None:
            return client
        # Pagination workers may race here when page 1 was served from cache.
        with self._client_lock:
            if self._client is None:
                request = self._config.request
                self._client = httpx.Client(
                    timeout=httpx.Timeout(request.timeout, connect=request.connect_timeout),
                    verify=request.verify_ssl,
                    follow_redirects=True,
                    transport=self._transport,
                )
            return self._client

    # ------------------------------------------------------------------ #
    # Public request methods
    # ------------------------------------------------------------------ #

    def request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        json_body: Optional[Any] = None,
    ) -> Any:
        """Make an API request and return the decoded JSON body.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE).
            path: Path below ``/api`` (e.g. ``/v1/cms-abc123``).
            params: Query parameters; lists are sent as ``key[]`` pairs.
            json_body: JSON-serialisable request body.

        Returns:
            The decoded JSON body (``{}`` for empty responses).

        Raises:
            AuthenticationError: On 401.
            ValidationError: On 422.
            RateLimitError: On 429.
            APIError: On any other error status, invalid JSON, or a
                transport failure.
        """
        method = method.upper()
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "User-Agent": self._config.request.user_agent,
            API_KEY_HEADER: self._config.api_key,
        }
        ctx = HookContext(
            method=method,
            url=build_url(self._config.base_url, path),
            headers=headers,
            params=dict(params or {}),
            body=json_body,
        )

        ctx = self.interceptors.run_request(ctx)

        cached = self._cache.get(ctx.method, ctx.url, ctx.params)
        if cached is not None:
            return cached

        try:
            response = self._execute_with_retry(ctx)
        except httpx.HTTPError as exc:
            ctx.error = exc
            self._raise_for_failure(ctx, cause=exc)

        ctx.status_code = response.status_code
        ctx.response_headers = dict(response.headers)

        if response.is_error:
            ctx.response_body = decode_error_body(response)
            ctx.error = httpx.HTTPStatusError(
                f"HTTP {response.status_code}", request=response.request, response=response
            )
            self._raise_for_failure(ctx, cause=ctx.error)

        try:
            ctx.response_body = extract_response_data(response)
        except InvalidJSONError as exc:
            ctx.error = APIError("Invalid JSON response from API", response.status_code)
            self._raise_for_failure(ctx, cause=exc)

        ctx = self.interceptors.run_response(ctx)
        self._cache.set(ctx.method, ctx.url, ctx.params, ctx.response_body)
        return ctx.response_body

    def get(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        """Send a GET request (cacheable)."""
        return self.request("GET", path, params=params)

    def post(self, path: str, json_body: Optional[Any] = None) -> Any:
        """Send a POST request with a JSON body."""
        return self.request("POST", path, json_body=json_body)

    def put(self, path: str, json_body: Optional[Any] = None) -> Any:
        """Send a PUT request with a JSON body."""
        return self.request("PUT", path, json_body=json_body)

    def delete(self, path: str) -> Any:
        """Send a DELETE request."""
        return self.request("DELETE", path)

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _raise_for_failure(self, ctx: HookContext, cause: BaseException) -> NoReturn:
        """Run error interceptors, then raise the classified exception."""
        ctx = self.interceptors.run_error(ctx)
        error = classify_error(ctx)
        if error is cause:
            raise error
        raise error from cause

    def _execute_with_retry(self, ctx: HookContext) -> httpx.Response:
        """Execute the HTTP request with exponential-backoff retry.

        Retries on 5xx status codes and connection / timeout errors up to
        ``max_retries`` times. The delay doubles each attempt: 1 s, 2 s, 4 s, ...
        """
        max_retries = self._config.request.max_retries
        kwargs: dict[str, Any] = {
            "method": ctx.method,
            "url": ctx.url,
            "headers": ctx.headers,
            "params": flatten_params(ctx.params),
        }
        if ctx.body is not None:
            kwargs["json"] = ctx.body

        for attempt in range(max_retries + 1):
            try:
                response = self._http().request(**kwargs)
            except (httpx.ConnectError, httpx.TimeoutException, httpx.NetworkError) as exc:
                if attempt >= max_retries:
                    raise
                delay = 2 ** attempt
                logger.debug(
                    "Connection error: %s, retrying in %ss (attempt %d/%d)",
                    exc, delay, attempt + 1, max_retries,
                )
                time.sleep(delay)
                continue

            if response.status_code >= 500 and attempt < max_retries:
                delay = 2 ** attempt
                logger.debug(
                    "Server error %d, retrying in %ss (attempt %d/%d)",
                    response.status_code, delay, attempt + 1, max_retries,
                )
                time.sleep(delay)
                continue
            return response

        raise AssertionError("unreachable")  # pragma: no cover
