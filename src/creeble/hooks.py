"""Interceptor chain for the request pipeline.

This module provides two core components:

* :class:`HookContext` -- A mutable dataclass that carries request and
  response state through the interceptor chain. Fields are progressively
  populated as the request/response lifecycle advances.
* :class:`InterceptorChain` -- Holds three ordered lists of transform
  functions (request, response, error) and runs them in registration order.

Every interceptor receives the :class:`HookContext` and returns it (or a
replacement). Returning ``None`` keeps the current context, which lets
observe-only interceptors such as loggers skip the ``return``.

Example::

    def add_locale(ctx: HookContext) -> HookContext:
        ctx.params["locale"] = "en"
        return ctx

    client.add_request_interceptor(add_locale)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional


@dataclass
class HookContext:
    """Mutable context object threaded through the interceptor chain.

    * **Request stage**: ``method``, ``url``, ``headers``, ``params`` and
      ``body`` are populated before request interceptors run.
    * **Response stage**: ``status_code``, ``response_headers`` and
      ``response_body`` (the parsed JSON) are populated before response
      interceptors run.
    * **Error stage**: ``error`` is set, plus the response fields when an
      HTTP response was received.

    Attributes:
        method: HTTP method (e.g. ``"GET"``).
        url: The fully resolved request URL.
        headers: Request headers dict (mutable).
        params: Request query parameters dict (mutable).
        body: Optional JSON request body.
        status_code: HTTP response status code, ``0`` if none was received.
        response_headers: Response headers dict.
        response_body: Parsed response body.
        error: Exception instance if the request failed, otherwise ``None``.
    """

    method: str = ""
    url: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    params: dict[str, Any] = field(default_factory=dict)
    body: Any = None
    status_code: int = 0
    response_headers: dict[str, str] = field(default_factory=dict)
    response_body: Any = None
    error: Optional[Exception] = None


Interceptor = Callable[[HookContext], Optional[HookContext]]


class InterceptorChain:
    """Ordered request, response, and error interceptors owned by one client."""

    def __init__(self) -> None:
        self._request: list[Interceptor] = []
        self._response: list[Interceptor] = []
        self._error: list[Interceptor] = []

    def add_request(self, interceptor: Interceptor) -> None:
        """Register an interceptor that may rewrite url, headers, params or body."""
        self._request.append(interceptor)

    def add_response(self, interceptor: Interceptor) -> None:
        """Register an interceptor that may rewrite ``response_body``."""
        self._response.append(interceptor)

    def add_error(self, interceptor: Interceptor) -> None:
        """Register an interceptor that may rewrite the error context before classification."""
        self._error.append(interceptor)

    def remove(self, interceptor: Interceptor) -> None:
        """Unregister *interceptor* from every stage it was added to."""
        for chain in (self._request, self._response, self._error):
            while interceptor in chain:
                chain.remove(interceptor)

    def clear(self) -> None:
        """Remove every registered interceptor."""
        self._request.clear()
        self._response.clear()
        self._error.clear()

    def run_request(self, ctx: HookContext) -> HookContext:
        return self._run(self._request, ctx)

    def run_response(self, ctx: HookContext) -> HookContext:
        return self._run(self._response, ctx)

    def run_error(self, ctx: HookContext) -> HookContext:
        return self._run(self._error, ctx)

    @staticmethod
    def _run(interceptors: list[Interceptor], ctx: HookContext) -> HookContext:
        for interceptor in interceptors:
            result = interceptor(ctx)
            if isinstance(result, HookContext):
                ctx = result
        return ctx

    def __len__(self) -> int:
        return len(self._request) + len(self._response) + len(self._error)
