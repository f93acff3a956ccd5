"""Response parsing and error classification.

:func:`extract_response_data` turns a successful :class:`httpx.Response`
into a decoded JSON body, and :func:`classify_error` maps a failed
request's :class:`~creeble.hooks.HookContext` onto the
:mod:`creeble.exceptions` taxonomy:

====== ==========================================================
Status Exception
====== ==========================================================
401    :class:`~creeble.exceptions.AuthenticationError`
422    :class:`~creeble.exceptions.ValidationError` (``errors`` from the body)
429    :class:`~creeble.exceptions.RateLimitError` (``retry_after`` from the header)
other  :class:`~creeble.exceptions.APIError`
====== ==========================================================
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Mapping, Optional

import httpx

from creeble.exceptions import (
    APIError,
    AuthenticationError,
    CreebleError,
    RateLimitError,
    ValidationError,
)
from creeble.hooks import HookContext


class InvalidJSONError(ValueError):
    """The response body could not be decoded as JSON."""


def extract_response_data(response: httpx.Response) -> Any:
    """Decode the JSON body of *response*.

    Returns an empty dict for responses with no content (e.g. 204).

    Raises:
        InvalidJSONError: If the body is present but is not valid JSON.
    """
    if not response.content:
        return {}
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidJSONError(str(exc)) from exc


def decode_error_body(response: httpx.Response) -> Any:
    """Best-effort decode of an error response body; falls back to text."""
    try:
        return extract_response_data(response)
    except InvalidJSONError:
        return response.text


def parse_retry_after(headers: Mapping[str, str]) -> int:
    """Parse ``Retry-After`` as whole seconds.

    Accepts delta-seconds or an HTTP date. Returns ``0`` when the header is
    missing or unparseable.
    """
    value: Optional[str] = None
    for key, header_value in headers.items():
        if key.lower() == "retry-after":
            value = header_value
            break
    if not value:
        return 0
    value = value.strip()
    try:
        return max(int(float(value)), 0)
    except ValueError:
        pass
    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return 0
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return max(int((when - datetime.now(timezone.utc)).total_seconds()), 0)


def normalize_field_errors(raw: Any) -> dict[str, list[str]]:
    """Coerce an ``errors`` payload into ``{field: [message, ...]}``."""
    if not isinstance(raw, dict):
        return {}
    errors: dict[str, list[str]] = {}
    for field, messages in raw.items():
        if isinstance(messages, (list, tuple)):
            errors[str(field)] = [str(m) for m in messages]
        elif messages is not None:
            errors[str(field)] = [str(messages)]
    return errors


def _error_message(ctx: HookContext) -> str:
    body = ctx.response_body
    if isinstance(body, dict):
        msg = body.get("message") or body.get("error") or body.get("detail")
        if msg:
            return str(msg)
    elif isinstance(body, str) and body:
        return body[:200]
    if ctx.error is not None:
        return str(ctx.error)
    return f"HTTP {ctx.status_code}"


def classify_error(ctx: HookContext) -> CreebleError:
    """Build the typed exception for a failed request.

    If an error interceptor already replaced ``ctx.error`` with a
    :class:`~creeble.exceptions.CreebleError`, that instance is returned
    unchanged.
    """
    if isinstance(ctx.error, CreebleError):
        return ctx.error

    status = ctx.status_code
    message = _error_message(ctx)

    if not status:
        return APIError(f"Request failed: {message}")
    if status == 401:
        return AuthenticationError(message)
    if status == 422:
        body = ctx.response_body if isinstance(ctx.response_body, dict) else {}
        return ValidationError(message, normalize_field_errors(body.get("errors")))
    if status == 429:
        return RateLimitError(message, parse_retry_after(ctx.response_headers))
    if status >= 500:
        return APIError(f"Server error: {message}", status)
    return APIError(message, status)
