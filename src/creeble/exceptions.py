"""Exception hierarchy for creeble.

All exceptions inherit from :class:`CreebleError`, which carries the HTTP
``status_code`` of the response that triggered it (``None`` for transport
failures and client-side errors). :class:`~creeble.client.HttpClient`
classifies every failed request into one of the :class:`APIError`
subclasses below, so callers can catch the broad base class or a specific
failure.

Subclass hierarchy::

    CreebleError
    +-- APIError                (any status / transport failure)
    |   +-- AuthenticationError (401)
    |   +-- ValidationError     (422, or local form validation)
    |   +-- RateLimitError      (429)
    +-- TooManyItemsError       (optimized pagination ceiling)
    +-- ConfigError             (missing API key, bad config file)
"""

from __future__ import annotations

from typing import Optional


class CreebleError(Exception):
    """Base exception for all creeble errors.

    Args:
        message: Human-readable error description.
        status_code: HTTP status code of the failing response, if any.
    """

    status_code: Optional[int] = None

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class APIError(CreebleError):
    """Raised when the API returns an error status or the transport fails.

    ``status_code`` is ``None`` when no HTTP response was received (DNS
    failure, refused connection, timeout). The underlying transport
    exception is available as ``__cause__``.
    """


class AuthenticationError(APIError):
    """Raised when the API rejects the API key (HTTP 401)."""

    status_code = 401


class ValidationError(APIError):
    """Raised when submitted data fails validation (HTTP 422).

    Also raised client-side by
    :meth:`~creeble.endpoints.forms.Forms.submit_with_validation` before any
    request is sent.

    Args:
        message: Human-readable error description.
        errors: Mapping of field name to a list of error messages.
    """

    status_code = 422

    def __init__(self, message: str, errors: Optional[dict[str, list[str]]] = None):
        super().__init__(message)
        self.errors: dict[str, list[str]] = dict(errors or {})


class RateLimitError(APIError):
    """Raised when the API rate limit is exceeded (HTTP 429).

    Args:
        message: Human-readable error description.
        retry_after: Seconds to wait before retrying, parsed from the
            ``Retry-After`` header (``0`` when absent).
    """

    status_code = 429

    def __init__(self, message: str, retry_after: int = 0):
        super().__init__(message)
        self.retry_after = retry_after


class TooManyItemsError(CreebleError):
    """Raised when an optimized fetch would exceed the caller's item ceiling.

    The caller should narrow the query with filters (``type``, ``database``,
    field filters) or raise ``max_items``.
    """

    def __init__(self, total: int, max_items: int):
        super().__init__(
            f"Dataset has {total} items, which exceeds max_items={max_items}. "
            "Add filters to narrow the result set."
        )
        self.total = total
        self.max_items = max_items


class ConfigError(CreebleError):
    """Raised for configuration problems (missing API key, invalid config file)."""
