"""Logger setup and debug interceptors.

Every creeble module logs through ``logging.getLogger(__name__)`` and the
package never configures the root logger. :func:`configure_logging` is
called when a client is created with ``debug=True``: it attaches a
:class:`rich.logging.RichHandler` (stderr) to the ``creeble`` logger so
request/response records become visible without touching the host
application's logging setup.

The interceptors below are registered by
:meth:`HttpClient.set_debug <creeble.client.http_client.HttpClient.set_debug>`
when debug mode is switched on. They attach structured fields through
``extra`` so that JSON log formatters can pick them up.
"""

from __future__ import annotations

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from creeble.hooks import HookContext

LOGGER_NAME = "creeble"

logger = logging.getLogger(__name__)


def configure_logging(debug: bool, console: Optional[Console] = None) -> logging.Logger:
    """Configure the ``creeble`` package logger.

    Idempotent: at most one handler installed by this function is kept on
    the logger.

    Args:
        debug: When ``True`` the logger level is set to ``DEBUG`` and a
            :class:`RichHandler` is attached. When ``False`` the handler is
            removed and the level reset so the host application decides.
        console: Optional Rich console, mainly for tests.

    Returns:
        The ``creeble`` logger.
    """
    package_logger = logging.getLogger(LOGGER_NAME)
    for handler in list(package_logger.handlers):
        if getattr(handler, "_creeble_debug", False):
            package_logger.removeHandler(handler)

    if debug:
        handler = RichHandler(
            console=console or Console(stderr=True),
            show_path=False,
            rich_tracebacks=False,
        )
        handler._creeble_debug = True  # type: ignore[attr-defined]
        package_logger.addHandler(handler)
        package_logger.setLevel(logging.DEBUG)
    else:
        package_logger.setLevel(logging.NOTSET)
    return package_logger


def _item_count(body: object) -> int:
    if isinstance(body, dict):
        data = body.get("data")
        if isinstance(data, list):
            return len(data)
    return 1


def log_request(ctx: HookContext) -> HookContext:
    """Request interceptor logging the outgoing call."""
    logger.debug(
        "Request %s %s",
        ctx.method,
        ctx.url,
        extra={"http_method": ctx.method, "url": ctx.url, "params": dict(ctx.params)},
    )
    return ctx


def log_response(ctx: HookContext) -> HookContext:
    """Response interceptor logging status and item count."""
    count = _item_count(ctx.response_body)
    logger.debug(
        "Response %s %s (%d items)",
        ctx.status_code,
        ctx.url,
        count,
        extra={"status_code": ctx.status_code, "url": ctx.url, "item_count": count},
    )
    return ctx


def log_error(ctx: HookContext) -> HookContext:
    """Error interceptor logging the failure before it is classified."""
    logger.debug(
        "Request failed %s %s: %s",
        ctx.method,
        ctx.url,
        ctx.error,
        extra={"status_code": ctx.status_code or None, "url": ctx.url},
    )
    return ctx
