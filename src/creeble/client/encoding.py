"""URL building and query-parameter encoding.

The Creeble API follows PHP query conventions: list values are sent as
repeated ``key[]`` pairs and nested mappings as ``key[sub]``. httpx accepts
a list of ``(key, value)`` tuples, which preserves repeated keys.
"""

from __future__ import annotations

from typing import Any, Optional
from urllib.parse import quote

API_PREFIX = "/api"
API_VERSION = "v1"


def endpoint_path(endpoint: str, *segments: str) -> str:
    """Return the versioned API path for *endpoint* and optional sub-segments.

    Example::

        >>> endpoint_path("cms-abc123", "forms", "contact")
        '/v1/cms-abc123/forms/contact'
    """
    if not endpoint:
        raise ValueError("endpoint must be a non-empty string")
    parts = [API_VERSION, endpoint, *segments]
    return "/" + "/".join(quote(str(part), safe="") for part in parts)


def build_url(base_url: str, path: str) -> str:
    """Join the base URL, the ``/api`` prefix and *path*."""
    return f"{base_url.rstrip('/')}{API_PREFIX}/{path.lstrip('/')}"


def _encode_scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def flatten_params(params: Optional[dict[str, Any]]) -> list[tuple[str, str]]:
    """Flatten *params* into ``(key, value)`` pairs.

    * ``None`` values are dropped.
    * Lists and tuples become repeated ``key[]`` pairs.
    * Dicts become ``key[sub]`` pairs (recursively).
    * Booleans become ``true`` / ``false``.
    """
    pairs: list[tuple[str, str]] = []
    for key, value in (params or {}).items():
        _flatten_into(pairs, str(key), value)
    return pairs


def _flatten_into(pairs: list[tuple[str, str]], key: str, value: Any) -> None:
    if value is None:
        return
    if isinstance(value, dict):
        for sub_key, sub_value in value.items():
            _flatten_into(pairs, f"{key}[{sub_key}]", sub_value)
    elif isinstance(value, (list, tuple)):
        for item in value:
            if item is not None:
                pairs.append((f"{key}[]", _encode_scalar(item)))
    else:
        pairs.append((key, _encode_scalar(value)))
