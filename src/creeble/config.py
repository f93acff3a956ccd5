"""Configuration resolution with precedence layering.

:func:`resolve_config` merges explicit arguments, environment variables, and
an optional project-local JSON file into a validated
:class:`~creeble.models.ClientConfig`.

Precedence (high to low):
    1. Explicit arguments passed to :func:`resolve_config` / :class:`~creeble.api.Creeble`
    2. Environment variables (``CREEBLE_API_KEY``, ``CREEBLE_BASE_URL``,
       ``CREEBLE_DEBUG``, ``CREEBLE_CACHE_TTL``)
    3. Project config (``./creeble.json`` or an explicit ``config_path``)
    4. Defaults
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from creeble.exceptions import ConfigError
from creeble.models import ClientConfig

_PROJECT_CONFIG_FILENAME = "creeble.json"

ENV_API_KEY = "CREEBLE_API_KEY"
ENV_BASE_URL = "CREEBLE_BASE_URL"
ENV_DEBUG = "CREEBLE_DEBUG"
ENV_CACHE_TTL = "CREEBLE_CACHE_TTL"

_TRUTHY = {"1", "true", "yes", "on"}


def load_project_config(path: Optional[str | Path] = None) -> Optional[dict[str, Any]]:
    """Load project-local configuration.

    Args:
        path: Explicit config file. When ``None``, ``./creeble.json`` is
            used if it exists.

    Returns:
        The parsed JSON object, or ``None`` when no file is present.

    Raises:
        ConfigError: If the file contains invalid JSON, is not an object,
            or an explicit *path* does not exist.
    """
    if path is None:
        candidate = Path.cwd() / _PROJECT_CONFIG_FILENAME
        if not candidate.is_file():
            return None
    else:
        candidate = Path(path)
        if not candidate.is_file():
            raise ConfigError(f"Config file not found: {candidate}")
    try:
        data = json.loads(candidate.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid config at {candidate}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config at {candidate}: expected a JSON object")
    return data


def _env_overrides() -> dict[str, Any]:
    """Collect configuration values from ``CREEBLE_*`` environment variables."""
    overrides: dict[str, Any] = {}
    api_key = os.environ.get(ENV_API_KEY)
    if api_key:
        overrides["api_key"] = api_key
    base_url = os.environ.get(ENV_BASE_URL)
    if base_url:
        overrides["base_url"] = base_url
    debug = os.environ.get(ENV_DEBUG)
    if debug:
        overrides["debug"] = debug.strip().lower() in _TRUTHY
    ttl = os.environ.get(ENV_CACHE_TTL)
    if ttl:
        try:
            overrides["cache"] = {"ttl_seconds": int(ttl)}
        except ValueError as exc:
            raise ConfigError(f"{ENV_CACHE_TTL} must be an integer, got {ttl!r}") from exc
    return overrides


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge *override* into a copy of *base*, recursing into nested dicts."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def resolve_config(
    api_key: Optional[str] = None,
    base_url: Optional[str] = None,
    config_path: Optional[str | Path] = None,
    **overrides: Any,
) -> ClientConfig:
    """Resolve the effective client configuration.

    Args:
        api_key: Explicit API key (highest precedence).
        base_url: Explicit base URL override.
        config_path: Optional JSON config file replacing ``./creeble.json``.
        **overrides: Further explicit fields, e.g. ``debug=True`` or
            ``cache={"enabled": True}``. ``None`` values are ignored.

    Returns:
        A validated :class:`~creeble.models.ClientConfig`.

    Raises:
        ConfigError: If no API key can be found, a config file is invalid,
            or the merged values fail validation.
    """
    merged: dict[str, Any] = load_project_config(config_path) or {}
    merged = _deep_merge(merged, _env_overrides())

    explicit: dict[str, Any] = {k: v for k, v in overrides.items() if v is not None}
    if api_key is not None:
        explicit["api_key"] = api_key
    if base_url is not None:
        explicit["base_url"] = base_url
    merged = _deep_merge(merged, explicit)

    if not merged.get("api_key"):
        raise ConfigError(
            f"API key is required (pass api_key or set {ENV_API_KEY})"
        )
    try:
        return ClientConfig.model_validate(merged)
    except PydanticValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
