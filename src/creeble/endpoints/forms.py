"""Forms endpoint: fetch form schemas and submit entries.

Submissions can be checked locally against the form schema with
:meth:`Forms.validate_form_data` before they are sent, which saves a round
trip for the common mistakes (missing required fields, malformed email,
unknown select option). The server remains the authority and may still
answer 422.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from pydantic import AnyUrl, EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from creeble.client import HttpClient
from creeble.client.encoding import endpoint_path
from creeble.exceptions import ValidationError

_EMAIL = TypeAdapter(EmailStr)
_URL = TypeAdapter(AnyUrl)
_HOST_LABEL_RE = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?$")
_PHONE_STRIP_RE = re.compile(r"[^0-9+]")
_DATE_FORMATS = ("%Y-%m-%d", "%Y-%m-%d %H:%M:%S", "%d/%m/%Y", "%m/%d/%Y")


@dataclass
class FormValidationResult:
    """Outcome of :meth:`Forms.validate_form_data`."""

    errors: dict[str, list[str]] = field(default_factory=dict)

    @property
    def valid(self) -> bool:
        return not self.errors


def _is_empty(value: Any) -> bool:
    return value is None or value == "" or value == [] or value is False


def _is_email(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        _EMAIL.validate_python(value)
    except PydanticValidationError:
        return False
    return True


def _is_url(value: Any) -> bool:
    """Parse with pydantic, then hold hostnames to letters, digits and inner hyphens."""
    if not isinstance(value, str):
        return False
    try:
        url = _URL.validate_python(value)
    except PydanticValidationError:
        return False
    host = url.host
    if not host:
        return False
    if host.startswith("["):
        return True
    return all(_HOST_LABEL_RE.match(label) for label in host.split("."))


def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    try:
        float(str(value))
    except ValueError:
        return False
    return True


def _is_phone(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    return 10 <= len(_PHONE_STRIP_RE.sub("", value)) <= 15


def _is_date(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    for fmt in _DATE_FORMATS:
        try:
            parsed = datetime.strptime(value, fmt)
        except ValueError:
            continue
        if parsed.strftime(fmt) == value:
            return True
    return False


def _option_names(config: dict[str, Any]) -> list[Any] | None:
    options = config.get("options")
    if not isinstance(options, list):
        return None
    return [opt.get("name") for opt in options if isinstance(opt, dict)]


def _field_type_errors(name: str, value: Any, config: dict[str, Any]) -> list[str]:
    kind = config.get("type", "text")
    if kind == "email" and not _is_email(value):
        return [f"The {name} must be a valid email address."]
    if kind == "url" and not _is_url(value):
        return [f"The {name} must be a valid URL."]
    if kind == "number" and not _is_number(value):
        return [f"The {name} must be a number."]
    if kind == "phone_number" and not _is_phone(value):
        return [f"The {name} must be a valid phone number."]
    if kind == "date" and not _is_date(value):
        return [f"The {name} must be a valid date."]
    if kind == "select":
        names = _option_names(config)
        if names is not None and value not in names:
            return [f"The selected {name} is invalid."]
    if kind == "multi_select":
        names = _option_names(config)
        values = value if isinstance(value, list) else [value]
        if names is not None and any(v not in names for v in values):
            return [f"One or more selected {name} values are invalid."]
    return []


class Forms:
    """Form schema retrieval and submission for a project endpoint."""

    def __init__(self, client: HttpClient) -> None:
        self._client = client

    def get_form(self, endpoint: str, form_slug: str) -> Any:
        """Fetch the form definition (name, settings, schema)."""
        return self._client.get(endpoint_path(endpoint, "forms", form_slug))

    def get_schema(self, endpoint: str, form_slug: str) -> Any:
        """Return the form's ``schema``, or the whole body if it has none."""
        response = self.get_form(endpoint, form_slug)
        if isinstance(response, dict) and "schema" in response:
            return response["schema"]
        return response

    def submit(self, endpoint: str, form_slug: str, form_data: dict[str, Any]) -> Any:
        """POST a submission. Not cached and does not invalidate cached reads."""
        return self._client.post(endpoint_path(endpoint, "forms", form_slug), form_data)

    def submit_with_validation(self, endpoint: str, form_slug: str, form_data: dict[str, Any]) -> Any:
        """Validate *form_data* against the live schema, then submit.

        Raises:
            ValidationError: If local validation fails; nothing is posted.
        """
        form = self.get_form(endpoint, form_slug)
        schema = form.get("schema") if isinstance(form, dict) else None
        result = self.validate_form_data(schema or {}, form_data)
        if not result.valid:
            raise ValidationError("Form validation failed", result.errors)
        return self.submit(endpoint, form_slug, form_data)

    @staticmethod
    def validate_form_data(schema: dict[str, Any], form_data: dict[str, Any]) -> FormValidationResult:
        """Check *form_data* against ``schema["properties"]``.

        Each property may declare ``required`` and a ``type`` among
        ``email``, ``url``, ``number``, ``phone_number``, ``date``,
        ``select`` and ``multi_select``. Type checks only run on non-empty
        values.
        """
        result = FormValidationResult()
        properties = schema.get("properties") or {}
        for name, config in properties.items():
            if not isinstance(config, dict):
                continue
            value = form_data.get(name)
            messages: list[str] = []
            if config.get("required") and _is_empty(value):
                messages.append(f"The {name} field is required.")
            if not _is_empty(value):
                messages.extend(_field_type_errors(name, value, config))
            if messages:
                result.errors[name] = messages
        return result
