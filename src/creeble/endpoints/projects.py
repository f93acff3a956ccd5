"""Projects endpoint: public project metadata."""

from __future__ import annotations

from typing import Any

from creeble.client import HttpClient
from creeble.client.encoding import endpoint_path
from creeble.exceptions import CreebleError


class Projects:
    def __init__(self, client: HttpClient) -> None:
        self._client = client

    def info(self, endpoint: str) -> Any:
        """Project name, status, record count and last sync time."""
        return self._client.get(endpoint_path(endpoint, "info"))

    def schema(self, endpoint: str) -> Any:
        return self._client.get(endpoint_path(endpoint, "schema"))

    def stats(self, endpoint: str) -> Any:
        return self._client.get(endpoint_path(endpoint, "stats"))

    def fields(self, endpoint: str) -> list[Any]:
        """Field definitions from the project schema (empty if none)."""
        schema = self.schema(endpoint)
        if isinstance(schema, dict):
            return schema.get("fields") or []
        return []

    def exists(self, endpoint: str) -> bool:
        """Whether the endpoint is reachable with this API key. Errors read as ``False``."""
        try:
            self.info(endpoint)
        except CreebleError:
            return False
        return True
