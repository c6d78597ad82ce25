from __future__ import annotations

import logging
from typing import Optional

import httpx

from config.settings import get_settings


logger = logging.getLogger(__name__)


class MigrationFailed(Exception):
    """The relay could not produce migrated code."""


class MigrationClient:
    """Thin HTTP client for the ``migrate-code`` relay."""

    def __init__(
        self,
        endpoint: Optional[str] = None,
        timeout: float = 90.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.endpoint = endpoint or get_settings().migrate_api_url
        self.timeout = timeout
        self._transport = transport

    def migrate(self, code: str, target_format: str) -> str:
        payload = {"code": code, "targetFormat": target_format}
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.post(self.endpoint, json=payload)
        except httpx.HTTPError as exc:
            logger.error("Relay call failed: %s", exc)
            raise MigrationFailed(f"Could not reach the migration service: {exc}") from exc

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if response.is_error:
            message = data.get("error") or f"Migration service returned {response.status_code}"
            logger.warning("Relay answered %s: %s", response.status_code, message)
            raise MigrationFailed(message)

        migrated = data.get("migratedCode")
        if not migrated:
            raise MigrationFailed("No migrated code returned. Please try again.")
        return migrated
