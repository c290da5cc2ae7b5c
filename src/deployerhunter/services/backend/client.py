"""Client for a first-party backend that serves pre-fetched token records."""

from typing import Any

import structlog

from deployerhunter.config.settings import get_settings
from deployerhunter.constants.pipeline import UPSTREAM_MAX_ATTEMPTS
from deployerhunter.core.exceptions import ConfigurationError, ExternalServiceError
from deployerhunter.services.base import BaseAPIClient

log = structlog.get_logger(__name__)


class BackendProxyClient(BaseAPIClient):
    """Backend proxy client.

    The backend answers ``GET /api/tokens`` with either a bare list of
    records or an envelope ``{"tokens": [...]}``.
    """

    def __init__(self, base_url: str | None = None) -> None:
        """Initialize from an explicit base URL or ``BACKEND_BASE_URL``.

        Raises:
            ConfigurationError: If no base URL is available.
        """
        settings = get_settings()
        base_url = base_url or settings.backend_base_url
        if not base_url:
            raise ConfigurationError("BACKEND_BASE_URL is not configured")
        super().__init__(
            base_url=base_url,
            service="backend",
            timeout=settings.upstream_timeout_seconds,
            max_attempts=UPSTREAM_MAX_ATTEMPTS,
            headers={"Accept": "application/json"},
            circuit_breaker_threshold=settings.circuit_breaker_threshold,
            circuit_breaker_cooldown=settings.circuit_breaker_cooldown,
        )

    async def fetch_tokens(self) -> list[dict[str, Any]]:
        """Fetch raw token records from the backend.

        Raises:
            ExternalServiceError: If the request fails or the body is malformed.
        """
        data = await self.get_json("/api/tokens")
        if isinstance(data, dict):
            data = data.get("tokens")
        if not isinstance(data, list):
            raise ExternalServiceError(service=self.service, message="Expected a list of tokens")
        records = [record for record in data if isinstance(record, dict)]
        log.info("backend_tokens_fetched", count=len(records))
        return records
