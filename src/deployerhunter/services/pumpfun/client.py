"""pump.fun frontend API client.

Provides the launch platform's recent-coins feed and the per-creator coin
history used by the live reputation enricher. No authentication required.
"""

from typing import Any

import structlog

from deployerhunter.config.settings import get_settings
from deployerhunter.constants.pipeline import (
    LIVE_REPUTATION_PAGE_SIZE,
    PUMPFUN_BASE_URL,
    UPSTREAM_MAX_ATTEMPTS,
)
from deployerhunter.core.exceptions import ExternalServiceError
from deployerhunter.services.base import BaseAPIClient

log = structlog.get_logger(__name__)


class PumpFunClient(BaseAPIClient):
    """pump.fun frontend API client.

    Endpoints used:
        - GET /coins - Most recently created coins
        - GET /coins/user-created-coins/{address} - Coins launched by one creator
    """

    def __init__(self) -> None:
        """Initialize pump.fun client from settings."""
        settings = get_settings()
        super().__init__(
            base_url=PUMPFUN_BASE_URL,
            service="pumpfun",
            timeout=settings.upstream_timeout_seconds,
            max_attempts=UPSTREAM_MAX_ATTEMPTS,
            headers={"Accept": "application/json"},
            circuit_breaker_threshold=settings.circuit_breaker_threshold,
            circuit_breaker_cooldown=settings.circuit_breaker_cooldown,
        )

    async def fetch_recent_coins(self, limit: int = 50) -> list[dict[str, Any]]:
        """Fetch the most recently created coins, newest first.

        Raises:
            ExternalServiceError: If the request fails or the body is malformed.
        """
        data = await self.get_json(
            "/coins",
            params={
                "offset": 0,
                "limit": limit,
                "sort": "created_timestamp",
                "order": "DESC",
                "includeNsfw": "false",
            },
        )
        coins = self._coin_list(data)
        log.info("pumpfun_recent_coins_fetched", count=len(coins))
        return coins

    async def fetch_created_coins(
        self, creator: str, limit: int = LIVE_REPUTATION_PAGE_SIZE
    ) -> list[dict[str, Any]]:
        """Fetch coins previously launched by a creator address.

        Raises:
            ExternalServiceError: If the request fails or the body is malformed.
        """
        data = await self.get_json(
            f"/coins/user-created-coins/{creator}",
            params={"offset": 0, "limit": limit, "includeNsfw": "false"},
        )
        return self._coin_list(data)

    def _coin_list(self, data: Any) -> list[dict[str, Any]]:
        if isinstance(data, dict):
            data = data.get("coins")
        if not isinstance(data, list):
            raise ExternalServiceError(service=self.service, message="Expected a list of coins")
        return [coin for coin in data if isinstance(coin, dict)]
