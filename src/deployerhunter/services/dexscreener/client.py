"""DexScreener API client for pair search and token market data.

API Documentation: https://docs.dexscreener.com/api/reference
Rate Limits: ~300 requests/minute (no auth required)
"""

from typing import Any

import structlog
from pydantic import ValidationError

from deployerhunter.config.settings import get_settings
from deployerhunter.constants.pipeline import (
    DEXSCREENER_BASE_URL,
    SOLANA_CHAIN_ID,
    UPSTREAM_MAX_ATTEMPTS,
)
from deployerhunter.core.exceptions import ExternalServiceError
from deployerhunter.services.base import BaseAPIClient
from deployerhunter.services.dexscreener.models import PairsResponse

log = structlog.get_logger(__name__)


class DexScreenerClient(BaseAPIClient):
    """DexScreener API client.

    Endpoints used:
        - GET /latest/dex/search?q={query} - Free-text pair search
        - GET /latest/dex/tokens/{address} - Pairs of one token

    Example:
        client = DexScreenerClient()
        try:
            pairs = await client.search_pairs("solana")
        finally:
            await client.close()
    """

    def __init__(self) -> None:
        """Initialize DexScreener client from settings."""
        settings = get_settings()
        super().__init__(
            base_url=DEXSCREENER_BASE_URL,
            service="dexscreener",
            timeout=settings.upstream_timeout_seconds,
            max_attempts=UPSTREAM_MAX_ATTEMPTS,
            headers={"Accept": "application/json"},
            circuit_breaker_threshold=settings.circuit_breaker_threshold,
            circuit_breaker_cooldown=settings.circuit_breaker_cooldown,
        )

    async def search_pairs(self, query: str) -> list[dict[str, Any]]:
        """Search pairs by free text, keeping Solana pairs only.

        Args:
            query: Free-text search query.

        Returns:
            Raw Solana pair records, in upstream order.

        Raises:
            ExternalServiceError: If the request fails or the body is malformed.
        """
        data = await self.get_json("/latest/dex/search", params={"q": query})
        pairs = self._solana_pairs(data)
        log.info("dexscreener_search_fetched", query=query, solana_count=len(pairs))
        return pairs

    async def fetch_token_pairs(self, address: str) -> list[dict[str, Any]]:
        """Fetch the Solana pairs of one token mint.

        Raises:
            ExternalServiceError: If the request fails or the body is malformed.
        """
        data = await self.get_json(f"/latest/dex/tokens/{address}")
        return self._solana_pairs(data)

    def _solana_pairs(self, data: Any) -> list[dict[str, Any]]:
        try:
            response = PairsResponse.model_validate(data)
        except ValidationError as e:
            raise ExternalServiceError(
                service=self.service,
                message=f"Unexpected response shape: {e.error_count()} error(s)",
            ) from e

        return [
            pair for pair in response.pairs or []
            if pair.get("chainId", SOLANA_CHAIN_ID) == SOLANA_CHAIN_ID
        ]
