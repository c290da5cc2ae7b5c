"""Solana JSON-RPC client for token discovery and holder lookups.

Covers ``getProgramAccounts`` for holder counts and the Helius DAS
extension ``getAssetsByAuthority`` for token discovery.
The API key, when configured, is sent as the ``api-key`` query parameter.
"""

from typing import Any

import structlog

from deployerhunter.config.settings import get_settings
from deployerhunter.constants.pipeline import (
    TOKEN_ACCOUNT_SIZE,
    TOKEN_PROGRAM_ID,
    UPSTREAM_MAX_ATTEMPTS,
)
from deployerhunter.core.exceptions import ExternalServiceError
from deployerhunter.core.records import dig
from deployerhunter.services.base import BaseAPIClient

log = structlog.get_logger(__name__)


def _positive_holder(account: Any) -> str | None:
    """Owner of a parsed token account with a non-zero balance, else None."""
    info = dig(account, "account.data.parsed.info")
    if not isinstance(info, dict):
        return None
    owner = info.get("owner")
    amount = dig(info, "tokenAmount.amount")
    try:
        balance = int(amount) if amount is not None else 0
    except (TypeError, ValueError):
        return None
    if isinstance(owner, str) and owner and balance > 0:
        return owner
    return None


class SolanaRPCClient(BaseAPIClient):
    """Client for Solana JSON-RPC operations.

    Example:
        client = SolanaRPCClient()
        holders = await client.count_token_holders("mint_address")
        await client.close()
    """

    def __init__(self) -> None:
        """Initialize Solana RPC client with settings."""
        settings = get_settings()
        super().__init__(
            base_url=settings.solana_rpc_url,
            service="solana_rpc",
            timeout=settings.upstream_timeout_seconds,
            max_attempts=UPSTREAM_MAX_ATTEMPTS,
            headers={"Content-Type": "application/json"},
            circuit_breaker_threshold=settings.circuit_breaker_threshold,
            circuit_breaker_cooldown=settings.circuit_breaker_cooldown,
        )
        api_key = settings.helius_api_key.get_secret_value()
        self._params = {"api-key": api_key} if api_key else {}

    async def call(self, method: str, params: Any) -> Any:
        """Issue one JSON-RPC call and return its ``result``.

        Raises:
            ExternalServiceError: On transport failure or a JSON-RPC error object.
        """
        payload = {"jsonrpc": "2.0", "id": 1, "method": method, "params": params}
        data = await self.post_json("", json=payload, params=self._params)

        if not isinstance(data, dict):
            raise ExternalServiceError(service=self.service, message=f"{method}: malformed reply")
        if data.get("error"):
            error = data["error"]
            message = error.get("message", str(error)) if isinstance(error, dict) else str(error)
            raise ExternalServiceError(service=self.service, message=f"{method}: {message}")
        return data.get("result")

    async def get_assets_by_authority(
        self, authority: str, limit: int = 50
    ) -> list[dict[str, Any]]:
        """List the newest DAS assets sharing an update authority."""
        result = await self.call(
            "getAssetsByAuthority",
            {
                "authorityAddress": authority,
                "page": 1,
                "limit": limit,
                "sortBy": {"sortBy": "created", "sortDirection": "desc"},
            },
        )
        items = result.get("items") if isinstance(result, dict) else None
        if items is None:
            items = []
        if not isinstance(items, list):
            raise ExternalServiceError(
                service=self.service, message="getAssetsByAuthority: items is not a list"
            )
        log.info("solana_assets_by_authority_fetched", count=len(items))
        return [item for item in items if isinstance(item, dict)]

    async def count_token_holders(self, token_mint: str) -> int:
        """Count wallets holding a non-zero balance of an SPL token.

        Queries the Token Program for every token account of the mint via
        ``getProgramAccounts``. Expensive; callers bound how often they use it.
        """
        result = await self.call(
            "getProgramAccounts",
            [
                TOKEN_PROGRAM_ID,
                {
                    "encoding": "jsonParsed",
                    "filters": [
                        {"dataSize": TOKEN_ACCOUNT_SIZE},
                        {"memcmp": {"offset": 0, "bytes": token_mint}},
                    ],
                },
            ],
        )

        if result is None:
            result = []
        if not isinstance(result, list):
            raise ExternalServiceError(
                service=self.service, message="getProgramAccounts: result is not a list"
            )

        owners: set[str] = set()
        for account in result:
            holder = _positive_holder(account)
            if holder is not None:
                owners.add(holder)

        log.debug("solana_token_holders_counted", token_mint=token_mint[:8] + "...", holders=len(owners))
        return len(owners)
