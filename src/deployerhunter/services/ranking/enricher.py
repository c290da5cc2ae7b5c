"""Attribute enrichers: deployer reputation and per-token market data.

Two reputation models share the ``enrich(address) -> DeployerStats``
contract:

- SyntheticReputationEnricher derives a stable pseudo-statistic from the
  address string. It is a placeholder, not a historical query.
- LiveReputationEnricher counts the deployer's previously launched coins
  that completed their bonding curve on the launch platform.

``enrich_tokens`` looks each unique deployer up once per pipeline run.
MarketDataEnricher performs the slow per-token lookups (holders, market
cap) for the first N tokens only.
"""

import asyncio
import time
from typing import Any, Protocol

import structlog

from deployerhunter.constants.pipeline import (
    SYNTHETIC_BONDING_RATE_SPAN,
    SYNTHETIC_MIN_BONDING_RATE,
    SYNTHETIC_MIN_TOTAL_TOKENS,
    SYNTHETIC_TOTAL_TOKENS_SPAN,
)
from deployerhunter.core.exceptions import DeployerHunterError
from deployerhunter.models.token import DeployerStats, Token
from deployerhunter.services.dexscreener.client import DexScreenerClient
from deployerhunter.services.pumpfun.client import PumpFunClient
from deployerhunter.core.records import dig, to_number
from deployerhunter.services.solana.rpc_client import SolanaRPCClient

log = structlog.get_logger(__name__)


class ReputationEnricher(Protocol):
    """Derives a reputation statistic for a deployer address."""

    async def enrich(self, address: str) -> DeployerStats:
        """Return the deployer's stats."""
        ...

    async def close(self) -> None:
        """Release any HTTP resources."""
        ...


class Throttle:
    """Enforces a minimum delay between consecutive upstream lookups."""

    def __init__(self, delay_ms: int) -> None:
        self.delay_seconds = delay_ms / 1000
        self._last_call: float | None = None

    async def wait(self) -> None:
        """Sleep until ``delay_ms`` has passed since the previous call."""
        if self._last_call is not None and self.delay_seconds > 0:
            remaining = self.delay_seconds - (time.monotonic() - self._last_call)
            if remaining > 0:
                await asyncio.sleep(remaining)
        self._last_call = time.monotonic()


def synthetic_stats(address: str) -> DeployerStats:
    """Deterministic pseudo-reputation of an address.

    ``hash`` is the sum of the address's character codes; the bonding rate
    always lands in [50, 90) and the launched-token count in [5, 20).
    """
    address_hash = sum(ord(char) for char in address)
    total_tokens = SYNTHETIC_MIN_TOTAL_TOKENS + address_hash % SYNTHETIC_TOTAL_TOKENS_SPAN
    bonding_rate = SYNTHETIC_MIN_BONDING_RATE + address_hash % SYNTHETIC_BONDING_RATE_SPAN
    bonded_tokens = total_tokens * bonding_rate // 100

    return DeployerStats(
        address=address,
        total_tokens=total_tokens,
        bonded_tokens=bonded_tokens,
        bonding_rate=bonding_rate,
    )


class SyntheticReputationEnricher:
    """Reputation from ``synthetic_stats``; no I/O."""

    async def enrich(self, address: str) -> DeployerStats:
        return synthetic_stats(address)

    async def close(self) -> None:
        return None


class LiveReputationEnricher:
    """Reputation from the deployer's real launch history.

    One HTTP call per address, spaced by ``delay_ms``. When the lookup
    fails the synthetic statistic is returned instead so the run can
    continue.
    """

    def __init__(self, client: PumpFunClient, delay_ms: int = 150) -> None:
        self.client = client
        self._throttle = Throttle(delay_ms)

    async def enrich(self, address: str) -> DeployerStats:
        await self._throttle.wait()
        try:
            coins = await self.client.fetch_created_coins(address)
        except DeployerHunterError as e:
            log.warning(
                "live_reputation_lookup_failed",
                deployer=address[:8] + "...",
                error=str(e),
            )
            return synthetic_stats(address)

        bonded = sum(1 for coin in coins if coin.get("complete") is True)
        return DeployerStats.from_counts(address, total_tokens=len(coins), bonded_tokens=bonded)

    async def close(self) -> None:
        await self.client.close()


async def enrich_tokens(
    tokens: list[Token],
    enricher: ReputationEnricher,
    limit: int | None = None,
) -> list[Token]:
    """Attach each token's deployer bonding rate.

    Every unique deployer is looked up once; results live in a map scoped
    to this call. With ``limit``, only deployers of the first ``limit``
    tokens are looked up and the remaining tokens keep a 0% rate.

    Args:
        tokens: Normalized tokens.
        enricher: Reputation model.
        limit: Optional admission cap on enriched tokens.

    Returns:
        New tokens with ``bonding_rate`` set, in input order.
    """
    candidates = tokens if limit is None else tokens[:limit]
    stats_by_deployer: dict[str, DeployerStats] = {}

    for token in candidates:
        if token.deployer not in stats_by_deployer:
            stats_by_deployer[token.deployer] = await enricher.enrich(token.deployer)

    log.debug(
        "deployers_enriched",
        unique_deployers=len(stats_by_deployer),
        tokens=len(tokens),
    )

    enriched = []
    for token in tokens:
        stats = stats_by_deployer.get(token.deployer)
        rate = stats.bonding_rate if stats is not None else 0.0
        enriched.append(token.model_copy(update={"bonding_rate": rate}))
    return enriched


def _best_pair_market_cap(pairs: list[dict[str, Any]]) -> float | None:
    """Market cap of the most liquid pair (fdv, then marketCap), None when unknown."""
    pairs = [pair for pair in pairs if isinstance(pair, dict)]
    if not pairs:
        return None
    best = max(pairs, key=lambda pair: to_number(dig(pair, "liquidity.usd")) or 0.0)
    for key in ("fdv", "marketCap"):
        value = to_number(best.get(key))
        if value is not None and value > 0:
            return value
    return None


class MarketDataEnricher:
    """Real holder counts and market caps for the first ``limit`` tokens.

    Lookups run sequentially, ``delay_ms`` apart. Tokens past the limit and
    tokens whose lookups fail keep their normalized values.
    """

    def __init__(
        self,
        rpc_client: SolanaRPCClient | None = None,
        dex_client: DexScreenerClient | None = None,
        limit: int = 20,
        delay_ms: int = 150,
    ) -> None:
        self.rpc_client = rpc_client
        self.dex_client = dex_client
        self.limit = limit
        self._throttle = Throttle(delay_ms)

    async def enrich(self, tokens: list[Token]) -> list[Token]:
        enriched = list(tokens)
        for index, token in enumerate(tokens[: self.limit]):
            update: dict[str, Any] = {}

            if self.rpc_client is not None:
                await self._throttle.wait()
                try:
                    update["holders"] = await self.rpc_client.count_token_holders(token.mint)
                except DeployerHunterError as e:
                    log.warning("holder_lookup_failed", mint=token.mint[:8] + "...", error=str(e))

            if self.dex_client is not None:
                await self._throttle.wait()
                try:
                    market_cap = _best_pair_market_cap(
                        await self.dex_client.fetch_token_pairs(token.mint)
                    )
                except DeployerHunterError as e:
                    log.warning("market_cap_lookup_failed", mint=token.mint[:8] + "...", error=str(e))
                    market_cap = None
                if market_cap is not None:
                    update["market_cap"] = market_cap

            if update:
                enriched[index] = token.model_copy(update=update)

        log.debug("market_data_enriched", enriched=min(len(tokens), self.limit), total=len(tokens))
        return enriched

    async def close(self) -> None:
        if self.rpc_client is not None:
            await self.rpc_client.close()
        if self.dex_client is not None:
            await self.dex_client.close()
