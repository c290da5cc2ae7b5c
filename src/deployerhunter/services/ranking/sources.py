"""Source fetchers: interchangeable upstreams for the ranking pipeline.

Every fetcher honours the same contract: ``await fetch()`` returns a list of
raw records and never raises for upstream trouble. Transport errors,
non-2xx statuses, malformed bodies and open circuit breakers are logged and
degraded to an empty list.
"""

import random
import string
from typing import Any, Protocol

import structlog

from deployerhunter.config.settings import Settings
from deployerhunter.constants.pipeline import PUMPFUN_UPDATE_AUTHORITY
from deployerhunter.core.exceptions import ConfigurationError, DeployerHunterError
from deployerhunter.core.timeutil import now_ms
from deployerhunter.services.backend.client import BackendProxyClient
from deployerhunter.services.dexscreener.client import DexScreenerClient
from deployerhunter.services.pumpfun.client import PumpFunClient
from deployerhunter.services.solana.rpc_client import SolanaRPCClient

log = structlog.get_logger(__name__)

RawRecord = dict[str, Any]

_BASE58 = "".join(c for c in string.ascii_letters + string.digits if c not in "0OIl")


class SourceFetcher(Protocol):
    """Upstream provider of raw token records."""

    name: str

    async def fetch(self) -> list[RawRecord]:
        """Return raw records, or an empty list when the upstream fails."""
        ...

    async def close(self) -> None:
        """Release any HTTP resources."""
        ...


class MockSourceFetcher:
    """Deterministic generator of launch-platform shaped records.

    Uses a seeded RNG so the same seed always produces the same mints,
    names and metrics; creation times are relative to the current clock.
    """

    name = "mock"

    def __init__(self, count: int = 30, seed: int = 42) -> None:
        self.count = count
        self.seed = seed

    async def fetch(self) -> list[RawRecord]:
        rng = random.Random(self.seed)
        now = now_ms()
        deployers = ["".join(rng.choices(_BASE58, k=44)) for _ in range(max(1, self.count // 3))]

        records = []
        for i in range(self.count):
            symbol = "".join(rng.choices(string.ascii_uppercase, k=rng.randint(3, 5)))
            mint = "".join(rng.choices(_BASE58, k=40)) + "pump"
            records.append(
                {
                    "mint": mint,
                    "name": f"{symbol.title()} Coin {i}",
                    "symbol": symbol,
                    "uri": f"https://pump.fun/coin/{mint}",
                    "usd_market_cap": round(rng.uniform(1_000, 80_000), 2),
                    "creator": rng.choice(deployers),
                    "holders": rng.randint(1, 400),
                    "created_timestamp": now - rng.randint(1, 120) * 60_000,
                }
            )
        log.debug("mock_records_generated", count=len(records), seed=self.seed)
        return records

    async def close(self) -> None:
        return None


class PumpFunSourceFetcher:
    """Recent coins from the token-launch platform."""

    name = "pumpfun"

    def __init__(self, client: PumpFunClient, limit: int = 50) -> None:
        self.client = client
        self.limit = limit

    async def fetch(self) -> list[RawRecord]:
        try:
            return await self.client.fetch_recent_coins(limit=self.limit)
        except DeployerHunterError as e:
            log.warning("source_fetch_failed", source=self.name, error=str(e))
            return []

    async def close(self) -> None:
        await self.client.close()


class DexSearchSourceFetcher:
    """Solana pairs from the DEX aggregator's free-text search.

    Args:
        client: DexScreener client.
        query: Search query.
        recent_hours: Keep only pairs created within this window; None keeps all.
        max_pairs: Maximum pairs returned.
    """

    name = "dexscreener"

    def __init__(
        self,
        client: DexScreenerClient,
        query: str = "solana",
        recent_hours: int | None = None,
        max_pairs: int = 100,
    ) -> None:
        self.client = client
        self.query = query
        self.recent_hours = recent_hours
        self.max_pairs = max_pairs

    async def fetch(self) -> list[RawRecord]:
        try:
            pairs = await self.client.search_pairs(self.query)
        except DeployerHunterError as e:
            log.warning("source_fetch_failed", source=self.name, error=str(e))
            return []

        if self.recent_hours is not None:
            cutoff = now_ms() - self.recent_hours * 3_600_000
            pairs = [
                pair for pair in pairs
                if isinstance(pair.get("pairCreatedAt"), int | float)
                and pair["pairCreatedAt"] > cutoff
            ]
            log.debug("dexscreener_recent_pairs", count=len(pairs), hours=self.recent_hours)

        return pairs[: self.max_pairs]

    async def close(self) -> None:
        await self.client.close()


class RpcSourceFetcher:
    """Newest launch-platform assets via the RPC provider's DAS API.

    Requires an API key; without one the fetcher is inert and returns
    an empty list.
    """

    name = "rpc"

    def __init__(
        self,
        client: SolanaRPCClient | None,
        authority: str = PUMPFUN_UPDATE_AUTHORITY,
        limit: int = 50,
    ) -> None:
        self.client = client
        self.authority = authority
        self.limit = limit

    async def fetch(self) -> list[RawRecord]:
        if self.client is None:
            log.warning("source_missing_api_key", source=self.name)
            return []
        try:
            return await self.client.get_assets_by_authority(self.authority, limit=self.limit)
        except DeployerHunterError as e:
            log.warning("source_fetch_failed", source=self.name, error=str(e))
            return []

    async def close(self) -> None:
        if self.client is not None:
            await self.client.close()


class BackendProxySourceFetcher:
    """Records served by the first-party backend proxy.

    Inert (empty list) when no backend URL is configured.
    """

    name = "backend"

    def __init__(self, client: BackendProxyClient | None) -> None:
        self.client = client

    async def fetch(self) -> list[RawRecord]:
        if self.client is None:
            log.warning("source_missing_backend_url", source=self.name)
            return []
        try:
            return await self.client.fetch_tokens()
        except DeployerHunterError as e:
            log.warning("source_fetch_failed", source=self.name, error=str(e))
            return []

    async def close(self) -> None:
        if self.client is not None:
            await self.client.close()


def build_source_fetcher(settings: Settings, source: str | None = None) -> SourceFetcher:
    """Create the source fetcher named by ``source`` or ``settings.token_source``.

    Raises:
        ConfigurationError: If the source name is unknown.
    """
    source = source or settings.token_source

    if source == "mock":
        return MockSourceFetcher()
    if source == "pumpfun":
        return PumpFunSourceFetcher(PumpFunClient(), limit=settings.pumpfun_fetch_limit)
    if source == "dexscreener":
        return DexSearchSourceFetcher(
            DexScreenerClient(),
            query=settings.dexscreener_search_query,
            recent_hours=settings.dexscreener_recent_hours,
            max_pairs=settings.dexscreener_max_pairs,
        )
    if source == "rpc":
        return RpcSourceFetcher(SolanaRPCClient() if settings.has_helius_key else None)
    if source == "backend":
        client = BackendProxyClient() if settings.backend_base_url else None
        return BackendProxySourceFetcher(client)

    raise ConfigurationError(f"Unknown token source: {source!r}")
