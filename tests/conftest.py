"""Shared pytest fixtures for Deployer Hunter tests.

This module provides:
- Environment isolation (no .env leakage, fresh cached settings)
- Stub source fetchers and reputation enrichers for pipeline tests
- Raw record builders in the shapes the upstreams return
"""

import os
from collections.abc import Callable, Generator
from typing import Any

import pytest

from deployerhunter.config.settings import get_settings
from deployerhunter.core.timeutil import now_ms
from deployerhunter.models.token import DeployerStats, Token
from deployerhunter.services.ranking import board as board_module

# =============================================================================
# Environment Configuration
# =============================================================================


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Run every test with a clean environment and fresh settings."""
    for key in list(os.environ):
        if key.startswith(("BACKEND_", "HELIUS_", "TOKEN_SOURCE", "REPUTATION_", "SOLANA_")):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setattr(board_module, "_token_board", None)

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# =============================================================================
# Stubs
# =============================================================================


class StubSourceFetcher:
    """Source fetcher returning canned records and counting calls."""

    name = "stub"

    def __init__(self, records: list[dict[str, Any]] | None = None, error: Exception | None = None):
        self.records = records or []
        self.error = error
        self.calls = 0
        self.closed = False

    async def fetch(self) -> list[dict[str, Any]]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.records)

    async def close(self) -> None:
        self.closed = True


class FixedReputationEnricher:
    """Reputation enricher returning the same bonding rate for everyone."""

    def __init__(self, bonding_rate: float = 60.0) -> None:
        self.bonding_rate = bonding_rate
        self.lookups: list[str] = []

    async def enrich(self, address: str) -> DeployerStats:
        self.lookups.append(address)
        return DeployerStats(
            address=address,
            total_tokens=10,
            bonded_tokens=int(self.bonding_rate // 10),
            bonding_rate=self.bonding_rate,
        )

    async def close(self) -> None:
        return None


@pytest.fixture
def stub_source() -> type[StubSourceFetcher]:
    """Provide the stub source fetcher class."""
    return StubSourceFetcher


@pytest.fixture
def fixed_reputation() -> type[FixedReputationEnricher]:
    """Provide the fixed reputation enricher class."""
    return FixedReputationEnricher


# =============================================================================
# Record Builders
# =============================================================================


@pytest.fixture
def pumpfun_coin() -> Callable[..., dict[str, Any]]:
    """Build a launch-platform coin record."""

    def _build(
        symbol: str = "DOG",
        holders: int = 100,
        market_cap: float = 8000.0,
        creator: str = "Creator1111111111111111111111111111111111111",
        age_minutes: int = 10,
        **extra: Any,
    ) -> dict[str, Any]:
        record = {
            "mint": f"{symbol}Mint11111111111111111111111111111pump",
            "name": f"{symbol} Coin",
            "symbol": symbol,
            "uri": f"https://ipfs.io/ipfs/{symbol}",
            "usd_market_cap": market_cap,
            "creator": creator,
            "holders": holders,
            "created_timestamp": now_ms() - age_minutes * 60_000,
        }
        record.update(extra)
        return record

    return _build


@pytest.fixture
def dex_pair() -> Callable[..., dict[str, Any]]:
    """Build a DEX aggregator pair record."""

    def _build(
        symbol: str = "CAT",
        volume_1h: float = 5000.0,
        price_change_1h: float = 12.5,
        buys_1h: int = 40,
        sells_1h: int = 20,
        age_minutes: int = 30,
        **extra: Any,
    ) -> dict[str, Any]:
        record = {
            "chainId": "solana",
            "dexId": "raydium",
            "url": f"https://dexscreener.com/solana/{symbol.lower()}pair",
            "pairAddress": f"{symbol}Pair111111111111111111111111111111111",
            "baseToken": {
                "address": f"{symbol}Mint1111111111111111111111111111111111",
                "name": f"{symbol} Token",
                "symbol": symbol,
            },
            "priceUsd": "0.00123",
            "txns": {
                "h1": {"buys": buys_1h, "sells": sells_1h},
                "h24": {"buys": buys_1h * 10, "sells": sells_1h * 10},
            },
            "volume": {"h1": volume_1h, "h24": volume_1h * 12},
            "priceChange": {"h1": price_change_1h, "h24": price_change_1h * 2},
            "liquidity": {"usd": 25000},
            "fdv": 90000,
            "marketCap": 85000,
            "pairCreatedAt": now_ms() - age_minutes * 60_000,
        }
        record.update(extra)
        return record

    return _build


@pytest.fixture
def make_token() -> Callable[..., Token]:
    """Build a canonical token."""

    def _build(mint: str = "Mint1", **fields: Any) -> Token:
        fields.setdefault("created_at", now_ms())
        return Token(mint=mint, **fields)

    return _build
