"""Tests for source fetchers."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from deployerhunter.config.settings import Settings
from deployerhunter.core.exceptions import (
    CircuitBreakerOpenError,
    ConfigurationError,
    ExternalServiceError,
)
from deployerhunter.core.timeutil import now_ms
from deployerhunter.services.ranking.sources import (
    BackendProxySourceFetcher,
    DexSearchSourceFetcher,
    MockSourceFetcher,
    PumpFunSourceFetcher,
    RpcSourceFetcher,
    build_source_fetcher,
)


def _failing_client(method: str, error: Exception) -> MagicMock:
    client = MagicMock()
    setattr(client, method, AsyncMock(side_effect=error))
    client.close = AsyncMock()
    return client


class TestMockSourceFetcher:
    """Deterministic synthetic records."""

    @pytest.mark.asyncio
    async def test_same_seed_same_records(self) -> None:
        first = await MockSourceFetcher(count=10, seed=7).fetch()
        second = await MockSourceFetcher(count=10, seed=7).fetch()

        assert [record["mint"] for record in first] == [record["mint"] for record in second]

    @pytest.mark.asyncio
    async def test_records_are_launch_platform_shaped(self) -> None:
        records = await MockSourceFetcher(count=5).fetch()

        assert len(records) == 5
        for record in records:
            assert record["mint"].endswith("pump")
            assert record["created_timestamp"] <= now_ms()
            assert {"creator", "holders", "usd_market_cap"} <= record.keys()


class TestFetchersNeverRaise:
    """Upstream errors degrade to an empty list."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            ExternalServiceError(service="upstream", message="HTTP 500", status_code=500),
            CircuitBreakerOpenError("upstream: circuit open"),
        ],
    )
    async def test_pumpfun(self, error: Exception) -> None:
        fetcher = PumpFunSourceFetcher(_failing_client("fetch_recent_coins", error))

        assert await fetcher.fetch() == []

    @pytest.mark.asyncio
    async def test_dexscreener(self) -> None:
        error = ExternalServiceError(service="dexscreener", message="Malformed JSON response")
        fetcher = DexSearchSourceFetcher(_failing_client("search_pairs", error))

        assert await fetcher.fetch() == []

    @pytest.mark.asyncio
    async def test_rpc(self) -> None:
        error = ExternalServiceError(service="solana_rpc", message="timeout")
        fetcher = RpcSourceFetcher(_failing_client("get_assets_by_authority", error))

        assert await fetcher.fetch() == []

    @pytest.mark.asyncio
    async def test_backend(self) -> None:
        error = ExternalServiceError(service="backend", message="HTTP 502", status_code=502)
        fetcher = BackendProxySourceFetcher(_failing_client("fetch_tokens", error))

        assert await fetcher.fetch() == []

    @pytest.mark.asyncio
    async def test_rpc_without_api_key(self) -> None:
        assert await RpcSourceFetcher(None).fetch() == []

    @pytest.mark.asyncio
    async def test_backend_without_url(self) -> None:
        assert await BackendProxySourceFetcher(None).fetch() == []


class TestDexSearchSourceFetcher:
    """Recency window and slicing."""

    @pytest.mark.asyncio
    async def test_recent_pairs_only(self) -> None:
        now = now_ms()
        client = MagicMock()
        client.search_pairs = AsyncMock(
            return_value=[
                {"pairAddress": "fresh", "pairCreatedAt": now - 3_600_000},
                {"pairAddress": "stale", "pairCreatedAt": now - 48 * 3_600_000},
                {"pairAddress": "undated"},
            ]
        )
        fetcher = DexSearchSourceFetcher(client, recent_hours=24)

        pairs = await fetcher.fetch()

        assert [pair["pairAddress"] for pair in pairs] == ["fresh"]

    @pytest.mark.asyncio
    async def test_max_pairs(self) -> None:
        client = MagicMock()
        client.search_pairs = AsyncMock(return_value=[{"pairAddress": str(i)} for i in range(10)])
        fetcher = DexSearchSourceFetcher(client, max_pairs=3)

        assert len(await fetcher.fetch()) == 3

    @pytest.mark.asyncio
    async def test_passes_query(self) -> None:
        client = MagicMock()
        client.search_pairs = AsyncMock(return_value=[])

        await DexSearchSourceFetcher(client, query="pump").fetch()

        client.search_pairs.assert_awaited_once_with("pump")


class TestBuildSourceFetcher:
    """Source selection from settings."""

    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("mock", MockSourceFetcher),
            ("pumpfun", PumpFunSourceFetcher),
            ("dexscreener", DexSearchSourceFetcher),
            ("rpc", RpcSourceFetcher),
            ("backend", BackendProxySourceFetcher),
        ],
    )
    def test_selects_fetcher(self, source: str, expected: type) -> None:
        fetcher = build_source_fetcher(Settings(), source=source)

        assert isinstance(fetcher, expected)
        assert fetcher.name == source

    def test_defaults_to_settings(self) -> None:
        fetcher = build_source_fetcher(Settings(token_source="mock"))

        assert isinstance(fetcher, MockSourceFetcher)

    def test_rpc_inert_without_key(self) -> None:
        fetcher = build_source_fetcher(Settings(), source="rpc")

        assert fetcher.client is None

    def test_backend_wired_when_configured(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BACKEND_BASE_URL", "https://backend.example.com")

        fetcher = build_source_fetcher(Settings(), source="backend")

        assert fetcher.client is not None

    def test_unknown_source(self) -> None:
        with pytest.raises(ConfigurationError, match="carrier-pigeon"):
            build_source_fetcher(Settings(), source="carrier-pigeon")
