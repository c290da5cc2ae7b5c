"""Tests for raw record normalization."""

import copy
import math

import pytest

from deployerhunter.models.token import Token
from deployerhunter.services.ranking.normalizer import normalize, normalize_all


class TestNormalizeDefaults:
    """Missing fields fall back to defaults and never raise."""

    def test_empty_record(self) -> None:
        """
        Given: An empty record
        When: It is normalized
        Then: Every field carries its default
        """
        token = normalize({})

        assert token == Token()
        assert token.mint == "unknown"
        assert token.name == "Unknown Token"
        assert token.symbol == "UNKNOWN"
        assert token.market_cap == 0.0
        assert token.holders == 0
        assert token.created_at == 0
        assert token.bonding_rate == 0.0
        assert token.rank == 0

    @pytest.mark.parametrize("record", [None, 42, "text", ["list"]])
    def test_non_dict_record(self, record: object) -> None:
        assert normalize(record) == Token()  # type: ignore[arg-type]

    def test_garbage_values_default(self) -> None:
        token = normalize(
            {
                "mint": "",
                "usd_market_cap": "lots",
                "holders": True,
                "created_timestamp": float("nan"),
                "volume": {"h1": float("inf")},
            }
        )

        assert token.mint == "unknown"
        assert token.market_cap == 0.0
        assert token.holders == 0
        assert token.created_at == 0
        assert token.volume_1h == 0.0

    def test_negative_market_cap_clamped(self) -> None:
        assert normalize({"market_cap": -5}).market_cap == 0.0


class TestNormalizeLaunchPlatform:
    """Launch-platform coin records."""

    def test_pumpfun_coin(self, pumpfun_coin) -> None:
        record = pumpfun_coin(symbol="DOG", holders=120, market_cap=8000.0)

        token = normalize(record)

        assert token.mint == record["mint"]
        assert token.symbol == "DOG"
        assert token.name == "DOG Coin"
        assert token.market_cap == 8000.0
        assert token.deployer == record["creator"]
        assert token.holders == 120
        assert token.created_at == record["created_timestamp"]

    def test_seconds_promoted_to_milliseconds(self) -> None:
        assert normalize({"created_timestamp": 1_700_000_000}).created_at == 1_700_000_000_000

    def test_milliseconds_kept(self) -> None:
        assert normalize({"createdAt": 1_700_000_000_123}).created_at == 1_700_000_000_123


class TestNormalizeDexPair:
    """DEX aggregator pair records."""

    def test_pair_fields(self, dex_pair) -> None:
        record = dex_pair(symbol="CAT", volume_1h=5000.0, price_change_1h=12.5, buys_1h=40, sells_1h=20)

        token = normalize(record)

        assert token.mint == record["baseToken"]["address"]
        assert token.symbol == "CAT"
        assert token.name == "CAT Token"
        assert token.price_usd == pytest.approx(0.00123)
        assert token.volume_1h == 5000.0
        assert token.volume_24h == 60000.0
        assert token.price_change_1h == 12.5
        assert token.txns_1h == 60
        assert token.buys_1h == 40
        assert token.sells_1h == 20
        assert token.pair_address == record["pairAddress"]
        assert token.url == record["url"]
        assert token.uri == record["url"]

    def test_market_cap_prefers_fdv(self, dex_pair) -> None:
        assert normalize(dex_pair()).market_cap == 90000

    def test_market_cap_falls_back_to_liquidity(self) -> None:
        assert normalize({"liquidity": {"usd": 2500}}).market_cap == 2500

    def test_zero_market_cap_keys_fall_through(self) -> None:
        """
        Given: A pair reporting fdv and marketCap as zero but real liquidity
        When: It is normalized
        Then: Zero values fall through to the next key in precedence
        """
        record = {"fdv": 0, "marketCap": 0, "liquidity": {"usd": 7000}}

        assert normalize(record).market_cap == 7000

    def test_string_zero_falls_through(self) -> None:
        assert normalize({"fdv": "0", "usd_market_cap": 6500}).market_cap == 6500

    def test_deployer_falls_back_to_pair_address(self, dex_pair) -> None:
        record = dex_pair()

        assert normalize(record).deployer == record["pairAddress"]

    def test_holders_proxy_from_24h_transactions(self, dex_pair) -> None:
        """
        Given: A DEX pair without a holder count
        When: It is normalized
        Then: 24h buys plus sells stand in for holders
        """
        token = normalize(dex_pair(buys_1h=4, sells_1h=2))

        assert token.holders == 60

    def test_explicit_holders_win_over_proxy(self, dex_pair) -> None:
        assert normalize(dex_pair(holders=7)).holders == 7


class TestNormalizeDasAsset:
    """DAS asset records from the RPC provider."""

    def test_das_asset(self) -> None:
        record = {
            "id": "AssetMint111",
            "content": {
                "json_uri": "https://arweave.net/meta.json",
                "metadata": {"name": "Frog", "symbol": "FROG"},
            },
            "authorities": [{"address": "Authority111"}],
            "token_info": {"price_info": {"total_price": 7200.5}},
        }

        token = normalize(record)

        assert token.mint == "AssetMint111"
        assert token.name == "Frog"
        assert token.symbol == "FROG"
        assert token.uri == "https://arweave.net/meta.json"
        assert token.deployer == "Authority111"
        assert token.market_cap == 7200.5


class TestNormalizeAll:
    """Batch normalization."""

    def test_preserves_order(self) -> None:
        tokens = normalize_all([{"mint": "B"}, {"mint": "A"}, {}])

        assert [token.mint for token in tokens] == ["B", "A", "unknown"]

    def test_values_are_finite(self, dex_pair, pumpfun_coin) -> None:
        for token in normalize_all([dex_pair(), pumpfun_coin(), {}]):
            assert math.isfinite(token.market_cap)
            assert token.holders >= 0


class TestNormalizePurity:
    """Normalization is a pure function of the record."""

    def test_same_record_same_token(self, dex_pair, pumpfun_coin) -> None:
        das_asset = {
            "id": "AssetMint111",
            "content": {"metadata": {"name": "Frog", "symbol": "FROG"}},
            "authorities": [{"address": "Authority111"}],
        }
        for record in (dex_pair(), pumpfun_coin(), das_asset, {}, {"mint": "M", "fdv": "bad"}):
            assert normalize(record) == normalize(record)

    def test_record_not_mutated(self, dex_pair) -> None:
        record = dex_pair()
        snapshot = copy.deepcopy(record)

        normalize(record)

        assert record == snapshot
