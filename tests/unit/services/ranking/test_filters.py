"""Tests for the filter stage."""

import pytest

from deployerhunter.models.pipeline import FilterCriteria
from deployerhunter.services.ranking.filters import apply_filters, passes

NOW = 1_700_000_000_000

DEFAULT_VIEW = FilterCriteria(
    min_holders=15,
    min_market_cap=6000,
    min_bonding_rate=50,
    strict_bonding_rate=True,
)


class TestThresholds:
    """Inclusive thresholds and strict flags."""

    def test_all_thresholds_met(self, make_token) -> None:
        token = make_token(holders=15, market_cap=6000, bonding_rate=50.5)

        assert passes(token, DEFAULT_VIEW, NOW) is True

    @pytest.mark.parametrize(
        ("field", "value"),
        [("holders", 14), ("market_cap", 5999.99), ("bonding_rate", 50.0)],
    )
    def test_each_threshold_rejects(self, make_token, field: str, value: float) -> None:
        fields = {"holders": 100, "market_cap": 10000, "bonding_rate": 60.0, field: value}

        assert passes(make_token(**fields), DEFAULT_VIEW, NOW) is False

    def test_inclusive_bonding_rate(self, make_token) -> None:
        criteria = FilterCriteria(min_bonding_rate=50)

        assert passes(make_token(bonding_rate=50.0), criteria, NOW) is True

    def test_strict_volume(self, make_token) -> None:
        """
        Given: Criteria requiring strictly positive 1h volume
        When: Tokens with zero and positive volume are checked
        Then: Only the active token passes
        """
        criteria = FilterCriteria(min_volume_1h=0, strict_volume_1h=True)

        assert passes(make_token(volume_1h=0.0), criteria, NOW) is False
        assert passes(make_token(volume_1h=0.01), criteria, NOW) is True

    def test_empty_criteria_pass_everything(self, make_token) -> None:
        assert passes(make_token(), FilterCriteria(), NOW) is True


class TestRecencyWindow:
    """max_age_ms behaviour."""

    def test_young_token_passes(self, make_token) -> None:
        criteria = FilterCriteria(max_age_ms=60_000)

        assert passes(make_token(created_at=NOW - 59_000), criteria, NOW) is True

    def test_old_token_rejected(self, make_token) -> None:
        criteria = FilterCriteria(max_age_ms=60_000)

        assert passes(make_token(created_at=NOW - 61_000), criteria, NOW) is False

    def test_unknown_creation_time_rejected(self, make_token) -> None:
        criteria = FilterCriteria(max_age_ms=60_000)

        assert passes(make_token(created_at=0), criteria, NOW) is False

    def test_unknown_creation_time_ok_without_window(self, make_token) -> None:
        assert passes(make_token(created_at=0), FilterCriteria(), NOW) is True


class TestApplyFilters:
    """Order-preserving subset."""

    def test_subset_in_order(self, make_token) -> None:
        tokens = [
            make_token("A", holders=20, market_cap=7000, bonding_rate=60),
            make_token("B", holders=2, market_cap=7000, bonding_rate=60),
            make_token("C", holders=30, market_cap=9000, bonding_rate=70),
        ]

        kept = apply_filters(tokens, DEFAULT_VIEW, now=NOW)

        assert [token.mint for token in kept] == ["A", "C"]
        assert all(token in tokens for token in kept)

    def test_empty_input(self) -> None:
        assert apply_filters([], DEFAULT_VIEW) == []
