"""Pipeline configuration and result models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from deployerhunter.models.token import Token


class TokenView(str, Enum):
    """Logical views served by the dashboard, each with its own cache slot."""

    DEFAULT = "default"
    TRENDING = "trending"
    VOLUME = "volume"


class SortKey(str, Enum):
    """Scalar fields the ranker can sort by."""

    HOLDERS = "holders"
    BONDING_RATE = "bonding_rate"
    MARKET_CAP = "market_cap"
    VOLUME_1H = "volume_1h"
    TRENDING_SCORE = "trending_score"


class EmptyFilterPolicy(str, Enum):
    """What the pipeline returns when no token passes the filters."""

    EMPTY = "empty"
    FALLBACK_TOP_N = "fallback_top_n"


class FilterCriteria(BaseModel):
    """Conjunction of numeric thresholds a token must meet.

    All thresholds are inclusive, except the bonding rate when
    ``strict_bonding_rate`` is set. ``max_age_ms=None`` disables the
    recency window.
    """

    model_config = ConfigDict(frozen=True)

    min_holders: int = Field(default=0, ge=0)
    min_market_cap: float = Field(default=0.0, ge=0)
    min_bonding_rate: float = Field(default=0.0, ge=0, le=100)
    strict_bonding_rate: bool = False
    min_volume_1h: float = Field(default=0.0, ge=0)
    strict_volume_1h: bool = False
    max_age_ms: int | None = Field(default=None, ge=0)


class TrendingWeights(BaseModel):
    """Weights of the composite trending score."""

    model_config = ConfigDict(frozen=True)

    price_change: float = 3.0
    txns_divisor: float = Field(default=5.0, gt=0)
    volume: float = 1.5
    buy_pressure_bonus: float = 10.0


class PipelineResult(BaseModel):
    """Outcome of one ranking pipeline run."""

    success: bool
    tokens: list[Token] = Field(default_factory=list)
    error: str | None = None


class ViewResult(BaseModel):
    """Ranked tokens of one view with cache timing, in epoch milliseconds."""

    view: TokenView
    success: bool
    tokens: list[Token] = Field(default_factory=list)
    last_updated: int = 0
    next_update: int = 0
    error: str | None = None
