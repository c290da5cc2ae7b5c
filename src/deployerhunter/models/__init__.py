"""Domain models."""

from deployerhunter.models.pipeline import (
    EmptyFilterPolicy,
    FilterCriteria,
    PipelineResult,
    SortKey,
    TokenView,
    TrendingWeights,
    ViewResult,
)
from deployerhunter.models.token import CacheEntry, DeployerStats, Token, TrendingToken

__all__ = [
    "CacheEntry",
    "DeployerStats",
    "EmptyFilterPolicy",
    "FilterCriteria",
    "PipelineResult",
    "SortKey",
    "Token",
    "TokenView",
    "TrendingToken",
    "TrendingWeights",
    "ViewResult",
]
