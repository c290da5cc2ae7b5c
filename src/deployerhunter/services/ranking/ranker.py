"""Ranker: sort descending by one scalar, truncate, assign dense ranks."""

import math
from collections.abc import Callable

from deployerhunter.models.pipeline import SortKey, TrendingWeights
from deployerhunter.models.token import Token


def trending_score(token: Token, weights: TrendingWeights | None = None) -> float:
    """Composite recent-attention score of a token.

    ``|priceChange1h| * W1 + txns1h / W2 + ln(volume1h + 1) * W3``, plus a
    flat bonus when 1h buys outnumber sells.
    """
    weights = weights or TrendingWeights()
    score = abs(token.price_change_1h) * weights.price_change
    score += token.txns_1h / weights.txns_divisor
    score += math.log(max(token.volume_1h, 0.0) + 1) * weights.volume
    if token.buys_1h > token.sells_1h:
        score += weights.buy_pressure_bonus
    return score


def sort_value(sort_key: SortKey, weights: TrendingWeights | None = None) -> Callable[[Token], float]:
    """Key function extracting the ranked scalar from a token."""
    if sort_key == SortKey.TRENDING_SCORE:
        return lambda token: trending_score(token, weights)
    field = sort_key.value
    return lambda token: float(getattr(token, field))


def rank_tokens(
    tokens: list[Token],
    sort_key: SortKey,
    top_n: int,
    weights: TrendingWeights | None = None,
) -> list[Token]:
    """Top ``top_n`` tokens by ``sort_key`` with ranks ``1..len(result)``.

    Ties on the sort value are broken by mint, ascending. A mint listed
    more than once (several DEX pairs of one token) keeps its best entry.
    """
    value = sort_value(sort_key, weights)
    ordered = sorted(tokens, key=lambda token: token.mint)
    ordered.sort(key=value, reverse=True)

    seen: set[str] = set()
    unique = []
    for token in ordered:
        if token.mint not in seen:
            seen.add(token.mint)
            unique.append(token)

    return [
        token.model_copy(update={"rank": index + 1})
        for index, token in enumerate(unique[: max(0, top_n)])
    ]
