"""Filter stage: keep tokens meeting every configured threshold."""

import structlog

from deployerhunter.core.timeutil import now_ms
from deployerhunter.models.pipeline import FilterCriteria
from deployerhunter.models.token import Token

log = structlog.get_logger(__name__)


def passes(token: Token, criteria: FilterCriteria, now: int) -> bool:
    """Whether a token meets all thresholds of ``criteria`` at time ``now`` (ms)."""
    if token.holders < criteria.min_holders:
        return False
    if token.market_cap < criteria.min_market_cap:
        return False

    if criteria.strict_bonding_rate:
        if token.bonding_rate <= criteria.min_bonding_rate:
            return False
    elif token.bonding_rate < criteria.min_bonding_rate:
        return False

    if criteria.strict_volume_1h:
        if token.volume_1h <= criteria.min_volume_1h:
            return False
    elif token.volume_1h < criteria.min_volume_1h:
        return False

    if criteria.max_age_ms is not None:
        if token.created_at <= 0 or now - token.created_at > criteria.max_age_ms:
            return False

    return True


def apply_filters(
    tokens: list[Token],
    criteria: FilterCriteria,
    now: int | None = None,
) -> list[Token]:
    """Order-preserving subset of ``tokens`` that passes ``criteria``.

    Tokens with an unknown creation time never pass a recency window.
    """
    now = now_ms() if now is None else now
    kept = [token for token in tokens if passes(token, criteria, now)]
    log.debug("tokens_filtered", before=len(tokens), after=len(kept))
    return kept
