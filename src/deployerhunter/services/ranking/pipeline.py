"""Ranking pipeline.

Full flow: Fetch -> Normalize -> Enrich -> Filter -> Rank

One class covers every data source; the upstream is an injected
SourceFetcher and every threshold, sort key and fallback is configuration.
"""

import time

import structlog

from deployerhunter.core.exceptions import PipelineError
from deployerhunter.models.pipeline import (
    EmptyFilterPolicy,
    FilterCriteria,
    PipelineResult,
    SortKey,
    TrendingWeights,
)
from deployerhunter.models.token import Token
from deployerhunter.services.ranking.enricher import (
    MarketDataEnricher,
    ReputationEnricher,
    enrich_tokens,
)
from deployerhunter.services.ranking.filters import apply_filters
from deployerhunter.services.ranking.normalizer import normalize_all
from deployerhunter.services.ranking.ranker import rank_tokens
from deployerhunter.services.ranking.sources import SourceFetcher

logger = structlog.get_logger(__name__)


class RankingPipeline:
    """Fetch-filter-rank pipeline for one view.

    Args:
        source: Active upstream.
        enricher: Deployer reputation model, None to skip reputation.
        criteria: Filter thresholds.
        sort_key: Ranked scalar.
        top_n: Size of the ranked list.
        on_empty_filter: Result when nothing passes the filters.
        market_enricher: Optional slow per-token lookups, run before reputation.
        reputation_limit: Optional cap on tokens whose deployer is looked up.
        weights: Trending score weights.
        name: View name used in logs.
    """

    def __init__(
        self,
        source: SourceFetcher,
        enricher: ReputationEnricher | None,
        criteria: FilterCriteria,
        sort_key: SortKey,
        top_n: int,
        on_empty_filter: EmptyFilterPolicy = EmptyFilterPolicy.EMPTY,
        market_enricher: MarketDataEnricher | None = None,
        reputation_limit: int | None = None,
        weights: TrendingWeights | None = None,
        name: str = "default",
    ) -> None:
        self.source = source
        self.enricher = enricher
        self.criteria = criteria
        self.sort_key = sort_key
        self.top_n = top_n
        self.on_empty_filter = on_empty_filter
        self.market_enricher = market_enricher
        self.reputation_limit = reputation_limit
        self.weights = weights
        self.name = name

    async def run(self) -> PipelineResult:
        """Run the pipeline once.

        Returns:
            PipelineResult with the ranked tokens, or ``success=False`` and
            no tokens if any stage raised.
        """
        start_time = time.perf_counter()
        try:
            tokens = await self._run_stages()
        except Exception as e:
            logger.error(
                "pipeline_failed",
                view=self.name,
                source=self.source.name,
                error=str(e),
                exc_info=True,
            )
            return PipelineResult(success=False, tokens=[], error=str(e))

        logger.info(
            "pipeline_completed",
            view=self.name,
            source=self.source.name,
            ranked=len(tokens),
            duration_ms=round((time.perf_counter() - start_time) * 1000, 1),
        )
        return PipelineResult(success=True, tokens=tokens)

    async def _run_stages(self) -> list[Token]:
        records = await self.source.fetch()
        if not isinstance(records, list):
            raise PipelineError(
                f"{self.source.name} returned {type(records).__name__}, expected list",
                view=self.name,
            )
        logger.debug("pipeline_fetched", view=self.name, records=len(records))
        if not records:
            return []

        tokens = normalize_all(records)

        if self.market_enricher is not None:
            tokens = await self.market_enricher.enrich(tokens)
        if self.enricher is not None:
            tokens = await enrich_tokens(tokens, self.enricher, limit=self.reputation_limit)

        filtered = apply_filters(tokens, self.criteria)
        if not filtered:
            if self.on_empty_filter == EmptyFilterPolicy.FALLBACK_TOP_N:
                logger.info("pipeline_filter_fallback", view=self.name, candidates=len(tokens))
                return rank_tokens(tokens, SortKey.HOLDERS, self.top_n, self.weights)
            logger.info("pipeline_no_qualifying_tokens", view=self.name, candidates=len(tokens))
            return []

        return rank_tokens(filtered, self.sort_key, self.top_n, self.weights)

    async def close(self) -> None:
        """Close upstream clients."""
        await self.source.close()
        if self.enricher is not None:
            await self.enricher.close()
        if self.market_enricher is not None:
            await self.market_enricher.close()
