"""Token board: the three dashboard views, each with a pipeline and cache slot."""

import structlog

from deployerhunter.config.settings import Settings, get_settings
from deployerhunter.core.timeutil import now_ms
from deployerhunter.models.pipeline import (
    EmptyFilterPolicy,
    FilterCriteria,
    SortKey,
    TokenView,
    TrendingWeights,
    ViewResult,
)
from deployerhunter.models.token import CacheEntry
from deployerhunter.services.dexscreener.client import DexScreenerClient
from deployerhunter.services.pumpfun.client import PumpFunClient
from deployerhunter.services.ranking.cache import ResultCache
from deployerhunter.services.ranking.enricher import (
    LiveReputationEnricher,
    MarketDataEnricher,
    ReputationEnricher,
    SyntheticReputationEnricher,
)
from deployerhunter.services.ranking.pipeline import RankingPipeline
from deployerhunter.services.ranking.sources import DexSearchSourceFetcher, build_source_fetcher
from deployerhunter.services.solana.rpc_client import SolanaRPCClient

logger = structlog.get_logger(__name__)


class TokenBoard:
    """Serves ranked token lists per view from cache, recomputing when stale."""

    def __init__(
        self,
        pipelines: dict[TokenView, RankingPipeline],
        caches: dict[TokenView, ResultCache],
    ) -> None:
        self.pipelines = pipelines
        self.caches = caches
        self._last_errors: dict[TokenView, str] = {}

    async def get_view(self, view: TokenView = TokenView.DEFAULT) -> ViewResult:
        """Ranked tokens of a view, from cache while fresh.

        A failed pipeline run is not cached and is reported with
        ``success=False`` and no tokens.
        """
        pipeline = self.pipelines[view]
        cache = self.caches[view]
        error: str | None = None

        async def _compute() -> CacheEntry | None:
            nonlocal error
            result = await pipeline.run()
            if not result.success:
                error = result.error
                return None
            return CacheEntry(tokens=result.tokens, fetched_at_ms=now_ms())

        entry = await cache.get_or_compute(_compute)
        if entry is None:
            self._last_errors[view] = error or "pipeline failed"
            return ViewResult(view=view, success=False, error=self._last_errors[view])

        self._last_errors.pop(view, None)
        return ViewResult(
            view=view,
            success=True,
            tokens=list(entry.tokens),
            last_updated=entry.fetched_at_ms,
            next_update=entry.fetched_at_ms + cache.ttl_ms,
        )

    def cached_view(self, view: TokenView = TokenView.DEFAULT) -> ViewResult | None:
        """Last known state of a view without recomputing it.

        None until the view has been computed once. After a failed run the
        result is unsuccessful and keeps the timestamp of the last good entry.
        """
        cache = self.caches[view]
        entry = cache.get()
        error = self._last_errors.get(view)
        if error is not None:
            return ViewResult(
                view=view,
                success=False,
                last_updated=entry.fetched_at_ms if entry else 0,
                error=error,
            )
        if entry is None:
            return None
        return ViewResult(
            view=view,
            success=True,
            tokens=list(entry.tokens),
            last_updated=entry.fetched_at_ms,
            next_update=entry.fetched_at_ms + cache.ttl_ms,
        )

    def get_stats(self) -> dict[str, dict]:
        """Cache statistics keyed by view name."""
        return {view.value: cache.get_stats() for view, cache in self.caches.items()}

    async def close(self) -> None:
        """Close all pipelines."""
        for pipeline in self.pipelines.values():
            await pipeline.close()


def _reputation_enricher(settings: Settings) -> ReputationEnricher:
    if settings.reputation_mode == "live":
        return LiveReputationEnricher(PumpFunClient(), delay_ms=settings.enrichment_delay_ms)
    return SyntheticReputationEnricher()


def _market_enricher(settings: Settings) -> MarketDataEnricher | None:
    if not settings.market_enrichment_enabled:
        return None
    return MarketDataEnricher(
        rpc_client=SolanaRPCClient() if settings.has_helius_key else None,
        dex_client=DexScreenerClient(),
        limit=settings.enrichment_limit,
        delay_ms=settings.enrichment_delay_ms,
    )


def build_token_board(settings: Settings) -> TokenBoard:
    """Wire the default, trending and volume views from settings."""
    weights = TrendingWeights(
        price_change=settings.trending_price_change_weight,
        txns_divisor=settings.trending_txns_divisor,
        volume=settings.trending_volume_weight,
        buy_pressure_bonus=settings.trending_buy_pressure_bonus,
    )
    max_age_ms = (
        settings.max_token_age_minutes * 60_000
        if settings.max_token_age_minutes is not None
        else None
    )
    live = settings.reputation_mode == "live"
    active_volume = FilterCriteria(min_volume_1h=0, strict_volume_1h=True)

    pipelines = {
        TokenView.DEFAULT: RankingPipeline(
            source=build_source_fetcher(settings),
            enricher=_reputation_enricher(settings),
            criteria=FilterCriteria(
                min_holders=settings.min_holders,
                min_market_cap=settings.min_market_cap,
                min_bonding_rate=settings.min_bonding_rate,
                strict_bonding_rate=True,
                max_age_ms=max_age_ms,
            ),
            sort_key=SortKey.HOLDERS,
            top_n=settings.default_top_n,
            on_empty_filter=EmptyFilterPolicy(settings.on_empty_filter),
            market_enricher=_market_enricher(settings),
            reputation_limit=settings.enrichment_limit if live else None,
            weights=weights,
            name=TokenView.DEFAULT.value,
        ),
        TokenView.TRENDING: RankingPipeline(
            source=DexSearchSourceFetcher(
                DexScreenerClient(), query=settings.dexscreener_search_query
            ),
            enricher=None,
            criteria=active_volume,
            sort_key=SortKey.TRENDING_SCORE,
            top_n=settings.trending_top_n,
            weights=weights,
            name=TokenView.TRENDING.value,
        ),
        TokenView.VOLUME: RankingPipeline(
            source=DexSearchSourceFetcher(
                DexScreenerClient(), query=settings.dexscreener_search_query
            ),
            enricher=None,
            criteria=active_volume,
            sort_key=SortKey.VOLUME_1H,
            top_n=settings.volume_top_n,
            weights=weights,
            name=TokenView.VOLUME.value,
        ),
    }
    caches = {
        TokenView.DEFAULT: ResultCache(settings.default_cache_ttl_seconds, "default"),
        TokenView.TRENDING: ResultCache(settings.trending_cache_ttl_seconds, "trending"),
        TokenView.VOLUME: ResultCache(settings.volume_cache_ttl_seconds, "volume"),
    }
    logger.info("token_board_built", source=settings.token_source, reputation=settings.reputation_mode)
    return TokenBoard(pipelines, caches)


# Singleton instance
_token_board: TokenBoard | None = None


def get_token_board() -> TokenBoard:
    """Get or create token board singleton."""
    global _token_board

    if _token_board is None:
        _token_board = build_token_board(get_settings())

    return _token_board


async def reset_token_board() -> None:
    """Reset token board singleton (for testing and shutdown)."""
    global _token_board
    if _token_board:
        await _token_board.close()
    _token_board = None
