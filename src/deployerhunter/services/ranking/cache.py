"""Single-slot in-memory result cache with a TTL and single-flight refresh."""

import asyncio
from collections.abc import Awaitable, Callable

import structlog

from deployerhunter.core.timeutil import now_ms
from deployerhunter.models.token import CacheEntry

logger = structlog.get_logger(__name__)


class ResultCache:
    """Holds the last ranked list of one view.

    One instance per view. The entry is replaced wholesale on refresh and
    lives for the process lifetime only.
    """

    def __init__(self, ttl_seconds: int, name: str = "default") -> None:
        """Initialize result cache.

        Args:
            ttl_seconds: Time-to-live of a stored entry
            name: View name used in logs
        """
        self.ttl_ms = ttl_seconds * 1000
        self.name = name
        self._entry: CacheEntry | None = None
        self._lock = asyncio.Lock()
        self._hits = 0
        self._misses = 0

    def get(self) -> CacheEntry | None:
        """Return the stored entry, fresh or not."""
        return self._entry

    def set(self, entry: CacheEntry) -> None:
        """Replace the stored entry."""
        self._entry = entry

    def clear(self) -> None:
        """Drop the stored entry."""
        self._entry = None

    def is_fresh(self, ttl_ms: int | None = None, now: int | None = None) -> bool:
        """Whether an entry exists and ``now - fetched_at < ttl``."""
        if self._entry is None:
            return False
        ttl_ms = self.ttl_ms if ttl_ms is None else ttl_ms
        now = now_ms() if now is None else now
        return now - self._entry.fetched_at_ms < ttl_ms

    async def get_or_compute(
        self,
        compute: Callable[[], Awaitable[CacheEntry | None]],
    ) -> CacheEntry | None:
        """Return the fresh entry, or compute and store a new one.

        The check-compute-store sequence runs under a lock, so concurrent
        callers on a stale slot trigger a single computation and then share
        its result. ``compute`` returning None means the run failed: nothing
        is stored and None is returned.
        """
        if self.is_fresh():
            self._hits += 1
            return self._entry

        async with self._lock:
            if self.is_fresh():
                self._hits += 1
                logger.debug("result_cache_refreshed_by_peer", view=self.name)
                return self._entry

            self._misses += 1
            logger.info("result_cache_stale", view=self.name)
            entry = await compute()
            if entry is not None:
                self._entry = entry
                logger.info("result_cache_updated", view=self.name, tokens=len(entry.tokens))
            return entry

    def get_stats(self) -> dict:
        """Get cache statistics.

        Returns:
            dict with cache stats
        """
        entry = self._entry
        return {
            "cached": entry is not None,
            "size": len(entry.tokens) if entry else 0,
            "last_updated": entry.fetched_at_ms if entry else None,
            "ttl_seconds": self.ttl_ms // 1000,
            "hits": self._hits,
            "misses": self._misses,
        }
