"""
Ranking Pipeline

One ranking run for a trade mode:
    1. Enumerate the ticker universe
    2. Pre-cache every ticker's preview
    3. Merge-sort the universe with a guarded comparator
    4. Log progress / ETA while sorting
    5. Cache the ranking under <namespace>-sorted-<mode>

A cached ranking short-circuits all of the above until its TTL expires.
The ranking is "locally consistent": with a non-transitive comparator
(e.g. an LLM) the order agrees with every comparison made, but it is not
guaranteed to reflect a single global preference.
"""

import asyncio
import logging
import time
from typing import Callable, Optional

from ranker.schemas.ranking import ComparatorKind, TradeMode
from ranker.services.cache import ResultCache, get_result_cache
from ranker.services.comparators import LLMComparator, ScoreComparator
from ranker.services.comparators.interface import (
    DEFAULT_PREVIEW_TTL,
    PreviewFetcher,
    TickerComparator,
    preview_key,
)
from ranker.services.ranking.adapter import GuardedComparator
from ranker.services.ranking.progress import (
    DEFAULT_LOG_INTERVAL,
    SortProgress,
    format_duration,
)
from ranker.services.sorting import expected_comparisons, merge_sort
from ranker.services.tickers.preview import fetch_ticker_preview
from ranker.services.tickers.universe import get_all_tickers

logger = logging.getLogger(__name__)

DEFAULT_RANKING_TTL = 60 * 60 * 7  # 7 hours


class RankingPipeline:
    """
    Ranks the ticker universe for a trade mode and caches the result.

    Usage:
        pipeline = RankingPipeline(cache, ScoreComparator(cache, fetch_ticker_preview))
        tickers = await pipeline.rank(TradeMode.SCALP)
    """

    def __init__(
        self,
        cache: ResultCache,
        comparator: TickerComparator,
        universe: Callable[[], list[str]] = get_all_tickers,
        preview_fetcher: PreviewFetcher = fetch_ticker_preview,
        namespace: str = "ai-trade",
        ranking_ttl: int = DEFAULT_RANKING_TTL,
        preview_ttl: int = DEFAULT_PREVIEW_TTL,
        precache_concurrency: int = 4,
        log_interval: float = DEFAULT_LOG_INTERVAL,
        concurrent_sort: bool = False,
    ):
        self.cache = cache
        self.comparator = comparator
        self.universe = universe
        self.preview_fetcher = preview_fetcher
        self.namespace = namespace
        self.ranking_ttl = ranking_ttl
        self.preview_ttl = preview_ttl
        self.precache_concurrency = max(1, precache_concurrency)
        self.log_interval = log_interval
        self.concurrent_sort = concurrent_sort

    # ============ Keys ============

    def ranking_key(self, mode: TradeMode) -> str:
        return f"{self.namespace}-sorted-{TradeMode(mode).value}"

    def preview_key(self, ticker: str) -> str:
        return preview_key(self.namespace, ticker)

    # ============ Entry points ============

    async def rank(self, mode: TradeMode) -> list[str]:
        """Get the ranking for a mode, sorting only on a cache miss."""
        mode = TradeMode(mode)
        return await self.cache.get_or_compute(
            self.ranking_key(mode),
            self.ranking_ttl,
            lambda: self.sort(mode),
        )

    async def refresh(self, mode: TradeMode) -> list[str]:
        """Discard the cached ranking and sort again."""
        await self.cache.invalidate(self.ranking_key(mode))
        return await self.rank(mode)

    async def get_cached_ranking(self, mode: TradeMode) -> Optional[list[str]]:
        """Cached ranking, or None without triggering a sort."""
        return await self.cache.get(self.ranking_key(mode))

    # ============ Steps ============

    async def precache_previews(self, tickers: list[str]) -> int:
        """
        Load every ticker's preview into the cache.
        Failures are logged and skipped. Returns the number cached.
        """
        semaphore = asyncio.Semaphore(self.precache_concurrency)

        async def load(ticker: str) -> bool:
            async with semaphore:
                try:
                    await self.cache.get_or_compute(
                        self.preview_key(ticker),
                        self.preview_ttl,
                        lambda: self.preview_fetcher(ticker),
                    )
                    return True
                except Exception as e:
                    logger.warning(f"Could not pre-cache preview for {ticker}: {e}")
                    return False

        logger.info(f"Pre-caching {len(tickers)} ticker previews...")
        results = await asyncio.gather(*(load(t) for t in tickers))
        cached = sum(results)
        logger.info(f"Pre-cached {cached}/{len(tickers)} previews")
        return cached

    async def sort(self, mode: TradeMode) -> list[str]:
        """Run a full sort of the universe (no ranking cache lookup)."""
        mode = TradeMode(mode)
        tickers = list(self.universe())
        await self.precache_previews(tickers)

        total = expected_comparisons(len(tickers))
        logger.info(
            f"[sorting {len(tickers)} tickers for <{mode.value}> trading] "
            f"{total} comparisons expected ({self.comparator.name})"
        )

        progress = SortProgress(total, log_interval=self.log_interval)
        guarded = GuardedComparator(self.comparator, mode, progress)

        started = time.monotonic()
        ranked = await merge_sort(tickers, guarded, concurrent=self.concurrent_sort)

        logger.info(
            f"Sorted {len(ranked)} tickers for <{mode.value}> in "
            f"{format_duration(time.monotonic() - started)} "
            f"({guarded.comparisons} comparisons, {guarded.failures} failed)"
        )
        return ranked


def build_comparator(kind: str, cache: ResultCache) -> TickerComparator:
    """Comparator for a ComparatorKind value ("score" or "llm")."""
    from ranker.core.config import settings

    kind = ComparatorKind(kind)
    if kind == ComparatorKind.LLM:
        return LLMComparator(
            cache,
            fetch_ticker_preview,
            namespace=settings.cache_namespace,
            preview_ttl=settings.preview_ttl_seconds,
            response_ttl=settings.llm_response_ttl_seconds,
        )
    return ScoreComparator(
        cache,
        fetch_ticker_preview,
        namespace=settings.cache_namespace,
        preview_ttl=settings.preview_ttl_seconds,
    )


def build_ranking_pipeline(
    cache: ResultCache,
    comparator_kind: Optional[str] = None,
) -> RankingPipeline:
    """Pipeline configured from application settings."""
    from ranker.core.config import settings

    comparator = build_comparator(comparator_kind or settings.default_comparator, cache)
    return RankingPipeline(
        cache,
        comparator,
        namespace=settings.cache_namespace,
        ranking_ttl=settings.ranking_ttl_seconds,
        preview_ttl=settings.preview_ttl_seconds,
        precache_concurrency=settings.precache_concurrency,
        log_interval=settings.progress_log_interval_seconds,
    )


# Singleton instance management
_ranking_pipeline: Optional[RankingPipeline] = None


def get_ranking_pipeline() -> RankingPipeline:
    """Get or create the process-wide ranking pipeline."""
    global _ranking_pipeline
    if _ranking_pipeline is None:
        _ranking_pipeline = build_ranking_pipeline(get_result_cache())
    return _ranking_pipeline
