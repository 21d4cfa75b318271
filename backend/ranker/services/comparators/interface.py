"""
Ticker Comparator Interface

CONTRACT:
    Input:  ticker_a, ticker_b, TradeMode
    Output: -1 (ticker_a better), 0 (equal), 1 (ticker_b better)

Comparators may be slow and may raise. They must not keep state between
calls other than caches. Errors are handled by the caller
(ranker.services.ranking.adapter.GuardedComparator), not here.
"""

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable

from ranker.schemas.ranking import TradeMode
from ranker.services.cache import ResultCache

PreviewFetcher = Callable[[str], Awaitable[dict[str, Any]]]

DEFAULT_PREVIEW_TTL = 60 * 60 * 24  # 1 day


def preview_key(namespace: str, ticker: str) -> str:
    """Cache key for a ticker's preview data."""
    return f"{namespace}-preview-{ticker}"


class TickerComparator(ABC):
    """Pairwise judge of trade suitability."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Comparator name for logging."""
        pass

    @abstractmethod
    async def compare(self, ticker_a: str, ticker_b: str, mode: TradeMode) -> int:
        """Return -1, 0 or 1; negative means ticker_a ranks first."""
        pass


class PreviewComparator(TickerComparator):
    """Base for comparators that judge cached ticker previews."""

    def __init__(
        self,
        cache: ResultCache,
        preview_fetcher: PreviewFetcher,
        namespace: str = "ai-trade",
        preview_ttl: int = DEFAULT_PREVIEW_TTL,
    ):
        self.cache = cache
        self.preview_fetcher = preview_fetcher
        self.namespace = namespace
        self.preview_ttl = preview_ttl

    async def load_preview(self, ticker: str) -> dict[str, Any]:
        """Preview for a ticker, fetched only on a cache miss."""
        return await self.cache.get_or_compute(
            preview_key(self.namespace, ticker),
            self.preview_ttl,
            lambda: self.preview_fetcher(ticker),
        )
