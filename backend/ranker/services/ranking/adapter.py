"""
Guarded Comparator

Adapts a TickerComparator to the merge sort's comparator signature and turns
comparator errors into a verdict, so a failed comparison never aborts a sort.

Blame rule:
    error mentions ticker_a → ticker_b preferred (1)
    error mentions ticker_b → ticker_a preferred (-1)
    otherwise               → equal (0), logged as an anomaly
"""

import logging
import re
from typing import Callable, Optional

from ranker.schemas.ranking import TradeMode
from ranker.services.comparators.interface import TickerComparator
from ranker.services.ranking.progress import SortProgress
from ranker.services.tickers.universe import map_symbol

logger = logging.getLogger(__name__)


def _names_symbol(message: str, symbol: str) -> bool:
    # Whole symbol only; "T" must not match inside "BTC-USD" or "Timeout"
    return re.search(rf"(?<![\w.=-]){re.escape(symbol)}(?![\w=-]|\.\w)", message) is not None


def _mentions(message: str, ticker: str, symbol_mapper: Callable[[str], str]) -> bool:
    return _names_symbol(message, ticker) or _names_symbol(message, symbol_mapper(ticker))


def resolve_comparison_error(
    error: Exception,
    ticker_a: str,
    ticker_b: str,
    symbol_mapper: Callable[[str], str] = map_symbol,
) -> int:
    """Verdict for a comparison that raised."""
    message = str(error)
    if _mentions(message, ticker_a, symbol_mapper):
        return 1
    if _mentions(message, ticker_b, symbol_mapper):
        return -1
    logger.error(f"Comparison {ticker_a} vs {ticker_b} failed: {error!r}")
    return 0


class GuardedComparator:
    """Callable (ticker_a, ticker_b) -> int for merge_sort()."""

    def __init__(
        self,
        oracle: TickerComparator,
        mode: TradeMode,
        progress: Optional[SortProgress] = None,
        symbol_mapper: Callable[[str], str] = map_symbol,
    ):
        self.oracle = oracle
        self.mode = mode
        self.progress = progress
        self.symbol_mapper = symbol_mapper
        self.comparisons = 0
        self.failures = 0

    async def __call__(self, ticker_a: str, ticker_b: str) -> int:
        self.comparisons += 1
        if self.progress is not None:
            self.progress.record()

        try:
            return await self.oracle.compare(ticker_a, ticker_b, self.mode)
        except Exception as e:
            self.failures += 1
            return resolve_comparison_error(e, ticker_a, ticker_b, self.symbol_mapper)
