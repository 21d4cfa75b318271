"""
Ranking

Sorts the ticker universe per trade mode, caches the result and narrows it
to currently tradable tickers.
"""

from ranker.services.ranking.adapter import GuardedComparator, resolve_comparison_error
from ranker.services.ranking.pipeline import (
    RankingPipeline,
    build_ranking_pipeline,
    get_ranking_pipeline,
)
from ranker.services.ranking.progress import SortProgress, format_duration
from ranker.services.ranking.tradable import (
    filter_tradable_tickers,
    get_tickers_for_trading,
    is_market_open,
)

__all__ = [
    "GuardedComparator",
    "resolve_comparison_error",
    "RankingPipeline",
    "build_ranking_pipeline",
    "get_ranking_pipeline",
    "SortProgress",
    "format_duration",
    "filter_tradable_tickers",
    "get_tickers_for_trading",
    "is_market_open",
]
