"""
Tickers

Ranking universe, Yahoo Finance symbol mapping and preview data.
"""

from ranker.services.tickers.universe import (
    SYMBOLS,
    get_all_tickers,
    get_asset_class,
    map_symbol,
)
from ranker.services.tickers.preview import (
    fetch_ticker_preview,
    fetch_market_state,
    build_preview,
)

__all__ = [
    "SYMBOLS",
    "get_all_tickers",
    "get_asset_class",
    "map_symbol",
    "fetch_ticker_preview",
    "fetch_market_state",
    "build_preview",
]
