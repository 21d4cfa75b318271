"""
Ticker Ranker Schema Contracts

JSON contracts between the ranking services and the API.
"""

from ranker.schemas.ranking import (
    TradeMode,
    ComparatorKind,
    RankingResponse,
    TradableResponse,
    CacheStats,
)

__all__ = [
    "TradeMode",
    "ComparatorKind",
    "RankingResponse",
    "TradableResponse",
    "CacheStats",
]
