"""
Ranking Schemas

Trade modes and the API response models for ticker rankings.
"""

from enum import Enum
from pydantic import BaseModel, Field


class TradeMode(str, Enum):
    SCALP = "scalp"
    SWING = "swing"


class ComparatorKind(str, Enum):
    SCORE = "score"
    LLM = "llm"


class RankingResponse(BaseModel):
    """Full ranking for a trade mode, best ticker first."""

    mode: TradeMode
    count: int = Field(..., ge=0)
    tickers: list[str]
    cached: bool = False


class TradableResponse(BaseModel):
    """Top-ranked tickers whose market is currently open."""

    mode: TradeMode
    limit: int = Field(..., ge=1)
    count: int = Field(..., ge=0)
    tickers: list[str]


class CacheStats(BaseModel):
    hits: int
    misses: int
    memory_entries: int
    capacity: int
    redis_configured: bool
    degraded: bool
