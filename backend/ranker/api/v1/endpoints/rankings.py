"""
Ranking API Endpoints

Ticker rankings per trade mode and the tradable short-list.
"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Query

from ranker.core.config import settings
from ranker.schemas.ranking import RankingResponse, TradableResponse, TradeMode
from ranker.services.base import ServiceError
from ranker.services.ranking import (
    RankingPipeline,
    filter_tradable_tickers,
    get_ranking_pipeline,
    is_market_open,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def get_tradability_check():
    """Tradability oracle; overridden in tests."""
    return is_market_open


@router.get("/{mode}", response_model=RankingResponse)
async def get_ranking(
    mode: TradeMode,
    pipeline: RankingPipeline = Depends(get_ranking_pipeline),
):
    """
    Get the full ranking for a trade mode, best ticker first.

    Served from cache when available; otherwise the universe is sorted,
    which can take a long time with the LLM comparator.
    """
    try:
        cached = await pipeline.get_cached_ranking(mode)
        tickers = cached if cached is not None else await pipeline.rank(mode)
    except ServiceError as e:
        logger.error(f"Ranking failed for {mode.value}: {e}")
        raise HTTPException(status_code=502, detail=str(e))

    return RankingResponse(
        mode=mode,
        count=len(tickers),
        tickers=tickers,
        cached=cached is not None,
    )


@router.post("/{mode}/refresh", response_model=RankingResponse)
async def refresh_ranking(
    mode: TradeMode,
    pipeline: RankingPipeline = Depends(get_ranking_pipeline),
):
    """Discard the cached ranking for a mode and sort again."""
    try:
        tickers = await pipeline.refresh(mode)
    except ServiceError as e:
        logger.error(f"Ranking refresh failed for {mode.value}: {e}")
        raise HTTPException(status_code=502, detail=str(e))

    return RankingResponse(mode=mode, count=len(tickers), tickers=tickers, cached=False)


@router.get("/{mode}/tradable", response_model=TradableResponse)
async def get_tradable_tickers(
    mode: TradeMode,
    limit: int = Query(settings.tradable_limit, ge=1, le=100, description="Max tickers"),
    pipeline: RankingPipeline = Depends(get_ranking_pipeline),
    is_tradable=Depends(get_tradability_check),
):
    """
    Top-ranked tickers whose market is currently open.

    Example: `/rankings/scalp/tradable?limit=7`
    """
    try:
        ranked = await pipeline.rank(mode)
        tickers = await filter_tradable_tickers(ranked, limit, is_tradable)
    except ServiceError as e:
        logger.error(f"Tradable list failed for {mode.value}: {e}")
        raise HTTPException(status_code=502, detail=str(e))

    return TradableResponse(mode=mode, limit=limit, count=len(tickers), tickers=tickers)
