"""
Tradable-Set Filter

Narrows a ranking to tickers whose market is currently open.
"""

import logging
from typing import Awaitable, Callable, Optional

from ranker.schemas.ranking import TradeMode
from ranker.services.cache import ResultCache, get_result_cache
from ranker.services.ranking.pipeline import RankingPipeline
from ranker.services.tickers.preview import fetch_market_state

logger = logging.getLogger(__name__)

TradabilityCheck = Callable[[str], Awaitable[bool]]

# Share of a large tradable list handed to trading
TRADING_KEEP_RATIO = 0.47

# Cached when Yahoo reports no state, so the miss is not refetched each time
UNKNOWN_STATE = "unknown"


def market_state_key(namespace: str, ticker: str) -> str:
    """Cache key for a ticker's market state."""
    return f"{namespace}-market-state-{ticker}"


async def is_market_open(
    ticker: str,
    cache: Optional[ResultCache] = None,
    namespace: Optional[str] = None,
    ttl: Optional[int] = None,
) -> bool:
    """
    True when Yahoo reports the ticker's regular session as open.
    The state is cached for a few minutes.
    """
    from ranker.core.config import settings

    cache = cache or get_result_cache()
    namespace = namespace or settings.cache_namespace
    ttl = ttl or settings.market_state_ttl_seconds

    async def fetch() -> str:
        return await fetch_market_state(ticker) or UNKNOWN_STATE

    state = await cache.get_or_compute(market_state_key(namespace, ticker), ttl, fetch)
    return state == "regular"


async def filter_tradable_tickers(
    tickers: list[str],
    limit: int,
    is_tradable: TradabilityCheck = is_market_open,
) -> list[str]:
    """
    Walk tickers in rank order and collect the first `limit` tradable ones.

    Tickers whose check raises are skipped. May return fewer than `limit`.
    """
    tradable: list[str] = []
    if limit <= 0:
        return tradable

    for ticker in tickers:
        try:
            if await is_tradable(ticker):
                tradable.append(ticker)
                if len(tradable) >= limit:
                    break
        except Exception as e:
            logger.debug(f"Tradability check failed for {ticker}: {e}")

    return tradable


async def get_tickers_for_trading(
    pipeline: RankingPipeline,
    mode: TradeMode,
    limit: int = 100,
    is_tradable: TradabilityCheck = is_market_open,
    keep_ratio: float = TRADING_KEEP_RATIO,
) -> list[str]:
    """
    Ranked, tradable tickers ready for trade decisions.

    When `limit` tickers are tradable only the top `keep_ratio` share is
    kept; shorter lists are returned whole.
    """
    mode = TradeMode(mode)
    ranked = await pipeline.rank(mode)
    tickers = await filter_tradable_tickers(ranked, limit, is_tradable)

    if len(tickers) >= limit:
        tickers = tickers[: int(len(tickers) * keep_ratio)]

    logger.info(f"[{mode.value}]: {len(tickers)} tickers ready for trading => {tickers}")
    return tickers
