"""
Re-sort the ticker universe and cache the rankings.
Run with: python sort_tickers.py --mode all --comparator score
"""

import argparse
import asyncio
import logging
import os
import sys
from typing import Optional, Sequence

# Set working directory to backend folder
backend_dir = os.path.dirname(os.path.abspath(__file__))
os.chdir(backend_dir)
sys.path.insert(0, backend_dir)

# Load environment variables from .env
from dotenv import load_dotenv
load_dotenv(os.path.join(backend_dir, ".env"))

from ranker.core.config import settings
from ranker.schemas.ranking import ComparatorKind, TradeMode
from ranker.services.cache import ResultCache, close_redis, init_redis
from ranker.services.ranking import build_ranking_pipeline

logger = logging.getLogger("sort_tickers")


def parse_args(args: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Rank tickers for trading and cache the result.")
    parser.add_argument(
        "--mode",
        choices=[m.value for m in TradeMode] + ["all"],
        default="all",
        help="Trade mode to rank (default: all)",
    )
    parser.add_argument(
        "--comparator",
        choices=[c.value for c in ComparatorKind],
        default=settings.default_comparator,
        help=f"Comparator to sort with (default: {settings.default_comparator})",
    )
    parser.add_argument("--print", action="store_true", dest="print_result", help="Print the rankings")
    return parser.parse_args(args)


async def run(args: argparse.Namespace) -> int:
    modes = list(TradeMode) if args.mode == "all" else [TradeMode(args.mode)]

    redis_client = await init_redis(settings.redis_url)
    cache = ResultCache(
        redis_client=redis_client,
        capacity=settings.cache_capacity,
        degraded_cooldown=settings.cache_degraded_cooldown_seconds,
    )
    pipeline = build_ranking_pipeline(cache, args.comparator)

    try:
        for mode in modes:
            tickers = await pipeline.refresh(mode)
            logger.info(f"Cached {len(tickers)} tickers under {pipeline.ranking_key(mode)}")
            if args.print_result:
                print(f"\n[{mode.value}]")
                for position, ticker in enumerate(tickers, start=1):
                    print(f"{position:4d}. {ticker}")
    finally:
        await close_redis(redis_client)

    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return asyncio.run(run(parse_args(argv)))


if __name__ == "__main__":
    sys.exit(main())
