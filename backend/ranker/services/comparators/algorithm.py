"""
Score Comparator

Deterministic comparator: the ticker with the higher suitability score
for the trade mode ranks first.
"""

import logging

from ranker.schemas.ranking import TradeMode
from ranker.services.comparators.interface import PreviewComparator
from ranker.services.comparators.scoring import calculate_score

logger = logging.getLogger(__name__)


class ScoreComparator(PreviewComparator):
    """Compare tickers by calculate_score() over their cached previews."""

    @property
    def name(self) -> str:
        return "ScoreComparator"

    async def compare(self, ticker_a: str, ticker_b: str, mode: TradeMode) -> int:
        data_a = await self.load_preview(ticker_a)
        data_b = await self.load_preview(ticker_b)

        score_a = calculate_score(data_a, mode)
        score_b = calculate_score(data_b, mode)
        logger.debug(f"{ticker_a}={score_a:.2f} vs {ticker_b}={score_b:.2f} ({TradeMode(mode).value})")

        if score_a > score_b:
            return -1
        if score_a < score_b:
            return 1
        return 0
