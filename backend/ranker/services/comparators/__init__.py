"""
Ticker Comparators

Pairwise oracles used by the ranking pipeline:
    - ScoreComparator: deterministic suitability scores
    - LLMComparator: LLM-judged verdicts
"""

from ranker.services.comparators.interface import (
    TickerComparator,
    PreviewComparator,
    preview_key,
)
from ranker.services.comparators.algorithm import ScoreComparator
from ranker.services.comparators.llm import LLMComparator, parse_verdict
from ranker.services.comparators.scoring import (
    calculate_score,
    calculate_scalp_score,
    calculate_swing_score,
)

__all__ = [
    "TickerComparator",
    "PreviewComparator",
    "preview_key",
    "ScoreComparator",
    "LLMComparator",
    "parse_verdict",
    "calculate_score",
    "calculate_scalp_score",
    "calculate_swing_score",
]
