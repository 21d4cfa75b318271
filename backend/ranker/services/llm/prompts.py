"""
LLM Prompt Templates

Pairwise comparison prompts for the LLM comparator.

The model must finish with exactly one verdict marker:
- (((TICKER_1))) → first ticker is better
- (((TICKER_2))) → second ticker is better
- (((EQUAL)))    → no meaningful difference
"""

import json

VERDICT_TICKER_1 = "(((TICKER_1)))"
VERDICT_TICKER_2 = "(((TICKER_2)))"
VERDICT_EQUAL = "(((EQUAL)))"

# =============================================================================
# COMPARISON PROMPTS
# =============================================================================

COMPARISON_SYSTEM_PROMPT_TEMPLATE = """You are a financial analyst ranking instruments for {mode} trading.

YOUR ROLE:
- You are given two tickers and a summary of their recent market data.
- Decide which of the two is the better candidate for {mode} trading right now.

RULES:
1. Base the decision only on the data provided.
2. Consider volatility, liquidity, trend, momentum and technical indicators.
3. Missing data counts against a ticker.

OUTPUT FORMAT:
Write a short analysis, then end with exactly one of:
- "{ticker_1}" if the first ticker is better for {mode} trading.
- "{ticker_2}" if the second ticker is better for {mode} trading.
- "{equal}" if the two tickers are equally good for {mode} trading."""

COMPARISON_USER_PROMPT_TEMPLATE = """Compare the following two tickers:

TICKER_1: {ticker_1}
{data_1}

TICKER_2: {ticker_2}
{data_2}

---

Which ticker is better for {mode} trading? Do an analysis before making a decision.

Your response must end with one of:
- "{verdict_1}" if the first ticker is better for {mode} trading.
- "{verdict_2}" if the second ticker is better for {mode} trading.
- "{equal}" if the two tickers are equally good for {mode} trading."""


def format_comparison_system_prompt(mode: str) -> str:
    """System prompt for a given trade mode."""
    return COMPARISON_SYSTEM_PROMPT_TEMPLATE.format(
        mode=mode,
        ticker_1=VERDICT_TICKER_1,
        ticker_2=VERDICT_TICKER_2,
        equal=VERDICT_EQUAL,
    )


def format_comparison_prompt(
    ticker_1: str,
    ticker_2: str,
    data_1: dict,
    data_2: dict,
    mode: str,
) -> str:
    """User prompt embedding both tickers' preview data."""
    return COMPARISON_USER_PROMPT_TEMPLATE.format(
        ticker_1=ticker_1,
        ticker_2=ticker_2,
        data_1=json.dumps(data_1, indent=1, sort_keys=True, default=str),
        data_2=json.dumps(data_2, indent=1, sort_keys=True, default=str),
        mode=mode,
        verdict_1=VERDICT_TICKER_1,
        verdict_2=VERDICT_TICKER_2,
        equal=VERDICT_EQUAL,
    )
