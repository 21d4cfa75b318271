"""
Tests for the score and LLM comparators.
"""

import pytest

from ranker.schemas.ranking import TradeMode
from ranker.services.comparators import LLMComparator, ScoreComparator, parse_verdict
from ranker.services.llm import LLMProvider, LLMResponse

BULLISH = {
    "priceMetrics": {"priceChange15min": 0.4, "priceChange1hr": 0.8, "priceChange3hr": 1.2},
}
BEARISH = {
    "priceMetrics": {"priceChange15min": -0.4, "priceChange1hr": -0.8, "priceChange3hr": -1.2},
}


def preview_source(previews):
    calls = []

    async def fetch(ticker):
        calls.append(ticker)
        return previews[ticker]

    fetch.calls = calls
    return fetch


class FakeLLM:
    def __init__(self, content: str):
        self.content = content
        self.prompts = []

    async def generate(self, system_prompt, user_prompt, temperature=None, max_tokens=None):
        self.prompts.append((system_prompt, user_prompt))
        return LLMResponse(content=self.content, model="fake-model", provider=LLMProvider.OPENAI)


class TestScoreComparator:
    @pytest.mark.asyncio
    async def test_higher_score_first(self, cache):
        comparator = ScoreComparator(cache, preview_source({"UP": BULLISH, "DOWN": BEARISH}))

        assert await comparator.compare("UP", "DOWN", TradeMode.SCALP) == -1
        assert await comparator.compare("DOWN", "UP", TradeMode.SCALP) == 1

    @pytest.mark.asyncio
    async def test_equal_scores_tie(self, cache):
        comparator = ScoreComparator(cache, preview_source({"X": BULLISH, "Y": dict(BULLISH)}))
        assert await comparator.compare("X", "Y", TradeMode.SCALP) == 0

    @pytest.mark.asyncio
    async def test_previews_fetched_once(self, cache):
        fetch = preview_source({"UP": BULLISH, "DOWN": BEARISH})
        comparator = ScoreComparator(cache, fetch)

        await comparator.compare("UP", "DOWN", TradeMode.SWING)
        await comparator.compare("DOWN", "UP", TradeMode.SWING)

        assert sorted(fetch.calls) == ["DOWN", "UP"]

    @pytest.mark.asyncio
    async def test_fetch_error_propagates(self, cache):
        async def fetch(ticker):
            raise ValueError(f"No data for {ticker}")

        comparator = ScoreComparator(cache, fetch)
        with pytest.raises(ValueError, match="No data for UP"):
            await comparator.compare("UP", "DOWN", TradeMode.SCALP)


class TestParseVerdict:
    @pytest.mark.parametrize(
        "content,expected",
        [
            ("Analysis...\n(((TICKER_1)))", -1),
            ("Analysis...\n(((TICKER_2)))", 1),
            ("Both look alike. (((EQUAL)))", 0),
            ("No decision here", 0),
            ('{"analysis": "...", "verdict": "TICKER_2"}', 1),
            ('```json\n{"verdict": "TICKER_1"}\n```', -1),
        ],
    )
    def test_markers(self, content, expected):
        assert parse_verdict(content) == expected

    def test_last_marker_wins(self):
        content = "I could answer (((TICKER_1))) but the data favours the second.\n(((TICKER_2)))"
        assert parse_verdict(content) == 1


class TestLLMComparator:
    @pytest.mark.asyncio
    async def test_verdict_from_llm(self, cache):
        llm = FakeLLM("The second ticker trends better. (((TICKER_2)))")
        comparator = LLMComparator(cache, preview_source({"A": BULLISH, "B": BEARISH}), llm_client=llm)

        assert await comparator.compare("A", "B", TradeMode.SWING) == 1

        system_prompt, user_prompt = llm.prompts[0]
        assert "swing trading" in system_prompt
        assert "TICKER_1: A" in user_prompt
        assert "TICKER_2: B" in user_prompt

    @pytest.mark.asyncio
    async def test_repeated_pair_costs_one_call(self, cache, fake_redis):
        llm = FakeLLM("(((TICKER_1)))")
        comparator = LLMComparator(cache, preview_source({"A": BULLISH, "B": BEARISH}), llm_client=llm)

        assert await comparator.compare("A", "B", TradeMode.SCALP) == -1
        assert await comparator.compare("A", "B", TradeMode.SCALP) == -1

        assert len(llm.prompts) == 1
        assert any(key.startswith("ai-trade-llm-") for key in fake_redis.store)

    @pytest.mark.asyncio
    async def test_response_key_is_prompt_hash(self, cache):
        comparator = LLMComparator(cache, preview_source({}), llm_client=FakeLLM(""))

        key = comparator.response_key("prompt")
        assert key.startswith("ai-trade-llm-")
        assert len(key) == len("ai-trade-llm-") + 64
        assert comparator.response_key("prompt") == key
        assert comparator.response_key("other") != key
