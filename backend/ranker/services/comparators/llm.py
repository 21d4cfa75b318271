"""
LLM Comparator

Asks an LLM which of two tickers is better for the trade mode.

Raw model responses are cached by a hash of the user prompt, so repeated
comparisons of the same previews cost one LLM call per TTL window.
"""

import hashlib
import json
import logging
from typing import Optional

from ranker.schemas.ranking import TradeMode
from ranker.services.cache import ResultCache
from ranker.services.comparators.interface import (
    DEFAULT_PREVIEW_TTL,
    PreviewComparator,
    PreviewFetcher,
)
from ranker.services.llm.client import LLMClient, get_llm_client
from ranker.services.llm.prompts import (
    VERDICT_EQUAL,
    VERDICT_TICKER_1,
    VERDICT_TICKER_2,
    format_comparison_prompt,
    format_comparison_system_prompt,
)

logger = logging.getLogger(__name__)

JSON_VERDICTS = {"TICKER_1": -1, "TICKER_2": 1, "EQUAL": 0}


def parse_verdict(content: str) -> int:
    """
    Extract the comparison outcome from a model response.

    Accepts the verdict markers or a JSON object with a "verdict" field.
    Anything unrecognized counts as equal.
    """
    text = content.strip()

    if text.startswith("```"):
        # Remove markdown code block
        lines = text.split("\n")
        text = "\n".join(lines[1:-1]).strip()

    if text.startswith("{"):
        try:
            verdict = str(json.loads(text).get("verdict", "")).strip("()").upper()
            if verdict in JSON_VERDICTS:
                return JSON_VERDICTS[verdict]
        except (json.JSONDecodeError, AttributeError):
            logger.debug(f"Response looked like JSON but did not parse: {text[:200]}")

    # The final marker wins; analyses sometimes quote the others
    positions = {
        verdict: text.rfind(marker)
        for marker, verdict in ((VERDICT_TICKER_1, -1), (VERDICT_TICKER_2, 1), (VERDICT_EQUAL, 0))
    }
    verdict, position = max(positions.items(), key=lambda item: item[1])
    if position < 0:
        logger.warning(f"No verdict marker in LLM response: {text[-200:]}")
        return 0
    return verdict


class LLMComparator(PreviewComparator):
    """Compare tickers by asking an LLM."""

    def __init__(
        self,
        cache: ResultCache,
        preview_fetcher: PreviewFetcher,
        llm_client: Optional[LLMClient] = None,
        namespace: str = "ai-trade",
        preview_ttl: int = DEFAULT_PREVIEW_TTL,
        response_ttl: int = 60 * 60 * 24,
    ):
        super().__init__(cache, preview_fetcher, namespace, preview_ttl)
        self._llm_client = llm_client
        self.response_ttl = response_ttl

    @property
    def llm_client(self) -> LLMClient:
        """Lazy initialization of LLM client."""
        if self._llm_client is None:
            self._llm_client = get_llm_client()
        return self._llm_client

    @property
    def name(self) -> str:
        return "LLMComparator"

    def response_key(self, user_prompt: str) -> str:
        digest = hashlib.sha256(user_prompt.encode("utf-8")).hexdigest()
        return f"{self.namespace}-llm-{digest}"

    async def compare(self, ticker_a: str, ticker_b: str, mode: TradeMode) -> int:
        mode_name = TradeMode(mode).value
        data_a = await self.load_preview(ticker_a)
        data_b = await self.load_preview(ticker_b)

        system_prompt = format_comparison_system_prompt(mode_name)
        user_prompt = format_comparison_prompt(ticker_a, ticker_b, data_a, data_b, mode_name)

        async def ask() -> str:
            response = await self.llm_client.generate(
                system_prompt=system_prompt,
                user_prompt=user_prompt,
            )
            logger.debug(f"{ticker_a} vs {ticker_b} judged by {response.provider.value}/{response.model}")
            return response.content

        content = await self.cache.get_or_compute(
            self.response_key(user_prompt),
            self.response_ttl,
            ask,
        )
        return parse_verdict(content)
