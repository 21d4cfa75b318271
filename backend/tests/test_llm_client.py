"""
Tests for the multi-provider LLM client.
"""

import pytest

from ranker.services.base import ExternalAPIError
from ranker.services.llm import (
    BaseLLMClient,
    LLMClient,
    LLMConfig,
    LLMProvider,
    LLMResponse,
    build_backends,
)
from ranker.services.llm.client import AnthropicClient, GeminiClient, GroqClient, OpenAIClient


class StubBackend(BaseLLMClient):
    def __init__(self, provider: LLMProvider, fail: bool = False):
        self.provider = provider
        self.fail = fail
        self.calls = 0

    async def generate(self, system_prompt, user_prompt, temperature=None, max_tokens=None):
        self.calls += 1
        if self.fail:
            raise ConnectionError(f"{self.provider.value} unavailable")
        return LLMResponse(content="(((EQUAL)))", model="stub", provider=self.provider)


class TestBuildBackends:
    def test_only_configured_providers_in_priority_order(self):
        config = LLMConfig(
            provider_priority=[LLMProvider.GROQ, LLMProvider.GEMINI, LLMProvider.OPENAI],
            gemini_api_key="g",
            groq_api_key="q",
        )
        backends = build_backends(config)
        assert [type(b) for b in backends] == [GroqClient, GeminiClient]

    def test_all_providers(self):
        config = LLMConfig(
            gemini_api_key="g",
            openai_api_key="o",
            anthropic_api_key="a",
            groq_api_key="q",
        )
        assert [type(b) for b in build_backends(config)] == [
            GeminiClient,
            OpenAIClient,
            AnthropicClient,
            GroqClient,
        ]

    def test_groq_uses_openai_protocol(self):
        backend = GroqClient(LLMConfig(groq_api_key="q", groq_models=["llama-3.3-70b-versatile"]))
        assert backend.provider == LLMProvider.GROQ
        assert backend._base_url == "https://api.groq.com/openai/v1"
        assert backend._models == ["llama-3.3-70b-versatile"]


class TestFallback:
    @pytest.mark.asyncio
    async def test_first_success_wins(self):
        first = StubBackend(LLMProvider.GEMINI)
        second = StubBackend(LLMProvider.OPENAI)

        response = await LLMClient([first, second]).generate("system", "user")

        assert response.provider == LLMProvider.GEMINI
        assert second.calls == 0

    @pytest.mark.asyncio
    async def test_falls_through_failures(self):
        backends = [
            StubBackend(LLMProvider.GEMINI, fail=True),
            StubBackend(LLMProvider.OPENAI, fail=True),
            StubBackend(LLMProvider.GROQ),
        ]

        response = await LLMClient(backends).generate("system", "user")

        assert response.provider == LLMProvider.GROQ
        assert [b.calls for b in backends] == [1, 1, 1]

    @pytest.mark.asyncio
    async def test_all_failed(self):
        client = LLMClient([StubBackend(LLMProvider.GEMINI, fail=True)])

        with pytest.raises(ExternalAPIError) as exc_info:
            await client.generate("system", "user")

        assert "gemini unavailable" in exc_info.value.details["errors"][0]

    @pytest.mark.asyncio
    async def test_no_providers(self):
        with pytest.raises(RuntimeError):
            await LLMClient([]).generate("system", "user")
