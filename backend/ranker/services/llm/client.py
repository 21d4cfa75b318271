"""
LLM Client Abstraction

Unified interface over Gemini, OpenAI, Anthropic and Groq.
Providers are tried in priority order; the first successful response wins.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
import asyncio
import logging

from ranker.services.base import ExternalAPIError

logger = logging.getLogger(__name__)


class LLMProvider(str, Enum):
    GEMINI = "gemini"
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GROQ = "groq"


@dataclass
class LLMConfig:
    """Configuration for LLM client."""

    provider_priority: list[LLMProvider] = field(
        default_factory=lambda: [
            LLMProvider.GEMINI,
            LLMProvider.OPENAI,
            LLMProvider.ANTHROPIC,
            LLMProvider.GROQ,
        ]
    )
    gemini_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    anthropic_api_key: Optional[str] = None
    groq_api_key: Optional[str] = None
    gemini_models: list[str] = field(default_factory=lambda: ["gemini-2.5-flash"])
    openai_model: str = "gpt-4o-mini"
    anthropic_model: str = "claude-3-haiku-20240307"
    groq_models: list[str] = field(default_factory=lambda: ["llama-3.3-70b-versatile"])
    groq_base_url: str = "https://api.groq.com/openai/v1"
    max_tokens: int = 4096
    temperature: float = 0.7


@dataclass
class LLMResponse:
    """Response from LLM."""

    content: str
    model: str
    provider: LLMProvider


class BaseLLMClient(ABC):
    """Abstract base class for LLM backends."""

    provider: LLMProvider

    @abstractmethod
    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> LLMResponse:
        """Generate a response from the LLM."""
        pass


class GeminiClient(BaseLLMClient):
    """Google Gemini backend. Walks the configured model list on failure."""

    provider = LLMProvider.GEMINI

    def __init__(self, config: LLMConfig):
        self.config = config
        self._genai = None

    def _get_genai(self):
        """Lazy import and configuration of the Gemini SDK."""
        if self._genai is None:
            try:
                import google.generativeai as genai
            except ImportError:
                raise RuntimeError(
                    "google-generativeai package not installed. Run: pip install google-generativeai"
                )
            genai.configure(api_key=self.config.gemini_api_key)
            self._genai = genai
        return self._genai

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> LLMResponse:
        genai = self._get_genai()
        generation_config = {
            "temperature": temperature if temperature is not None else self.config.temperature,
            "max_output_tokens": max_tokens if max_tokens is not None else self.config.max_tokens,
        }

        last_error: Optional[Exception] = None
        for model_name in self.config.gemini_models:
            model = genai.GenerativeModel(model_name, system_instruction=system_prompt)
            try:
                # generate_content is synchronous, run it in the executor
                loop = asyncio.get_running_loop()
                response = await loop.run_in_executor(
                    None,
                    lambda: model.generate_content(
                        user_prompt,
                        generation_config=generation_config,
                    ),
                )
                return LLMResponse(
                    content=response.text,
                    model=model_name,
                    provider=self.provider,
                )
            except Exception as e:
                logger.debug(f"Gemini model {model_name} failed: {e}")
                last_error = e

        raise ExternalAPIError("GeminiClient", f"All Gemini models failed: {last_error}")


class OpenAIClient(BaseLLMClient):
    """OpenAI chat completions backend (also used for OpenAI-compatible APIs)."""

    provider = LLMProvider.OPENAI

    def __init__(
        self,
        config: LLMConfig,
        api_key: Optional[str] = None,
        models: Optional[list[str]] = None,
        base_url: Optional[str] = None,
    ):
        self.config = config
        self._api_key = api_key or config.openai_api_key
        self._models = models or [config.openai_model]
        self._base_url = base_url
        self._client = None

    def _get_client(self):
        """Lazy initialization of OpenAI client."""
        if self._client is None:
            try:
                import openai
            except ImportError:
                raise RuntimeError(
                    "openai package not installed. Run: pip install openai"
                )
            kwargs = {"api_key": self._api_key, "max_retries": 2}
            if self._base_url:
                kwargs["base_url"] = self._base_url
            self._client = openai.AsyncOpenAI(**kwargs)
        return self._client

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> LLMResponse:
        client = self._get_client()
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]

        last_error: Optional[Exception] = None
        for model in self._models:
            try:
                response = await client.chat.completions.create(
                    model=model,
                    messages=messages,
                    temperature=temperature if temperature is not None else self.config.temperature,
                    max_tokens=max_tokens if max_tokens is not None else self.config.max_tokens,
                )
                return LLMResponse(
                    content=response.choices[0].message.content,
                    model=model,
                    provider=self.provider,
                )
            except Exception as e:
                logger.debug(f"{self.provider.value} model {model} failed: {e}")
                last_error = e

        raise ExternalAPIError(
            f"{self.provider.value}Client", f"All models failed: {last_error}"
        )


class GroqClient(OpenAIClient):
    """Groq through its OpenAI-compatible endpoint."""

    provider = LLMProvider.GROQ

    def __init__(self, config: LLMConfig):
        super().__init__(
            config,
            api_key=config.groq_api_key,
            models=config.groq_models,
            base_url=config.groq_base_url,
        )


class AnthropicClient(BaseLLMClient):
    """Anthropic Claude backend."""

    provider = LLMProvider.ANTHROPIC

    def __init__(self, config: LLMConfig):
        self.config = config
        self._client = None

    def _get_client(self):
        """Lazy initialization of Anthropic client."""
        if self._client is None:
            try:
                import anthropic
            except ImportError:
                raise RuntimeError(
                    "anthropic package not installed. Run: pip install anthropic"
                )
            self._client = anthropic.AsyncAnthropic(api_key=self.config.anthropic_api_key)
        return self._client

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> LLMResponse:
        client = self._get_client()
        response = await client.messages.create(
            model=self.config.anthropic_model,
            max_tokens=max_tokens if max_tokens is not None else self.config.max_tokens,
            temperature=temperature if temperature is not None else self.config.temperature,
            system=system_prompt,
            messages=[{"role": "user", "content": user_prompt}],
        )
        return LLMResponse(
            content=response.content[0].text,
            model=self.config.anthropic_model,
            provider=self.provider,
        )


def build_backends(config: LLMConfig) -> list[BaseLLMClient]:
    """Create a backend for every provider with an API key, in priority order."""
    factories = {
        LLMProvider.GEMINI: (config.gemini_api_key, GeminiClient),
        LLMProvider.OPENAI: (config.openai_api_key, OpenAIClient),
        LLMProvider.ANTHROPIC: (config.anthropic_api_key, AnthropicClient),
        LLMProvider.GROQ: (config.groq_api_key, GroqClient),
    }
    backends = []
    for provider in config.provider_priority:
        api_key, factory = factories[LLMProvider(provider)]
        if api_key:
            backends.append(factory(config))
    return backends


class LLMClient:
    """
    LLM client with provider fallback.

    Backends are tried in order; a failure moves on to the next one.
    """

    def __init__(self, backends: list[BaseLLMClient]):
        self.backends = backends
        if not backends:
            logger.warning("No LLM API keys configured. LLM comparator disabled.")

    @classmethod
    def from_config(cls, config: LLMConfig) -> "LLMClient":
        return cls(build_backends(config))

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> LLMResponse:
        """
        Generate a response, falling back through the backends.

        Raises:
            RuntimeError: no backends configured
            ExternalAPIError: every backend failed
        """
        if not self.backends:
            raise RuntimeError("No LLM providers configured")

        errors = []
        for backend in self.backends:
            try:
                return await backend.generate(
                    system_prompt=system_prompt,
                    user_prompt=user_prompt,
                    temperature=temperature,
                    max_tokens=max_tokens,
                )
            except Exception as e:
                logger.warning(f"LLM provider {backend.provider.value} failed: {e}, trying next...")
                errors.append(f"{backend.provider.value}: {e}")

        raise ExternalAPIError("LLMClient", "All LLM providers failed", {"errors": errors})


# Singleton instance management
_llm_client: Optional[LLMClient] = None


def get_llm_client() -> LLMClient:
    """Get or create LLM client singleton."""
    global _llm_client
    if _llm_client is None:
        from ranker.core.config import settings

        config = LLMConfig(
            provider_priority=[LLMProvider(p) for p in settings.llm_provider_priority],
            gemini_api_key=settings.gemini_api_key,
            openai_api_key=settings.openai_api_key,
            anthropic_api_key=settings.anthropic_api_key,
            groq_api_key=settings.groq_api_key,
            gemini_models=settings.gemini_models,
            openai_model=settings.openai_model,
            anthropic_model=settings.anthropic_model,
            groq_models=settings.groq_models,
            groq_base_url=settings.groq_base_url,
            max_tokens=settings.llm_max_tokens,
            temperature=settings.llm_temperature,
        )
        _llm_client = LLMClient.from_config(config)
    return _llm_client
