"""
LLM Providers

Prioritized multi-provider client used by the LLM comparator.
Failures fall through to the next configured provider.
"""

from ranker.services.llm.client import (
    BaseLLMClient,
    LLMClient,
    LLMConfig,
    LLMProvider,
    LLMResponse,
    build_backends,
    get_llm_client,
)

__all__ = [
    "BaseLLMClient",
    "LLMClient",
    "LLMConfig",
    "LLMProvider",
    "LLMResponse",
    "build_backends",
    "get_llm_client",
]
