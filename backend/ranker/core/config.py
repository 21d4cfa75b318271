"""
Application Configuration

All settings loaded from environment variables.
"""

from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Application
    app_name: str = "Ticker Ranker"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS (Frontend URL)
    allowed_origins: list[str] = ["http://localhost:3000"]

    # Redis
    redis_url: str = "redis://localhost:6379"

    # Result cache
    cache_namespace: str = "ai-trade"
    cache_capacity: int = 200
    cache_degraded_cooldown_seconds: int = 60 * 30  # 30 minutes

    # TTLs (seconds)
    ranking_ttl_seconds: int = 60 * 60 * 7  # 7 hours
    preview_ttl_seconds: int = 60 * 60 * 24  # 1 day
    llm_response_ttl_seconds: int = 60 * 60 * 24  # 1 day

    # Ranking
    default_comparator: str = "score"  # Options: score, llm
    progress_log_interval_seconds: int = 60 * 5
    precache_concurrency: int = 4
    tradable_limit: int = 7
    market_state_ttl_seconds: int = 60 * 5

    # LLM Providers
    gemini_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    anthropic_api_key: Optional[str] = None
    groq_api_key: Optional[str] = None
    llm_provider_priority: list[str] = ["gemini", "openai", "anthropic", "groq"]
    gemini_models: list[str] = ["gemini-2.5-flash", "gemini-2.0-flash", "gemini-2.0-flash-lite"]
    openai_model: str = "gpt-4o-mini"
    anthropic_model: str = "claude-3-haiku-20240307"
    groq_models: list[str] = ["deepseek-r1-distill-llama-70b", "llama-3.3-70b-versatile"]
    groq_base_url: str = "https://api.groq.com/openai/v1"
    llm_temperature: float = 0.7
    llm_max_tokens: int = 4096

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
