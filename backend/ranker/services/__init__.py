"""
Ticker Ranker Services

Service layer: result cache, comparators, sorting engine, ranking pipeline
and the market data / LLM providers they depend on.
"""

from ranker.services.base import ServiceError, ExternalAPIError

__all__ = ["ServiceError", "ExternalAPIError"]
