"""
Cache module for the ticker ranker.

Two-layer (memory LRU + Redis) result cache.
"""

from ranker.services.cache.redis_client import (
    ResultCache,
    get_result_cache,
    set_result_cache,
    init_redis,
    close_redis,
)

__all__ = [
    "ResultCache",
    "get_result_cache",
    "set_result_cache",
    "init_redis",
    "close_redis",
]
