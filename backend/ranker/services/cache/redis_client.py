"""
Two-layer result cache.

A bounded in-memory LRU layer sits in front of Redis. Every expensive
computation in the ranking pipeline (ticker previews, LLM verdicts, the final
ranking) goes through ResultCache.get_or_compute().

Keys:
- <namespace>-preview-<ticker> → JSON ticker preview
- <namespace>-sorted-<mode>    → JSON list of tickers
- <namespace>-llm-<sha256>     → raw LLM response text
"""

import json
import logging
import time
from collections import OrderedDict
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

import redis.asyncio as redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

logger = logging.getLogger(__name__)

# Errors that mean "Redis is unreachable", as opposed to a bad command/payload
CONNECTIVITY_ERRORS = (RedisConnectionError, RedisTimeoutError, OSError)

DEFAULT_CAPACITY = 200
DEFAULT_DEGRADED_COOLDOWN = 60 * 30  # 30 minutes
NO_EXPIRY_MEMORY_TTL = 60 * 60


async def init_redis(url: str) -> Optional[redis.Redis]:
    """
    Connect to Redis and verify the connection.
    Returns None (fast-layer-only caching) when Redis is unreachable.
    """
    client = redis.from_url(
        url,
        encoding="utf-8",
        decode_responses=True,
    )
    try:
        await client.ping()
        logger.info(f"Redis connected: {url}")
        return client
    except Exception as e:
        logger.warning(f"Redis connection failed: {e}. Using in-memory cache only.")
        await client.aclose()
        return None


async def close_redis(client: Optional[redis.Redis]) -> None:
    """Close a Redis client created by init_redis()."""
    if client is not None:
        await client.aclose()
        logger.info("Redis connection closed")


class ResultCache:
    """
    Memoization store with a fast LRU layer and a durable Redis layer.

    - Reads check the fast layer, then Redis; Redis hits are promoted.
    - Writes go to the fast layer first, then Redis.
    - Redis failures never reach the caller. A connectivity failure puts the
      cache into fast-layer-only mode for `degraded_cooldown` seconds.
    - Concurrent writers to one key race; the last write wins.
    """

    def __init__(
        self,
        redis_client: Optional[redis.Redis] = None,
        capacity: int = DEFAULT_CAPACITY,
        degraded_cooldown: float = DEFAULT_DEGRADED_COOLDOWN,
        clock: Callable[[], float] = time.monotonic,
    ):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._redis = redis_client
        self.capacity = capacity
        self.degraded_cooldown = degraded_cooldown
        self._clock = clock
        # key -> (value, expires_at)
        self._memory: "OrderedDict[str, Tuple[Any, float]]" = OrderedDict()
        self._degraded_until: Optional[float] = None
        self.hits = 0
        self.misses = 0

    # ============ Degraded mode ============

    @property
    def is_degraded(self) -> bool:
        """True while Redis is being skipped after a connectivity failure."""
        if self._degraded_until is None:
            return False
        if self._clock() >= self._degraded_until:
            self._degraded_until = None
            logger.info("Cache cool-down elapsed, retrying Redis")
            return False
        return True

    @property
    def redis(self) -> Optional[redis.Redis]:
        """The Redis client, or None when absent or degraded."""
        if self._redis is None or self.is_degraded:
            return None
        return self._redis

    def _handle_redis_error(self, operation: str, key: str, error: Exception) -> None:
        if isinstance(error, CONNECTIVITY_ERRORS):
            self._degraded_until = self._clock() + self.degraded_cooldown
            logger.warning(
                f"Redis unreachable during {operation}({key}): {error}. "
                f"Using in-memory cache for {self.degraded_cooldown:.0f}s"
            )
        else:
            logger.warning(f"Redis {operation}({key}) failed: {error}")

    # ============ Fast layer ============

    def _memory_get(self, key: str) -> Tuple[bool, Any]:
        entry = self._memory.get(key)
        if entry is None:
            return False, None
        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._memory[key]
            return False, None
        self._memory.move_to_end(key)
        return True, value

    def _memory_set(self, key: str, value: Any, ttl_seconds: float) -> None:
        self._memory[key] = (value, self._clock() + ttl_seconds)
        self._memory.move_to_end(key)
        while len(self._memory) > self.capacity:
            evicted, _ = self._memory.popitem(last=False)
            logger.debug(f"Evicted {evicted} from memory cache")

    # ============ Public interface ============

    async def get(self, key: str) -> Optional[Any]:
        """
        Get a cached value.
        Returns None on a miss in both layers.
        """
        found, value = self._memory_get(key)
        if found:
            self.hits += 1
            return value

        client = self.redis
        if client is not None:
            try:
                raw = await client.get(key)
                if raw is not None:
                    value = json.loads(raw)
                    remaining = await client.ttl(key)
                    # -1 means the key has no expiry
                    if remaining == -1 or remaining > 0:
                        ttl = remaining if remaining > 0 else NO_EXPIRY_MEMORY_TTL
                        self._memory_set(key, value, ttl)
                    self.hits += 1
                    return value
            except Exception as e:
                self._handle_redis_error("get", key, e)

        self.misses += 1
        return None

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        """Store a value in both layers for `ttl_seconds`."""
        self._memory_set(key, value, ttl_seconds)

        client = self.redis
        if client is not None:
            try:
                await client.set(key, json.dumps(value), ex=int(ttl_seconds))
            except Exception as e:
                self._handle_redis_error("set", key, e)

    async def invalidate(self, key: str) -> None:
        """Remove a key from both layers."""
        self._memory.pop(key, None)

        client = self.redis
        if client is not None:
            try:
                await client.delete(key)
            except Exception as e:
                self._handle_redis_error("invalidate", key, e)

    async def get_or_compute(
        self,
        key: str,
        ttl_seconds: int,
        compute_fn: Callable[[], Awaitable[Any]],
    ) -> Any:
        """
        Return the cached value for `key`, computing and storing it on a miss.

        Errors raised by compute_fn propagate unchanged and nothing is stored.
        """
        value = await self.get(key)
        if value is not None:
            return value

        value = await compute_fn()
        await self.set(key, value, ttl_seconds)
        return value

    def stats(self) -> Dict[str, Any]:
        """Counters for the health endpoint."""
        return {
            "hits": self.hits,
            "misses": self.misses,
            "memory_entries": len(self._memory),
            "capacity": self.capacity,
            "redis_configured": self._redis is not None,
            "degraded": self.is_degraded,
        }


# Process-wide instance for the API and CLI entry points
_result_cache: Optional[ResultCache] = None


def set_result_cache(cache: Optional[ResultCache]) -> None:
    """Install the process-wide cache (called on startup and in tests)."""
    global _result_cache
    _result_cache = cache


def get_result_cache() -> ResultCache:
    """Get the process-wide cache, creating a memory-only one if needed."""
    global _result_cache
    if _result_cache is None:
        from ranker.core.config import settings

        _result_cache = ResultCache(
            capacity=settings.cache_capacity,
            degraded_cooldown=settings.cache_degraded_cooldown_seconds,
        )
    return _result_cache
