"""
Tests for the two-layer result cache.
"""

import json

import pytest

from ranker.services.cache import ResultCache
from ranker.services.cache.redis_client import NO_EXPIRY_MEMORY_TTL

from conftest import UnreachableRedis


class TestFastLayer:
    @pytest.mark.asyncio
    async def test_set_then_get(self, memory_cache):
        await memory_cache.set("k", {"a": 1}, 60)
        assert await memory_cache.get("k") == {"a": 1}

    @pytest.mark.asyncio
    async def test_miss_returns_none(self, memory_cache):
        assert await memory_cache.get("missing") is None
        assert memory_cache.misses == 1

    @pytest.mark.asyncio
    async def test_entry_expires(self, memory_cache, clock):
        await memory_cache.set("k", "v", 10)
        clock.advance(9)
        assert await memory_cache.get("k") == "v"
        clock.advance(1)
        assert await memory_cache.get("k") is None

    @pytest.mark.asyncio
    async def test_lru_eviction(self, clock):
        cache = ResultCache(capacity=2, clock=clock)
        await cache.set("a", 1, 60)
        await cache.set("b", 2, 60)
        # Touch "a" so "b" is least recently used
        assert await cache.get("a") == 1
        await cache.set("c", 3, 60)

        assert await cache.get("b") is None
        assert await cache.get("a") == 1
        assert await cache.get("c") == 3

    def test_capacity_must_be_positive(self):
        with pytest.raises(ValueError):
            ResultCache(capacity=0)


class TestDurableLayer:
    @pytest.mark.asyncio
    async def test_write_through_with_ttl(self, cache, fake_redis):
        await cache.set("k", ["AAPL.NAS", "BTCUSD"], 120)

        value, expires_at = fake_redis.store["k"]
        assert json.loads(value) == ["AAPL.NAS", "BTCUSD"]
        assert await fake_redis.ttl("k") == 120

    @pytest.mark.asyncio
    async def test_durable_hit_promoted(self, cache, fake_redis):
        await fake_redis.set("k", json.dumps({"x": 1}), ex=300)

        assert await cache.get("k") == {"x": 1}
        fake_redis.calls.clear()
        assert await cache.get("k") == {"x": 1}
        assert "get" not in fake_redis.calls

    @pytest.mark.asyncio
    async def test_promoted_entry_keeps_remaining_ttl(self, cache, fake_redis, clock):
        await fake_redis.set("k", json.dumps("v"), ex=100)
        clock.advance(40)
        assert await cache.get("k") == "v"

        # Remaining durable TTL was 60s
        clock.advance(60)
        assert await cache.get("k") is None

    @pytest.mark.asyncio
    async def test_key_without_expiry_promoted(self, cache, fake_redis, clock):
        await fake_redis.set("k", json.dumps("v"))
        assert await cache.get("k") == "v"

        del fake_redis.store["k"]
        clock.advance(NO_EXPIRY_MEMORY_TTL - 1)
        assert await cache.get("k") == "v"

    @pytest.mark.asyncio
    async def test_value_survives_fast_layer_eviction(self, fake_redis, clock):
        cache = ResultCache(redis_client=fake_redis, capacity=1, clock=clock)
        await cache.set("a", 1, 60)
        await cache.set("b", 2, 60)

        assert await cache.get("a") == 1

    @pytest.mark.asyncio
    async def test_invalidate_removes_both_layers(self, cache, fake_redis):
        await cache.set("k", "v", 60)
        await cache.invalidate("k")

        assert "k" not in fake_redis.store
        assert await cache.get("k") is None


class TestDegradedMode:
    @pytest.mark.asyncio
    async def test_unreachable_store_never_raises(self, clock):
        cache = ResultCache(redis_client=UnreachableRedis(clock), clock=clock)

        await cache.set("k", "v", 60)
        assert await cache.get("k") == "v"
        assert await cache.get("other") is None
        await cache.invalidate("k")

    @pytest.mark.asyncio
    async def test_enters_degraded_and_skips_store(self, clock):
        store = UnreachableRedis(clock)
        cache = ResultCache(redis_client=store, degraded_cooldown=1800, clock=clock)

        await cache.set("k", "v", 60)
        assert cache.is_degraded
        assert store.calls == ["set"]

        await cache.get("missing")
        await cache.set("k2", "v2", 60)
        assert store.calls == ["set"]

    @pytest.mark.asyncio
    async def test_retries_store_after_cooldown(self, clock):
        store = UnreachableRedis(clock)
        cache = ResultCache(redis_client=store, degraded_cooldown=1800, clock=clock)

        await cache.get("missing")
        assert cache.is_degraded

        clock.advance(1800)
        assert not cache.is_degraded
        await cache.get("missing")
        assert store.calls == ["get", "get"]

    @pytest.mark.asyncio
    async def test_non_connectivity_error_not_degraded(self, cache, fake_redis):
        async def bad_set(key, value, ex=None):
            raise ValueError("bad payload")

        fake_redis.set = bad_set
        await cache.set("k", "v", 60)

        assert not cache.is_degraded
        assert await cache.get("k") == "v"


class TestGetOrCompute:
    @pytest.mark.asyncio
    async def test_computes_once(self, cache):
        calls = 0

        async def compute():
            nonlocal calls
            calls += 1
            return ["A", "B"]

        assert await cache.get_or_compute("k", 60, compute) == ["A", "B"]
        assert await cache.get_or_compute("k", 60, compute) == ["A", "B"]
        assert calls == 1

    @pytest.mark.asyncio
    async def test_recomputes_after_expiry(self, cache, clock):
        values = iter([1, 2])

        async def compute():
            return next(values)

        assert await cache.get_or_compute("k", 10, compute) == 1
        clock.advance(10)
        assert await cache.get_or_compute("k", 10, compute) == 2

    @pytest.mark.asyncio
    async def test_compute_error_propagates_and_stores_nothing(self, cache, fake_redis):
        async def compute():
            raise RuntimeError("upstream down")

        with pytest.raises(RuntimeError, match="upstream down"):
            await cache.get_or_compute("k", 60, compute)

        assert "k" not in fake_redis.store
        assert await cache.get("k") is None

    @pytest.mark.asyncio
    async def test_works_while_degraded(self, clock):
        cache = ResultCache(redis_client=UnreachableRedis(clock), clock=clock)

        async def compute():
            return "fresh"

        assert await cache.get_or_compute("k", 60, compute) == "fresh"
        assert await cache.get("k") == "fresh"


class TestStats:
    @pytest.mark.asyncio
    async def test_counters(self, cache):
        await cache.set("k", 1, 60)
        await cache.get("k")
        await cache.get("missing")

        stats = cache.stats()
        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["memory_entries"] == 1
        assert stats["redis_configured"] is True
        assert stats["degraded"] is False
