"""Shared fixtures: a controllable clock and an in-memory Redis stand-in."""

from typing import Optional

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from ranker.services.cache import ResultCache


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeRedis:
    """Subset of redis.asyncio.Redis used by ResultCache, with TTLs."""

    def __init__(self, clock: FakeClock):
        self.clock = clock
        self.store: dict[str, tuple[str, Optional[float]]] = {}
        self.calls: list[str] = []

    def _live(self, key: str):
        entry = self.store.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and self.clock() >= expires_at:
            del self.store[key]
            return None
        return entry

    async def ping(self):
        return True

    async def get(self, key: str):
        self.calls.append("get")
        entry = self._live(key)
        return entry[0] if entry else None

    async def set(self, key: str, value: str, ex: Optional[int] = None):
        self.calls.append("set")
        self.store[key] = (value, self.clock() + ex if ex else None)
        return True

    async def ttl(self, key: str) -> int:
        entry = self._live(key)
        if entry is None:
            return -2
        if entry[1] is None:
            return -1
        return int(entry[1] - self.clock())

    async def delete(self, key: str) -> int:
        self.calls.append("delete")
        return 1 if self.store.pop(key, None) else 0

    async def aclose(self):
        pass


class UnreachableRedis(FakeRedis):
    """Every command fails as if the server were down."""

    async def get(self, key: str):
        self.calls.append("get")
        raise RedisConnectionError("Connection refused")

    async def set(self, key: str, value: str, ex: Optional[int] = None):
        self.calls.append("set")
        raise RedisConnectionError("Connection refused")

    async def delete(self, key: str) -> int:
        self.calls.append("delete")
        raise RedisConnectionError("Connection refused")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fake_redis(clock):
    return FakeRedis(clock)


@pytest.fixture
def cache(fake_redis, clock):
    return ResultCache(redis_client=fake_redis, capacity=200, clock=clock)


@pytest.fixture
def memory_cache(clock):
    return ResultCache(capacity=200, clock=clock)
