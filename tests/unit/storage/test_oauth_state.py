"""
Unit tests for the Redis-backed OAuth state store.
"""

import asyncio
from typing import Any

import pytest

from src.storage.oauth_state import RedisOAuthStateStore


class SlowRedis:
    """Yields to the event loop inside every command, like a network round trip."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}

    async def set(self, key: str, value: str, ex: int | None = None) -> None:
        self.data[key] = value

    async def get(self, key: str) -> str | None:
        await asyncio.sleep(0)
        return self.data.get(key)

    async def delete(self, key: str) -> bool:
        await asyncio.sleep(0)
        return self.data.pop(key, None) is not None


class TestRedisOAuthStateStore:
    @pytest.mark.asyncio
    async def test_issued_state_is_consumed_once(self, fake_redis: Any) -> None:
        store = RedisOAuthStateStore(fake_redis)

        state = await store.async_issue()

        assert await store.async_consume(state) is True
        assert await store.async_consume(state) is False

    @pytest.mark.asyncio
    async def test_unknown_state_is_rejected(self, fake_redis: Any) -> None:
        store = RedisOAuthStateStore(fake_redis)

        assert await store.async_consume("forged") is False

    @pytest.mark.asyncio
    async def test_state_expires(self, fake_redis: Any) -> None:
        store = RedisOAuthStateStore(fake_redis, expiration_seconds=120)

        state = await store.async_issue()

        assert fake_redis.expiry[f"oauth_state:{state}"] == 120

    def test_exposes_logger(self, fake_redis: Any) -> None:
        assert RedisOAuthStateStore(fake_redis).logger is not None

    @pytest.mark.asyncio
    async def test_concurrent_consumers_get_one_success(self) -> None:
        store = RedisOAuthStateStore(SlowRedis())
        state = await store.async_issue()

        results = await asyncio.gather(*(store.async_consume(state) for _ in range(5)))

        assert results.count(True) == 1
