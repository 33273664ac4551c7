"""
Unit tests for the per-team client cache.
"""

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from slack_bolt.authorization import AuthorizeResult
from slack_sdk.web.async_client import AsyncWebClient

from src.slack.client_cache import ClientCache, ClientCacheAuthorize
from src.storage.credentials import RedisCredentialStore


@pytest.fixture
def store(fake_redis: Any) -> RedisCredentialStore:
    return RedisCredentialStore(fake_redis)


class TestResolve:
    """resolve tests."""

    @pytest.mark.asyncio
    async def test_returns_none_without_credential(self, store: RedisCredentialStore) -> None:
        cache = ClientCache(store)

        assert await cache.resolve("T1") is None

    @pytest.mark.asyncio
    async def test_builds_client_with_stored_token(self, store: RedisCredentialStore) -> None:
        await store.set("T1", "xoxb-1")
        cache = ClientCache(store)

        client = await cache.resolve("T1")

        assert isinstance(client, AsyncWebClient)
        assert client.token == "xoxb-1"

    @pytest.mark.asyncio
    async def test_returns_identical_handle_on_repeat(self, store: RedisCredentialStore) -> None:
        await store.set("T1", "xoxb-1")
        cache = ClientCache(store)

        first = await cache.resolve("T1")
        second = await cache.resolve("T1")

        assert first is not None
        assert first is second

    @pytest.mark.asyncio
    async def test_cached_handle_skips_store(self) -> None:
        store = MagicMock()
        store.get = AsyncMock(return_value="xoxb-1")
        cache = ClientCache(store)

        await cache.resolve("T1")
        await cache.resolve("T1")

        store.get.assert_called_once_with("T1")

    @pytest.mark.asyncio
    async def test_miss_is_not_cached(self, store: RedisCredentialStore) -> None:
        cache = ClientCache(store)

        assert await cache.resolve("T1") is None
        await store.set("T1", "xoxb-1")

        assert await cache.resolve("T1") is not None

    @pytest.mark.asyncio
    async def test_teams_get_separate_handles(self, store: RedisCredentialStore) -> None:
        await store.set("T1", "xoxb-1")
        await store.set("T2", "xoxb-2")
        cache = ClientCache(store)

        first = await cache.resolve("T1")
        second = await cache.resolve("T2")

        assert first is not second
        assert second is not None and second.token == "xoxb-2"

    @pytest.mark.asyncio
    async def test_invalidate_picks_up_rotated_token(self, store: RedisCredentialStore) -> None:
        await store.set("T1", "xoxb-old")
        cache = ClientCache(store)
        old = await cache.resolve("T1")

        await store.set("T1", "xoxb-new")
        cache.invalidate("T1")
        new = await cache.resolve("T1")

        assert new is not old
        assert new is not None and new.token == "xoxb-new"


class TestClientCacheAuthorize:
    """Bolt authorize hook tests."""

    @pytest.mark.asyncio
    async def test_returns_result_with_bot_token(self, store: RedisCredentialStore) -> None:
        await store.set("T1", "xoxb-1")
        authorize = ClientCacheAuthorize(ClientCache(store))

        result = await authorize(context=MagicMock(), enterprise_id=None, team_id="T1", user_id="U1")

        assert isinstance(result, AuthorizeResult)
        assert result.team_id == "T1"
        assert result.user_id == "U1"
        assert result.bot_token == "xoxb-1"

    @pytest.mark.asyncio
    async def test_returns_none_for_unknown_team(self, store: RedisCredentialStore) -> None:
        authorize = ClientCacheAuthorize(ClientCache(store))

        result = await authorize(context=MagicMock(), enterprise_id=None, team_id="T404", user_id=None)

        assert result is None

    @pytest.mark.asyncio
    async def test_returns_none_without_team(self, store: RedisCredentialStore) -> None:
        authorize = ClientCacheAuthorize(ClientCache(store))

        result = await authorize(context=MagicMock(), enterprise_id="E1", team_id=None, user_id=None)

        assert result is None
