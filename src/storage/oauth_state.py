"""
OAuth state store backed by Redis.

Implements slack_sdk's AsyncOAuthStateStore so the installation flow can
swap it with slack_sdk's FileOAuthStateStore for the local backend.
"""

import logging
import uuid
from logging import Logger
from typing import Any

from slack_sdk.oauth.state_store.async_state_store import AsyncOAuthStateStore

from src.redis.client import RedisClient

STATE_KEY_PREFIX = "oauth_state:"
DEFAULT_STATE_EXPIRATION_SECONDS = 600


class RedisOAuthStateStore(AsyncOAuthStateStore):
    """Issues single-use OAuth state values that expire after a fixed time."""

    def __init__(
        self,
        redis: RedisClient,
        expiration_seconds: int = DEFAULT_STATE_EXPIRATION_SECONDS,
    ) -> None:
        self._redis = redis
        self._expiration_seconds = expiration_seconds
        self._logger = logging.getLogger(__name__)

    @property
    def logger(self) -> Logger:
        return self._logger

    async def async_issue(self, *args: Any, **kwargs: Any) -> str:
        state = str(uuid.uuid4())
        await self._redis.set(f"{STATE_KEY_PREFIX}{state}", "1", ex=self._expiration_seconds)
        return state

    async def async_consume(self, state: str) -> bool:
        # DEL is atomic; only one of several concurrent callbacks sees the key removed
        if not await self._redis.delete(f"{STATE_KEY_PREFIX}{state}"):
            self._logger.warning("Unknown or expired OAuth state: %s", state)
            return False
        return True
