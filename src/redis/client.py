"""
Redis key-value client module.

Backs the token, pending-action and OAuth state stores. The client must be
connected once at startup; commands issued before that fail fast with
ConnectionError. Dropped connections are re-established by redis-py's
connection pool on the next command.
"""

import logging
from typing import Protocol

from redis.asyncio import Redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)


class RedisClient(Protocol):
    """Protocol type for the key-value client.

    - set: store a value, optionally with an expiry
    - get: fetch a value
    - delete: remove a key, reporting whether it existed
    """

    async def set(self, key: str, value: str, ex: int | None = None) -> None:
        """Store a value.

        Args:
            key: Key to store
            value: Value to store
            ex: Expiry in seconds. None means no expiry.
        """
        ...

    async def get(self, key: str) -> str | None:
        """Fetch the value for a key.

        Returns:
            The stored value, or None if the key does not exist or has expired.
        """
        ...

    async def delete(self, key: str) -> bool:
        """Remove a key.

        Returns:
            True if this call removed the key, False if it was already gone.
        """
        ...


class AsyncRedisClientImpl:
    """redis-py backed RedisClient.

    Attributes:
        _redis: Redis client built from the URL (connections are lazy)
        _connected: Set by connect(), cleared by disconnect()
    """

    def __init__(self, redis_url: str) -> None:
        self._redis: Redis = Redis.from_url(redis_url, decode_responses=True)
        self._connected = False

    async def connect(self) -> None:
        """Check that the server answers.

        Raises:
            ConnectionError: If the server cannot be reached
        """
        try:
            await self._redis.ping()
        except RedisError as e:
            logger.error("Redis ping failed: %s", e)
            raise ConnectionError(f"Failed to connect to Redis: {e}") from e
        self._connected = True
        logger.info("Redis connection ready")

    async def disconnect(self) -> None:
        await self._redis.aclose()
        self._connected = False
        logger.info("Redis connection closed")

    async def set(self, key: str, value: str, ex: int | None = None) -> None:
        self._ensure_connected()
        try:
            await self._redis.set(key, value, ex=ex)
        except RedisError:
            logger.exception("Redis SET %s failed", key)
            raise

    async def get(self, key: str) -> str | None:
        self._ensure_connected()
        try:
            return await self._redis.get(key)
        except RedisError:
            logger.exception("Redis GET %s failed", key)
            raise

    async def delete(self, key: str) -> bool:
        self._ensure_connected()
        try:
            removed = await self._redis.delete(key)
        except RedisError:
            logger.exception("Redis DEL %s failed", key)
            raise
        return removed > 0

    def _ensure_connected(self) -> None:
        if not self._connected:
            raise ConnectionError("Not connected to Redis")
