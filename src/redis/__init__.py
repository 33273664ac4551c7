"""
Redis connection module.

Provides the async key-value client backing the token and pending-action stores.

Main exports:
- RedisClient: protocol type for the key-value client
- AsyncRedisClientImpl: async implementation of RedisClient
"""

from src.redis.client import AsyncRedisClientImpl, RedisClient

__all__ = [
    "AsyncRedisClientImpl",
    "RedisClient",
]
