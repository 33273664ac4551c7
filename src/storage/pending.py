"""
Pending save prompts.

A PendingAction is recorded when a save prompt is posted and looked up
when the user clicks confirm. Records expire after a fixed TTL.
"""

import logging
import time
import uuid
from collections import OrderedDict
from typing import Protocol

from src.models import MessageEvent, PendingAction
from src.redis.client import RedisClient

PENDING_KEY_PREFIX = "pending_action:"
DEFAULT_TTL_SECONDS = 900
DEFAULT_MAX_ENTRIES = 1000

logger = logging.getLogger(__name__)


def create_pending_action(event: MessageEvent) -> PendingAction:
    """Create a PendingAction with a fresh opaque ID.

    Args:
        event: Message the prompt was posted for

    Returns:
        A new PendingAction
    """
    return PendingAction(id=str(uuid.uuid4()), event=event, created_at=time.time())


class PendingActionStore(Protocol):
    """Protocol type for the pending-action store."""

    async def add(self, event: MessageEvent) -> PendingAction:
        """Record a prompt for a message.

        Args:
            event: Message the prompt is posted for

        Returns:
            The stored PendingAction
        """
        ...

    async def get(self, action_id: str) -> PendingAction | None:
        """Look up a prompt.

        Args:
            action_id: PendingAction ID

        Returns:
            The PendingAction, or None if unknown or expired.
        """
        ...

    async def discard(self, action_id: str) -> None:
        """Forget a prompt.

        Args:
            action_id: PendingAction ID
        """
        ...


class RedisPendingActionStore:
    """PendingActionStore using Redis key expiry for the TTL."""

    def __init__(self, redis: RedisClient, ttl_seconds: int = DEFAULT_TTL_SECONDS) -> None:
        self._redis = redis
        self._ttl_seconds = ttl_seconds

    async def add(self, event: MessageEvent) -> PendingAction:
        action = create_pending_action(event)
        await self._redis.set(
            f"{PENDING_KEY_PREFIX}{action.id}",
            action.model_dump_json(),
            ex=self._ttl_seconds,
        )
        logger.debug("Recorded pending action %s", action.id)
        return action

    async def get(self, action_id: str) -> PendingAction | None:
        raw = await self._redis.get(f"{PENDING_KEY_PREFIX}{action_id}")
        if raw is None:
            return None
        return PendingAction.model_validate_json(raw)

    async def discard(self, action_id: str) -> None:
        await self._redis.delete(f"{PENDING_KEY_PREFIX}{action_id}")


class InMemoryPendingActionStore:
    """Process-local PendingActionStore.

    Entries expire after the TTL; once max_entries is reached the oldest
    entry is evicted.

    Attributes:
        _ttl_seconds: Lifetime of an entry
        _max_entries: Upper bound on stored entries
        _entries: action ID -> (expiry on the monotonic clock, PendingAction)
    """

    def __init__(
        self,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
    ) -> None:
        self._ttl_seconds = ttl_seconds
        self._max_entries = max_entries
        self._entries: OrderedDict[str, tuple[float, PendingAction]] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    async def add(self, event: MessageEvent) -> PendingAction:
        self._evict_expired()
        while len(self._entries) >= self._max_entries:
            evicted_id, _ = self._entries.popitem(last=False)
            logger.warning("Evicted pending action %s (store full)", evicted_id)

        action = create_pending_action(event)
        self._entries[action.id] = (time.monotonic() + self._ttl_seconds, action)
        return action

    async def get(self, action_id: str) -> PendingAction | None:
        entry = self._entries.get(action_id)
        if entry is None:
            return None
        expires_at, action = entry
        if expires_at <= time.monotonic():
            del self._entries[action_id]
            return None
        return action

    async def discard(self, action_id: str) -> None:
        self._entries.pop(action_id, None)

    def _evict_expired(self) -> None:
        now = time.monotonic()
        # Insertion order equals expiry order since the TTL is fixed.
        while self._entries:
            action_id, (expires_at, _) = next(iter(self._entries.items()))
            if expires_at > now:
                break
            del self._entries[action_id]
