"""
Storage module.

Team credentials, pending save prompts and OAuth state, each behind a
protocol with a Redis-backed and a local implementation.
"""

from src.storage.credentials import CredentialStore, LocalCredentialStore, RedisCredentialStore
from src.storage.oauth_state import RedisOAuthStateStore
from src.storage.pending import (
    InMemoryPendingActionStore,
    PendingActionStore,
    RedisPendingActionStore,
)

__all__ = [
    "CredentialStore",
    "InMemoryPendingActionStore",
    "LocalCredentialStore",
    "PendingActionStore",
    "RedisCredentialStore",
    "RedisOAuthStateStore",
    "RedisPendingActionStore",
]
