"""
Team credential store.

Keeps one bot access token per team ID. Last write wins; there is no locking.
"""

import logging
import re
from pathlib import Path
from typing import Protocol

from src.redis.client import RedisClient

TOKEN_KEY_PREFIX = "team_token:"

# Slack team IDs are alphanumeric; anything else never reaches the filesystem.
TEAM_ID_PATTERN = re.compile(r"[A-Za-z0-9_-]+")

logger = logging.getLogger(__name__)


class CredentialStore(Protocol):
    """Protocol type for the credential store."""

    async def get(self, team_id: str) -> str | None:
        """Fetch the token stored for a team.

        Args:
            team_id: Team ID

        Returns:
            The bot access token, or None if the team has not installed the app.
        """
        ...

    async def set(self, team_id: str, token: str) -> None:
        """Store (or overwrite) a team's token.

        Args:
            team_id: Team ID
            token: Bot access token
        """
        ...


class RedisCredentialStore:
    """CredentialStore backed by the Redis key-value client."""

    def __init__(self, redis: RedisClient) -> None:
        self._redis = redis

    async def get(self, team_id: str) -> str | None:
        return await self._redis.get(f"{TOKEN_KEY_PREFIX}{team_id}")

    async def set(self, team_id: str, token: str) -> None:
        await self._redis.set(f"{TOKEN_KEY_PREFIX}{team_id}", token)
        logger.info("Stored token for team %s", team_id)


class LocalCredentialStore:
    """CredentialStore that writes one plain file per team.

    Tokens are stored unencrypted. Use for local development only.

    Attributes:
        _base_dir: Directory holding the token files
    """

    def __init__(self, base_dir: str | Path) -> None:
        self._base_dir = Path(base_dir)
        self._base_dir.mkdir(parents=True, exist_ok=True)
        logger.warning(
            "Using unencrypted local token storage at %s (development only)",
            self._base_dir,
        )

    async def get(self, team_id: str) -> str | None:
        path = self._path_for(team_id)
        if not path.is_file():
            return None
        return path.read_text(encoding="utf-8")

    async def set(self, team_id: str, token: str) -> None:
        self._path_for(team_id).write_text(token, encoding="utf-8")
        logger.info("Stored token for team %s", team_id)

    def _path_for(self, team_id: str) -> Path:
        if not TEAM_ID_PATTERN.fullmatch(team_id):
            msg = f"Invalid team ID: {team_id!r}"
            raise ValueError(msg)
        return self._base_dir / team_id
