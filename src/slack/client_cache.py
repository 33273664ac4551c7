"""
Per-team Slack Web API client cache.

One AsyncWebClient is memoized per team, built from the token in the
credential store. No client is ever built for a team without a token.
"""

import logging

from slack_bolt.authorization import AuthorizeResult
from slack_bolt.authorization.async_authorize import AsyncAuthorize
from slack_bolt.context.async_context import AsyncBoltContext
from slack_sdk.web.async_client import AsyncWebClient

from src.storage.credentials import CredentialStore

logger = logging.getLogger(__name__)


class ClientCache:
    """Memoizes one AsyncWebClient per team ID.

    Attributes:
        _store: Credential store the tokens are read from
        _clients: team ID -> cached client
    """

    def __init__(self, store: CredentialStore) -> None:
        self._store = store
        self._clients: dict[str, AsyncWebClient] = {}

    async def resolve(self, team_id: str) -> AsyncWebClient | None:
        """Return the client for a team.

        Args:
            team_id: Team ID

        Returns:
            The cached (or newly built) client, or None if the team has no token.
        """
        client = self._clients.get(team_id)
        if client is not None:
            return client

        token = await self._store.get(team_id)
        if not token:
            return None

        client = AsyncWebClient(token=token)
        self._clients[team_id] = client
        logger.debug("Created Web API client for team %s", team_id)
        return client

    def invalidate(self, team_id: str) -> None:
        """Drop the cached client so the next resolve reads the store again."""
        self._clients.pop(team_id, None)


class ClientCacheAuthorize(AsyncAuthorize):
    """Bolt `authorize` hook that reads team tokens through the client cache.

    Bolt accepts an AsyncAuthorize instance together with `oauth_settings`,
    which a plain callback is not allowed to be.
    """

    def __init__(self, cache: ClientCache) -> None:
        self._cache = cache

    async def __call__(
        self,
        *,
        context: AsyncBoltContext,
        enterprise_id: str | None,
        team_id: str | None,
        user_id: str | None,
        actor_enterprise_id: str | None = None,
        actor_team_id: str | None = None,
        actor_user_id: str | None = None,
    ) -> AuthorizeResult | None:
        """Resolve the bot token for the request's team.

        Returns:
            An AuthorizeResult carrying the team's bot token, or None if the
            team has not installed the app.
        """
        if team_id is None:
            return None
        client = await self._cache.resolve(team_id)
        if client is None:
            logger.warning("No stored credential for team %s", team_id)
            return None
        return AuthorizeResult(
            enterprise_id=enterprise_id,
            team_id=team_id,
            user_id=user_id,
            bot_token=client.token,
        )
