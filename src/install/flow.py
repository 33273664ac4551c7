"""
Installation flow module.

OAuth v2 "Add to Slack" handshake, run by Bolt's AsyncOAuthFlow:
- GET /auth/install issues a state value and redirects to Slack
- GET /auth/install/callback exchanges the code for a bot token
- installed: the token is written to the CredentialStore (the only place
  tokens live) and the team's cached client is dropped
- failed: a diagnostic page is returned with status 500; the user restarts
  installation manually
"""

import logging
from logging import Logger

from slack_bolt.error import BoltError
from slack_bolt.oauth.async_callback_options import (
    AsyncCallbackOptions,
    AsyncFailureArgs,
    AsyncSuccessArgs,
)
from slack_bolt.oauth.async_oauth_settings import AsyncOAuthSettings
from slack_bolt.response import BoltResponse
from slack_sdk.oauth.installation_store import Installation
from slack_sdk.oauth.installation_store.async_installation_store import AsyncInstallationStore
from slack_sdk.oauth.state_store.async_state_store import AsyncOAuthStateStore

from src.install.pages import failure_page, success_page
from src.slack.client_cache import ClientCache
from src.storage.credentials import CredentialStore
from src.storage.oauth_state import DEFAULT_STATE_EXPIRATION_SECONDS

INSTALL_PATH = "/auth/install"
CALLBACK_PATH = "/auth/install/callback"
INSTALL_SCOPES = [
    "channels:history",
    "chat:write",
    "files:read",
    "groups:history",
    "im:history",
    "users:read",
]

HTML_HEADERS = {"Content-Type": "text/html; charset=utf-8"}

# Bolt's failure reasons; anything else is an error code sent back by Slack
FAILURE_MESSAGES = {
    "invalid_browser": "The installation was not started from this browser",
    "invalid_state": "Invalid or expired state parameter",
    "missing_code": "Missing code parameter",
    "invalid_code": "Token exchange failed",
}

logger = logging.getLogger(__name__)


class CredentialInstallationStore(AsyncInstallationStore):
    """Bolt installation store that keeps only each team's bot token.

    Tokens are read back through the ClientCache, so the find_* lookups of
    AsyncInstallationStore are not implemented.

    Attributes:
        _credentials: Where installed tokens are written
        _clients: Client cache, invalidated on reinstall
    """

    def __init__(self, credentials: CredentialStore, clients: ClientCache) -> None:
        self._credentials = credentials
        self._clients = clients

    @property
    def logger(self) -> Logger:
        return logger

    async def async_save(self, installation: Installation) -> None:
        """Persist the bot token of a completed installation.

        Raises:
            BoltError: If Slack returned no team or no bot token
        """
        team_id = installation.team_id
        token = installation.bot_token
        if not team_id or not token:
            raise BoltError("Slack did not return a bot token")

        await self._credentials.set(team_id, token)
        self._clients.invalidate(team_id)
        logger.info("Installed on team %s", team_id, extra={"team_id": team_id})


def describe_failure(args: AsyncFailureArgs) -> str:
    if args.error is not None:
        return str(args.error)
    if args.reason in FAILURE_MESSAGES:
        return FAILURE_MESSAGES[args.reason]
    return f"Authorization was not granted: {args.reason}"


async def render_success(args: AsyncSuccessArgs) -> BoltResponse:
    return BoltResponse(
        status=200,
        body=success_page(args.installation.team_name),
        headers=HTML_HEADERS,
    )


async def render_failure(args: AsyncFailureArgs) -> BoltResponse:
    message = describe_failure(args)
    logger.error("Installation failed: %s", message, exc_info=args.error)
    return BoltResponse(status=500, body=failure_page(message), headers=HTML_HEADERS)


def build_oauth_settings(
    client_id: str,
    client_secret: str,
    credentials: CredentialStore,
    clients: ClientCache,
    state_store: AsyncOAuthStateStore,
    redirect_uri: str | None = None,
) -> AsyncOAuthSettings:
    """Configure Bolt's OAuth flow for this app.

    Args:
        client_id: OAuth client ID
        client_secret: OAuth client secret
        credentials: Credential store receiving installed tokens
        clients: Client cache, invalidated on reinstall
        state_store: Issues and consumes OAuth state values
        redirect_uri: Registered redirect URL, if any

    Returns:
        Settings for AsyncApp(oauth_settings=...)
    """
    return AsyncOAuthSettings(
        client_id=client_id,
        client_secret=client_secret,
        scopes=INSTALL_SCOPES,
        user_scopes=[],
        redirect_uri=redirect_uri,
        install_path=INSTALL_PATH,
        install_page_rendering_enabled=False,
        redirect_uri_path=CALLBACK_PATH,
        callback_options=AsyncCallbackOptions(success=render_success, failure=render_failure),
        installation_store=CredentialInstallationStore(credentials, clients),
        state_store=state_store,
        state_expiration_seconds=DEFAULT_STATE_EXPIRATION_SECONDS,
    )
