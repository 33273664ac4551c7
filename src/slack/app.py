"""
Slack Bolt app module.

Builds the AsyncApp that verifies and routes event and action deliveries:
- Request signatures are checked by Bolt with the signing secret
- Tokens come from the client cache through Bolt's `authorize` hook
- Installation runs through Bolt's OAuth flow, writing to the credential store
- Listeners are the EventDispatcher and ActionHandler methods (dependency injection)
"""

import logging
from typing import Any

from slack_bolt.async_app import AsyncApp
from slack_bolt.oauth.async_oauth_settings import AsyncOAuthSettings

from src.slack.actions import ActionHandler
from src.slack.client_cache import ClientCache, ClientCacheAuthorize
from src.slack.events import EventDispatcher
from src.slack.prompts import DISMISS_ACTION_ID, SAVE_ACTION_ID, SAVE_SNIPPET_ACTION_ID

logger = logging.getLogger(__name__)


async def handle_listener_error(error: Exception, body: dict[str, Any]) -> None:
    """Global Bolt error handler.

    Logs the failure so one broken delivery does not affect the others.

    Args:
        error: Exception raised by a listener
        body: Request body of the failed delivery
    """
    logger.error(
        "An error occurred while handling a Slack request: %s",
        error,
        exc_info=error,
        extra={"team_id": body.get("team_id") or body.get("team", {}).get("id")},
    )


def create_bolt_app(
    signing_secret: str,
    clients: ClientCache,
    dispatcher: EventDispatcher,
    actions: ActionHandler,
    oauth_settings: AsyncOAuthSettings,
) -> AsyncApp:
    """Create the Bolt app and register every listener.

    Args:
        signing_secret: Slack signing secret
        clients: Per-team client cache used for authorization
        dispatcher: Message and file event listeners
        actions: Save prompt button listeners
        oauth_settings: Installation flow settings (see src.install.flow)

    Returns:
        The configured AsyncApp
    """
    app = AsyncApp(
        signing_secret=signing_secret,
        authorize=ClientCacheAuthorize(clients),
        oauth_settings=oauth_settings,
    )

    app.event("message")(dispatcher.handle_message)
    app.event("file_created")(dispatcher.handle_file_created)

    app.action(SAVE_ACTION_ID)(actions.handle_save)
    app.action(SAVE_SNIPPET_ACTION_ID)(actions.handle_save_snippet)
    app.action(DISMISS_ACTION_ID)(actions.handle_dismiss)

    app.error(handle_listener_error)

    logger.info("Slack listeners registered")
    return app
