"""
Slack interactive action handler module.

Handles the buttons of the save prompt:
- save_paste: save the original message as a paste and reply with the link
- save_paste_snippet: same, with the content read from a Slack snippet
- dismiss_paste: close the prompt without saving
"""

import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from slack_sdk.errors import SlackApiError

from src.models import MessageEvent, PromptValue
from src.paste.client import PasteApiError, PasteClientProtocol
from src.slack.client_cache import ClientCache
from src.slack.prompts import DISMISSED_TEXT, ERROR_TEXT, EXPIRED_TEXT, SAVED_TEXT
from src.storage.pending import PendingActionStore

logger = logging.getLogger(__name__)

AckFunction = Callable[[], Awaitable[None]]
RespondFunction = Callable[..., Awaitable[Any]]


def parse_prompt_value(value: str) -> PromptValue:
    """Decode the confirm button value.

    Raises:
        json.JSONDecodeError: If the value is not valid JSON
        pydantic.ValidationError: If the JSON does not describe a prompt
    """
    return PromptValue.model_validate(json.loads(value))


class ActionHandler:
    """Handles clicks on the save prompt buttons.

    Attributes:
        _clients: Per-team Web API client cache
        _pending: Store for save prompts awaiting confirmation
        _paste: Paste-hosting API client
    """

    def __init__(
        self,
        clients: ClientCache,
        pending: PendingActionStore,
        paste: PasteClientProtocol,
    ) -> None:
        self._clients = clients
        self._pending = pending
        self._paste = paste

    async def handle_save(
        self,
        ack: AckFunction,
        body: dict[str, Any],
        respond: RespondFunction,
    ) -> str | None:
        """Save the original message as a paste.

        The content comes from the server-side pending record; the button
        value only identifies it. A malformed value is an error and nothing
        is sent to the paste API.

        Args:
            ack: Bolt ack function
            body: Interactive payload
            respond: Bolt respond function (response_url)

        Returns:
            URL of the created paste, or None if nothing was created.

        Raises:
            json.JSONDecodeError: If the button value is not valid JSON
        """
        await ack()

        prompt = parse_prompt_value(body["actions"][0]["value"])
        action = await self._pending.get(prompt.pending_id)
        if action is None:
            logger.warning("Pending action %s is unknown or expired", prompt.pending_id)
            await respond(text=EXPIRED_TEXT, replace_original=True)
            return None

        return await self._save(action.event, action.id, respond, pending_id=action.id)

    async def handle_save_snippet(
        self,
        ack: AckFunction,
        body: dict[str, Any],
        respond: RespondFunction,
    ) -> str | None:
        """Save a Slack snippet as a paste.

        Args:
            ack: Bolt ack function
            body: Interactive payload (button value is the file ID)
            respond: Bolt respond function

        Returns:
            URL of the created paste, or None if nothing was created.
        """
        await ack()

        file_id = body["actions"][0]["value"]
        team_id = body.get("team", {}).get("id", "")
        client = await self._clients.resolve(team_id)
        if client is None:
            logger.warning("No stored credential, dropping snippet save", extra={"team_id": team_id})
            return None

        try:
            response = await client.files_info(file=file_id)
        except SlackApiError as e:
            logger.error("Failed to fetch file %s: %s", file_id, e.response["error"])
            await respond(text=ERROR_TEXT, replace_original=True)
            return None

        file = response["file"]
        content = response.get("content") or file.get("content") or file.get("preview")
        if not content:
            logger.error("Snippet %s has no readable content", file_id)
            await respond(text=ERROR_TEXT, replace_original=True)
            return None

        channels = file.get("channels") or []
        event = MessageEvent(
            team_id=team_id,
            channel=channels[0] if channels else body.get("channel", {}).get("id", ""),
            user=file.get("user", ""),
            text=content,
            ts=str(file.get("created", "")),
        )
        return await self._save(event, f"snippet:{file_id}", respond)

    async def handle_dismiss(
        self,
        ack: AckFunction,
        body: dict[str, Any],
        respond: RespondFunction,
    ) -> None:
        """Close the prompt without saving anything.

        The pending record, if any, is left to expire.
        """
        await ack()
        logger.info("Save prompt dismissed", extra={"user_id": body.get("user", {}).get("id")})
        await respond(text=DISMISSED_TEXT, replace_original=True)

    async def _save(
        self,
        event: MessageEvent,
        idempotency_key: str,
        respond: RespondFunction,
        pending_id: str | None = None,
    ) -> str | None:
        try:
            url = await self._paste.create_paste(event, idempotency_key=idempotency_key)
        except PasteApiError as e:
            logger.error("Failed to save paste: %s", e)
            await respond(text=ERROR_TEXT, replace_original=True)
            return None

        if pending_id is not None:
            await self._pending.discard(pending_id)
        await respond(text=SAVED_TEXT.format(url=url), replace_original=True)
        return url
