"""
Slack event dispatcher module.

Matches inbound messages against an ordered list of rules and issues the
replies and save prompts. Every rule is evaluated on every plain message,
and each matching rule fires independently of the others.

Matching is literal, case-sensitive substring containment.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from slack_sdk.errors import SlackApiError

from src.models import MessageEvent
from src.paste.client import PasteApiError, PasteClientProtocol
from src.slack.client_cache import ClientCache
from src.slack.prompts import (
    LIST_TEXT,
    SAVE_SNIPPET_ACTION_ID,
    code_block_prompt_text,
    confirm_attachments,
    encode_prompt_value,
    snippet_prompt_text,
)
from src.storage.pending import PendingActionStore

CODE_FENCE = "```"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MessageRule:
    """A (pattern, handler) pair.

    Attributes:
        name: Rule name, used in logs
        pattern: Literal substring that triggers the rule
        handler: Coroutine run for matching messages
    """

    name: str
    pattern: str
    handler: Callable[[MessageEvent], Awaitable[None]]

    def matches(self, text: str) -> bool:
        return self.pattern in text


class EventDispatcher:
    """Turns message and file events into Slack replies.

    Attributes:
        _clients: Per-team Web API client cache
        _pending: Store for save prompts awaiting confirmation
        _paste: Paste-hosting API client
        rules: Ordered message rules
    """

    def __init__(
        self,
        clients: ClientCache,
        pending: PendingActionStore,
        paste: PasteClientProtocol,
        list_keyword: str,
    ) -> None:
        self._clients = clients
        self._pending = pending
        self._paste = paste
        self.rules: list[MessageRule] = [
            MessageRule("code_block", CODE_FENCE, self.prompt_code_block),
            MessageRule("list_pastes", list_keyword, self.post_paste_list),
        ]

    async def handle_message(self, event: dict[str, Any], body: dict[str, Any]) -> list[str]:
        """Bolt listener for `message` events.

        Args:
            event: The inbound message event
            body: The full Events API envelope (carries team_id)

        Returns:
            Names of the rules that fired.
        """
        if event.get("subtype") or event.get("bot_id"):
            return []

        message = MessageEvent.from_slack(event, body.get("team_id", ""))
        return await self.dispatch(message)

    async def dispatch(self, message: MessageEvent) -> list[str]:
        """Run every matching rule against a message.

        A failing rule is logged and does not stop the remaining ones.
        """
        fired: list[str] = []
        for rule in self.rules:
            if not rule.matches(message.text):
                continue
            fired.append(rule.name)
            logger.info(
                "Message matched rule %s",
                rule.name,
                extra={"team_id": message.team_id, "channel": message.channel},
            )
            try:
                await rule.handler(message)
            except Exception:
                logger.exception("Rule %s failed", rule.name)
        return fired

    async def prompt_code_block(self, message: MessageEvent) -> None:
        """Offer to save a message containing a code block."""
        client = await self._clients.resolve(message.team_id)
        if client is None:
            logger.warning(
                "No stored credential, dropping code block prompt",
                extra={"team_id": message.team_id},
            )
            return

        try:
            info = await client.users_info(user=message.user)
        except SlackApiError as e:
            logger.error("Failed to fetch profile for %s: %s", message.user, e.response["error"])
            return

        profile = info["user"].get("profile", {})
        message = message.model_copy(
            update={"username": profile.get("display_name") or profile.get("real_name")}
        )
        action = await self._pending.add(message)

        try:
            await client.chat_postMessage(
                channel=message.channel,
                text=code_block_prompt_text(message.user),
                attachments=confirm_attachments(encode_prompt_value(action)),
            )
        except SlackApiError as e:
            logger.error("Failed to post save prompt: %s", e.response["error"])
            await self._pending.discard(action.id)

    async def post_paste_list(self, message: MessageEvent) -> None:
        """Reply with a link to the newest paste."""
        client = await self._clients.resolve(message.team_id)
        if client is None:
            logger.warning(
                "No stored credential, dropping paste list request",
                extra={"team_id": message.team_id},
            )
            return

        try:
            url = await self._paste.latest_paste_url()
        except PasteApiError as e:
            logger.error("Failed to list pastes: %s", e)
            return

        if url is None:
            logger.info("Paste list is empty")
            return

        try:
            await client.chat_postMessage(channel=message.channel, text=LIST_TEXT.format(url=url))
        except SlackApiError as e:
            logger.error("Failed to post paste list: %s", e.response["error"])

    async def handle_file_created(self, event: dict[str, Any], body: dict[str, Any]) -> None:
        """Bolt listener for `file_created` events.

        Snippets get the same save prompt as code blocks, keyed by file ID.
        """
        team_id = body.get("team_id", "")
        file_id = event.get("file_id") or event.get("file", {}).get("id")
        if not file_id:
            return

        client = await self._clients.resolve(team_id)
        if client is None:
            logger.warning("No stored credential, dropping snippet prompt", extra={"team_id": team_id})
            return

        try:
            response = await client.files_info(file=file_id)
        except SlackApiError as e:
            logger.error("Failed to fetch file %s: %s", file_id, e.response["error"])
            return

        file = response["file"]
        if file.get("mode") != "snippet":
            return

        channels = file.get("channels") or []
        if not channels:
            logger.info("Snippet %s is not shared in any channel", file_id)
            return

        try:
            await client.chat_postMessage(
                channel=channels[0],
                text=snippet_prompt_text(file.get("user", "")),
                attachments=confirm_attachments(file_id, SAVE_SNIPPET_ACTION_ID),
            )
        except SlackApiError as e:
            logger.error("Failed to post snippet prompt: %s", e.response["error"])
