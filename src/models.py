"""
Data models.

Pydantic models for the transient objects that flow through the bot:
- MessageEvent: the parts of an inbound message the bot acts on
- PendingAction: a save prompt awaiting the user's decision
- PromptValue: what the confirm button carries back on click
"""

from typing import Any

from pydantic import BaseModel, Field


class MessageEvent(BaseModel):
    """An inbound message event.

    Attributes:
        team_id: Team (workspace) the event was delivered for
        channel: Channel the message was posted in
        user: Sender's user ID
        text: Message text
        ts: Message timestamp
        subtype: Slack message subtype; None for plain user messages
        username: Sender's display name, filled in before prompting
    """

    team_id: str
    channel: str
    user: str = ""
    text: str = ""
    ts: str = ""
    subtype: str | None = None
    username: str | None = None

    @classmethod
    def from_slack(cls, event: dict[str, Any], team_id: str) -> "MessageEvent":
        """Build a MessageEvent from a raw Slack event.

        Args:
            event: The `event` object of an Events API envelope
            team_id: The envelope's team_id

        Returns:
            The parsed MessageEvent
        """
        return cls(
            team_id=team_id,
            channel=event.get("channel", ""),
            user=event.get("user", ""),
            text=event.get("text") or "",
            ts=event.get("ts", ""),
            subtype=event.get("subtype"),
        )


class PendingAction(BaseModel):
    """A save prompt waiting for confirmation.

    The server-side record is the authoritative copy of the content to save.

    Attributes:
        id: Opaque identifier (UUID v4)
        event: The message that triggered the prompt
        created_at: Unix timestamp of creation
    """

    id: str = Field(..., pattern=r"^[0-9a-f-]{36}$")
    event: MessageEvent
    created_at: float


class PromptValue(BaseModel):
    """Value of the confirm button.

    Attributes:
        pending_id: ID of the server-side PendingAction
        event: Serialized copy of the original message
    """

    pending_id: str
    event: MessageEvent
