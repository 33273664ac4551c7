"""
Unit tests for the prompt builders.
"""

import json

from src.models import MessageEvent, PendingAction
from src.slack.prompts import (
    BUTTON_VALUE_LIMIT,
    DISMISS_ACTION_ID,
    DISMISS_VALUE,
    SAVE_ACTION_ID,
    code_block_prompt_text,
    confirm_attachments,
    encode_prompt_value,
)

PENDING_ID = "a1b2c3d4-e5f6-4a7b-8c9d-0e1f2a3b4c5d"


class TestConfirmAttachments:
    def test_two_buttons(self) -> None:
        attachments = confirm_attachments("value-1")

        elements = attachments[0]["blocks"][0]["elements"]
        assert len(elements) == 2
        save, dismiss = elements
        assert save["action_id"] == SAVE_ACTION_ID
        assert save["value"] == "value-1"
        assert save["style"] == "primary"
        assert dismiss["action_id"] == DISMISS_ACTION_ID
        assert dismiss["value"] == DISMISS_VALUE
        assert dismiss["style"] == "danger"

    def test_custom_save_action_id(self) -> None:
        elements = confirm_attachments("F1", "save_paste_snippet")[0]["blocks"][0]["elements"]

        assert elements[0]["action_id"] == "save_paste_snippet"


class TestEncodePromptValue:
    def test_carries_full_event(self, code_message: MessageEvent) -> None:
        action = PendingAction(id=PENDING_ID, event=code_message, created_at=1.0)

        value = json.loads(encode_prompt_value(action))

        assert value["pending_id"] == PENDING_ID
        assert value["event"]["text"] == code_message.text

    def test_long_text_is_left_to_the_server_copy(self) -> None:
        event = MessageEvent(team_id="T1", channel="C1", user="U1", text="```" + "x" * 5000 + "```")
        action = PendingAction(id=PENDING_ID, event=event, created_at=1.0)

        encoded = encode_prompt_value(action)

        assert len(encoded) <= BUTTON_VALUE_LIMIT
        value = json.loads(encoded)
        assert value["pending_id"] == PENDING_ID
        assert value["event"]["text"] == ""
        assert value["event"]["channel"] == "C1"


def test_prompt_text_mentions_user() -> None:
    assert "<@U1>" in code_block_prompt_text("U1")
