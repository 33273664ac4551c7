"""Builders for the save prompt and its replies."""

from typing import Any

from src.models import PendingAction, PromptValue

SAVE_ACTION_ID = "save_paste"
SAVE_SNIPPET_ACTION_ID = "save_paste_snippet"
DISMISS_ACTION_ID = "dismiss_paste"
DISMISS_VALUE = "dismiss"

# Slack rejects button values longer than this.
BUTTON_VALUE_LIMIT = 2000

SAVED_TEXT = "I saved it as a gist for you. You can find it here:\n{url}"
ERROR_TEXT = "Sorry, there's been an error. Try again later."
EXPIRED_TEXT = "Sorry, that request has expired. Paste the code again to get a new prompt."
DISMISSED_TEXT = "No problem, I won't save it."
LIST_TEXT = "Your gists are here:\n{url}"


def code_block_prompt_text(user_id: str) -> str:
    return (
        f"Hey, <@{user_id}>, looks like you pasted a code block. "
        "Want me to save it for you as a Gist? :floppy_disk:"
    )


def snippet_prompt_text(user_id: str) -> str:
    return (
        f"Hey, <@{user_id}>, looks like you made a code snippet. "
        "Want me to save it for you as a Gist? :floppy_disk:"
    )


def encode_prompt_value(action: PendingAction) -> str:
    """Serialize the confirm button value for a pending action.

    The full event is carried when it fits; otherwise the text is left out
    and the server-side record supplies it on confirm.
    """
    value = PromptValue(pending_id=action.id, event=action.event).model_dump_json()
    if len(value) <= BUTTON_VALUE_LIMIT:
        return value
    trimmed = action.event.model_copy(update={"text": ""})
    return PromptValue(pending_id=action.id, event=trimmed).model_dump_json()


def _button(text: str, value: str, action_id: str, style: str) -> dict[str, Any]:
    return {
        "type": "button",
        "text": {"type": "plain_text", "emoji": True, "text": text},
        "value": value,
        "action_id": action_id,
        "style": style,
    }


def confirm_attachments(save_value: str, save_action_id: str = SAVE_ACTION_ID) -> list[dict[str, Any]]:
    """Attachments holding the "Yeah" / "Nah" buttons.

    Args:
        save_value: Value of the confirm button
        save_action_id: Action ID of the confirm button

    Returns:
        The `attachments` argument for chat.postMessage
    """
    return [
        {
            "blocks": [
                {
                    "type": "actions",
                    "elements": [
                        _button("Yeah", save_value, save_action_id, "primary"),
                        _button("Nah", DISMISS_VALUE, DISMISS_ACTION_ID, "danger"),
                    ],
                }
            ]
        }
    ]
