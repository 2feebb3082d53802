from __future__ import annotations

from typing import Any

from catering.domain.entities.invoke_response import ContentType

WELCOME_TEXT = "Welcome. This bot will introduce you to Action.Execute in Adaptive Cards."
WELCOME_HINT = "Type anything to see a card here, or type recents to see recent orders."


def text_reply(text: str) -> dict[str, Any]:
    return {"type": "message", "text": text}


def card_reply(card: dict[str, Any]) -> dict[str, Any]:
    return {
        "type": "message",
        "attachments": [{"contentType": ContentType.CARD.mime_type, "content": card}],
    }
