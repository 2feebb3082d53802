#!/usr/bin/env python3
"""
Interactive local chat harness (no HTTP, no Bot Framework).

Usage:
  python3 scripts/chat_local.py

What it does:
- Keeps a stable user and conversation for the session
- Sends typed messages through HandleTurnUseCase with in-memory stores and mock adapters
- Shows the cards the bot sends and lets you press their buttons by number
"""

from __future__ import annotations

import json
import sys
import time
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from catering.application.dto.activity import ADAPTIVE_CARD_ACTION, SIGNIN_VERIFY_STATE, ActivityDTO
from catering.application.use_cases.handle_turn import HandleTurnUseCase
from catering.application.use_cases.oauth_exchange import OAuthExchangeUseCase
from catering.application.use_cases.order_flow import OrderFlowUseCase
from catering.application.use_cases.send_reply import SendReplyUseCase
from catering.infrastructure.botframework.mock_connector import MockConnector
from catering.infrastructure.botframework.mock_token_provider import MockTokenProvider
from catering.infrastructure.cards.file_card_store import FileCardStore
from catering.infrastructure.dialog.keyword_flow import KeywordOrderFlow
from catering.infrastructure.llm.menu_recognizer import MenuRecognizer
from catering.infrastructure.store.memory_store import MemoryOrderRepository, MemoryStateStore


def _build_dispatcher(connector: MockConnector) -> HandleTurnUseCase:
    order_flow = OrderFlowUseCase(
        cards=FileCardStore(),
        orders=MemoryOrderRepository(),
        recognizer=MenuRecognizer(),
        display_timezone=ZoneInfo("America/Los_Angeles"),
    )
    return HandleTurnUseCase(
        state_store=MemoryStateStore(),
        order_flow=order_flow,
        oauth=OAuthExchangeUseCase(
            nominal=MockTokenProvider("NonSSOBotApp"),
            sso=MockTokenProvider("BotApp"),
        ),
        send_reply=SendReplyUseCase(connector=connector),
        conversation_flow=KeywordOrderFlow(order_flow),
    )


def _activity(user_id: str, **fields: Any) -> ActivityDTO:
    payload = {
        "id": f"local_{int(time.time() * 1000)}",
        "channelId": "webchat",
        "from": {"id": user_id},
        "recipient": {"id": "catering-bot"},
        "conversation": {"id": f"conv_{user_id}"},
        **fields,
    }
    return ActivityDTO.model_validate(payload)


def _print_card(card: dict[str, Any]) -> list[dict[str, Any]]:
    for item in card.get("body", []):
        if item.get("type") == "TextBlock" and item.get("text"):
            print(f"  {item['text']}")
        elif item.get("type") == "FactSet":
            for fact in item.get("facts", []):
                print(f"  {fact['title']}: {fact['value']}")
        elif item.get("type") == "Container":
            print("  - " + " / ".join(i.get("text", "") for i in item.get("items", [])))
    actions = card.get("actions", [])
    for i, action in enumerate(actions, 1):
        print(f"  [{i}] {action.get('title')}")
    return actions


def _print_replies(connector: MockConnector) -> list[dict[str, Any]]:
    actions: list[dict[str, Any]] = []
    for reply in connector.sent:
        if reply.get("text"):
            print(f"(bot) {reply['text']}")
        for attachment in reply.get("attachments", []):
            actions = _print_card(attachment["content"])
    connector.sent.clear()
    return actions


def main() -> None:
    user_id = "local_user_1"
    connector = MockConnector()
    dispatcher = _build_dispatcher(connector)
    actions: list[dict[str, Any]] = []

    print("\nLocal Chat Harness")
    print("-" * 60)
    print("Type a message, a button number, or /code <magic code>.")
    print("Commands: /new (new user), /quit")
    print("-" * 60)
    dispatcher.handle(_activity(user_id, type="conversationUpdate", membersAdded=[{"id": user_id}]))
    _print_replies(connector)

    while True:
        try:
            user_text = input("\n> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            return

        if not user_text:
            continue
        if user_text in ("/quit", "/exit"):
            print("Bye!")
            return
        if user_text == "/new":
            user_id = f"local_user_{int(time.time())}"
            print(f"New user: {user_id}")
            continue

        if user_text.startswith("/code "):
            activity = _activity(user_id, type="invoke", name=SIGNIN_VERIFY_STATE, value={"state": user_text[6:]})
        elif user_text.isdigit() and 0 < int(user_text) <= len(actions):
            action = actions[int(user_text) - 1]
            custom = input("  typed text (Enter to skip): ").strip()
            data = dict(action.get("data") or {})
            if custom:
                data["custom"] = custom
            activity = _activity(
                user_id,
                type="invoke",
                name=ADAPTIVE_CARD_ACTION,
                value={"action": {"type": "Action.Execute", "verb": action.get("verb"), "data": data}},
            )
        else:
            activity = _activity(user_id, type="message", text=user_text)

        try:
            result = dispatcher.handle(activity)
        except Exception as e:
            print(f"ERROR: {type(e).__name__}: {e}")
            continue

        if result.body is None:
            actions = _print_replies(connector) or actions
            continue

        print(f"\n--- Invoke response (HTTP {result.status}) ---")
        print(f"statusCode: {result.body['statusCode']}  type: {result.body['type']}")
        value = result.body["value"]
        if isinstance(value, dict) and value.get("type") == "AdaptiveCard":
            actions = _print_card(value)
        else:
            print(json.dumps(value, indent=2))
        print("-" * 60)


if __name__ == "__main__":
    main()
