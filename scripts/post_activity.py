#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import time
from typing import Any

import httpx
from httpx import ConnectError


def build_activity(kind: str, user_id: str, conversation_id: str, text: str, verb: str, data: str) -> dict[str, Any]:
    now_ms = int(time.time() * 1000)
    activity: dict[str, Any] = {
        "id": f"act_{now_ms}",
        "channelId": "webchat",
        "serviceUrl": "http://127.0.0.1:8001/mock-connector/",
        "from": {"id": user_id, "name": "Local User"},
        "recipient": {"id": "catering-bot", "name": "Catering"},
        "conversation": {"id": conversation_id},
    }
    if kind == "message":
        activity.update(type="message", text=text)
    elif kind == "join":
        activity.update(type="conversationUpdate", membersAdded=[{"id": user_id}])
    elif kind == "action":
        activity.update(
            type="invoke",
            name="adaptiveCard/action",
            value={"action": {"type": "Action.Execute", "verb": verb, "data": json.loads(data)}},
        )
    elif kind == "verify":
        activity.update(type="invoke", name="signin/verifyState", value={"state": text})
    else:
        raise ValueError(f"Unknown activity kind: {kind}")
    return activity


def main() -> None:
    parser = argparse.ArgumentParser(description="Send a test activity to the bot's messaging endpoint")
    parser.add_argument("kind", choices=["message", "join", "action", "verify"])
    parser.add_argument("--url", default="http://127.0.0.1:8001/api/messages")
    parser.add_argument("--user", default="user_123")
    parser.add_argument("--conversation", default="conv_456")
    parser.add_argument("--text", default="hello", help="message text, or the magic code for verify")
    parser.add_argument("--verb", default="order")
    parser.add_argument("--data", default='{"currentCard": 11, "nextCardToSend": 0}', help="action data as JSON")
    args = parser.parse_args()

    payload = build_activity(args.kind, args.user, args.conversation, args.text, args.verb, args.data)

    try:
        resp = httpx.post(args.url, json=payload, timeout=10.0)
    except ConnectError:
        print("Connection refused. Is the FastAPI server running?")
        print("Try: uvicorn catering.main:app --reload --port 8001")
        return

    print(resp.status_code)
    if resp.text:
        print(json.dumps(resp.json(), indent=2) if resp.headers.get("content-type", "").startswith("application/json") else resp.text)


if __name__ == "__main__":
    main()
