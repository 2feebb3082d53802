from __future__ import annotations

from datetime import datetime
from typing import Any

from catering.domain.entities.user import Lunch, User


def serialize_user(user: User) -> dict[str, Any]:
    lunch = user.lunch
    return {
        "id": user.id,
        "lunch": {
            "entree": lunch.entree,
            "drink": lunch.drink,
            "order_timestamp": lunch.order_timestamp.isoformat() if lunch.order_timestamp else None,
        },
    }


def deserialize_user(data: dict[str, Any]) -> User:
    lunch_data = data.get("lunch") or {}

    order_timestamp = None
    if lunch_data.get("order_timestamp"):
        try:
            order_timestamp = datetime.fromisoformat(lunch_data["order_timestamp"])
        except (ValueError, TypeError):
            pass

    return User(
        id=str(data.get("id", "")),
        lunch=Lunch(
            entree=lunch_data.get("entree"),
            drink=lunch_data.get("drink"),
            order_timestamp=order_timestamp,
        ),
    )
