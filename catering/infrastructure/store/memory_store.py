from __future__ import annotations

import copy
import threading
from datetime import datetime, timezone
from typing import Any

from catering.application.ports.order_repository import OrderRepositoryPort
from catering.application.ports.state_store import StateStorePort
from catering.domain.entities.user import User


class MemoryStateStore(StateStorePort):
    def __init__(self) -> None:
        self._documents: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()

    def read(self, key: str) -> dict[str, Any] | None:
        with self._lock:
            document = self._documents.get(key)
            return copy.deepcopy(document) if document is not None else None

    def write(self, key: str, document: dict[str, Any]) -> None:
        with self._lock:
            self._documents[key] = copy.deepcopy(document)


class MemoryOrderRepository(OrderRepositoryPort):
    def __init__(self) -> None:
        self._orders: dict[str, User] = {}
        self._lock = threading.Lock()

    def get_recent_orders(self, limit: int = 10) -> list[User]:
        with self._lock:
            users = list(self._orders.values())
        users.sort(key=ordered_at, reverse=True)
        return users[:limit]

    def upsert_order(self, user: User) -> None:
        with self._lock:
            self._orders[user.id] = user


def ordered_at(user: User) -> datetime:
    value = user.lunch.order_timestamp
    if value is None:
        return datetime.min.replace(tzinfo=timezone.utc)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
