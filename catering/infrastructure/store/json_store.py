from __future__ import annotations

import hashlib
import json
import logging
import threading
from pathlib import Path
from typing import Any

from catering.application.ports.order_repository import OrderRepositoryPort
from catering.application.ports.state_store import StateStorePort
from catering.application.utils.user_codec import deserialize_user, serialize_user
from catering.domain.entities.user import User
from catering.infrastructure.store.memory_store import ordered_at


def _write_json_atomic(file_path: Path, data: Any) -> None:
    """Save data to a JSON file atomically."""
    temp_path = file_path.with_suffix(".json.tmp")
    try:
        with open(temp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        temp_path.replace(file_path)
    except Exception:
        if temp_path.exists():
            temp_path.unlink()
        raise


class JsonStateStore(StateStorePort):
    def __init__(self, data_dir: str = "./data/state") -> None:
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._locks: dict[str, threading.Lock] = {}
        self._lock_lock = threading.Lock()  # guards the locks dict
        self._logger = logging.getLogger(__name__)

    def _get_lock(self, key: str) -> threading.Lock:
        """Get or create a lock for a state key."""
        with self._lock_lock:
            if key not in self._locks:
                self._locks[key] = threading.Lock()
            return self._locks[key]

    def _get_file_path(self, key: str) -> Path:
        # Keys contain slashes and channel-provided ids; hash them into a flat file name.
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
        return self._data_dir / f"{digest}.json"

    def read(self, key: str) -> dict[str, Any] | None:
        file_path = self._get_file_path(key)
        with self._get_lock(key):
            if not file_path.exists():
                return None
            try:
                with open(file_path, "r", encoding="utf-8") as f:
                    data = json.load(f)
            except json.JSONDecodeError:
                self._logger.warning("Corrupted state file ignored", extra={"reason": str(file_path)})
                return None
        return data.get("document") if isinstance(data, dict) else None

    def write(self, key: str, document: dict[str, Any]) -> None:
        with self._get_lock(key):
            _write_json_atomic(self._get_file_path(key), {"key": key, "document": document, "version": 1})


class JsonOrderRepository(OrderRepositoryPort):
    """All confirmed orders in one JSON file, one entry per user (latest order wins)."""

    def __init__(self, data_dir: str = "./data") -> None:
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._file_path = self._data_dir / "orders.json"
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def _load(self) -> dict[str, dict[str, Any]]:
        if not self._file_path.exists():
            return {}
        try:
            with open(self._file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError:
            self._logger.warning("Corrupted orders file ignored", extra={"reason": str(self._file_path)})
            return {}
        return data.get("orders", {}) if isinstance(data, dict) else {}

    def get_recent_orders(self, limit: int = 10) -> list[User]:
        with self._lock:
            orders = self._load()
        users = [deserialize_user(entry) for entry in orders.values()]
        users.sort(key=ordered_at, reverse=True)
        return users[:limit]

    def upsert_order(self, user: User) -> None:
        with self._lock:
            orders = self._load()
            orders[user.id] = serialize_user(user)
            _write_json_atomic(self._file_path, {"orders": orders, "version": 1})
        self._logger.info("Order upserted", extra={"user_id": user.id})
