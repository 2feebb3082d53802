from __future__ import annotations

import copy
import json
import logging
import re
import threading
from pathlib import Path
from typing import Any

from catering.application.ports.card_store import CardStorePort

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

_PLACEHOLDER = re.compile(r"\$\{(\w+)\}")
_WHOLE_PLACEHOLDER = re.compile(r"^\$\{(\w+)\}$")


class FileCardStore(CardStorePort):
    """Adaptive card templates stored as `<name>.json` files, read once and cached."""

    def __init__(self, cards_dir: str | Path | None = None) -> None:
        self._cards_dir = Path(cards_dir) if cards_dir else TEMPLATES_DIR
        self._cache: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def load(self, name: str) -> dict[str, Any]:
        with self._lock:
            if name not in self._cache:
                path = self._cards_dir / f"{name}.json"
                with open(path, "r", encoding="utf-8") as f:
                    self._cache[name] = json.load(f)
                self._logger.debug("Card template loaded", extra={"card": name})
            return copy.deepcopy(self._cache[name])

    def render(self, name: str, data: dict[str, Any] | None = None) -> dict[str, Any]:
        return _bind(self.load(name), data or {})


def _bind(node: Any, data: dict[str, Any]) -> Any:
    if isinstance(node, dict):
        return {key: _bind(value, data) for key, value in node.items()}
    if isinstance(node, list):
        out: list[Any] = []
        for item in node:
            if isinstance(item, dict) and "$data" in item:
                # Repeat the element once per entry of the bound list.
                template = {k: v for k, v in item.items() if k != "$data"}
                for entry in _resolve_items(item["$data"], data):
                    scope = {**data, **entry} if isinstance(entry, dict) else data
                    out.append(_bind(template, scope))
            else:
                out.append(_bind(item, data))
        return out
    if isinstance(node, str):
        whole = _WHOLE_PLACEHOLDER.match(node)
        if whole:
            return data.get(whole.group(1), "")
        return _PLACEHOLDER.sub(lambda m: _to_text(data.get(m.group(1), "")), node)
    return node


def _resolve_items(expression: Any, data: dict[str, Any]) -> list[Any]:
    if isinstance(expression, list):
        return expression
    if isinstance(expression, str):
        whole = _WHOLE_PLACEHOLDER.match(expression)
        if whole:
            value = data.get(whole.group(1))
            return list(value) if isinstance(value, (list, tuple)) else []
    return []


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
