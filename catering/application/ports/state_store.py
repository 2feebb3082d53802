from abc import ABC, abstractmethod
from typing import Any


class StateStorePort(ABC):
    """Keyed storage for per conversation, per user state documents."""

    @abstractmethod
    def read(self, key: str) -> dict[str, Any] | None:
        raise NotImplementedError

    @abstractmethod
    def write(self, key: str, document: dict[str, Any]) -> None:
        raise NotImplementedError
