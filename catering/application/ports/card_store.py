from abc import ABC, abstractmethod
from typing import Any


class CardStorePort(ABC):
    @abstractmethod
    def load(self, name: str) -> dict[str, Any]:
        """Return a copy of the named card template."""
        raise NotImplementedError

    @abstractmethod
    def render(self, name: str, data: dict[str, Any] | None = None) -> dict[str, Any]:
        """Return the named card with its placeholders bound to `data`."""
        raise NotImplementedError
