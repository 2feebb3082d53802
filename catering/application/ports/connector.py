from abc import ABC, abstractmethod
from typing import Any

from catering.application.dto.activity import ActivityDTO


class ConnectorPort(ABC):
    @abstractmethod
    def send_activity(self, activity: ActivityDTO, reply: dict[str, Any]) -> None:
        """Post `reply` into the conversation `activity` came from."""
        raise NotImplementedError
