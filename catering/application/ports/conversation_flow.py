from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from catering.application.dto.activity import ActivityDTO

if TYPE_CHECKING:
    from catering.application.utils.turn_state import TurnState


class ConversationFlowPort(ABC):
    @abstractmethod
    def continue_turn(self, activity: ActivityDTO, state: TurnState) -> list[dict[str, Any]]:
        """Handle a free-text message and return the replies to send."""
        raise NotImplementedError
