from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any

from catering.application.dto.activity import ActivityDTO
from catering.application.ports.conversation_flow import ConversationFlowPort
from catering.application.use_cases.order_flow import ENTREE_CARD, OrderFlowUseCase
from catering.application.utils.replies import card_reply
from catering.application.utils.turn_state import TurnState
from catering.domain.entities.user import Lunch

RECENTS_PHRASES = frozenset({"recents", "recent", "recent orders", "show recent orders", "history"})


def is_recents_request(text: str) -> bool:
    normalized = " ".join(text.lower().strip(" .!?").split())
    return normalized in RECENTS_PHRASES


class KeywordOrderFlow(ConversationFlowPort):
    """Free text either asks for recent orders or starts a new lunch order from an empty lunch."""

    def __init__(self, order_flow: OrderFlowUseCase) -> None:
        self._order_flow = order_flow
        self._logger = logging.getLogger(__name__)

    def continue_turn(self, activity: ActivityDTO, state: TurnState) -> list[dict[str, Any]]:
        text = activity.text or ""
        if is_recents_request(text):
            self._logger.info("Recent orders requested", extra={"user_id": activity.user_id})
            return [card_reply(self._order_flow.recent_orders_card())]

        user = state.get_user()
        if user.lunch != Lunch():
            state.set_user(replace(user, lunch=Lunch()))
        self._logger.info("Order started", extra={"user_id": activity.user_id})
        return [card_reply(self._order_flow.options_card(ENTREE_CARD))]
