from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable

from catering.application.dto.activity import ActivityDTO
from catering.application.exceptions import ActionValidationError, OAuthProtocolError, VerbNotSupportedError
from catering.application.ports.conversation_flow import ConversationFlowPort
from catering.application.ports.state_store import StateStorePort
from catering.application.use_cases.oauth_exchange import OAuthExchangeUseCase
from catering.application.use_cases.order_flow import BLAND_CARD, ERROR_OPTIONS_CARD, OrderFlowUseCase
from catering.application.use_cases.send_reply import SendReplyUseCase
from catering.application.use_cases.validate_action import AdaptiveAction, validate_action
from catering.application.utils.invoke_responses import card_response, client_error_response
from catering.application.utils.replies import WELCOME_HINT, WELCOME_TEXT, card_reply, text_reply
from catering.application.utils.turn_state import TurnState
from catering.domain.entities.invoke_response import InvokeResponse


@dataclass(frozen=True)
class TurnResult:
    """HTTP answer for the inbound activity. `body` is only set for invoke activities."""

    status: int
    body: dict[str, Any] | None = None


class HandleTurnUseCase:
    """
    Routes one inbound activity and writes the user's state back exactly once.

    Without a conversation flow, free-text messages get the fixed fallback card. With one,
    messages are handed to it (the order dialog configuration).
    """

    def __init__(
        self,
        state_store: StateStorePort,
        order_flow: OrderFlowUseCase,
        oauth: OAuthExchangeUseCase,
        send_reply: SendReplyUseCase,
        welcome_channels: Iterable[str] = ("directline", "webchat"),
        conversation_flow: ConversationFlowPort | None = None,
    ) -> None:
        self._state_store = state_store
        self._order_flow = order_flow
        self._oauth = oauth
        self._send_reply = send_reply
        self._welcome_channels = frozenset(welcome_channels)
        self._conversation_flow = conversation_flow
        self._logger = logging.getLogger(__name__)

    def handle(self, activity: ActivityDTO) -> TurnResult:
        state = TurnState(self._state_store, activity.state_key(), activity.user_id)
        result = self._dispatch(activity, state)
        state.save_changes()
        return result

    def _dispatch(self, activity: ActivityDTO, state: TurnState) -> TurnResult:
        if activity.type == "conversationUpdate":
            self._on_members_added(activity)
            return TurnResult(status=200)
        if activity.type == "message":
            self._on_message(activity, state)
            return TurnResult(status=200)
        if activity.type == "invoke":
            return self._on_invoke(activity, state)

        self._logger.info("Activity ignored", extra={"activity_id": activity.id, "reason": activity.type})
        return TurnResult(status=200)

    def _on_members_added(self, activity: ActivityDTO) -> None:
        if activity.channel_id not in self._welcome_channels:
            return
        bot_id = activity.recipient.id if activity.recipient else None
        for member in activity.members_added:
            if member.id == bot_id:
                continue
            self._send_reply.execute(activity, text_reply(WELCOME_TEXT))
            self._send_reply.execute(activity, text_reply(WELCOME_HINT))

    def _on_message(self, activity: ActivityDTO, state: TurnState) -> None:
        if self._conversation_flow is None:
            replies = [card_reply(self._order_flow.plain_card(ERROR_OPTIONS_CARD))]
        else:
            replies = self._conversation_flow.continue_turn(activity, state)
        for reply in replies:
            self._send_reply.execute(activity, reply)

    def _on_invoke(self, activity: ActivityDTO, state: TurnState) -> TurnResult:
        if activity.is_oauth_invoke():
            try:
                response = self._oauth.continue_flow(activity, state)
            except OAuthProtocolError as e:
                error = client_error_response(e.status_code, "BadRequest", str(e))
                return TurnResult(status=e.status_code, body=error.to_wire())
            return TurnResult(status=200, body=response.to_wire())

        if activity.is_adaptive_action():
            return TurnResult(status=200, body=self._on_adaptive_action(activity, state).to_wire())

        self._logger.info("Invoke not implemented", extra={"activity_id": activity.id, "reason": activity.name})
        return TurnResult(status=501)

    def _on_adaptive_action(self, activity: ActivityDTO, state: TurnState) -> InvokeResponse:
        try:
            action = validate_action(activity.value)
            return self._route_action(action, activity, state)
        except ActionValidationError as e:
            self._logger.info("Action rejected", extra={"activity_id": activity.id, "reason": e.code})
            return client_error_response(e.status_code, e.code, e.message)

    def _route_action(self, action: AdaptiveAction, activity: ActivityDTO, state: TurnState) -> InvokeResponse:
        verb = action.verb
        self._logger.info(
            "Adaptive card action",
            extra={"activity_id": activity.id, "verb": verb, "card": action.options.next_card_to_send.name},
        )

        if verb == "next":
            return card_response(self._order_flow.plain_card(BLAND_CARD))
        if verb == "back":
            return card_response(self._order_flow.plain_card(ERROR_OPTIONS_CARD))
        if verb == "err":
            return self._order_flow.process_err(action.options)
        if verb == "order":
            user = state.get_user()
            step = self._order_flow.process_order(user, action.options)
            if step.user != user:
                state.set_user(step.user)
            return step.response
        if verb == "nominal-oauth":
            return self._oauth.start_nominal(activity, state)
        if verb == "sso-oauth":
            return self._oauth.start_sso(activity, state)
        if verb == "signout":
            return self._oauth.sign_out(activity)

        raise VerbNotSupportedError(verb)
