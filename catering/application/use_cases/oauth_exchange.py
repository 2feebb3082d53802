from __future__ import annotations

import logging

from catering.application.dto.activity import ActivityDTO
from catering.application.exceptions import OAuthProtocolError
from catering.application.ports.token_provider import TokenProviderPort
from catering.application.utils.invoke_responses import message_response
from catering.application.utils.turn_state import TurnState
from catering.domain.entities.invoke_response import InvokeResponse
from catering.domain.entities.oauth_state import OAuthState
from catering.domain.entities.token_result import TokenResult


class OAuthExchangeUseCase:
    """
    Coordinates the two sign-in flows across turns.

    The nominal flow goes through the platform login redirect; the SSO flow exchanges a
    token the client already holds. At most one flow is pending per user, recorded in
    the turn state so the continuation invoke can be routed to the right provider.
    """

    def __init__(self, nominal: TokenProviderPort, sso: TokenProviderPort) -> None:
        self._nominal = nominal
        self._sso = sso
        self._logger = logging.getLogger(__name__)

    def start_nominal(self, activity: ActivityDTO, state: TurnState) -> InvokeResponse:
        self._set_state(state, OAuthState.PENDING_NOMINAL, activity)
        result = self._nominal.begin(activity)
        return self._finish(result, state, activity, "Received a token right away for nominal oauth")

    def start_sso(self, activity: ActivityDTO, state: TurnState) -> InvokeResponse:
        if activity.authentication_token():
            # The client already ran the SSO prompt; exchange its token now.
            self._set_state(state, OAuthState.IDLE, activity)
            result = self._sso.complete(activity)
            return self._finish(result, state, activity, "Completed SSO token exchange and now have a user token")

        self._set_state(state, OAuthState.PENDING_SSO, activity)
        result = self._sso.begin(activity)
        return self._finish(result, state, activity, "Received a token right away for sso oauth")

    def continue_flow(self, activity: ActivityDTO, state: TurnState) -> InvokeResponse:
        """
        Handle a sign-in continuation invoke.

        Raises:
            OAuthProtocolError: no sign-in flow is pending for this user
        """
        pending = state.get_oauth_state()
        if pending is OAuthState.PENDING_NOMINAL:
            provider, label = self._nominal, "Received a token for nominal oauth"
        elif pending is OAuthState.PENDING_SSO:
            provider, label = self._sso, "Received a token for sso oauth"
        else:
            self._logger.warning(
                "Sign-in continuation without a pending flow",
                extra={"user_id": activity.user_id, "reason": activity.name},
            )
            raise OAuthProtocolError(activity.name)

        self._set_state(state, OAuthState.IDLE, activity)
        result = provider.complete(activity)
        return self._finish(result, state, activity, label)

    def sign_out(self, activity: ActivityDTO) -> InvokeResponse:
        # Both connections are signed out; the pending flag may not reflect what the user signed into.
        response = self._nominal.sign_out(activity)
        response = self._sso.sign_out(activity)
        self._logger.info("Signed out", extra={"user_id": activity.user_id})
        return response

    def _finish(self, result: TokenResult, state: TurnState, activity: ActivityDTO, label: str) -> InvokeResponse:
        if result.token:
            self._set_state(state, OAuthState.IDLE, activity)
            return message_response(f"{label}: {result.token}")
        if result.response is None:
            raise RuntimeError("Token provider returned neither a token nor a response")
        return result.response

    def _set_state(self, state: TurnState, oauth_state: OAuthState, activity: ActivityDTO) -> None:
        if state.get_oauth_state() is oauth_state:
            return
        state.set_oauth_state(oauth_state)
        self._logger.info(
            "OAuth state changed",
            extra={"user_id": activity.user_id, "reason": oauth_state.value},
        )
