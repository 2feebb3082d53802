from __future__ import annotations

import logging
import secrets
from urllib.parse import urlencode

from catering.application.dto.activity import ActivityDTO
from catering.application.ports.token_provider import TokenProviderPort
from catering.application.utils.invoke_responses import login_request_response, message_response
from catering.domain.entities.invoke_response import InvokeResponse
from catering.domain.entities.token_result import TokenResult


class MockTokenProvider(TokenProviderPort):
    """In-memory token provider: any magic code or SSO token signs the user in."""

    def __init__(self, connection_name: str, login_url: str = "https://token.botframework.com/mock/signin") -> None:
        self._connection_name = connection_name
        self._login_url = login_url
        self._tokens: dict[str, str] = {}
        self._logger = logging.getLogger(__name__)

    @property
    def connection_name(self) -> str:
        return self._connection_name

    def begin(self, activity: ActivityDTO) -> TokenResult:
        return self._acquire(activity)

    def complete(self, activity: ActivityDTO) -> TokenResult:
        return self._acquire(activity)

    def sign_out(self, activity: ActivityDTO) -> InvokeResponse:
        self._tokens.pop(activity.user_id, None)
        self._logger.info("Mock sign out", extra={"connection": self._connection_name, "user_id": activity.user_id})
        return message_response(f"Signed out of {self._connection_name}.")

    def _acquire(self, activity: ActivityDTO) -> TokenResult:
        user_id = activity.user_id
        if activity.authentication_token() or activity.magic_code():
            self._tokens[user_id] = f"mock-{self._connection_name}-{secrets.token_hex(8)}"
        token = self._tokens.get(user_id)
        if token:
            return TokenResult(token=token)

        query = urlencode({"connectionName": self._connection_name, "userId": user_id})
        return TokenResult(response=login_request_response(f"{self._login_url}?{query}"))
