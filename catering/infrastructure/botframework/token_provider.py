from __future__ import annotations

import base64
import json
import logging

import httpx

from catering.application.dto.activity import ActivityDTO
from catering.application.exceptions import TokenServiceError
from catering.application.ports.token_provider import TokenProviderPort
from catering.application.utils.invoke_responses import (
    client_error_response,
    login_request_response,
    message_response,
)
from catering.domain.entities.invoke_response import InvokeResponse
from catering.domain.entities.token_result import TokenResult
from catering.infrastructure.botframework.credentials import BotFrameworkCredentials


class BotFrameworkTokenProvider(TokenProviderPort):
    """User tokens for one OAuth connection, via the Bot Framework token service."""

    def __init__(
        self,
        connection_name: str,
        credentials: BotFrameworkCredentials,
        base_url: str = "https://api.botframework.com",
        client: httpx.Client | None = None,
    ) -> None:
        self._connection_name = connection_name
        self._credentials = credentials
        self._base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(timeout=10.0)
        self._logger = logging.getLogger(__name__)

    @property
    def connection_name(self) -> str:
        return self._connection_name

    def begin(self, activity: ActivityDTO) -> TokenResult:
        return self._acquire(activity)

    def complete(self, activity: ActivityDTO) -> TokenResult:
        return self._acquire(activity)

    def sign_out(self, activity: ActivityDTO) -> InvokeResponse:
        resp = self._client.delete(
            f"{self._base_url}/api/usertoken/SignOut",
            params=self._user_params(activity),
            headers=self._credentials.authorization_header(),
        )
        self._raise_for_status(resp, "sign out")
        self._logger.info("User signed out", extra={"connection": self._connection_name, "user_id": activity.user_id})
        return message_response(f"Signed out of {self._connection_name}.")

    def _acquire(self, activity: ActivityDTO) -> TokenResult:
        sso_token = activity.authentication_token()
        if sso_token:
            token = self._exchange(activity, sso_token)
            if token:
                return TokenResult(token=token)
            return TokenResult(
                response=client_error_response(412, "PreconditionFailed", "The SSO token could not be exchanged.")
            )

        token = self._get_token(activity, activity.magic_code())
        if token:
            return TokenResult(token=token)
        return TokenResult(response=login_request_response(self._sign_in_url(activity)))

    def _get_token(self, activity: ActivityDTO, code: str | None) -> str | None:
        params = self._user_params(activity)
        if code:
            params["code"] = code
        resp = self._client.get(
            f"{self._base_url}/api/usertoken/GetToken",
            params=params,
            headers=self._credentials.authorization_header(),
        )
        if resp.status_code == 404:
            return None
        self._raise_for_status(resp, "get token")
        return (resp.json() or {}).get("token")

    def _exchange(self, activity: ActivityDTO, sso_token: str) -> str | None:
        resp = self._client.post(
            f"{self._base_url}/api/usertoken/exchange",
            params=self._user_params(activity),
            json={"token": sso_token},
            headers=self._credentials.authorization_header(),
        )
        if resp.status_code >= 400:
            self._logger.warning(
                "SSO token exchange refused",
                extra={"connection": self._connection_name, "status": resp.status_code},
            )
            return None
        return (resp.json() or {}).get("token")

    def _sign_in_url(self, activity: ActivityDTO) -> str:
        state = {
            "ConnectionName": self._connection_name,
            "Conversation": {
                "activityId": activity.id,
                "bot": activity.recipient.model_dump() if activity.recipient else None,
                "channelId": activity.channel_id,
                "conversation": {"id": activity.conversation_id},
                "serviceUrl": activity.service_url,
                "user": activity.from_.model_dump() if activity.from_ else None,
            },
            "MsAppId": self._credentials.app_id,
        }
        encoded = base64.b64encode(json.dumps(state).encode("utf-8")).decode("ascii")
        resp = self._client.get(
            f"{self._base_url}/api/botsignin/GetSignInUrl",
            params={"state": encoded},
            headers=self._credentials.authorization_header(),
        )
        self._raise_for_status(resp, "get sign-in url")
        return resp.text.strip().strip('"')

    def _user_params(self, activity: ActivityDTO) -> dict[str, str]:
        return {
            "userId": activity.user_id,
            "connectionName": self._connection_name,
            "channelId": activity.channel_id,
        }

    def _raise_for_status(self, resp: httpx.Response, what: str) -> None:
        if resp.status_code < 400:
            return
        self._logger.error(
            "Token service request failed",
            extra={"connection": self._connection_name, "status": resp.status_code, "reason": what},
        )
        raise TokenServiceError(f"Token service {what} failed with status {resp.status_code}")
