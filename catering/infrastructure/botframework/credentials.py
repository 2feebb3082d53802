from __future__ import annotations

import logging
import time

import httpx

from catering.application.exceptions import TokenServiceError

LOGIN_URL = "https://login.microsoftonline.com/{tenant}/oauth2/v2.0/token"
BOT_FRAMEWORK_SCOPE = "https://api.botframework.com/.default"
REFRESH_MARGIN_SECONDS = 300


class BotFrameworkCredentials:
    """App access token from the client credentials grant, cached until shortly before it expires."""

    def __init__(
        self,
        app_id: str,
        app_password: str,
        tenant: str = "botframework.com",
        scope: str = BOT_FRAMEWORK_SCOPE,
        client: httpx.Client | None = None,
    ) -> None:
        if not app_id or not app_password:
            raise ValueError("MICROSOFT_APP_ID and MICROSOFT_APP_PASSWORD are required for Bot Framework calls")
        self._app_id = app_id
        self._app_password = app_password
        self._login_url = LOGIN_URL.format(tenant=tenant)
        self._scope = scope
        self._client = client or httpx.Client(timeout=10.0)
        self._access_token: str | None = None
        self._expires_at = 0.0
        self._logger = logging.getLogger(__name__)

    @property
    def app_id(self) -> str:
        return self._app_id

    def get_access_token(self) -> str:
        if self._access_token and time.time() < self._expires_at - REFRESH_MARGIN_SECONDS:
            return self._access_token

        resp = self._client.post(
            self._login_url,
            data={
                "grant_type": "client_credentials",
                "client_id": self._app_id,
                "client_secret": self._app_password,
                "scope": self._scope,
            },
        )
        if resp.status_code >= 400:
            self._logger.error("App token request failed", extra={"status": resp.status_code, "reason": resp.text})
            raise TokenServiceError(f"App token request failed with status {resp.status_code}")

        data = resp.json()
        self._access_token = data["access_token"]
        self._expires_at = time.time() + float(data.get("expires_in", 3600))
        return self._access_token

    def authorization_header(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.get_access_token()}"}
