from __future__ import annotations

import logging
from typing import Any

import httpx

from catering.application.dto.activity import ActivityDTO
from catering.application.exceptions import ConnectorError
from catering.application.ports.connector import ConnectorPort
from catering.infrastructure.botframework.credentials import BotFrameworkCredentials


class BotFrameworkConnector(ConnectorPort):
    def __init__(self, credentials: BotFrameworkCredentials, client: httpx.Client | None = None) -> None:
        self._credentials = credentials
        self._client = client or httpx.Client(timeout=10.0)
        self._logger = logging.getLogger(__name__)

    def send_activity(self, activity: ActivityDTO, reply: dict[str, Any]) -> None:
        if not activity.service_url or not activity.conversation_id:
            raise ConnectorError("Cannot reply to an activity without serviceUrl and conversation")

        url = f"{activity.service_url.rstrip('/')}/v3/conversations/{activity.conversation_id}/activities"
        if activity.id:
            url = f"{url}/{activity.id}"

        payload = {
            **reply,
            "channelId": activity.channel_id,
            "conversation": {"id": activity.conversation_id},
            "from": activity.recipient.model_dump() if activity.recipient else None,
            "recipient": activity.from_.model_dump() if activity.from_ else None,
            "replyToId": activity.id,
        }
        resp = self._client.post(url, json=payload, headers=self._credentials.authorization_header())
        if resp.status_code >= 400:
            self._logger.error(
                "Connector send failed",
                extra={"status": resp.status_code, "activity_id": activity.id, "reason": resp.text},
            )
            raise ConnectorError(f"Connector send failed with status {resp.status_code}")
