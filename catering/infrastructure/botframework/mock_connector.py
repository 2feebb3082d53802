from __future__ import annotations

import logging
from typing import Any

from catering.application.dto.activity import ActivityDTO
from catering.application.ports.connector import ConnectorPort


class MockConnector(ConnectorPort):
    def __init__(self) -> None:
        self.sent: list[dict[str, Any]] = []
        self._logger = logging.getLogger(__name__)

    def send_activity(self, activity: ActivityDTO, reply: dict[str, Any]) -> None:
        self.sent.append(reply)
        self._logger.info(
            "Mock send to channel",
            extra={"activity_id": activity.id, "reason": reply.get("text") or "card"},
        )
