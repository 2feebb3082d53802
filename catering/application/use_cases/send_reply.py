from __future__ import annotations

import logging
from typing import Any

from catering.application.dto.activity import ActivityDTO
from catering.application.ports.connector import ConnectorPort


class SendReplyUseCase:
    def __init__(self, connector: ConnectorPort, enabled: bool = True) -> None:
        self._connector = connector
        self._enabled = enabled
        self._logger = logging.getLogger(__name__)

    def execute(self, activity: ActivityDTO, reply: dict[str, Any]) -> bool:
        """Send a reply. Returns True if actually sent, False if skipped."""
        if not self._enabled:
            self._logger.info(
                "WOULD_SEND_REPLY",
                extra={"activity_id": activity.id, "reason": reply.get("text") or "card"},
            )
            return False
        self._connector.send_activity(activity, reply)
        return True
