from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

VENDOR_PREFIX = "application/vnd.microsoft."


class ContentType(str, Enum):
    MESSAGE = "activity.message"
    CARD = "card.adaptive"
    LOGIN_REQUEST = "activity.loginRequest"
    RETRY_AFTER = "activity.retryAfter"
    ERROR = "error"

    @property
    def mime_type(self) -> str:
        return f"{VENDOR_PREFIX}{self.value}"


@dataclass(frozen=True)
class InvokeResponse:
    status_code: int
    type: ContentType
    value: Any

    def to_wire(self) -> dict[str, Any]:
        return {
            "statusCode": self.status_code,
            "type": self.type.mime_type,
            "value": self.value,
        }
