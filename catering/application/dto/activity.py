from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

ADAPTIVE_CARD_ACTION = "adaptiveCard/action"
SIGNIN_VERIFY_STATE = "signin/verifyState"
SIGNIN_TOKEN_EXCHANGE = "signin/tokenExchange"
OAUTH_INVOKE_NAMES = frozenset({SIGNIN_VERIFY_STATE, SIGNIN_TOKEN_EXCHANGE})


class ChannelAccount(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str | None = None


class ConversationAccount(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str


class ActivityDTO(BaseModel):
    """Inbound Bot Framework activity, reduced to the fields the bot reads."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    type: str
    id: str | None = None
    name: str | None = None
    channel_id: str = Field(default="", alias="channelId")
    service_url: str | None = Field(default=None, alias="serviceUrl")
    from_: ChannelAccount | None = Field(default=None, alias="from")
    recipient: ChannelAccount | None = None
    conversation: ConversationAccount | None = None
    members_added: list[ChannelAccount] = Field(default_factory=list, alias="membersAdded")
    text: str | None = None
    value: Any = None

    @property
    def user_id(self) -> str:
        return self.from_.id if self.from_ else ""

    @property
    def conversation_id(self) -> str:
        return self.conversation.id if self.conversation else ""

    def state_key(self) -> str:
        return f"{self.channel_id}/conversations/{self.conversation_id}/users/{self.user_id}"

    def is_oauth_invoke(self) -> bool:
        return self.type == "invoke" and self.name in OAUTH_INVOKE_NAMES

    def is_adaptive_action(self) -> bool:
        return self.type == "invoke" and self.name == ADAPTIVE_CARD_ACTION

    def invoke_value(self) -> dict[str, Any]:
        return self.value if isinstance(self.value, dict) else {}

    def authentication_token(self) -> str | None:
        """SSO token attached by the client, either on an action or on a token exchange invoke."""
        value = self.invoke_value()
        auth = value.get("authentication")
        if isinstance(auth, dict) and auth.get("token"):
            return str(auth["token"])
        if self.name == SIGNIN_TOKEN_EXCHANGE and value.get("token"):
            return str(value["token"])
        return None

    def magic_code(self) -> str | None:
        state = self.invoke_value().get("state")
        return str(state) if state else None
