from __future__ import annotations

from datetime import datetime, timezone
from typing import Any
from zoneinfo import ZoneInfo

import pytest

from catering.application.dto.activity import ActivityDTO
from catering.application.ports.recognizer import RecognizerPort
from catering.application.ports.token_provider import TokenProviderPort
from catering.application.use_cases.handle_turn import HandleTurnUseCase
from catering.application.use_cases.oauth_exchange import OAuthExchangeUseCase
from catering.application.use_cases.order_flow import OrderFlowUseCase
from catering.application.use_cases.send_reply import SendReplyUseCase
from catering.application.utils.invoke_responses import login_request_response, message_response
from catering.domain.entities.invoke_response import InvokeResponse
from catering.domain.entities.token_result import TokenResult
from catering.domain.entities.user import User
from catering.infrastructure.botframework.mock_connector import MockConnector
from catering.infrastructure.cards.file_card_store import FileCardStore
from catering.infrastructure.dialog.keyword_flow import KeywordOrderFlow
from catering.infrastructure.store.memory_store import MemoryOrderRepository, MemoryStateStore

FIXED_NOW = datetime(2024, 5, 17, 19, 30, tzinfo=timezone.utc)


class RecordingOrderRepository(MemoryOrderRepository):
    def __init__(self) -> None:
        super().__init__()
        self.upserts: list[User] = []
        self.reads = 0

    def get_recent_orders(self, limit: int = 10) -> list[User]:
        self.reads += 1
        return super().get_recent_orders(limit)

    def upsert_order(self, user: User) -> None:
        self.upserts.append(user)
        super().upsert_order(user)


class CountingStateStore(MemoryStateStore):
    def __init__(self) -> None:
        super().__init__()
        self.writes: list[str] = []

    def write(self, key: str, document: dict[str, Any]) -> None:
        self.writes.append(key)
        super().write(key, document)


class StubRecognizer(RecognizerPort):
    def __init__(self, entrees: set[str] | None = None, drinks: set[str] | None = None) -> None:
        self.entrees = entrees or {"Sandwich", "Salad", "Tacos"}
        self.drinks = drinks or {"Water", "Iced tea"}
        self.calls: list[tuple[str, str]] = []

    def validate_entree(self, text: str) -> bool:
        self.calls.append(("entree", text))
        return text in self.entrees

    def validate_drink(self, text: str) -> bool:
        self.calls.append(("drink", text))
        return text in self.drinks


class FakeTokenProvider(TokenProviderPort):
    """Records calls; hands out `token` when set, otherwise a login request."""

    def __init__(self, connection_name: str, token: str | None = None) -> None:
        self._connection_name = connection_name
        self.token = token
        self.calls: list[str] = []
        self.call_log: list[str] | None = None

    @property
    def connection_name(self) -> str:
        return self._connection_name

    def begin(self, activity: ActivityDTO) -> TokenResult:
        self._record("begin")
        return self._result()

    def complete(self, activity: ActivityDTO) -> TokenResult:
        self._record("complete")
        return self._result()

    def sign_out(self, activity: ActivityDTO) -> InvokeResponse:
        self._record("sign_out")
        return message_response(f"Signed out of {self._connection_name}.")

    def _record(self, call: str) -> None:
        self.calls.append(call)
        if self.call_log is not None:
            self.call_log.append(f"{self._connection_name}.{call}")

    def _result(self) -> TokenResult:
        if self.token:
            return TokenResult(token=self.token)
        return TokenResult(response=login_request_response(f"https://login.example/{self._connection_name}"))


def make_activity(**fields: Any) -> ActivityDTO:
    payload: dict[str, Any] = {
        "type": "message",
        "id": "act-1",
        "channelId": "webchat",
        "serviceUrl": "https://smba.example/",
        "from": {"id": "user-1", "name": "Pat"},
        "recipient": {"id": "bot-1", "name": "Catering"},
        "conversation": {"id": "conv-1"},
    }
    payload.update(fields)
    return ActivityDTO.model_validate(payload)


def make_action(verb: str, data: dict[str, Any] | None, **value_fields: Any) -> ActivityDTO:
    value: dict[str, Any] = {"action": {"type": "Action.Execute", "verb": verb, "data": data}}
    value.update(value_fields)
    return make_activity(type="invoke", name="adaptiveCard/action", value=value)


@pytest.fixture
def card_store() -> FileCardStore:
    return FileCardStore()


@pytest.fixture
def orders() -> RecordingOrderRepository:
    return RecordingOrderRepository()


@pytest.fixture
def recognizer() -> StubRecognizer:
    return StubRecognizer()


@pytest.fixture
def order_flow(card_store, orders, recognizer) -> OrderFlowUseCase:
    return OrderFlowUseCase(
        cards=card_store,
        orders=orders,
        recognizer=recognizer,
        display_timezone=ZoneInfo("America/Los_Angeles"),
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def nominal_provider() -> FakeTokenProvider:
    return FakeTokenProvider("NonSSOBotApp")


@pytest.fixture
def sso_provider() -> FakeTokenProvider:
    return FakeTokenProvider("BotApp")


@pytest.fixture
def oauth(nominal_provider, sso_provider) -> OAuthExchangeUseCase:
    return OAuthExchangeUseCase(nominal=nominal_provider, sso=sso_provider)


@pytest.fixture
def state_store() -> CountingStateStore:
    return CountingStateStore()


@pytest.fixture
def connector() -> MockConnector:
    return MockConnector()


@pytest.fixture
def dispatcher(state_store, order_flow, oauth, connector) -> HandleTurnUseCase:
    return HandleTurnUseCase(
        state_store=state_store,
        order_flow=order_flow,
        oauth=oauth,
        send_reply=SendReplyUseCase(connector=connector),
    )


@pytest.fixture
def dispatcher_with_flow(state_store, order_flow, oauth, connector) -> HandleTurnUseCase:
    return HandleTurnUseCase(
        state_store=state_store,
        order_flow=order_flow,
        oauth=oauth,
        send_reply=SendReplyUseCase(connector=connector),
        conversation_flow=KeywordOrderFlow(order_flow),
    )
