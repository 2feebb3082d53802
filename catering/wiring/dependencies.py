from functools import lru_cache
import logging
from pathlib import Path
from zoneinfo import ZoneInfo

from catering.core.config import settings
from catering.application.ports.connector import ConnectorPort
from catering.application.ports.order_repository import OrderRepositoryPort
from catering.application.ports.recognizer import RecognizerPort
from catering.application.ports.state_store import StateStorePort
from catering.application.ports.token_provider import TokenProviderPort
from catering.application.use_cases.handle_turn import HandleTurnUseCase
from catering.application.use_cases.oauth_exchange import OAuthExchangeUseCase
from catering.application.use_cases.order_flow import OrderFlowUseCase
from catering.application.use_cases.send_reply import SendReplyUseCase
from catering.infrastructure.botframework.connector_client import BotFrameworkConnector
from catering.infrastructure.botframework.credentials import BotFrameworkCredentials
from catering.infrastructure.botframework.mock_connector import MockConnector
from catering.infrastructure.botframework.mock_token_provider import MockTokenProvider
from catering.infrastructure.botframework.token_provider import BotFrameworkTokenProvider
from catering.infrastructure.cards.file_card_store import FileCardStore
from catering.infrastructure.dialog.keyword_flow import KeywordOrderFlow
from catering.infrastructure.llm.menu_recognizer import MenuRecognizer
from catering.infrastructure.llm.openai_recognizer import OpenAIRecognizer
from catering.infrastructure.store.json_store import JsonOrderRepository, JsonStateStore
from catering.infrastructure.store.memory_store import MemoryOrderRepository, MemoryStateStore

logger = logging.getLogger(__name__)


def _is_local() -> bool:
    return settings.ENV.lower() in {"dev", "local"}


def _has_bot_credentials() -> bool:
    return bool(settings.MICROSOFT_APP_ID and settings.MICROSOFT_APP_PASSWORD)


def _new_credentials() -> BotFrameworkCredentials:
    return BotFrameworkCredentials(
        app_id=settings.MICROSOFT_APP_ID or "",
        app_password=settings.MICROSOFT_APP_PASSWORD or "",
        tenant=settings.MICROSOFT_APP_TENANT,
    )


@lru_cache
def get_state_store() -> StateStorePort:
    if _is_local():
        return JsonStateStore(data_dir=str(Path(settings.DATA_DIR) / "state"))
    return MemoryStateStore()


@lru_cache
def get_order_repository() -> OrderRepositoryPort:
    if _is_local():
        return JsonOrderRepository(data_dir=settings.DATA_DIR)
    return MemoryOrderRepository()


@lru_cache
def get_card_store() -> FileCardStore:
    return FileCardStore(cards_dir=settings.CARDS_DIR)


@lru_cache
def get_recognizer() -> RecognizerPort:
    if settings.OPENAI_API_KEY and settings.OPENAI_API_KEY.strip():
        return OpenAIRecognizer(
            api_key=settings.OPENAI_API_KEY,
            model=settings.OPENAI_MODEL_RECOGNIZE,
            temperature=settings.OPENAI_TEMPERATURE_RECOGNIZE,
        )
    return MenuRecognizer()


def _token_provider(connection_name: str) -> TokenProviderPort:
    if not _has_bot_credentials():
        if _is_local():
            logger.info("Using MockTokenProvider", extra={"connection": connection_name})
            return MockTokenProvider(connection_name)
        raise ValueError("MICROSOFT_APP_ID and MICROSOFT_APP_PASSWORD are required for sign-in.")

    # Each connection gets its own credentials object; nothing mutable is shared between them.
    return BotFrameworkTokenProvider(
        connection_name=connection_name,
        credentials=_new_credentials(),
        base_url=settings.TOKEN_SERVICE_URL,
    )


@lru_cache
def get_connector() -> ConnectorPort:
    logger.info("ENV=%s bot credentials present=%s", settings.ENV, _has_bot_credentials())
    if not _has_bot_credentials():
        if _is_local():
            logger.info("Using MockConnector (credentials missing, ENV=dev/local)")
            return MockConnector()
        raise ValueError("MICROSOFT_APP_ID and MICROSOFT_APP_PASSWORD are required to send replies.")
    return BotFrameworkConnector(credentials=_new_credentials())


@lru_cache
def get_oauth_exchange() -> OAuthExchangeUseCase:
    return OAuthExchangeUseCase(
        nominal=_token_provider(settings.NOMINAL_CONNECTION_NAME),
        sso=_token_provider(settings.SSO_CONNECTION_NAME),
    )


def get_order_flow() -> OrderFlowUseCase:
    return OrderFlowUseCase(
        cards=get_card_store(),
        orders=get_order_repository(),
        recognizer=get_recognizer(),
        display_timezone=ZoneInfo(settings.DISPLAY_TIMEZONE),
        recent_orders_limit=settings.RECENT_ORDERS_LIMIT,
    )


def get_handle_turn_use_case() -> HandleTurnUseCase:
    order_flow = get_order_flow()
    return HandleTurnUseCase(
        state_store=get_state_store(),
        order_flow=order_flow,
        oauth=get_oauth_exchange(),
        send_reply=SendReplyUseCase(connector=get_connector(), enabled=settings.REPLIES_ENABLED),
        welcome_channels=settings.WELCOME_CHANNELS,
        conversation_flow=KeywordOrderFlow(order_flow) if settings.ORDER_FLOW_ENABLED else None,
    )
