from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Callable
from zoneinfo import ZoneInfo

from catering.application.exceptions import MenuAuthoringError
from catering.application.ports.card_store import CardStorePort
from catering.application.ports.order_repository import OrderRepositoryPort
from catering.application.ports.recognizer import RecognizerPort
from catering.application.utils.invoke_responses import (
    card_response,
    client_error_response,
    message_response,
    retry_after_response,
    server_error_response,
)
from catering.domain.entities.card_options import CardOptions
from catering.domain.entities.cards import CurrentCard, NextCard
from catering.domain.entities.invoke_response import InvokeResponse
from catering.domain.entities.user import Lunch, User

ENTREE_CARD = "EntreeOptions"
DRINK_CARD = "DrinkOptions"
REVIEW_CARD = "ReviewOrder"
RECENT_ORDERS_CARD = "RecentOrders"
CONFIRMATION_CARD = "OrderConfirmation"
BLAND_CARD = "BlandCard"
ERROR_OPTIONS_CARD = "ErrorOptions"

DISPLAY_FORMAT = "%a %b %d, %Y %I:%M %p %Z"
RETRY_AFTER_SECONDS = 15


@dataclass(frozen=True)
class OrderStepResult:
    user: User
    response: InvokeResponse
    persisted: bool = False


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class OrderFlowUseCase:
    def __init__(
        self,
        cards: CardStorePort,
        orders: OrderRepositoryPort,
        recognizer: RecognizerPort,
        display_timezone: ZoneInfo,
        recent_orders_limit: int = 10,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._cards = cards
        self._orders = orders
        self._recognizer = recognizer
        self._display_timezone = display_timezone
        self._recent_orders_limit = recent_orders_limit
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    def process_order(self, user: User, options: CardOptions) -> OrderStepResult:
        """
        Apply the choice made on the current card, then move to the requested card.

        Free text typed into an entree or drink card must pass the recognizer; if it does not,
        the same card is shown again with the text and nothing is committed. A choice made after
        a confirmed order starts a new lunch.

        Raises:
            MenuAuthoringError: the card requested a transition that is not implemented
        """
        if options.current_card is CurrentCard.ENTREE:
            if options.custom and not self._recognizer.validate_entree(options.custom):
                self._logger.info("Entree rejected", extra={"card": ENTREE_CARD, "reason": options.custom})
                return OrderStepResult(user=user, response=self._redo_card(ENTREE_CARD, options.custom))
            choice = options.custom or options.option
            if choice is not None:
                user = self.start_order(user)
                user = replace(user, lunch=replace(user.lunch, entree=choice))

        elif options.current_card is CurrentCard.DRINK:
            if options.custom and not self._recognizer.validate_drink(options.custom):
                self._logger.info("Drink rejected", extra={"card": DRINK_CARD, "reason": options.custom})
                return OrderStepResult(user=user, response=self._redo_card(DRINK_CARD, options.custom))
            choice = options.custom or options.option
            if choice is not None:
                user = self.start_order(user)
                user = replace(user, lunch=replace(user.lunch, drink=choice))

        next_card = options.next_card_to_send
        if next_card is NextCard.DRINK:
            return OrderStepResult(user=user, response=card_response(self.options_card(DRINK_CARD)))
        if next_card is NextCard.ENTREE:
            return OrderStepResult(user=user, response=card_response(self.options_card(ENTREE_CARD)))
        if next_card is NextCard.REVIEW:
            return OrderStepResult(user=user, response=card_response(self.review_card(user)))
        if next_card is NextCard.REVIEW_ALL:
            return OrderStepResult(user=user, response=card_response(self.recent_orders_card()))
        if next_card is NextCard.CONFIRMATION:
            return self._confirm(user)

        raise MenuAuthoringError(f"No card matches nextCardToSend={next_card.name}")

    def process_err(self, options: CardOptions) -> InvokeResponse:
        """Return one of the demo response shapes. Does not touch the order."""
        next_card = options.next_card_to_send
        if next_card is NextCard.OK_WITH_STRING:
            return message_response("This is an error message string.")
        if next_card is NextCard.OK_WITH_CARD:
            return card_response(self.plain_card(BLAND_CARD))
        if next_card is NextCard.THROTTLE_WARNING:
            return retry_after_response(RETRY_AFTER_SECONDS)
        if next_card is NextCard.TEAPOT:
            return client_error_response(418, "418", "I am a little teapot.")
        if next_card is NextCard.ERROR:
            return server_error_response(500, "500", "Bot has encountered an error.")

        raise MenuAuthoringError(f"No card matches nextCardToSend={next_card.name}")

    def start_order(self, user: User) -> User:
        """Return `user` with an empty lunch if the current one was already confirmed."""
        if user.lunch.order_timestamp is None:
            return user
        return replace(user, lunch=Lunch())

    def plain_card(self, name: str) -> dict[str, Any]:
        return self._cards.load(name)

    def options_card(self, name: str, error: str = "") -> dict[str, Any]:
        return self._cards.render(name, {"error": error})

    def review_card(self, user: User) -> dict[str, Any]:
        return self._cards.render(
            REVIEW_CARD,
            {"entree": user.lunch.entree or "", "drink": user.lunch.drink or ""},
        )

    def recent_orders_card(self) -> dict[str, Any]:
        recent = self._orders.get_recent_orders(self._recent_orders_limit)
        orders = [
            {
                "user": u.id,
                "entree": u.lunch.entree or "",
                "drink": u.lunch.drink or "",
                "orderedAt": self.format_timestamp(u.lunch.order_timestamp),
            }
            for u in recent
        ]
        return self._cards.render(RECENT_ORDERS_CARD, {"orders": orders, "count": len(orders)})

    def format_timestamp(self, value: datetime | None) -> str:
        if value is None:
            return ""
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(self._display_timezone).strftime(DISPLAY_FORMAT)

    def _confirm(self, user: User) -> OrderStepResult:
        ordered_at = self._clock()
        user = replace(user, lunch=replace(user.lunch, order_timestamp=ordered_at))
        self._orders.upsert_order(user)
        self._logger.info("Order saved", extra={"user_id": user.id, "card": CONFIRMATION_CARD})

        card = self._cards.render(
            CONFIRMATION_CARD,
            {
                "entree": user.lunch.entree or "",
                "drink": user.lunch.drink or "",
                "orderedAt": self.format_timestamp(ordered_at),
            },
        )
        return OrderStepResult(user=user, response=card_response(card), persisted=True)

    def _redo_card(self, name: str, rejected: str) -> InvokeResponse:
        error = f'Sorry, "{rejected}" is not on the menu. Pick an option or try something else.'
        return card_response(self.options_card(name, error=error))
