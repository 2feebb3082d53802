from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from catering.application.exceptions import InvalidPayloadError, VerbNotSupportedError
from catering.domain.entities.card_options import CardOptions
from catering.domain.entities.cards import CurrentCard, NextCard

SUPPORTED_VERBS = frozenset({"next", "back", "order", "err", "nominal-oauth", "sso-oauth", "signout"})

logger = logging.getLogger(__name__)

CardT = TypeVar("CardT", bound=IntEnum)


@dataclass(frozen=True)
class AdaptiveAction:
    verb: str
    options: CardOptions


class CardOptionsPayload(BaseModel):
    """Schema of the `data` object authored on Action.Execute buttons."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    current_card: int | None = Field(default=None, alias="currentCard")
    next_card_to_send: int | None = Field(default=None, alias="nextCardToSend")
    option: str | None = None
    custom: str | None = None


def validate_action(invoke_value: Any) -> AdaptiveAction:
    """
    Turn the value of an adaptiveCard/action invoke into a typed action.

    Raises:
        InvalidPayloadError: the action or its data is missing, or the data does not match the schema
        VerbNotSupportedError: the verb is not one of SUPPORTED_VERBS
    """
    action = invoke_value.get("action") if isinstance(invoke_value, dict) else None
    if not isinstance(action, dict):
        raise InvalidPayloadError("The invoke value does not contain an action.")

    data = action.get("data")
    if data is None:
        raise InvalidPayloadError("The action data is missing.")
    if not isinstance(data, dict):
        raise InvalidPayloadError("The action data must be an object.")

    try:
        payload = CardOptionsPayload.model_validate(data)
    except ValidationError as e:
        raise InvalidPayloadError(f"The action data is malformed: {e.errors()[0]['msg']}") from e

    verb = action.get("verb")
    if verb not in SUPPORTED_VERBS:
        logger.info("Unsupported verb", extra={"verb": verb})
        raise VerbNotSupportedError(verb)

    options = CardOptions(
        current_card=_to_card(CurrentCard, payload.current_card),
        next_card_to_send=_to_card(NextCard, payload.next_card_to_send),
        option=payload.option,
        custom=payload.custom if payload.custom and payload.custom.strip() else None,
    )
    return AdaptiveAction(verb=verb, options=options)


def _to_card(enum_cls: type[CardT], raw: int | None) -> CardT:
    # Missing or unknown numbers become UNHANDLED; handlers reject it explicitly.
    if raw is None:
        return enum_cls.UNHANDLED
    try:
        return enum_cls(raw)
    except ValueError:
        return enum_cls.UNHANDLED
