from dataclasses import dataclass

from catering.domain.entities.cards import CurrentCard, NextCard


@dataclass(frozen=True)
class CardOptions:
    current_card: CurrentCard = CurrentCard.UNHANDLED
    next_card_to_send: NextCard = NextCard.UNHANDLED
    option: str | None = None
    custom: str | None = None  # free text typed instead of picking an option
