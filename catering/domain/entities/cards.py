from __future__ import annotations

from enum import IntEnum


class CurrentCard(IntEnum):
    """Card the user acted on. Numbering matches the values authored in card templates."""

    UNHANDLED = -1
    ENTREE = 0
    DRINK = 1
    REVIEW = 2
    REVIEW_ALL = 3
    CONFIRMATION = 4
    OK_WITH_STRING = 5
    OK_WITH_CARD = 6
    LOGIN_REQUEST = 7
    THROTTLE_WARNING = 8
    TEAPOT = 9
    ERROR = 10
    ERR_MENU = 11


class NextCard(IntEnum):
    """Card a submitted action asks the bot to show next."""

    UNHANDLED = -1
    ENTREE = 0
    DRINK = 1
    REVIEW = 2
    REVIEW_ALL = 3
    CONFIRMATION = 4
    OK_WITH_STRING = 5
    OK_WITH_CARD = 6
    LOGIN_REQUEST = 7
    THROTTLE_WARNING = 8
    TEAPOT = 9
    ERROR = 10
    ERR_MENU = 11
