from __future__ import annotations

from catering.application.ports.recognizer import RecognizerPort

ENTREES = (
    "sandwich",
    "salad",
    "pizza",
    "burger",
    "soup",
    "pasta",
    "tacos",
    "burrito",
    "wrap",
    "sushi",
    "steak",
    "chicken",
    "tofu",
)

DRINKS = (
    "water",
    "soda",
    "coffee",
    "tea",
    "juice",
    "lemonade",
    "milk",
    "smoothie",
    "cola",
)


class MenuRecognizer(RecognizerPort):
    """Accepts free text that mentions something on the menu."""

    def __init__(self, entrees: tuple[str, ...] = ENTREES, drinks: tuple[str, ...] = DRINKS) -> None:
        self._entrees = tuple(e.lower() for e in entrees)
        self._drinks = tuple(d.lower() for d in drinks)

    def validate_entree(self, text: str) -> bool:
        return _mentions_any(text, self._entrees)

    def validate_drink(self, text: str) -> bool:
        return _mentions_any(text, self._drinks)


def _mentions_any(text: str, words: tuple[str, ...]) -> bool:
    tokens = {token.strip(".,!?;:'\"").rstrip("s") for token in text.lower().split()}
    return any(word.rstrip("s") in tokens for word in words)
