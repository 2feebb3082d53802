from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Lunch:
    entree: str | None = None
    drink: str | None = None
    order_timestamp: datetime | None = None  # only set when the order is confirmed


@dataclass(frozen=True)
class User:
    id: str
    lunch: Lunch = Lunch()
