from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple


class HandCategory(str, Enum):
    """Paying categories, highest first."""

    ROYAL = "ROYAL"
    STRAIGHT_FLUSH = "STRAIGHT_FLUSH"
    FOUR_KIND = "FOUR_KIND"
    FULL_HOUSE = "FULL_HOUSE"
    FLUSH = "FLUSH"
    STRAIGHT = "STRAIGHT"
    THREE_KIND = "THREE_KIND"
    TWO_PAIR = "TWO_PAIR"
    JACKS_OR_BETTER = "JacksOrBetter"
    NOTHING = "NOTHING"


# Four-of-a-kind payout keys in fallback order; FOUR_KIND always resolves.
FOUR_KIND_KEYS = (
    "FOUR_ACES_WITH_234",
    "FOUR_ACES",
    "FOUR_2_4_WITH_A_4",
    "FOUR_2_4",
    "FOUR_5_K",
    "FOUR_KIND",
)


class InvalidHandError(ValueError):
    """Raised when a hand is not exactly five distinct cards."""


class InvalidHoldError(ValueError):
    """Raised when a hold names a position outside 0..4 or repeats one."""


@dataclass(frozen=True)
class ClassifiedHand:
    name: str
    key: Optional[str]
    payout: float
    category: HandCategory

    def as_dict(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "key": self.key,
            "payout": self.payout,
            "category": self.category.value,
        }


@dataclass(frozen=True)
class HoldEv:
    hold: Tuple[int, ...]
    ev: float

    def as_dict(self) -> Dict[str, object]:
        return {"hold": list(self.hold), "ev": self.ev}


@dataclass
class SolverConfig:
    cache_size: Optional[int] = 65_536
    chunk_size: int = 32_768
    workers: int = 1
