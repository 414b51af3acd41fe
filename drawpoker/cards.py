from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

RANKS = "AKQJT98765432"
SUITS = "shdc"
RANK_VALUE = {rank: value for value, rank in zip(range(14, 1, -1), RANKS)}

_SUIT_ALIASES = {"♠": "s", "♥": "h", "♦": "d", "♣": "c"}


@dataclass(frozen=True)
class Card:
    rank: str
    suit: str

    def __post_init__(self) -> None:
        if self.rank not in RANKS:
            raise ValueError(f"Invalid rank: {self.rank}")
        if self.suit not in SUITS:
            raise ValueError(f"Invalid suit: {self.suit}")

    @property
    def label(self) -> str:
        return f"{self.rank}{self.suit}"

    @property
    def value(self) -> int:
        return RANK_VALUE[self.rank]

    def __str__(self) -> str:
        return self.label


def rank(card: Card) -> str:
    return card.rank


def suit(card: Card) -> str:
    return card.suit


def make_deck() -> List[Card]:
    """Return the 52 cards in a fixed order: suits outer, Ace down to deuce inner."""
    return [Card(rank, suit) for suit in SUITS for rank in RANKS]


FULL_DECK = tuple(make_deck())


def random_hand(seed: Optional[int] = None) -> List[Card]:
    rng = random.Random(seed)
    deck = make_deck()
    rng.shuffle(deck)
    return deck[:5]


def parse_label(label: str) -> Card:
    if not isinstance(label, str) or len(label) not in (2, 3):
        raise ValueError(f"Invalid card label: {label!r}")
    rank_part, suit_part = label[:-1].upper(), label[-1]
    if rank_part == "10":
        rank_part = "T"
    suit_part = _SUIT_ALIASES.get(suit_part, suit_part.lower())
    if len(rank_part) != 1:
        raise ValueError(f"Invalid card label: {label!r}")
    return Card(rank_part, suit_part)


def parse_cards(labels: Sequence[str]) -> List[Card]:
    return [parse_label(label) for label in labels]


def cards_to_labels(cards: Iterable[Card]) -> List[str]:
    return [card.label for card in cards]
