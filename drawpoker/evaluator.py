from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable, Sequence, Tuple, Union

import numpy as np

from .cards import RANKS, RANK_VALUE, SUITS, Card, parse_label
from .models import ClassifiedHand, HandCategory, InvalidHandError
from .paytables import Paytable, as_paytable

CardLike = Union[Card, str]

RANK_PLURAL = {
    "A": "Aces",
    "K": "Kings",
    "Q": "Queens",
    "J": "Jacks",
    "T": "Tens",
    **{rank: f"{rank}s" for rank in "98765432"},
}

ROYAL_VALUES = [14, 13, 12, 11, 10]
WHEEL_VALUES = [14, 5, 4, 3, 2]


def validate_hand(cards: Iterable[CardLike]) -> Tuple[Card, ...]:
    """Coerce labels to cards and require exactly five distinct cards."""
    try:
        hand = tuple(card if isinstance(card, Card) else parse_label(card) for card in cards)
    except ValueError as exc:
        raise InvalidHandError(str(exc)) from exc
    if len(hand) != 5:
        raise InvalidHandError(f"Hand must contain exactly 5 cards, got {len(hand)}")
    seen = set()
    for card in hand:
        if card in seen:
            raise InvalidHandError(f"Duplicate card in hand: {card.label}")
        seen.add(card)
    return hand


def four_kind_key(quad_rank: str, kicker_rank: str, paytable: Paytable) -> str:
    if quad_rank == "A":
        if kicker_rank in ("2", "3", "4") and "FOUR_ACES_WITH_234" in paytable:
            return "FOUR_ACES_WITH_234"
        if "FOUR_ACES" in paytable:
            return "FOUR_ACES"
    if quad_rank in ("2", "3", "4"):
        if kicker_rank in ("A", "2", "3", "4") and "FOUR_2_4_WITH_A_4" in paytable:
            return "FOUR_2_4_WITH_A_4"
        if "FOUR_2_4" in paytable:
            return "FOUR_2_4"
    if "FOUR_5_K" in paytable:
        return "FOUR_5_K"
    return "FOUR_KIND"


def classify(hand: Iterable[CardLike], paytable) -> ClassifiedHand:
    """Return the best-paying category of a five-card hand under ``paytable``."""
    return _classify(validate_hand(hand), as_paytable(paytable))


def _classify(cards: Sequence[Card], paytable: Paytable) -> ClassifiedHand:
    rank_counts = Counter(card.rank for card in cards)
    suit_counts = Counter(card.suit for card in cards)
    counts = sorted(rank_counts.values(), reverse=True)
    values = sorted((RANK_VALUE[rank] for rank in rank_counts), reverse=True)

    is_flush = max(suit_counts.values()) == 5
    is_straight = len(values) == 5 and (values[0] - values[4] == 4 or values == WHEEL_VALUES)

    def made(category: HandCategory, name: str) -> ClassifiedHand:
        return ClassifiedHand(name, category.value, paytable.payout(category.value), category)

    if is_straight and is_flush:
        if values == ROYAL_VALUES:
            return made(HandCategory.ROYAL, "Royal Flush")
        return made(HandCategory.STRAIGHT_FLUSH, "Straight Flush")

    if counts[0] == 4:
        quad_rank = next(r for r, c in rank_counts.items() if c == 4)
        kicker_rank = next(r for r, c in rank_counts.items() if c == 1)
        key = four_kind_key(quad_rank, kicker_rank, paytable)
        name = f"Four {RANK_PLURAL[quad_rank]}"
        if key in ("FOUR_ACES_WITH_234", "FOUR_2_4_WITH_A_4"):
            name = f"{name} (with {kicker_rank})"
        return ClassifiedHand(name, key, paytable.payout(key), HandCategory.FOUR_KIND)

    if counts[0] == 3 and counts[1] == 2:
        return made(HandCategory.FULL_HOUSE, "Full House")
    if is_flush:
        return made(HandCategory.FLUSH, "Flush")
    if is_straight:
        return made(HandCategory.STRAIGHT, "Straight")
    if counts[0] == 3:
        trips = next(r for r, c in rank_counts.items() if c == 3)
        return made(HandCategory.THREE_KIND, f"Three of a Kind ({RANK_PLURAL[trips]})")
    if counts[0] == 2 and counts[1] == 2:
        return made(HandCategory.TWO_PAIR, "Two Pair")
    if counts[0] == 2:
        pair = next(r for r, c in rank_counts.items() if c == 2)
        if RANK_VALUE[pair] >= 11:
            return made(HandCategory.JACKS_OR_BETTER, f"Jacks or Better ({RANK_PLURAL[pair]})")

    return ClassifiedHand("Nothing", None, 0, HandCategory.NOTHING)


# Vectorised scoring ------------------------------------------------------
#
# The solver scores hundreds of thousands of candidate hands per hold, so it
# works on N x 5 integer blocks instead of Card objects. Rank values are 2..14,
# suits are indices into SUITS.


@dataclass(frozen=True, eq=False)
class PayoutSchedule:
    royal: float
    straight_flush: float
    full_house: float
    flush: float
    straight: float
    three_kind: float
    two_pair: float
    high_pair: float
    four_kind: np.ndarray  # [quad value, kicker value] -> payout

    @staticmethod
    @lru_cache(maxsize=64)
    def for_paytable(paytable: Paytable) -> "PayoutSchedule":
        four_kind = np.zeros((15, 15), dtype=np.float64)
        for quad_rank in RANKS:
            for kicker_rank in RANKS:
                if kicker_rank == quad_rank:
                    continue
                key = four_kind_key(quad_rank, kicker_rank, paytable)
                four_kind[RANK_VALUE[quad_rank], RANK_VALUE[kicker_rank]] = paytable.payout(key)
        four_kind.setflags(write=False)
        return PayoutSchedule(
            royal=paytable.payout(HandCategory.ROYAL.value),
            straight_flush=paytable.payout(HandCategory.STRAIGHT_FLUSH.value),
            full_house=paytable.payout(HandCategory.FULL_HOUSE.value),
            flush=paytable.payout(HandCategory.FLUSH.value),
            straight=paytable.payout(HandCategory.STRAIGHT.value),
            three_kind=paytable.payout(HandCategory.THREE_KIND.value),
            two_pair=paytable.payout(HandCategory.TWO_PAIR.value),
            high_pair=paytable.payout(HandCategory.JACKS_OR_BETTER.value),
            four_kind=four_kind,
        )


def encode_cards(cards: Sequence[Card]) -> Tuple[np.ndarray, np.ndarray]:
    values = np.array([card.value for card in cards], dtype=np.int8)
    suits = np.array([SUITS.index(card.suit) for card in cards], dtype=np.int8)
    return values, suits


def score_hands(values: np.ndarray, suits: np.ndarray, schedule: PayoutSchedule) -> np.ndarray:
    """Payout of every row of an N x 5 block, matching ``classify`` row by row."""
    ranks = np.sort(values, axis=1)
    same = ranks[:, 1:] == ranks[:, :-1]
    distinct = 5 - same.sum(axis=1)

    flush = np.all(suits == suits[:, :1], axis=1)
    wheel = (ranks[:, 4] == 14) & (ranks[:, 3] == 5)
    straight = (distinct == 5) & ((ranks[:, 4] - ranks[:, 0] == 4) | wheel)
    royal = straight & flush & (ranks[:, 0] == 10)

    quads = (distinct == 2) & ((same[:, 0] & same[:, 1] & same[:, 2]) | (same[:, 1] & same[:, 2] & same[:, 3]))
    full_house = (distinct == 2) & ~quads
    trips = (distinct == 3) & (
        (same[:, 0] & same[:, 1]) | (same[:, 1] & same[:, 2]) | (same[:, 2] & same[:, 3])
    )
    two_pair = (distinct == 3) & ~trips
    pair_value = np.where(same, ranks[:, 1:], 0).max(axis=1)
    high_pair = (distinct == 4) & (pair_value >= 11)

    # The middle card of a sorted quad hand always belongs to the quad.
    quad_value = ranks[:, 2]
    kicker_value = np.where(ranks[:, 0] == quad_value, ranks[:, 4], ranks[:, 0])

    # Lowest category first so higher ones overwrite.
    payouts = np.zeros(len(ranks), dtype=np.float64)
    payouts[high_pair] = schedule.high_pair
    payouts[two_pair] = schedule.two_pair
    payouts[trips] = schedule.three_kind
    payouts[straight] = schedule.straight
    payouts[flush] = schedule.flush
    payouts[full_house] = schedule.full_house
    payouts[quads] = schedule.four_kind[quad_value[quads], kicker_value[quads]]
    payouts[straight & flush] = schedule.straight_flush
    payouts[royal] = schedule.royal
    return payouts
