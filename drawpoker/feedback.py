"""Grading and plain-language explanations for a player's hold choice."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Optional

from .cards import RANK_VALUE
from .evaluator import RANK_PLURAL, CardLike, _classify, validate_hand
from .models import HandCategory, HoldEv
from .paytables import as_paytable
from .solver import Solver, default_solver, validate_hold


class Severity(str, Enum):
    EXCELLENT = "Excellent"
    MINOR = "Minor mistake"
    MODERATE = "Moderate mistake"
    MAJOR = "Major mistake"
    SEVERE = "Severe mistake"


# Upper bound of EV lost for each grade; anything above the last is SEVERE.
SEVERITY_THRESHOLDS = (
    (0.05, Severity.EXCELLENT),
    (0.2, Severity.MINOR),
    (0.5, Severity.MODERATE),
    (1.0, Severity.MAJOR),
)

SEVERITY_DESCRIPTIONS = {
    Severity.EXCELLENT: "Perfect or near-perfect play. The hold was optimal or very close to it.",
    Severity.MINOR: "Small error with minimal impact. A decent alternative, but not the optimal play.",
    Severity.MODERATE: "Noticeable error that hurts returns and significantly reduces expected value.",
    Severity.MAJOR: "Serious strategic error that dramatically reduces winning potential.",
    Severity.SEVERE: "Critical blunder. The hold is mathematically very poor.",
}


def severity_for(difference: float) -> Severity:
    for limit, severity in SEVERITY_THRESHOLDS:
        if difference <= limit:
            return severity
    return Severity.SEVERE


@dataclass(frozen=True)
class MistakeGrade:
    player_ev: float
    optimal_ev: float
    difference: float
    severity: Severity

    @property
    def description(self) -> str:
        return SEVERITY_DESCRIPTIONS[self.severity]

    def as_dict(self) -> Dict[str, object]:
        return {
            "player_ev": self.player_ev,
            "optimal_ev": self.optimal_ev,
            "difference": self.difference,
            "severity": self.severity.value,
            "description": self.description,
        }


def grade_hold(
    hand: Iterable[CardLike],
    player_hold: Iterable[int],
    paytable,
    optimal: Optional[HoldEv] = None,
    solver: Optional[Solver] = None,
) -> MistakeGrade:
    solver = solver or default_solver()
    cards = validate_hand(hand)
    hold = validate_hold(player_hold)
    table = as_paytable(paytable)

    player_ev = solver.expected_value(cards, hold, table)
    if optimal is None:
        optimal = solver.get_optimal_hold(cards, table)
    difference = optimal.ev - player_ev
    return MistakeGrade(player_ev, optimal.ev, difference, severity_for(difference))


def _is_run(values) -> bool:
    ordered = sorted(values, reverse=True)
    return all(high - low == 1 for high, low in zip(ordered, ordered[1:]))


def explain_hold(hand: Iterable[CardLike], hold: Iterable[int], ev: float, paytable) -> str:
    cards = validate_hand(hand)
    positions = validate_hold(hold)
    table = as_paytable(paytable)
    held = [cards[position] for position in positions]
    ev_text = f"EV {ev:.4f}"

    if not held:
        return f"Draw five new cards. No hold beats a fresh hand. {ev_text}"

    if len(held) == 5:
        current = _classify(cards, table)
        if current.payout > 0:
            return f"Hold all five: {current.name} pays {current.payout}x."
        return f"Hold all five. The hand does not pay. {ev_text}"

    rank_counts = Counter(card.rank for card in held)
    held_suits = {card.suit for card in held}
    counts = sorted(rank_counts.values(), reverse=True)
    current = _classify(cards, table)

    if counts[0] == 4:
        quads = next(r for r, c in rank_counts.items() if c == 4)
        return f"Hold four {RANK_PLURAL[quads]} and draw one. {ev_text}"
    if counts[0] == 3:
        trips = next(r for r, c in rank_counts.items() if c == 3)
        if len(held) == 3:
            return f"Hold three {RANK_PLURAL[trips]} and draw two for a full house or four of a kind. {ev_text}"
        extra = next(card.label for card in held if card.rank != trips)
        return f"Hold three {RANK_PLURAL[trips]} with {extra} and draw one for a full house or four of a kind. {ev_text}"
    if len(held) == 4 and counts[:2] == [2, 2]:
        return f"Hold both pairs and draw one for a full house. {ev_text}"
    if counts[0] == 2 and len(held) == 2:
        pair = next(iter(rank_counts))
        if RANK_VALUE[pair] >= 11:
            return f"Hold the pair of {RANK_PLURAL[pair]}. It pays now and can improve. {ev_text}"
        return f"Hold the low pair of {RANK_PLURAL[pair]}. It does not pay yet but can improve to trips or better. {ev_text}"

    if len(held) == 4 and len(held_suits) == 1:
        flush_suit = next(iter(held_suits))
        outs = 13 - sum(1 for card in cards if card.suit == flush_suit)
        return f"Hold the four-card flush draw: {outs} of 47 cards complete it for {table.payout(HandCategory.FLUSH.value)}x. {ev_text}"
    held_values = [card.value for card in held]
    if len(held) == 4 and counts[0] == 1 and _is_run(held_values):
        outs = 8 if max(held_values) < 14 else 4
        return f"Hold the four-card straight draw: {outs} outs. {ev_text}"
    if len(held) == 3 and len(held_suits) == 1 and all(card.value >= 10 for card in held):
        return f"Hold the three-card royal flush draw. {ev_text}"

    high_cards = [card for card in held if card.value >= 11]
    if high_cards and len(held) <= 2:
        names = ", ".join(card.label for card in held)
        if any(card.rank == "A" for card in held) and "FOUR_ACES" in table:
            return f"Hold {names}. Aces carry bonus four-of-a-kind payouts in this game. {ev_text}"
        return f"Hold high cards {names}. Each can pair into Jacks or Better. {ev_text}"

    if current.category is HandCategory.NOTHING:
        return f"Hold {', '.join(card.label for card in held)}. {ev_text}"
    return f"Hold {len(held)} cards from {current.name}. {ev_text}"
