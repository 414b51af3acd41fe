from __future__ import annotations

import itertools
from typing import Sequence

from drawpoker.cards import FULL_DECK, Card, parse_cards
from drawpoker.evaluator import classify
from drawpoker.models import SolverConfig
from drawpoker.paytables import PAYTABLES, Paytable
from drawpoker.solver import Solver

JOB_9_6 = PAYTABLES["Jacks or Better 9/6"]
DOUBLE_DOUBLE_BONUS = PAYTABLES["Double Double Bonus"]
BONUS_POKER = PAYTABLES["Bonus Poker"]


def hand(*labels: str) -> list[Card]:
    return parse_cards(labels)


def fresh_solver(**config) -> Solver:
    """Solver with its own empty cache."""
    return Solver(SolverConfig(**config))


def brute_force_ev(cards: Sequence[Card], hold: Sequence[int], paytable: Paytable) -> float:
    """Reference EV by classifying every draw one hand at a time (slow; keep draws small)."""
    pool = [card for card in FULL_DECK if card not in cards]
    kept = [cards[position] for position in hold]
    payouts = [
        classify(kept + list(draw), paytable).payout
        for draw in itertools.combinations(pool, 5 - len(kept))
    ]
    return sum(payouts) / len(payouts)
