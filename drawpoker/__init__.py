"""Exact expected-value strategy engine for five-card draw video poker."""

from .cache import EVCache
from .cards import Card, FULL_DECK, RANKS, SUITS, make_deck, parse_cards, parse_label, random_hand
from .evaluator import classify
from .feedback import Severity, explain_hold, grade_hold
from .models import (
    ClassifiedHand,
    HandCategory,
    HoldEv,
    InvalidHandError,
    InvalidHoldError,
    SolverConfig,
)
from .paytables import PAYTABLES, Paytable, get_paytable
from .solver import HOLD_COMBINATIONS, Solver, enumerate_hold_evs, expected_value, get_optimal_hold

__all__ = [
    "Card",
    "FULL_DECK",
    "RANKS",
    "SUITS",
    "make_deck",
    "parse_cards",
    "parse_label",
    "random_hand",
    "classify",
    "ClassifiedHand",
    "HandCategory",
    "HoldEv",
    "InvalidHandError",
    "InvalidHoldError",
    "SolverConfig",
    "EVCache",
    "PAYTABLES",
    "Paytable",
    "get_paytable",
    "HOLD_COMBINATIONS",
    "Solver",
    "enumerate_hold_evs",
    "expected_value",
    "get_optimal_hold",
    "Severity",
    "explain_hold",
    "grade_hold",
]
