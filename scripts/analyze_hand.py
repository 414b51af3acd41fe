#!/usr/bin/env python3
"""Rank every hold for one dealt hand.

Example:
    python scripts/analyze_hand.py 7h 7d Kh Qh 9h --variant "Jacks or Better 9/6" --top 5
    python scripts/analyze_hand.py --seed 42
"""

from __future__ import annotations

import argparse
import logging
import sys
import time

from drawpoker.cards import cards_to_labels, parse_cards, random_hand
from drawpoker.evaluator import classify
from drawpoker.feedback import explain_hold
from drawpoker.models import InvalidHandError, SolverConfig
from drawpoker.paytables import DEFAULT_VARIANT, PAYTABLES
from drawpoker.solver import Solver

LOGGER = logging.getLogger("analyze_hand")


def _format_hold(labels: list[str], hold: tuple[int, ...]) -> str:
    if not hold:
        return "(draw five)"
    return " ".join(labels[position] for position in hold)


def main() -> int:
    parser = argparse.ArgumentParser(description="Exact EV of all 32 holds for a five-card hand")
    parser.add_argument("cards", nargs="*", help="Five card labels such as As Kd 10h 7c 2s")
    parser.add_argument("--variant", default=DEFAULT_VARIANT, choices=sorted(PAYTABLES))
    parser.add_argument("--seed", type=int, help="Deal a random hand from this seed when no cards are given")
    parser.add_argument("--top", type=int, default=10, help="Number of holds to print")
    parser.add_argument("--workers", type=int, default=1)
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        hand = parse_cards(args.cards) if args.cards else random_hand(args.seed)
        paytable = PAYTABLES[args.variant]
        labels = cards_to_labels(hand)
        dealt = classify(hand, paytable)
    except (InvalidHandError, ValueError) as exc:
        LOGGER.error("%s", exc)
        return 2

    solver = Solver(SolverConfig(workers=args.workers))
    started = time.perf_counter()
    options = solver.enumerate_hold_evs(hand, paytable)
    elapsed = time.perf_counter() - started

    print(f"{args.variant}: {' '.join(labels)}  [{dealt.name}]")
    for rank_idx, option in enumerate(options[: args.top], start=1):
        print(f"{rank_idx:>2}. {option.ev:9.5f}  {_format_hold(labels, option.hold)}")
    best = options[0]
    print(explain_hold(hand, best.hold, best.ev, paytable))
    LOGGER.info("Solved 32 holds in %.2fs", elapsed)
    return 0


if __name__ == "__main__":
    sys.exit(main())
