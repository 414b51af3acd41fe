from __future__ import annotations

import itertools
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from .cache import EVCache, make_key
from .cards import FULL_DECK, Card
from .evaluator import CardLike, PayoutSchedule, _classify, encode_cards, score_hands, validate_hand
from .models import HoldEv, InvalidHoldError, SolverConfig
from .paytables import Paytable, as_paytable

LOGGER = logging.getLogger("drawpoker.solver")

# All 32 holds in increasing bitmask order. The order is the tie-break.
HOLD_COMBINATIONS: Tuple[Tuple[int, ...], ...] = tuple(
    tuple(position for position in range(5) if mask & (1 << position)) for mask in range(32)
)


def validate_hold(hold: Iterable[int]) -> Tuple[int, ...]:
    try:
        positions = tuple(hold)
    except TypeError:
        raise InvalidHoldError(f"Hold must be a collection of positions, got {hold!r}") from None
    for position in positions:
        if isinstance(position, bool) or not isinstance(position, int) or not 0 <= position <= 4:
            raise InvalidHoldError(f"Hold position out of range: {position!r}")
    if len(set(positions)) != len(positions):
        raise InvalidHoldError(f"Duplicate hold position in {list(positions)}")
    return tuple(sorted(positions))


def _draw_chunks(pool_size: int, draw_count: int, chunk_size: int) -> Iterator[np.ndarray]:
    """Yield every draw_count-combination of pool indices, chunk_size rows at a time."""
    combos = itertools.combinations(range(pool_size), draw_count)
    row = np.dtype((np.intp, draw_count))
    while True:
        block = np.fromiter(itertools.islice(combos, chunk_size), dtype=row)
        if len(block) == 0:
            return
        yield block


class Solver:
    """Exact expected values and optimal holds for five-card draw.

    Owns its EV cache; build a fresh ``Solver`` for an empty one.
    """

    def __init__(self, config: Optional[SolverConfig] = None, cache: Optional[EVCache] = None) -> None:
        self.config = config or SolverConfig()
        if self.config.chunk_size < 1:
            raise ValueError(f"chunk_size must be positive: {self.config.chunk_size}")
        self.cache = cache if cache is not None else EVCache(self.config.cache_size)

    def expected_value(self, hand: Iterable[CardLike], hold: Iterable[int], paytable) -> float:
        cards = validate_hand(hand)
        positions = validate_hold(hold)
        return self._expected_value(cards, positions, as_paytable(paytable))

    def enumerate_hold_evs(self, hand: Iterable[CardLike], paytable) -> List[HoldEv]:
        """Every hold with its EV, best first; equal EVs keep bitmask order."""
        cards = validate_hand(hand)
        table = as_paytable(paytable)

        def evaluate(hold: Tuple[int, ...]) -> HoldEv:
            return HoldEv(hold, self._expected_value(cards, hold, table))

        if self.config.workers > 1:
            with ThreadPoolExecutor(max_workers=self.config.workers) as pool:
                options = list(pool.map(evaluate, HOLD_COMBINATIONS))
        else:
            options = [evaluate(hold) for hold in HOLD_COMBINATIONS]
        return sorted(options, key=lambda option: option.ev, reverse=True)

    def get_optimal_hold(self, hand: Iterable[CardLike], paytable) -> HoldEv:
        return self.enumerate_hold_evs(hand, paytable)[0]

    def _expected_value(self, cards: Sequence[Card], hold: Tuple[int, ...], paytable: Paytable) -> float:
        kept = [cards[position] for position in hold]
        key = make_key(cards, kept, paytable)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        started = time.perf_counter()
        if len(kept) == 5:
            ev = float(_classify(cards, paytable).payout)
        else:
            ev = self._enumerate_draws(cards, kept, paytable)
        LOGGER.debug(
            "EV %s hold=%s -> %.6f (%.1f ms)",
            ",".join(card.label for card in cards),
            list(hold),
            ev,
            (time.perf_counter() - started) * 1000,
        )
        self.cache.put(key, ev)
        return ev

    def _enumerate_draws(self, cards: Sequence[Card], kept: List[Card], paytable: Paytable) -> float:
        # Discards never come back: the pool excludes all five dealt cards.
        dealt = set(cards)
        pool_values, pool_suits = encode_cards([card for card in FULL_DECK if card not in dealt])
        schedule = PayoutSchedule.for_paytable(paytable)

        held_count = len(kept)
        draw_count = 5 - held_count
        chunk_size = self.config.chunk_size

        values = np.empty((chunk_size, 5), dtype=np.int8)
        suits = np.empty((chunk_size, 5), dtype=np.int8)
        if kept:
            kept_values, kept_suits = encode_cards(kept)
            values[:, :held_count] = kept_values
            suits[:, :held_count] = kept_suits

        total = 0.0
        count = 0
        for block in _draw_chunks(len(pool_values), draw_count, chunk_size):
            rows = len(block)
            values[:rows, held_count:] = pool_values[block]
            suits[:rows, held_count:] = pool_suits[block]
            total += float(score_hands(values[:rows], suits[:rows], schedule).sum())
            count += rows
        return total / count


_default_solver = Solver()


def default_solver() -> Solver:
    return _default_solver


def reset_default_solver(config: Optional[SolverConfig] = None) -> Solver:
    global _default_solver
    _default_solver = Solver(config)
    return _default_solver


def expected_value(hand: Iterable[CardLike], hold: Iterable[int], paytable) -> float:
    return _default_solver.expected_value(hand, hold, paytable)


def enumerate_hold_evs(hand: Iterable[CardLike], paytable) -> List[HoldEv]:
    return _default_solver.enumerate_hold_evs(hand, paytable)


def get_optimal_hold(hand: Iterable[CardLike], paytable) -> HoldEv:
    return _default_solver.get_optimal_hold(hand, paytable)
