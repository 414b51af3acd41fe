from __future__ import annotations

import math
from numbers import Real
from typing import Dict, Iterator, Mapping, Union


class Paytable(Mapping[str, float]):
    """Immutable payout schedule for one game variant.

    Keys are hand-category keys (``ROYAL``, ``FOUR_ACES`` ...), values are the
    multiplier paid per unit bet. Absent keys pay nothing.
    """

    __slots__ = ("_name", "_payouts", "_signature")

    def __init__(self, name: str, payouts: Mapping[str, float]) -> None:
        checked: Dict[str, float] = {}
        for key, value in payouts.items():
            if not isinstance(key, str):
                raise ValueError(f"Paytable key must be a string: {key!r}")
            if isinstance(value, bool) or not isinstance(value, Real):
                raise ValueError(f"Payout for {key} must be a number: {value!r}")
            if not math.isfinite(value):
                raise ValueError(f"Payout for {key} must be finite: {value!r}")
            if value < 0:
                raise ValueError(f"Negative payout for {key}: {value}")
            checked[key] = value
        self._name = name
        self._payouts = checked
        self._signature = "|".join(f"{key}:{checked[key]}" for key in sorted(checked))

    @property
    def name(self) -> str:
        return self._name

    @property
    def signature(self) -> str:
        return self._signature

    def payout(self, key: str) -> float:
        return self._payouts.get(key, 0)

    def scaled(self, factor: float) -> "Paytable":
        if factor <= 0:
            raise ValueError(f"Scale factor must be positive: {factor}")
        return Paytable(
            f"{self._name} x{factor}",
            {key: value * factor for key, value in self._payouts.items()},
        )

    def __getitem__(self, key: str) -> float:
        return self._payouts[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._payouts)

    def __len__(self) -> int:
        return len(self._payouts)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Paytable):
            return self._signature == other._signature
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._signature)

    def __repr__(self) -> str:
        return f"Paytable({self._name!r}, {self._payouts!r})"


def _bonus_schedule(aces_234: int, small_quads_kicker: int, aces: int, small_quads: int, other_quads: int) -> Dict[str, int]:
    return {
        "ROYAL": 800,
        "STRAIGHT_FLUSH": 50,
        "FOUR_ACES_WITH_234": aces_234,
        "FOUR_2_4_WITH_A_4": small_quads_kicker,
        "FOUR_ACES": aces,
        "FOUR_2_4": small_quads,
        "FOUR_5_K": other_quads,
        "FULL_HOUSE": 9,
        "FLUSH": 6,
        "STRAIGHT": 4,
        "THREE_KIND": 3,
        "TWO_PAIR": 1,
        "JacksOrBetter": 1,
    }


PAYTABLES: Dict[str, Paytable] = {
    name: Paytable(name, payouts)
    for name, payouts in {
        "Jacks or Better 9/6": {
            "ROYAL": 800,
            "STRAIGHT_FLUSH": 50,
            "FOUR_KIND": 25,
            "FULL_HOUSE": 9,
            "FLUSH": 6,
            "STRAIGHT": 4,
            "THREE_KIND": 3,
            "TWO_PAIR": 2,
            "JacksOrBetter": 1,
        },
        "Jacks or Better 8/5": {
            "ROYAL": 800,
            "STRAIGHT_FLUSH": 50,
            "FOUR_KIND": 25,
            "FULL_HOUSE": 8,
            "FLUSH": 5,
            "STRAIGHT": 4,
            "THREE_KIND": 3,
            "TWO_PAIR": 1,
            "JacksOrBetter": 1,
        },
        "Double Bonus": _bonus_schedule(400, 160, 160, 80, 50),
        "Double Double Bonus": _bonus_schedule(400, 160, 160, 80, 50),
        "Bonus Poker": _bonus_schedule(160, 80, 80, 40, 25),
    }.items()
}

DEFAULT_VARIANT = "Jacks or Better 9/6"


def get_paytable(name: str) -> Paytable:
    try:
        return PAYTABLES[name]
    except KeyError:
        raise ValueError(f"Unknown paytable: {name}") from None


def as_paytable(value: Union[Paytable, Mapping[str, float]]) -> Paytable:
    if isinstance(value, Paytable):
        return value
    if isinstance(value, Mapping):
        return Paytable("custom", value)
    raise ValueError(f"Expected a paytable mapping, got {type(value).__name__}")
