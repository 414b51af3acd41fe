from __future__ import annotations

import threading
from collections import OrderedDict
from typing import Dict, Iterable, Optional, Tuple

from .cards import Card
from .paytables import Paytable

CacheKey = Tuple[str, str, str]


def make_key(cards: Iterable[Card], held: Iterable[Card], paytable: Paytable) -> CacheKey:
    """Canonical identity of an EV query: dealt cards, held cards, paytable."""
    return (
        ",".join(sorted(card.label for card in cards)),
        ",".join(sorted(card.label for card in held)),
        paytable.signature,
    )


class EVCache:
    """Bounded, thread-safe memo of expected values.

    Entries are write-once: the memoised computation is pure, so a key that is
    already present is never overwritten. ``maxsize=None`` keeps every entry,
    ``maxsize=0`` stores nothing.
    """

    def __init__(self, maxsize: Optional[int] = 65_536) -> None:
        if maxsize is not None and maxsize < 0:
            raise ValueError(f"maxsize must be >= 0 or None: {maxsize}")
        self.maxsize = maxsize
        self.hits = 0
        self.misses = 0
        self._entries: "OrderedDict[CacheKey, float]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: CacheKey) -> Optional[float]:
        with self._lock:
            value = self._entries.get(key)
            if value is None:
                self.misses += 1
                return None
            self._entries.move_to_end(key)
            self.hits += 1
            return value

    def put(self, key: CacheKey, value: float) -> None:
        if self.maxsize == 0:
            return
        with self._lock:
            if key in self._entries:
                return
            self._entries[key] = value
            if self.maxsize is not None and len(self._entries) > self.maxsize:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def stats(self) -> Dict[str, Optional[int]]:
        with self._lock:
            return {
                "hits": self.hits,
                "misses": self.misses,
                "size": len(self._entries),
                "maxsize": self.maxsize,
            }

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
