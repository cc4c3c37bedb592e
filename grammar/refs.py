"""
grammar/refs.py — generator unikalnych nazw referencji (@ref).

RefCounter jest przekazywany jawnie do każdego parsowania (przez
ParseContext). Inkrementacja jest atomowa (Lock), więc równoległe
tłumaczenia na jednym liczniku nie kolidują nazwami.
"""

from __future__ import annotations

import itertools
import threading


class RefCounter:
    """Monotoniczny licznik: next("ant") -> "ant0", next("cons") -> "cons1"."""

    def __init__(self, start: int = 0) -> None:
        self._start = start
        self._lock  = threading.Lock()
        self._count = itertools.count(start)

    def next(self, prefix: str = "ref") -> str:
        with self._lock:
            n = next(self._count)
        return f"{prefix}{n}"

    def reset(self) -> None:
        with self._lock:
            self._count = itertools.count(self._start)
