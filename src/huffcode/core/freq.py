from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from typing import Any

from huffcode.core.builder import WeightedSymbol


def count_frequencies(text: Iterable[Any]) -> list[WeightedSymbol]:
    """Tally symbols, in first-occurrence order (Counter keeps insertion order)."""
    return [WeightedSymbol(sym, n) for sym, n in Counter(text).items()]
