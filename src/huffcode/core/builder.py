from __future__ import annotations

import heapq
import itertools
import math
from collections.abc import Iterable, Mapping
from typing import Any, NamedTuple, Union

from huffcode.core.tree import HuffmanTree, Internal, Leaf, Node
from huffcode.errors import EmptyAlphabet, InvalidAlphabet


class WeightedSymbol(NamedTuple):
    symbol: Any
    weight: float


AlphabetLike = Union[Mapping[Any, float], Iterable[Union[WeightedSymbol, tuple[Any, float]]]]


def _check_symbol(sym: Any) -> None:
    if sym is None or (isinstance(sym, (str, bytes)) and len(sym) == 0):
        raise InvalidAlphabet(f"invalid symbol {sym!r}: symbols must be non-empty")
    try:
        hash(sym)
    except TypeError as e:
        raise InvalidAlphabet(f"invalid symbol {sym!r}: symbols must be hashable") from e


def _check_weight(sym: Any, w: Any) -> float:
    if isinstance(w, bool) or not isinstance(w, (int, float)):
        raise InvalidAlphabet(f"weight for {sym!r} must be a number, got {type(w).__name__}")
    if isinstance(w, float) and (math.isnan(w) or math.isinf(w)):
        raise InvalidAlphabet(f"weight for {sym!r} must be finite, got {w!r}")
    if w < 0:
        raise InvalidAlphabet(f"weight for {sym!r} must be >= 0, got {w!r}")
    return w


def normalize_alphabet(symbols: AlphabetLike) -> list[WeightedSymbol]:
    """Validate an alphabet and return it as a list of WeightedSymbol (input order kept)."""
    pairs = symbols.items() if isinstance(symbols, Mapping) else symbols

    out: list[WeightedSymbol] = []
    seen: set[Any] = set()
    for entry in pairs:
        try:
            sym, w = entry
        except (TypeError, ValueError) as e:
            raise InvalidAlphabet(f"alphabet entry {entry!r} is not a (symbol, weight) pair") from e
        _check_symbol(sym)
        w = _check_weight(sym, w)
        if sym in seen:
            raise InvalidAlphabet(f"duplicate symbol {sym!r} in alphabet")
        seen.add(sym)
        out.append(WeightedSymbol(sym, w))
    return out


def build_tree(symbols: AlphabetLike) -> HuffmanTree:
    """Build a Huffman tree by greedy merging of the two lightest nodes.

    Heap entries are ``(weight, seq, index)``. ``seq`` is a creation counter:
    leaves get it in input order, merged nodes get the following values as
    they are created. Equal weights are therefore extracted in creation
    order, which makes the resulting codes reproducible for a given input
    order. The first node extracted becomes the left child, the second the
    right child.

    A single-symbol alphabet yields a tree whose root is that leaf.
    """
    alphabet = normalize_alphabet(symbols)
    if not alphabet:
        raise EmptyAlphabet()

    nodes: list[Node] = []
    heap: list[tuple[float, int, int]] = []
    counter = itertools.count()

    for sym, w in alphabet:
        nodes.append(Leaf(symbol=sym, weight=w))
        heapq.heappush(heap, (w, next(counter), len(nodes) - 1))

    while len(heap) > 1:
        w1, _, left = heapq.heappop(heap)
        w2, _, right = heapq.heappop(heap)
        nodes.append(Internal(weight=w1 + w2, left=left, right=right))
        heapq.heappush(heap, (w1 + w2, next(counter), len(nodes) - 1))

    return HuffmanTree(nodes=tuple(nodes), root=heap[0][2])
