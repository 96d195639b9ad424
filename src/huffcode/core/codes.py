from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

from huffcode.core.tree import BIT_LEFT, HuffmanTree
from huffcode.errors import UnknownSymbol

# Conventional code for a one-symbol alphabet
SINGLE_SYMBOL_CODE = BIT_LEFT


class CodeTable(Mapping[Any, str]):
    """Immutable symbol -> bitstring mapping ('0'/'1' characters)."""

    __slots__ = ("_codes",)

    def __init__(self, codes: Mapping[Any, str] | None = None) -> None:
        self._codes: dict[Any, str] = dict(codes or {})

    def __getitem__(self, symbol: Any) -> str:
        return self._codes[symbol]

    def __iter__(self) -> Iterator[Any]:
        return iter(self._codes)

    def __len__(self) -> int:
        return len(self._codes)

    def __repr__(self) -> str:
        return f"CodeTable({self._codes!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Mapping):
            return dict(self.items()) == dict(other.items())
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def lookup(self, symbol: Any, position: int | None = None) -> str:
        try:
            return self._codes[symbol]
        except (KeyError, TypeError):
            raise UnknownSymbol(symbol, position) from None

    @property
    def max_length(self) -> int:
        return max((len(c) for c in self._codes.values()), default=0)

    def sorted_items(self) -> list[tuple[Any, str]]:
        """Entries in a stable order: by code length, then by code."""
        return sorted(self._codes.items(), key=lambda kv: (len(kv[1]), kv[1]))

    def is_prefix_free(self) -> bool:
        # in lexicographic order a prefix always sorts right before one of its extensions
        codes = sorted(self._codes.values())
        return all(not b.startswith(a) for a, b in zip(codes, codes[1:]))


def generate_codes(tree: HuffmanTree) -> CodeTable:
    """Walk the tree and collect one code per leaf ('0' left, '1' right).

    The one-leaf tree has no edge to walk: its symbol gets the one-bit code
    "0" instead of an empty string, which could not be seen on a bitstream.
    """
    if tree.root_is_leaf:
        return CodeTable({tree.node(tree.root).symbol: SINGLE_SYMBOL_CODE})
    return CodeTable(dict(tree.leaves()))
