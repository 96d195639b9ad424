"""Huffman tree model.

Nodes live in an arena (a tuple) and refer to each other by index:

  - ``Leaf(symbol, weight)``
  - ``Internal(weight, left, right)``

The tree owns the arena and the root index. Everything is frozen: once
built, a tree can be shared by any number of readers.
"""

from __future__ import annotations

import math
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any, Union

from huffcode.errors import MalformedPersistedTable, TreeInvariantError

BIT_LEFT = "0"
BIT_RIGHT = "1"


@dataclass(frozen=True, slots=True)
class Leaf:
    symbol: Any
    weight: float


@dataclass(frozen=True, slots=True)
class Internal:
    weight: float
    left: int
    right: int


Node = Union[Leaf, Internal]


@dataclass(frozen=True)
class HuffmanTree:
    nodes: tuple[Node, ...]
    root: int

    def __post_init__(self) -> None:
        if not self.nodes:
            raise TreeInvariantError("tree has no nodes")
        if not 0 <= self.root < len(self.nodes):
            raise TreeInvariantError(f"root index {self.root} out of range")

    # -------------------
    # Node access
    # -------------------
    def node(self, index: int) -> Node:
        return self.nodes[index]

    def is_leaf(self, index: int) -> bool:
        return isinstance(self.nodes[index], Leaf)

    @property
    def root_is_leaf(self) -> bool:
        return self.is_leaf(self.root)

    @property
    def weight(self) -> float:
        return self.nodes[self.root].weight

    def child(self, index: int, bit: str) -> int:
        """Index reached from ``index`` following ``bit`` ('0' left, '1' right)."""
        node = self.nodes[index]
        if isinstance(node, Leaf):
            raise TreeInvariantError(f"cannot move past leaf {node.symbol!r}")
        return node.left if bit == BIT_LEFT else node.right

    def leaves(self) -> Iterator[tuple[Any, str]]:
        """Yield (symbol, path) for every leaf, left before right."""
        stack: list[tuple[int, str]] = [(self.root, "")]
        while stack:
            idx, path = stack.pop()
            node = self.nodes[idx]
            if isinstance(node, Leaf):
                yield node.symbol, path
                continue
            # right first so that left is visited first
            stack.append((node.right, path + BIT_RIGHT))
            stack.append((node.left, path + BIT_LEFT))

    @property
    def symbols(self) -> list[Any]:
        return [sym for sym, _ in self.leaves()]

    def validate(self) -> None:
        """Check the structural invariants, raising TreeInvariantError on violation.

        - every node is reachable from the root exactly once (no sharing, no cycles)
        - every internal node has two valid children
        - internal weight == left weight + right weight
        - leaf symbols are distinct
        """
        seen = [False] * len(self.nodes)
        symbols: set[Any] = set()
        stack = [self.root]
        while stack:
            idx = stack.pop()
            if not 0 <= idx < len(self.nodes):
                raise TreeInvariantError(f"child index {idx} out of range")
            if seen[idx]:
                raise TreeInvariantError(f"node {idx} reached twice (shared node or cycle)")
            seen[idx] = True
            node = self.nodes[idx]
            if isinstance(node, Leaf):
                if node.symbol in symbols:
                    raise TreeInvariantError(f"symbol {node.symbol!r} appears in two leaves")
                symbols.add(node.symbol)
                continue
            if node.left == node.right:
                raise TreeInvariantError(f"node {idx} has the same left and right child")
            for c in (node.left, node.right):
                if not 0 <= c < len(self.nodes):
                    raise TreeInvariantError(f"child index {c} out of range")
            total = self.nodes[node.left].weight + self.nodes[node.right].weight
            if isinstance(total, int) and isinstance(node.weight, int):
                same = node.weight == total
            else:
                same = math.isclose(node.weight, total, rel_tol=1e-9, abs_tol=1e-12)
            if not same:
                raise TreeInvariantError(
                    f"node {idx} weight {node.weight} != children sum {total}"
                )
            stack.append(node.left)
            stack.append(node.right)

        orphans = [i for i, s in enumerate(seen) if not s]
        if orphans:
            raise TreeInvariantError(f"unreachable nodes in arena: {orphans[:10]}")

    # -------------------
    # Table -> tree (trie)
    # -------------------
    @classmethod
    def from_code_table(cls, table: Mapping[Any, str]) -> "HuffmanTree":
        """Rebuild a tree from a symbol -> code mapping, without weights.

        Inverse of code generation: each code is inserted into a trie where
        '0' selects the left branch and '1' the right one. A single entry
        with code "0" gives back the degenerate one-leaf tree.
        """
        items = list(table.items())
        if not items:
            raise MalformedPersistedTable("code table is empty")

        for sym, code in items:
            if not isinstance(code, str) or not code:
                raise MalformedPersistedTable(f"empty code for symbol {sym!r}")
            if any(c not in "01" for c in code):
                raise MalformedPersistedTable(f"code {code!r} for symbol {sym!r} is not binary")

        # Special case: one symbol => leaf root, code "0"
        if len(items) == 1:
            sym, code = items[0]
            if code != BIT_LEFT:
                raise MalformedPersistedTable(
                    f"single-symbol table must use code '0', got {code!r} for {sym!r}"
                )
            return cls(nodes=(Leaf(symbol=sym, weight=0),), root=0)

        # scratch: slots[i] = [left, right] for internal nodes, None for leaves
        slots: list[list[int | None] | None] = [[None, None]]
        leaf_symbol: list[Any] = [None]

        for sym, code in items:
            cur = 0
            last = len(code) - 1
            for depth, ch in enumerate(code):
                here = slots[cur]
                if here is None:
                    raise MalformedPersistedTable(
                        f"code {code[:depth]!r} ({leaf_symbol[cur]!r}) is a prefix of "
                        f"{code!r} ({sym!r})"
                    )
                bit = 1 if ch == BIT_RIGHT else 0
                nxt = here[bit]
                if nxt is None:
                    slots.append(None if depth == last else [None, None])
                    leaf_symbol.append(sym if depth == last else None)
                    nxt = len(slots) - 1
                    here[bit] = nxt
                elif depth == last:
                    if slots[nxt] is None:
                        raise MalformedPersistedTable(
                            f"code {code!r} assigned to both {leaf_symbol[nxt]!r} and {sym!r}"
                        )
                    raise MalformedPersistedTable(
                        f"code {code!r} ({sym!r}) is a prefix of another code"
                    )
                cur = nxt

        nodes: list[Node] = []
        for i, here in enumerate(slots):
            if here is None:
                nodes.append(Leaf(symbol=leaf_symbol[i], weight=0))
                continue
            left, right = here
            if left is None or right is None:
                raise MalformedPersistedTable(
                    "incomplete code table: some bit paths lead nowhere"
                )
            nodes.append(Internal(weight=0, left=left, right=right))

        return cls(nodes=tuple(nodes), root=0)
