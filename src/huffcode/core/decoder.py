from __future__ import annotations

from typing import Any

from huffcode.core.bitpack import unpack_bits
from huffcode.core.codes import SINGLE_SYMBOL_CODE
from huffcode.core.encoder import EncodedStream
from huffcode.core.tree import HuffmanTree, Leaf
from huffcode.errors import IncompleteCode, MalformedStream, MissingStreamLength, UsageError


def _walk(bits: str, tree: HuffmanTree, limit: int | None, max_trailing: int) -> list[Any]:
    """Replay ``bits`` through ``tree``: cursor moves per bit, emits on leaves.

    limit        = expected number of symbols (None: until the bits run out)
    max_trailing = leftover bits tolerated after ``limit`` symbols (padding)
    """
    out: list[Any] = []
    root = tree.root
    degenerate = tree.root_is_leaf
    cur = root
    pos = 0
    code_start = 0
    n = len(bits)

    while pos < n:
        if limit is not None and len(out) == limit:
            break
        ch = bits[pos]
        if ch != "0" and ch != "1":
            raise MalformedStream(f"invalid bit {ch!r} at offset {pos} (expected '0' or '1')")
        pos += 1

        # Special case: leaf root, every '0' is one symbol
        if degenerate:
            if ch != SINGLE_SYMBOL_CODE:
                raise MalformedStream(
                    f"bit {ch!r} at offset {pos - 1}: a single-symbol code only uses "
                    f"{SINGLE_SYMBOL_CODE!r}"
                )
            out.append(tree.node(root).symbol)
            code_start = pos
            continue

        cur = tree.child(cur, ch)
        node = tree.node(cur)
        if isinstance(node, Leaf):
            out.append(node.symbol)
            cur = root
            code_start = pos

    if cur != root:
        raise IncompleteCode(
            f"stream ends inside a code: {pos - code_start} dangling bit(s) "
            f"after {len(out)} symbol(s)",
            decoded=len(out),
            consumed_bits=code_start,
        )

    if limit is not None:
        if len(out) < limit:
            raise IncompleteCode(
                f"stream ends after {len(out)} symbol(s), expected {limit}",
                decoded=len(out),
                consumed_bits=code_start,
            )
        trailing = n - pos
        if trailing > max_trailing:
            raise MalformedStream(f"{trailing} unexpected bit(s) after {limit} symbol(s)")

    return out


def decode(
    bits: str | EncodedStream,
    tree: HuffmanTree,
    expected_symbol_count: int | None = None,
) -> list[Any]:
    """Decode a '0'/'1' bitstream back into symbols.

    If ``bits`` is an EncodedStream and no count is given, its ``n_symbols``
    is used. With a count, decoding stops after that many symbols and any
    leftover bit is an error.
    """
    if isinstance(bits, EncodedStream):
        if expected_symbol_count is None:
            expected_symbol_count = bits.n_symbols
        bits = bits.bits
    if expected_symbol_count is not None and expected_symbol_count < 0:
        raise UsageError(f"expected symbol count must be >= 0, got {expected_symbol_count}")
    return _walk(bits, tree, expected_symbol_count, max_trailing=0)


def decode_packed(
    data: bytes,
    tree: HuffmanTree,
    expected_symbol_count: int | None = None,
    lastbits: int | None = None,
) -> list[Any]:
    """Decode a byte-packed (MSB-first) bitstream.

    The final byte may carry up to 7 padding bits. With ``lastbits`` the
    padding is cut exactly; without it only an explicit symbol count tells
    where the data ends, and its absence raises MissingStreamLength.
    """
    if expected_symbol_count is not None and expected_symbol_count < 0:
        raise UsageError(f"expected symbol count must be >= 0, got {expected_symbol_count}")

    if lastbits is not None:
        return _walk(unpack_bits(data, lastbits), tree, expected_symbol_count, max_trailing=0)

    if expected_symbol_count is None:
        raise MissingStreamLength(
            "packed stream has padding of unknown size: lastbits or a symbol count is required"
        )
    bits = unpack_bits(data, 8 if data else 0)
    return _walk(bits, tree, expected_symbol_count, max_trailing=7)
