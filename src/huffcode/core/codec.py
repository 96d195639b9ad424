from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from huffcode.core.builder import AlphabetLike, build_tree
from huffcode.core.codes import CodeTable, generate_codes
from huffcode.core.decoder import decode, decode_packed
from huffcode.core.encoder import EncodedStream, encode
from huffcode.core.freq import count_frequencies
from huffcode.core.tree import HuffmanTree


@dataclass(frozen=True)
class HuffmanCodec:
    """A built tree together with the code table derived from it.

    The table is always generated from ``tree``, so the two cannot disagree.
    Both are immutable: the codec can be shared and reused for any number
    of encode/decode calls.
    """

    tree: HuffmanTree
    table: CodeTable = field(init=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "table", generate_codes(self.tree))

    @classmethod
    def from_alphabet(cls, symbols: AlphabetLike) -> "HuffmanCodec":
        return cls(tree=build_tree(symbols))

    @classmethod
    def from_text(cls, text: Iterable[Any]) -> "HuffmanCodec":
        return cls.from_alphabet(count_frequencies(text))

    @classmethod
    def from_code_table(cls, table: Mapping[Any, str]) -> "HuffmanCodec":
        # the rebuilt trie yields exactly the persisted codes again
        return cls(tree=HuffmanTree.from_code_table(table))

    def encode(self, text: Iterable[Any]) -> EncodedStream:
        return encode(text, self.table)

    def decode(self, bits: str | EncodedStream, expected_symbol_count: int | None = None) -> list[Any]:
        return decode(bits, self.tree, expected_symbol_count)

    def decode_packed(
        self, data: bytes, expected_symbol_count: int | None = None, lastbits: int | None = None
    ) -> list[Any]:
        return decode_packed(data, self.tree, expected_symbol_count, lastbits)

    def decode_text(self, bits: str | EncodedStream, expected_symbol_count: int | None = None) -> str:
        return "".join(str(s) for s in self.decode(bits, expected_symbol_count))
