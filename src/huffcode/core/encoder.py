from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from huffcode.core.bitpack import check_bits, pack_bits
from huffcode.core.codes import CodeTable


@dataclass(frozen=True)
class EncodedStream:
    """Concatenated codes plus the number of symbols they encode.

    ``bits`` alone is not self-delimiting; ``n_symbols`` is the length
    carried alongside so a reader knows where the data stops.
    """

    bits: str
    n_symbols: int

    def __post_init__(self) -> None:
        if self.n_symbols < 0:
            raise ValueError("n_symbols must be >= 0")
        check_bits(self.bits)

    @property
    def nbits(self) -> int:
        return len(self.bits)

    def pack(self) -> tuple[bytes, int]:
        """Return (bitstream bytes MSB-first, lastbits)."""
        return pack_bits(self.bits)


def encode(text: Iterable[Any], table: CodeTable) -> EncodedStream:
    """Append, in order, the code of every symbol of ``text``.

    Raises UnknownSymbol for a symbol with no code: no symbol is ever dropped.
    """
    parts: list[str] = []
    for pos, sym in enumerate(text):
        parts.append(table.lookup(sym, pos))
    return EncodedStream(bits="".join(parts), n_symbols=len(parts))
