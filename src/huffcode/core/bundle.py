"""Huffman text bundle v1 (binary-safe table + stream in one blob).

Layout:
  "HTX1" + varint(n_entries) +
  repeat (by code length, then code):
    varint(len(sym_utf8)) + sym_utf8 + varint(code_len) + packed(code)
  varint(n_symbols) + u8(lastbits) + varint(len(bitstream)) + bitstream

Symbols are UTF-8 strings of any content (whitespace included), which the
line-oriented text table cannot carry without escaping.
"""

from __future__ import annotations

from typing import Any

from huffcode.core.bitpack import pack_bits, unpack_bits
from huffcode.core.codes import CodeTable
from huffcode.core.encoder import EncodedStream
from huffcode.errors import BadMagic, MalformedPersistedTable, MalformedStream, UsageError

BUNDLE_MAGIC = b"HTX1"


def _enc_varint(x: int) -> bytes:
    if x < 0:
        raise ValueError("negative varint not supported")
    out = bytearray()
    while True:
        b = x & 0x7F
        x >>= 7
        if x:
            out.append(0x80 | b)
        else:
            out.append(b)
            break
    return bytes(out)


def _dec_varint(buf: bytes, idx: int) -> tuple[int, int]:
    shift = 0
    x = 0
    while True:
        if idx >= len(buf):
            raise MalformedStream("bundle truncated (varint)")
        b = buf[idx]
        idx += 1
        x |= (b & 0x7F) << shift
        if (b & 0x80) == 0:
            break
        shift += 7
        if shift > 63:
            raise MalformedStream("bundle varint too large")
    return x, idx


def _take(buf: bytes, idx: int, n: int, what: str) -> tuple[bytes, int]:
    if idx + n > len(buf):
        raise MalformedStream(f"bundle truncated ({what})")
    return buf[idx:idx + n], idx + n


def _sym_bytes(sym: Any) -> bytes:
    if not isinstance(sym, str) or not sym:
        raise UsageError(f"bundle supports non-empty str symbols only, got {sym!r}")
    return sym.encode("utf-8")


def pack_bundle(table: CodeTable, stream: EncodedStream) -> bytes:
    out = bytearray()
    out += BUNDLE_MAGIC

    entries = table.sorted_items()
    out += _enc_varint(len(entries))
    for sym, code in entries:
        sym_b = _sym_bytes(sym)
        code_b, _ = pack_bits(code)
        out += _enc_varint(len(sym_b))
        out += sym_b
        out += _enc_varint(len(code))
        out += code_b

    bitstream, lastbits = stream.pack()
    out += _enc_varint(stream.n_symbols)
    out.append(lastbits)
    out += _enc_varint(len(bitstream))
    out += bitstream
    return bytes(out)


def is_bundle(blob: bytes) -> bool:
    return blob[:4] == BUNDLE_MAGIC


def unpack_bundle(blob: bytes) -> tuple[CodeTable, EncodedStream]:
    if not is_bundle(blob):
        raise BadMagic("payload is not a huffcode bundle (bad magic)")
    idx = len(BUNDLE_MAGIC)

    n_entries, idx = _dec_varint(blob, idx)
    codes: dict[str, str] = {}
    for i in range(n_entries):
        sym_len, idx = _dec_varint(blob, idx)
        sym_b, idx = _take(blob, idx, sym_len, "symbol")
        try:
            sym = sym_b.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedPersistedTable(f"entry {i}: symbol is not valid UTF-8") from e
        if not sym:
            raise MalformedPersistedTable(f"entry {i}: empty symbol")

        code_len, idx = _dec_varint(blob, idx)
        if code_len == 0:
            raise MalformedPersistedTable(f"entry {i}: empty code for {sym!r}")
        code_b, idx = _take(blob, idx, (code_len + 7) // 8, "code")
        code = unpack_bits(code_b, code_len % 8 or 8)

        if sym in codes:
            raise MalformedPersistedTable(f"entry {i}: duplicate symbol {sym!r}")
        codes[sym] = code

    n_symbols, idx = _dec_varint(blob, idx)
    lastbits_b, idx = _take(blob, idx, 1, "lastbits")
    bs_len, idx = _dec_varint(blob, idx)
    bitstream, idx = _take(blob, idx, bs_len, "bitstream")
    if idx != len(blob):
        raise MalformedStream(f"bundle has {len(blob) - idx} trailing byte(s)")

    bits = unpack_bits(bitstream, lastbits_b[0])
    return CodeTable(codes), EncodedStream(bits=bits, n_symbols=n_symbols)
