"""Persistence adapter: text code table, text stream, binary bundle files.

Text code table: one ``<symbol> <code>`` line per symbol. Inside the symbol
token a backslash is written ``\\\\`` and whitespace / non-printable
characters are written ``\\uXXXX`` (or ``\\UXXXXXXXX``), so every symbol fits
in a single space-free token.

Text stream: a single '0'/'1' token, optionally preceded by a ``#n=<count>``
header line carrying the number of encoded symbols.

This is the only module doing file I/O. Failures are never silent: a
missing/unreadable file raises MissingResource, bad content raises
MalformedPersistedTable / MalformedStream.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

from huffcode.core.bitpack import check_bits
from huffcode.core.bundle import pack_bundle, unpack_bundle
from huffcode.core.codes import CodeTable
from huffcode.core.encoder import EncodedStream
from huffcode.errors import (
    HuffcodeError,
    MalformedPersistedTable,
    MalformedStream,
    MissingResource,
    UsageError,
)

_HEX = "0123456789abcdefABCDEF"
_COUNT_HEADER_RE = re.compile(r"^#n=(\d+)$")


# -------------------
# Symbol escaping
# -------------------
def escape_symbol(sym: Any) -> str:
    if not isinstance(sym, str) or not sym:
        raise UsageError(f"text code table supports non-empty str symbols only, got {sym!r}")
    out: list[str] = []
    for ch in sym:
        if ch == "\\":
            out.append("\\\\")
        elif ch.isspace() or not ch.isprintable():
            cp = ord(ch)
            out.append(f"\\u{cp:04x}" if cp <= 0xFFFF else f"\\U{cp:08x}")
        else:
            out.append(ch)
    return "".join(out)


def unescape_symbol(token: str, *, lineno: int | None = None) -> str:
    out: list[str] = []
    i = 0
    while i < len(token):
        ch = token[i]
        if ch != "\\":
            out.append(ch)
            i += 1
            continue
        nxt = token[i + 1:i + 2]
        if nxt == "\\":
            out.append("\\")
            i += 2
            continue
        if nxt in ("u", "U"):
            width = 4 if nxt == "u" else 8
            digits = token[i + 2:i + 2 + width]
            if len(digits) != width or any(c not in _HEX for c in digits):
                raise MalformedPersistedTable(f"bad escape in symbol {token!r}", lineno=lineno)
            cp = int(digits, 16)
            if cp > 0x10FFFF:
                raise MalformedPersistedTable(
                    f"escape out of Unicode range in symbol {token!r}", lineno=lineno
                )
            out.append(chr(cp))
            i += 2 + width
            continue
        raise MalformedPersistedTable(f"bad escape in symbol {token!r}", lineno=lineno)
    return "".join(out)


# -------------------
# Code table (text)
# -------------------
def dumps_code_table(table: CodeTable) -> str:
    return "".join(f"{escape_symbol(sym)} {code}\n" for sym, code in table.sorted_items())


def loads_code_table(text: str) -> CodeTable:
    codes: dict[str, str] = {}
    for lineno, line in enumerate(text.splitlines(), start=1):
        if not line:
            continue
        parts = line.split(" ")
        if len(parts) != 2:
            raise MalformedPersistedTable(
                "expected '<symbol> <code>' separated by a single space", lineno=lineno
            )
        token, code = parts
        if not token:
            raise MalformedPersistedTable("empty symbol", lineno=lineno)
        if not code:
            raise MalformedPersistedTable("empty code", lineno=lineno)
        if any(c not in "01" for c in code):
            raise MalformedPersistedTable(f"code {code!r} is not binary", lineno=lineno)
        sym = unescape_symbol(token, lineno=lineno)
        if sym in codes:
            raise MalformedPersistedTable(f"duplicate symbol {sym!r}", lineno=lineno)
        codes[sym] = code
    if not codes:
        raise MalformedPersistedTable("code table is empty")
    return CodeTable(codes)


# -------------------
# Encoded stream (text)
# -------------------
def dumps_stream(stream: EncodedStream, *, with_count: bool = True) -> str:
    if with_count:
        return f"#n={stream.n_symbols}\n{stream.bits}\n"
    return f"{stream.bits}\n"


def loads_stream(text: str) -> tuple[str, int | None]:
    """Parse a text stream. Returns (bits, symbol count or None if no header)."""
    lines = [ln.strip() for ln in text.splitlines()]
    lines = [ln for ln in lines if ln]

    count: int | None = None
    if lines and lines[0].startswith("#"):
        m = _COUNT_HEADER_RE.match(lines[0])
        if m is None:
            raise MalformedStream(f"bad stream header {lines[0]!r} (expected '#n=<count>')")
        count = int(m.group(1))
        lines = lines[1:]

    if len(lines) > 1:
        raise MalformedStream("stream must be a single '0'/'1' token")
    bits = lines[0] if lines else ""
    if any(c.isspace() for c in bits):
        raise MalformedStream("stream token contains whitespace")
    check_bits(bits)
    return bits, count


# -------------------
# File
# -------------------
def _read_bytes(path: str | Path) -> bytes:
    p = Path(path)
    try:
        return p.read_bytes()
    except FileNotFoundError as e:
        raise MissingResource(f"file not found: {p}") from e
    except OSError as e:
        raise MissingResource(f"cannot read {p}: {e}") from e


def _write_bytes(path: str | Path, data: bytes) -> None:
    p = Path(path)
    try:
        p.write_bytes(data)
    except OSError as e:
        raise HuffcodeError(f"cannot write {p}: {e}") from e


def _decode_utf8(raw: bytes, path: str | Path, exc: type[HuffcodeError]) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise exc(f"{path}: not valid UTF-8 text") from e


def save_code_table(path: str | Path, table: CodeTable) -> None:
    _write_bytes(path, dumps_code_table(table).encode("utf-8"))


def load_code_table(path: str | Path) -> CodeTable:
    return loads_code_table(_decode_utf8(_read_bytes(path), path, MalformedPersistedTable))


def save_stream(path: str | Path, stream: EncodedStream, *, with_count: bool = True) -> None:
    _write_bytes(path, dumps_stream(stream, with_count=with_count).encode("utf-8"))


def load_stream(path: str | Path) -> tuple[str, int | None]:
    return loads_stream(_decode_utf8(_read_bytes(path), path, MalformedStream))


def save_bundle(path: str | Path, table: CodeTable, stream: EncodedStream) -> None:
    _write_bytes(path, pack_bundle(table, stream))


def load_bundle(path: str | Path) -> tuple[CodeTable, EncodedStream]:
    return unpack_bundle(_read_bytes(path))


def read_text_input(path: str | Path) -> str:
    """Read a UTF-8 source text (the symbols to encode)."""
    return _decode_utf8(_read_bytes(path), path, UsageError)


def write_text_output(path: str | Path, text: str) -> None:
    _write_bytes(path, text.encode("utf-8"))
