"""Typed errors for huffcode.

Single source of truth for exit codes lives here.

Policy:
- Errors are small and boring.
- Every fallible codec operation raises one of these; nothing is silently defaulted.
- The CLI maps errors to stable exit codes (see EXIT_* constants).
- docs/exit_codes.md is generated from this module (scripts/gen_exit_codes_md.py).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

# -------------------------
# Exit codes (single source)
# -------------------------

EXIT_OK = 0
EXIT_USAGE = 2
EXIT_GENERIC = 10
EXIT_UNKNOWN_SYMBOL = 11
EXIT_CORRUPT_STREAM = 12
EXIT_MALFORMED_TABLE = 13
EXIT_MISSING_RESOURCE = 14


@dataclass(frozen=True, slots=True)
class ExitCodeInfo:
    code: int
    name: str
    description: str


EXIT_CODES: tuple[ExitCodeInfo, ...] = (
    ExitCodeInfo(EXIT_OK, "OK", "Success"),
    ExitCodeInfo(EXIT_USAGE, "USAGE", "Usage/config error (invalid args, invalid or empty alphabet)"),
    ExitCodeInfo(EXIT_GENERIC, "GENERIC", "Generic failure (tree invariant violation, unexpected error)"),
    ExitCodeInfo(EXIT_UNKNOWN_SYMBOL, "UNKNOWN_SYMBOL", "Input symbol has no entry in the code table"),
    ExitCodeInfo(
        EXIT_CORRUPT_STREAM,
        "CORRUPT_STREAM",
        "Encoded stream is truncated, malformed or has no known length",
    ),
    ExitCodeInfo(EXIT_MALFORMED_TABLE, "MALFORMED_TABLE", "Persisted code table cannot be parsed"),
    ExitCodeInfo(EXIT_MISSING_RESOURCE, "MISSING_RESOURCE", "Input file missing or unreadable"),
)

# For convenience (fast lookup)
_EXIT_CODE_BY_NAME: dict[str, int] = {e.name: e.code for e in EXIT_CODES}
_EXIT_CODE_BY_CODE: dict[int, ExitCodeInfo] = {e.code: e for e in EXIT_CODES}


def exit_code_info(code: int) -> ExitCodeInfo | None:
    return _EXIT_CODE_BY_CODE.get(int(code))


def exit_code_by_name(name: str) -> int | None:
    return _EXIT_CODE_BY_NAME.get(name.strip().upper())


def render_exit_codes_markdown() -> str:
    """Render docs/exit_codes.md content."""
    lines: list[str] = []
    lines.append("# Exit codes\n")
    lines.append("> GENERATED FILE, do not edit manually.\n")
    lines.append("> Source of truth: `src/huffcode/errors.py` (EXIT_CODES).\n")
    lines.append("> Regenerate: `python scripts/gen_exit_codes_md.py`.\n\n")
    lines.append("These are the CLI exit codes you can rely on.\n\n")
    lines.append("| Code | Name | Meaning |\n")
    lines.append("|---:|---|---|\n")
    for e in sorted(EXIT_CODES, key=lambda x: x.code):
        lines.append(f"| {e.code} | `{e.name}` | {e.description} |\n")
    lines.append("\n## Notes\n")
    lines.append("- Every internal error extends `HuffcodeError` and carries an `exit_code`.\n")
    lines.append("- `--debug` re-raises errors to show full stack traces.\n")
    lines.append("- Alphabet spec errors (`AlphabetSpecError`) map to `USAGE`.\n")
    return "".join(lines)


# ---------------
# Typed exceptions
# ---------------


class HuffcodeError(Exception):
    """Base error for huffcode."""

    exit_code: int = EXIT_GENERIC


class UsageError(HuffcodeError):
    exit_code = EXIT_USAGE


class InvalidAlphabet(UsageError):
    pass


class EmptyAlphabet(InvalidAlphabet):
    def __init__(self, msg: str = "alphabet is empty: at least one symbol is required") -> None:
        super().__init__(msg)


class UnknownSymbol(HuffcodeError):
    exit_code = EXIT_UNKNOWN_SYMBOL

    def __init__(self, symbol: Any, position: int | None = None) -> None:
        self.symbol = symbol
        self.position = position
        where = f" at position {position}" if position is not None else ""
        super().__init__(f"symbol {symbol!r}{where} has no entry in the code table")


class CorruptStream(HuffcodeError):
    exit_code = EXIT_CORRUPT_STREAM


class IncompleteCode(CorruptStream):
    """The stream ended while the cursor was still inside the tree."""

    def __init__(self, msg: str, *, decoded: int = 0, consumed_bits: int = 0) -> None:
        self.decoded = decoded
        self.consumed_bits = consumed_bits
        super().__init__(msg)


class MalformedStream(CorruptStream):
    pass


class BadMagic(MalformedStream):
    pass


class MissingStreamLength(CorruptStream):
    pass


class MalformedPersistedTable(HuffcodeError):
    exit_code = EXIT_MALFORMED_TABLE

    def __init__(self, msg: str, *, lineno: int | None = None) -> None:
        self.lineno = lineno
        if lineno is not None:
            msg = f"line {lineno}: {msg}"
        super().__init__(msg)


class MissingResource(HuffcodeError):
    exit_code = EXIT_MISSING_RESOURCE


class TreeInvariantError(HuffcodeError):
    exit_code = EXIT_GENERIC
