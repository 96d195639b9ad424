"""huffcode CLI.

This is the stable CLI entrypoint (console-script: ``huffcode``).

UX policy:
  - reports go to stdout as small ``=== ... ===`` blocks
  - errors go to stderr as a single ``[huffcode] ...`` line, exit code from errors.py
  - ``--debug`` re-raises to show the stack trace
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from huffcode.alphabet_spec import (
    DEMO_TEXT,
    AlphabetSpecError,
    AlphabetSpecV1,
    demo_alphabet_spec,
    load_alphabet_spec,
)
from huffcode.core.codec import HuffmanCodec
from huffcode.core.codes import CodeTable
from huffcode.errors import EXIT_GENERIC, EXIT_USAGE, HuffcodeError
from huffcode.persist import (
    escape_symbol,
    load_bundle,
    load_code_table,
    load_stream,
    read_text_input,
    save_bundle,
    save_code_table,
    save_stream,
    write_text_output,
)

PROG = "huffcode"


def _add_common_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--debug", action="store_true", help="Show stack traces on errors")


def _print_code_table(table: CodeTable, label: str) -> None:
    print(f"=== huffcode codes ({label}) ===")
    for sym, code in table.sorted_items():
        print(f"{escape_symbol(sym)}: {code}")
    print("=" * 24)


def _codec_for(text: str, alphabet_arg: str | None) -> tuple[HuffmanCodec, str]:
    if alphabet_arg is not None:
        spec = load_alphabet_spec(alphabet_arg)
        return HuffmanCodec.from_alphabet(spec.symbols), spec.name
    return HuffmanCodec.from_text(text), "from input"


def _cmd_demo(alphabet_arg: str | None, text: str, workdir: Path) -> int:
    spec: AlphabetSpecV1 = (
        load_alphabet_spec(alphabet_arg) if alphabet_arg is not None else demo_alphabet_spec()
    )
    codec = HuffmanCodec.from_alphabet(spec.symbols)
    _print_code_table(codec.table, spec.name)

    workdir.mkdir(parents=True, exist_ok=True)
    table_path = workdir / "codes.txt"
    stream_path = workdir / "encoded.txt"
    save_code_table(table_path, codec.table)
    save_stream(stream_path, codec.encode(text))

    # read path: files only, tree rebuilt from the table
    reloaded = HuffmanCodec.from_code_table(load_code_table(table_path))
    bits, count = load_stream(stream_path)
    print(f"Decoded text: {reloaded.decode_text(bits, count)}")
    return 0


def _cmd_codes(alphabet_arg: str | None, from_text: Path | None) -> int:
    if alphabet_arg is not None:
        spec = load_alphabet_spec(alphabet_arg)
        _print_code_table(HuffmanCodec.from_alphabet(spec.symbols).table, spec.name)
        return 0
    assert from_text is not None
    codec = HuffmanCodec.from_text(read_text_input(from_text))
    _print_code_table(codec.table, from_text.name)
    return 0


def _cmd_encode(
    input_path: Path, table_path: Path, stream_path: Path, *, alphabet_arg: str | None, with_count: bool
) -> int:
    text = read_text_input(input_path)
    codec, label = _codec_for(text, alphabet_arg)
    stream = codec.encode(text)
    save_code_table(table_path, codec.table)
    save_stream(stream_path, stream, with_count=with_count)

    print("=== huffcode encode ===")
    print(f"Alphabet       : {label} ({len(codec.table)} symbols)")
    print(f"Input          : {input_path} ({stream.n_symbols} symbols)")
    print(f"Code table     : {table_path}")
    print(f"Stream         : {stream_path} ({stream.nbits} bits)")
    if stream.n_symbols:
        print(f"Bits/symbol    : {stream.nbits / stream.n_symbols:.3f}")
    print("=======================")
    return 0


def _cmd_decode(table_path: Path, stream_path: Path, output_path: Path | None, count: int | None) -> int:
    codec = HuffmanCodec.from_code_table(load_code_table(table_path))
    bits, header_count = load_stream(stream_path)
    text = codec.decode_text(bits, count if count is not None else header_count)
    if output_path is None:
        sys.stdout.write(text)
        return 0
    write_text_output(output_path, text)
    print(f"Decoded: {output_path} ({len(text)} symbols)")
    return 0


def _cmd_pack(input_path: Path, output_path: Path, alphabet_arg: str | None) -> int:
    text = read_text_input(input_path)
    codec, label = _codec_for(text, alphabet_arg)
    stream = codec.encode(text)
    save_bundle(output_path, codec.table, stream)
    in_size = input_path.stat().st_size
    out_size = output_path.stat().st_size
    ratio = (out_size / in_size) if in_size else 0.0

    print("=== huffcode pack ===")
    print(f"Alphabet       : {label} ({len(codec.table)} symbols)")
    print(f"Input          : {input_path} ({in_size} bytes)")
    print(f"Bundle         : {output_path} ({out_size} bytes)")
    print(f"Ratio          : {ratio:.3f} (1.0 = no compression)")
    print("=====================")
    return 0


def _cmd_unpack(input_path: Path, output_path: Path) -> int:
    table, stream = load_bundle(input_path)
    text = HuffmanCodec.from_code_table(table).decode_text(stream)
    write_text_output(output_path, text)
    print(f"Unpacked: {output_path} ({stream.n_symbols} symbols)")
    return 0


def _cmd_alphabet_validate(alphabet_arg: str) -> int:
    # load is the validation
    load_alphabet_spec(alphabet_arg)
    print("OK")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog=PROG, description="Huffman code tables, encoder and decoder")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_demo = sub.add_parser(
        "demo", help="Print the code table, write codes.txt + encoded.txt, decode them back"
    )
    p_demo.add_argument(
        "--alphabet",
        default=None,
        help="Alphabet spec JSON ('@file.json' or inline). Default: a:5 b:9 c:12 d:13 e:16 f:45",
    )
    p_demo.add_argument("--text", default=DEMO_TEXT, help=f"Text to encode (default: {DEMO_TEXT!r})")
    p_demo.add_argument("--workdir", type=Path, default=Path("."), help="Where to write the files")
    _add_common_args(p_demo)

    p_codes = sub.add_parser("codes", help="Print the code table of an alphabet")
    src = p_codes.add_mutually_exclusive_group(required=True)
    src.add_argument("--alphabet", default=None, help="Alphabet spec JSON ('@file.json' or inline)")
    src.add_argument("--from-text", type=Path, default=None, help="Count frequencies from a text file")
    _add_common_args(p_codes)

    p_enc = sub.add_parser("encode", help="Encode a text file into a code table + text stream")
    p_enc.add_argument("input", type=Path)
    p_enc.add_argument("table", type=Path, help="Output code table (text)")
    p_enc.add_argument("stream", type=Path, help="Output encoded stream (text)")
    p_enc.add_argument(
        "--alphabet",
        default=None,
        help="Alphabet spec JSON. Default: frequencies counted from the input",
    )
    p_enc.add_argument(
        "--no-count", action="store_true", help="Do not write the '#n=<count>' stream header"
    )
    _add_common_args(p_enc)

    p_dec = sub.add_parser("decode", help="Decode a text stream with a persisted code table")
    p_dec.add_argument("table", type=Path)
    p_dec.add_argument("stream", type=Path)
    p_dec.add_argument("output", type=Path, nargs="?", default=None, help="Default: stdout")
    p_dec.add_argument(
        "--count", type=int, default=None, help="Expected symbol count (overrides the stream header)"
    )
    _add_common_args(p_dec)

    p_pack = sub.add_parser("pack", help="Encode a text file into a binary bundle (table + stream)")
    p_pack.add_argument("input", type=Path)
    p_pack.add_argument("output", type=Path)
    p_pack.add_argument("--alphabet", default=None, help="Alphabet spec JSON")
    _add_common_args(p_pack)

    p_unpack = sub.add_parser("unpack", help="Decode a binary bundle back into text")
    p_unpack.add_argument("input", type=Path)
    p_unpack.add_argument("output", type=Path)
    _add_common_args(p_unpack)

    p_av = sub.add_parser("alphabet-validate", help="Validate an alphabet spec (v1)")
    p_av.add_argument("alphabet", help="Alphabet spec JSON (@file.json or inline JSON)")
    _add_common_args(p_av)

    return p


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    p = build_parser()
    ns = p.parse_args(argv)

    try:
        if ns.cmd == "demo":
            return _cmd_demo(ns.alphabet, ns.text, ns.workdir)
        if ns.cmd == "codes":
            return _cmd_codes(ns.alphabet, ns.from_text)
        if ns.cmd == "encode":
            return _cmd_encode(
                ns.input,
                ns.table,
                ns.stream,
                alphabet_arg=ns.alphabet,
                with_count=not ns.no_count,
            )
        if ns.cmd == "decode":
            return _cmd_decode(ns.table, ns.stream, ns.output, ns.count)
        if ns.cmd == "pack":
            return _cmd_pack(ns.input, ns.output, ns.alphabet)
        if ns.cmd == "unpack":
            return _cmd_unpack(ns.input, ns.output)
        if ns.cmd == "alphabet-validate":
            return _cmd_alphabet_validate(str(ns.alphabet))
        raise AssertionError("unreachable")

    except SystemExit:
        raise
    except AlphabetSpecError as e:
        # Treat as usage/config error.
        if getattr(ns, "debug", False):
            raise
        print(f"[{PROG}] {e}", file=sys.stderr)
        return EXIT_USAGE
    except HuffcodeError as e:
        if getattr(ns, "debug", False):
            raise
        print(f"[{PROG}] {e}", file=sys.stderr)
        return int(getattr(e, "exit_code", EXIT_GENERIC) or EXIT_GENERIC)
    except Exception as e:
        if getattr(ns, "debug", False):
            raise
        print(f"[{PROG}] error: {e}", file=sys.stderr)
        return EXIT_GENERIC


if __name__ == "__main__":
    raise SystemExit(main())
