from __future__ import annotations

import json
from pathlib import Path

import pytest

from huffcode.alphabet_spec import (
    DEMO_ALPHABET,
    AlphabetSpecError,
    demo_alphabet_spec,
    load_alphabet_spec,
)
from huffcode.core.builder import WeightedSymbol
from huffcode.core.codec import HuffmanCodec


def test_alphabet_inline_object() -> None:
    obj = {"spec": "huffcode.alphabet.v1", "name": "abc", "symbols": {"a": 1, "b": 2, "c": 0.5}}
    spec = load_alphabet_spec(json.dumps(obj))
    assert spec.name == "abc"
    assert spec.symbols == (
        WeightedSymbol("a", 1),
        WeightedSymbol("b", 2),
        WeightedSymbol("c", 0.5),
    )


def test_alphabet_pairs_keep_order() -> None:
    obj = {"spec": "huffcode.alphabet.v1", "symbols": [["z", 1], ["y", 1], ["x", 1]]}
    spec = load_alphabet_spec(json.dumps(obj))
    assert spec.name == "alphabet"
    assert [s.symbol for s in spec.symbols] == ["z", "y", "x"]
    # order drives the tie-break
    assert HuffmanCodec.from_alphabet(spec.symbols).table["x"] == "0"


def test_alphabet_from_file(tmp_path: Path) -> None:
    p = tmp_path / "alpha.json"
    p.write_text(
        json.dumps({"spec": "huffcode.alphabet.v1", "name": "ws", "symbols": {" ": 3, "\n": 1}}),
        encoding="utf-8",
    )
    spec = load_alphabet_spec("@" + str(p))
    assert spec.as_dict() == {" ": 3, "\n": 1}


@pytest.mark.parametrize(
    "obj",
    [
        {"name": "x", "symbols": {"a": 1}},
        {"spec": "huffcode.alphabet.v2", "symbols": {"a": 1}},
        {"spec": "huffcode.alphabet.v1"},
        {"spec": "huffcode.alphabet.v1", "symbols": {}},
        {"spec": "huffcode.alphabet.v1", "symbols": "abc"},
        {"spec": "huffcode.alphabet.v1", "symbols": {"a": -1}},
        {"spec": "huffcode.alphabet.v1", "symbols": {"a": True}},
        {"spec": "huffcode.alphabet.v1", "symbols": {"a": "1"}},
        {"spec": "huffcode.alphabet.v1", "symbols": {"": 1}},
        {"spec": "huffcode.alphabet.v1", "symbols": [["a", 1], ["a", 2]]},
        {"spec": "huffcode.alphabet.v1", "symbols": [["a", 1, 2]]},
        {"spec": "huffcode.alphabet.v1", "symbols": [[1, 1]]},
        {"spec": "huffcode.alphabet.v1", "name": "", "symbols": {"a": 1}},
        {"spec": "huffcode.alphabet.v1", "symbols": {"a": 1}, "wat": 1},
    ],
)
def test_alphabet_rejected(obj) -> None:
    with pytest.raises(AlphabetSpecError):
        load_alphabet_spec(json.dumps(obj))


@pytest.mark.parametrize("arg", ["", "   ", "[1, 2]", "{not json", "@/nonexistent/alpha.json"])
def test_alphabet_bad_argument(arg: str) -> None:
    with pytest.raises(AlphabetSpecError):
        load_alphabet_spec(arg)


def test_demo_alphabet() -> None:
    spec = demo_alphabet_spec()
    assert spec.symbols == DEMO_ALPHABET
    assert spec.as_dict() == {"a": 5, "b": 9, "c": 12, "d": 13, "e": 16, "f": 45}


@pytest.mark.parametrize(
    "raw",
    [
        '{"spec": "huffcode.alphabet.v1", "symbols": {"a": 1, "a": 7, "b": 2}}',
        '{"spec": "huffcode.alphabet.v1", "spec": "huffcode.alphabet.v1", "symbols": {"a": 1}}',
    ],
)
def test_alphabet_duplicate_keys_rejected(raw: str) -> None:
    with pytest.raises(AlphabetSpecError, match="duplicate"):
        load_alphabet_spec(raw)


def test_alphabet_duplicate_keys_rejected_from_file(tmp_path: Path) -> None:
    p = tmp_path / "alpha.json"
    p.write_text('{"spec": "huffcode.alphabet.v1", "symbols": {"x": 1, "x": 2}}', encoding="utf-8")
    with pytest.raises(AlphabetSpecError, match="duplicate key 'x'"):
        load_alphabet_spec("@" + str(p))


def test_alphabet_file_not_utf8(tmp_path: Path) -> None:
    p = tmp_path / "alpha.json"
    p.write_bytes(b"\xff\xfe{}")
    with pytest.raises(AlphabetSpecError, match="cannot read"):
        load_alphabet_spec("@" + str(p))
