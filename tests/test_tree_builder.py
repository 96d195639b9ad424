from __future__ import annotations

import dataclasses

import pytest

from huffcode.core.builder import WeightedSymbol, build_tree, normalize_alphabet
from huffcode.core.codes import generate_codes
from huffcode.core.tree import HuffmanTree, Internal, Leaf
from huffcode.errors import EmptyAlphabet, InvalidAlphabet, TreeInvariantError, UsageError

CLRS = {"a": 5, "b": 9, "c": 12, "d": 13, "e": 16, "f": 45}


def test_build_tree_classic_alphabet_structure() -> None:
    tree = build_tree(CLRS)
    tree.validate()

    # leaves first (input order), then merges in creation order
    assert tree.nodes[:6] == tuple(Leaf(s, w) for s, w in CLRS.items())
    assert tree.nodes[6:] == (
        Internal(weight=14, left=0, right=1),
        Internal(weight=25, left=2, right=3),
        Internal(weight=30, left=6, right=4),
        Internal(weight=55, left=7, right=8),
        Internal(weight=100, left=5, right=9),
    )
    assert tree.root == 10
    assert tree.weight == 100


def test_build_tree_accepts_pairs_and_weighted_symbols() -> None:
    t1 = build_tree(CLRS)
    t2 = build_tree(list(CLRS.items()))
    t3 = build_tree([WeightedSymbol(s, w) for s, w in CLRS.items()])
    assert t1 == t2 == t3


@pytest.mark.parametrize("empty", [[], {}, ()])
def test_build_tree_empty_alphabet(empty) -> None:
    with pytest.raises(EmptyAlphabet):
        build_tree(empty)


def test_empty_alphabet_is_a_usage_error() -> None:
    assert issubclass(EmptyAlphabet, InvalidAlphabet)
    assert issubclass(EmptyAlphabet, UsageError)
    assert EmptyAlphabet().exit_code == 2


def test_single_symbol_tree_is_a_leaf() -> None:
    tree = build_tree({"x": 3})
    tree.validate()
    assert tree.root_is_leaf
    assert tree.nodes == (Leaf("x", 3),)


def test_tie_break_follows_input_order() -> None:
    assert generate_codes(build_tree([("x", 1), ("y", 1), ("z", 1)])) == {
        "z": "0",
        "x": "10",
        "y": "11",
    }
    assert generate_codes(build_tree([("z", 1), ("y", 1), ("x", 1)])) == {
        "x": "0",
        "z": "10",
        "y": "11",
    }


def test_tie_break_leaf_before_later_merge() -> None:
    # c (leaf, weight 2) was created before the a+b merge (weight 2): c goes left
    assert generate_codes(build_tree({"a": 1, "b": 1, "c": 2})) == {
        "c": "0",
        "a": "10",
        "b": "11",
    }


def test_build_tree_is_reproducible() -> None:
    alphabet = [(chr(ord("a") + i), (i * 7) % 5) for i in range(20)]
    assert build_tree(alphabet) == build_tree(alphabet)


def test_float_weights_probabilities() -> None:
    tree = build_tree({"a": 0.5, "b": 0.25, "c": 0.25})
    tree.validate()
    assert generate_codes(tree) == {"a": "0", "b": "10", "c": "11"}


def test_zero_weights_are_valid() -> None:
    tree = build_tree({"a": 0, "b": 0})
    assert generate_codes(tree) == {"a": "0", "b": "1"}


@pytest.mark.parametrize(
    "alphabet",
    [
        {"a": -1},
        {"a": float("nan")},
        {"a": float("inf")},
        {"a": True},
        {"a": "5"},
        [("a", 1), ("a", 2)],
        [(None, 1)],
        [("", 1)],
        [(["x"], 1)],
        [("a", 1, 2)],
        "abc",
    ],
)
def test_invalid_alphabet(alphabet) -> None:
    with pytest.raises(InvalidAlphabet):
        build_tree(alphabet)


def test_normalize_alphabet_keeps_order() -> None:
    got = normalize_alphabet([("b", 2), ("a", 1)])
    assert got == [WeightedSymbol("b", 2), WeightedSymbol("a", 1)]


def test_tree_is_immutable() -> None:
    tree = build_tree(CLRS)
    with pytest.raises(dataclasses.FrozenInstanceError):
        tree.root = 0  # type: ignore[misc]
    with pytest.raises(dataclasses.FrozenInstanceError):
        tree.nodes[0].weight = 1  # type: ignore[misc]
    assert isinstance(tree.nodes, tuple)


def test_child_of_leaf_is_an_invariant_violation() -> None:
    tree = build_tree({"a": 1, "b": 2})
    leaf = tree.child(tree.root, "0")
    assert tree.is_leaf(leaf)
    with pytest.raises(TreeInvariantError):
        tree.child(leaf, "0")


def test_root_out_of_range() -> None:
    with pytest.raises(TreeInvariantError):
        HuffmanTree(nodes=(Leaf("a", 1),), root=1)
    with pytest.raises(TreeInvariantError):
        HuffmanTree(nodes=(), root=0)


@pytest.mark.parametrize(
    "nodes,root",
    [
        # same child twice
        ((Leaf("a", 1), Internal(2, 0, 0)), 1),
        # weight is not the children sum
        ((Leaf("a", 1), Leaf("b", 1), Internal(3, 0, 1)), 2),
        # orphan node in the arena
        ((Leaf("a", 1), Leaf("b", 1), Leaf("c", 1), Internal(2, 0, 1)), 3),
        # duplicated symbol
        ((Leaf("a", 1), Leaf("a", 1), Internal(2, 0, 1)), 2),
        # cycle
        ((Leaf("a", 1), Internal(1, 0, 1)), 1),
        # child out of range
        ((Leaf("a", 1), Internal(1, 0, 7)), 1),
    ],
)
def test_validate_rejects_broken_trees(nodes, root) -> None:
    with pytest.raises(TreeInvariantError):
        HuffmanTree(nodes=nodes, root=root).validate()
