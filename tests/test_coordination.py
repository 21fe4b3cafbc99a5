# tests/test_coordination.py
"""Tests for the shared coordination algorithm in :mod:`constructions.coordination`."""

from __future__ import annotations

from constructions.coordination import CoordElement, coordinate, coordinate_groups, placeholder_group_ids


def test_two_items_take_no_comma() -> None:
    assert coordinate(["tea", "coffee"], "and") == "tea and coffee"
    assert coordinate(["tea", "coffee"], "or") == "tea or coffee"


def test_three_items_take_the_oxford_comma() -> None:
    assert coordinate(["tea", "coffee", "milk"], "and") == "tea, coffee, and milk"
    assert coordinate(["tea", "coffee", "milk", "juice"], "or") == "tea, coffee, milk, or juice"


def test_correlatives() -> None:
    assert coordinate(["tea", "coffee"], "and", correlative=True) == "both tea and coffee"
    assert coordinate(["tea", "coffee"], "or", correlative=True) == "either tea or coffee"
    assert coordinate(["tea", "coffee"], "or", polarity="negative") == "neither tea nor coffee"
    assert coordinate(["tea", "coffee", "milk"], "or", polarity="negative") == "neither tea, coffee, nor milk"


def test_missing_conjunct_keeps_its_place() -> None:
    assert coordinate(["tea", None], "and") == "tea and ___"
    assert coordinate([None, "coffee", None], "or") == "___, coffee, or ___"
    assert coordinate(["tea", None], "and", placeholder="…") == "tea and …"


def test_degenerate_inputs() -> None:
    assert coordinate([], "and") == "___"
    assert coordinate(["tea"], "and") == "tea"


def test_single_group_renders_flat() -> None:
    elements = [CoordElement("ran", "he"), CoordElement("jumped", "he", "and")]
    assert coordinate_groups(elements) == "ran and jumped"


def test_groups_become_explicit_with_correlatives() -> None:
    elements = [
        CoordElement("A", "x", None),
        CoordElement("B", "x", "and"),
        CoordElement("C", "y", "and"),
    ]
    assert coordinate_groups(elements) == "both A and B, and C"


def test_conjunction_change_starts_a_new_group() -> None:
    elements = [
        CoordElement("A", "x", None),
        CoordElement("B", "x", "and"),
        CoordElement("C", "x", "or"),
    ]
    assert coordinate_groups(elements) == "both A and B, or C"


def test_placeholder_ids_never_merge() -> None:
    ids = placeholder_group_ids(["he", None, None, "he"], key=str)
    assert ids[0] == ids[3] == "he"
    assert ids[1] != ids[2]

    elements = [CoordElement(v, g) for v, g in zip(["a", None, None], ids)]
    assert "___" in coordinate_groups(elements)
