"""
constructions/coordination.py
-----------------------------

One coordination algorithm shared by noun phrases, verb phrases and
logical propositions.

Flat coordination:

    coordinate(["tea", "coffee"], "and")            -> "tea and coffee"
    coordinate(["tea", "coffee", "milk"], "or")     -> "tea, coffee, or milk"
    coordinate(["tea", "coffee"], "and", correlative=True) -> "both tea and coffee"
    coordinate(["tea", "coffee"], "or", correlative=True,
               polarity="negative")                 -> "neither tea nor coffee"

Grouped coordination (chains whose elements belong to different groups):

    coordinate_groups([
        CoordElement("A", "x", None),
        CoordElement("B", "x", "and"),
        CoordElement("C", "y", "and"),
    ])                                              -> "both A and B, and C"

Consecutive elements sharing a group id and conjunction form one group;
when more than one group exists the groups are made explicit with
correlatives. A missing element renders the placeholder token so the word
count stays stable while a sentence is still being built.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, List, Optional, Sequence, TypeVar

from app.shared.config import settings

T = TypeVar("T")

_CORRELATIVES = {"and": "both", "or": "either"}


def _conj(value) -> str:
    return getattr(value, "value", value) or "and"


def coordinate(
    items: Sequence[Optional[str]],
    conjunction: str = "and",
    correlative: bool = False,
    polarity: str = "affirmative",
    placeholder: Optional[str] = None,
) -> str:
    """Join rendered items; None items become the placeholder."""
    blank = placeholder if placeholder is not None else settings.PLACEHOLDER
    words = [item if item else blank for item in items]
    conj = _conj(conjunction)
    negative = _conj(polarity) == "negative" and conj == "or"

    if not words:
        return blank
    if len(words) == 1:
        return words[0]

    if negative:
        if len(words) == 2:
            return f"neither {words[0]} nor {words[1]}"
        return f"neither {', '.join(words[:-1])}, nor {words[-1]}"

    if len(words) == 2:
        if correlative:
            return f"{_CORRELATIVES[conj]} {words[0]} {conj} {words[1]}"
        return f"{words[0]} {conj} {words[1]}"

    # Oxford comma
    return f"{', '.join(words[:-1])}, {conj} {words[-1]}"


@dataclass(frozen=True)
class CoordElement(Generic[T]):
    value: Optional[T]
    # Same id = same group (e.g. verb phrases sharing a subject)
    group_id: str
    # Conjunction linking this element to the previous one; None for the first
    conjunction: Optional[str] = None


@dataclass
class _Group(Generic[T]):
    elements: List[Optional[T]]
    group_id: str
    # Conjunction inside the group; settled by its second element
    conjunction: Optional[str] = None
    # Conjunction linking the group to the previous one
    link: str = "and"


def _group(elements: Sequence[CoordElement[T]]) -> List[_Group[T]]:
    groups: List[_Group[T]] = []
    for elem in elements:
        conj = _conj(elem.conjunction)
        current = groups[-1] if groups else None
        if (
            current is not None
            and current.group_id == elem.group_id
            and current.conjunction in (None, conj)
        ):
            current.elements.append(elem.value)
            current.conjunction = conj
        else:
            groups.append(_Group(elements=[elem.value], group_id=elem.group_id, link=conj))
    return groups


def coordinate_groups(
    elements: Sequence[CoordElement[T]],
    render: Callable[[T], str] = str,  # type: ignore[assignment]
    placeholder: Optional[str] = None,
) -> str:
    """Render a grouped coordination chain."""
    blank = placeholder if placeholder is not None else settings.PLACEHOLDER
    if not elements:
        return blank

    def _render(value: Optional[T]) -> Optional[str]:
        return render(value) if value is not None else None

    if len(elements) == 1:
        return _render(elements[0].value) or blank

    groups = _group(elements)
    nested = len(groups) > 1
    texts = [
        coordinate([_render(v) for v in g.elements], g.conjunction or "and", correlative=nested, placeholder=blank)
        for g in groups
    ]

    result = texts[0]
    for group, text in zip(groups[1:], texts[1:]):
        result += f", {group.link} {text}"
    return result


def placeholder_group_ids(values: Sequence[Optional[object]], key: Callable[[object], str]) -> List[str]:
    """
    Group ids for a chain: `key(value)` for filled values, a unique id per
    empty slot so placeholders never merge into a group.
    """
    return [key(v) if v is not None else f"__placeholder_{i}__" for i, v in enumerate(values)]


__all__ = ["coordinate", "CoordElement", "coordinate_groups", "placeholder_group_ids"]
