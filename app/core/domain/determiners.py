# app/core/domain/determiners.py
"""
Determiner co-occurrence rules for one English noun phrase.

A noun phrase has three determiner slots:

    PRE      all, both, half                       (predeterminers)
    CENTRAL  the, a, this, that, these, those, possessives, no,
             every, each, any                      (central determiners)
    POST     one, two, three, many, few, some, several,
             plus the `plural` / `uncountable` number markers

The exclusion tables are directional: `EXCLUSIONS[slot][value][other]`
lists the values of `other` that become unusable once `value` sits in
`slot`. Two consequences:

* an option is *disabled* when a value already committed in another slot
  excludes it (see `available_options`);
* committing a value *resets* other slots whose current value the new
  value excludes (see `commit`);
* once the head noun type is known, values it rules out are disabled
  and cannot be committed.

Everything here is pure. `DeterminerResolver` is the only stateful piece:
it owns one noun phrase's selections while it is being edited and keeps
reset reasons around for a short display window.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Dict, FrozenSet, List, Mapping, Optional, Tuple

from app.shared.config import settings


class Slot(str, Enum):
    PRE = "pre"
    CENTRAL = "central"
    POST = "post"


class NounType(str, Enum):
    COUNTABLE = "countable"
    UNCOUNTABLE = "uncountable"
    PROPER = "proper"
    ZERO_ARTICLE = "zero_article"


PLURAL = "plural"
UNCOUNTABLE = "uncountable"

# Values offered per slot, in display order. None means "no determiner".
SLOT_VALUES: Dict[Slot, Tuple[str, ...]] = {
    Slot.PRE: ("all", "both", "half"),
    Slot.CENTRAL: (
        "the", "a", "this", "that", "these", "those",
        "my", "your", "his", "her", "our", "their",
        "no", "every", "each", "any",
    ),
    Slot.POST: ("one", "two", "three", "many", "few", "some", "several", PLURAL, UNCOUNTABLE),
}

# Values that only mark number and never produce a surface token.
MARKERS: FrozenSet[str] = frozenset({PLURAL, UNCOUNTABLE})

# Grammatical number implied by a value, where it implies one.
VALUE_NUMBER: Dict[str, str] = {
    "all": "plural",
    "both": "plural",
    "a": "singular",
    "this": "singular",
    "that": "singular",
    "these": "plural",
    "those": "plural",
    "every": "singular",
    "each": "singular",
    "one": "singular",
    "two": "plural",
    "three": "plural",
    "many": "plural",
    "few": "plural",
    "some": "plural",
    "several": "plural",
    PLURAL: "plural",
    UNCOUNTABLE: "uncountable",
}

_NUMERALS_AND_QUANTIFIERS = ("two", "three", "many", "few", "some", "several")
_DISTRIBUTIVES = ("every", "each")

# ---------------------------------------------------------------------------
# Exclusion tables
# ---------------------------------------------------------------------------

_Table = Dict[str, Dict[Slot, Tuple[str, ...]]]

PRE_EXCLUSIONS: _Table = {
    "all": {
        Slot.CENTRAL: ("a", "no") + _DISTRIBUTIVES + ("any",),
        Slot.POST: ("one",),
    },
    "both": {
        Slot.CENTRAL: ("a", "no", "this", "that") + _DISTRIBUTIVES + ("any",),
        Slot.POST: ("one", "three", "many", "few", "some", "several", UNCOUNTABLE),
    },
    "half": {
        Slot.CENTRAL: ("a", "no") + _DISTRIBUTIVES + ("any",),
        Slot.POST: ("one", UNCOUNTABLE),
    },
}

CENTRAL_EXCLUSIONS: _Table = {
    "a": {
        Slot.PRE: ("all", "both", "half"),
        Slot.POST: ("one", "two", "three", "many", "some", "several", PLURAL, UNCOUNTABLE),
    },
    "this": {
        Slot.PRE: ("both",),
        Slot.POST: _NUMERALS_AND_QUANTIFIERS + (PLURAL, UNCOUNTABLE),
    },
    "that": {
        Slot.PRE: ("both",),
        Slot.POST: _NUMERALS_AND_QUANTIFIERS + (PLURAL, UNCOUNTABLE),
    },
    "these": {
        Slot.POST: ("one", "some", UNCOUNTABLE),
    },
    "those": {
        Slot.POST: ("one", "some", UNCOUNTABLE),
    },
    "no": {
        Slot.PRE: ("all", "both", "half"),
        Slot.POST: ("some", UNCOUNTABLE),
    },
    "every": {
        Slot.PRE: ("all", "both", "half"),
        Slot.POST: _NUMERALS_AND_QUANTIFIERS + (PLURAL, UNCOUNTABLE),
    },
    "each": {
        Slot.PRE: ("all", "both", "half"),
        Slot.POST: _NUMERALS_AND_QUANTIFIERS + (PLURAL, UNCOUNTABLE),
    },
    "any": {
        Slot.PRE: ("all", "both", "half"),
        Slot.POST: ("many", "few", "some", "several", PLURAL),
    },
}

POST_EXCLUSIONS: _Table = {
    "one": {
        Slot.PRE: ("all", "both", "half"),
        Slot.CENTRAL: ("a", "these", "those"),
    },
    "two": {
        Slot.PRE: ("half",),
        Slot.CENTRAL: ("a", "this", "that"),
    },
    "three": {
        Slot.PRE: ("both", "half"),
        Slot.CENTRAL: ("a", "this", "that"),
    },
    "many": {
        Slot.PRE: ("both", "half"),
        Slot.CENTRAL: ("a", "this", "that"),
    },
    # "a few" is fine
    "few": {
        Slot.PRE: ("both", "half"),
        Slot.CENTRAL: ("this", "that"),
    },
    "some": {
        Slot.PRE: ("both", "half"),
        Slot.CENTRAL: ("a", "this", "that", "these", "those", "no"),
    },
    "several": {
        Slot.PRE: ("both", "half"),
        Slot.CENTRAL: ("a", "this", "that"),
    },
    PLURAL: {
        Slot.PRE: ("both",),
        Slot.CENTRAL: ("a", "this", "that"),
    },
    UNCOUNTABLE: {
        Slot.PRE: ("all", "both", "half"),
        Slot.CENTRAL: ("a", "this", "that", "these", "those") + _DISTRIBUTIVES,
    },
}

EXCLUSIONS: Dict[Slot, _Table] = {
    Slot.PRE: PRE_EXCLUSIONS,
    Slot.CENTRAL: CENTRAL_EXCLUSIONS,
    Slot.POST: POST_EXCLUSIONS,
}


# ---------------------------------------------------------------------------
# Noun-type constraints
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NounTypeConstraint:
    default: "Selections"
    invalid: Mapping[Slot, FrozenSet[str]]


# ---------------------------------------------------------------------------
# Value objects
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Selections:
    """Current value of each slot; None means the slot is empty."""

    pre: Optional[str] = None
    central: Optional[str] = None
    post: Optional[str] = None

    def get(self, slot: Slot) -> Optional[str]:
        return getattr(self, slot.value)

    def with_value(self, slot: Slot, value: Optional[str]) -> "Selections":
        return replace(self, **{slot.value: value})

    def as_dict(self) -> Dict[str, Optional[str]]:
        return {"pre": self.pre, "central": self.central, "post": self.post}


@dataclass(frozen=True)
class Option:
    value: Optional[str]
    enabled: bool = True
    reason: Optional[str] = None

    @property
    def label(self) -> str:
        if self.value is None:
            return "-"
        if self.value in MARKERS:
            return f"[{self.value}]"
        return self.value


@dataclass(frozen=True)
class Reset:
    """One slot cleared as a side effect of a commit."""

    slot: Slot
    previous: str
    reason: str


@dataclass(frozen=True)
class CommitResult:
    selections: Selections
    accepted: bool = True
    resets: Tuple[Reset, ...] = ()


NOUN_TYPE_CONSTRAINTS: Dict[NounType, NounTypeConstraint] = {
    NounType.COUNTABLE: NounTypeConstraint(
        default=Selections(central="a"),
        invalid={Slot.PRE: frozenset(), Slot.CENTRAL: frozenset(), Slot.POST: frozenset({UNCOUNTABLE})},
    ),
    NounType.UNCOUNTABLE: NounTypeConstraint(
        default=Selections(post=UNCOUNTABLE),
        invalid={
            Slot.PRE: frozenset({"both"}),
            Slot.CENTRAL: frozenset({"a", "these", "those", "every", "each"}),
            Slot.POST: frozenset({"one", "two", "three", "many", "few", "several", PLURAL}),
        },
    ),
    NounType.PROPER: NounTypeConstraint(
        default=Selections(),
        invalid={
            Slot.PRE: frozenset(SLOT_VALUES[Slot.PRE]),
            Slot.CENTRAL: frozenset(SLOT_VALUES[Slot.CENTRAL]),
            Slot.POST: frozenset(SLOT_VALUES[Slot.POST]),
        },
    ),
    NounType.ZERO_ARTICLE: NounTypeConstraint(
        default=Selections(),
        invalid={Slot.PRE: frozenset(), Slot.CENTRAL: frozenset(), Slot.POST: frozenset({UNCOUNTABLE})},
    ),
}


# ---------------------------------------------------------------------------
# Pure rule functions
# ---------------------------------------------------------------------------


def _label(value: str) -> str:
    return f"[{value}]" if value in MARKERS else f"'{value}'"


def excluded_values(slot: Slot, value: Optional[str], other: Slot) -> Tuple[str, ...]:
    """Values of `other` that `value` in `slot` rules out."""
    if value is None:
        return ()
    return EXCLUSIONS[slot].get(value, {}).get(other, ())


def blocked_by(slot: Slot, value: Optional[str], selections: Selections) -> Optional[Tuple[Slot, str]]:
    """The (slot, value) already committed elsewhere that excludes `value`, if any."""
    if value is None:
        return None
    for other in Slot:
        if other is slot:
            continue
        current = selections.get(other)
        if value in excluded_values(other, current, slot):
            return other, current  # type: ignore[return-value]
    return None


def find_conflicts(selections: Selections) -> List[Tuple[Slot, str, Slot, str]]:
    """Every (slot, value, other_slot, other_value) pair the tables forbid."""
    conflicts: List[Tuple[Slot, str, Slot, str]] = []
    for slot in Slot:
        value = selections.get(slot)
        if value is None:
            continue
        for other in Slot:
            if other is slot:
                continue
            other_value = selections.get(other)
            if other_value is not None and other_value in excluded_values(slot, value, other):
                conflicts.append((slot, value, other, other_value))
    return conflicts


def is_known_value(slot: Slot, value: Optional[str]) -> bool:
    return value is None or value in SLOT_VALUES[slot]


def invalid_for_noun_type(slot: Slot, value: Optional[str], noun_type: Optional[NounType]) -> bool:
    if value is None or noun_type is None:
        return False
    return value in NOUN_TYPE_CONSTRAINTS[noun_type].invalid[slot]


def _noun_type_reason(value: str, noun_type: NounType) -> str:
    kind = noun_type.value.replace("_", "-")
    article = "an" if kind[0] in "aeiou" else "a"
    return f"{_label(value)} cannot be used with {article} {kind} noun."


def available_options(
    slot: Slot,
    selections: Selections,
    noun_type: Optional[NounType] = None,
) -> List[Option]:
    """
    Every option for `slot`, flagged enabled/disabled against the values
    committed in the other two slots and, when given, the head noun type.
    The empty option is always enabled.
    """
    options = [Option(value=None)]
    for value in SLOT_VALUES[slot]:
        if invalid_for_noun_type(slot, value, noun_type):
            options.append(Option(value=value, enabled=False, reason=_noun_type_reason(value, noun_type)))  # type: ignore[arg-type]
            continue
        blocker = blocked_by(slot, value, selections)
        if blocker is None:
            options.append(Option(value=value))
        else:
            other, other_value = blocker
            options.append(
                Option(
                    value=value,
                    enabled=False,
                    reason=f"{_label(value)} cannot be used with {_label(other_value)} ({other.value}).",
                )
            )
    return options


def commit(
    slot: Slot,
    value: Optional[str],
    selections: Selections,
    noun_type: Optional[NounType] = None,
) -> CommitResult:
    """
    Put `value` into `slot`.

    Unknown or disabled values (including those the noun type rules out) are rejected silently: the prior selections
    come back unchanged with `accepted=False`. An accepted value clears
    every other slot it excludes and reports why.
    """
    if (
        not is_known_value(slot, value)
        or invalid_for_noun_type(slot, value, noun_type)
        or blocked_by(slot, value, selections) is not None
    ):
        return CommitResult(selections=selections, accepted=False)

    updated = selections.with_value(slot, value)
    resets: List[Reset] = []
    for other in Slot:
        if other is slot:
            continue
        current = updated.get(other)
        if current is not None and current in excluded_values(slot, value, other):
            updated = updated.with_value(other, None)
            resets.append(
                Reset(
                    slot=other,
                    previous=current,
                    reason=f"{_label(current)} was removed: it cannot be used with {_label(value)}.",
                )
            )
    return CommitResult(selections=updated, accepted=True, resets=tuple(resets))


def apply_noun_type(noun_type: NounType, selections: Selections) -> CommitResult:
    """
    Re-validate selections after the head noun changes.

    Any value invalid for the noun type resets all slots to the type's
    defaults; an empty countable noun gets the default 'a'.
    """
    constraint = NOUN_TYPE_CONSTRAINTS[noun_type]
    bad = [
        (slot, selections.get(slot))
        for slot in Slot
        if selections.get(slot) in constraint.invalid[slot]
    ]
    if bad:
        resets = tuple(
            Reset(
                slot=slot,
                previous=value,  # type: ignore[arg-type]
                reason=_noun_type_reason(value, noun_type),  # type: ignore[arg-type]
            )
            for slot, value in bad
        )
        return CommitResult(selections=constraint.default, accepted=True, resets=resets)

    if noun_type is NounType.COUNTABLE and selections == Selections():
        return CommitResult(selections=constraint.default, accepted=True)
    return CommitResult(selections=selections, accepted=True)


def implied_number(selections: Selections) -> Optional[str]:
    """Number implied by the selections: POST wins over CENTRAL over PRE."""
    for slot in (Slot.POST, Slot.CENTRAL, Slot.PRE):
        value = selections.get(slot)
        if value in VALUE_NUMBER:
            return VALUE_NUMBER[value]
    return None


def surface_values(selections: Selections) -> List[str]:
    """Determiner words in surface order; number markers produce nothing."""
    return [
        v
        for v in (selections.pre, selections.central, selections.post)
        if v is not None and v not in MARKERS
    ]


# ---------------------------------------------------------------------------
# Stateful editor wrapper
# ---------------------------------------------------------------------------


@dataclass
class _ShownReason:
    reset: Reset
    shown_at: float


@dataclass
class DeterminerResolver:
    """
    Selections of a single noun phrase being edited.

    Owned by exactly one editing instance. Reset reasons are kept for
    `reason_ttl` seconds and then dropped.
    """

    selections: Selections = field(default_factory=Selections)
    noun_type: Optional[NounType] = None
    reason_ttl: float = field(default_factory=lambda: settings.RESET_REASON_TTL_SEC)
    clock: Callable[[], float] = time.monotonic
    _reasons: List[_ShownReason] = field(default_factory=list, repr=False)

    def options(self, slot: Slot) -> List[Option]:
        return available_options(slot, self.selections, self.noun_type)

    def commit(self, slot: Slot, value: Optional[str]) -> CommitResult:
        result = commit(slot, value, self.selections, self.noun_type)
        self._absorb(result)
        return result

    def set_noun_type(self, noun_type: NounType) -> CommitResult:
        self.noun_type = noun_type
        result = apply_noun_type(noun_type, self.selections)
        self._absorb(result)
        return result

    def reasons(self) -> List[str]:
        """Reset reasons still inside their display window."""
        now = self.clock()
        self._reasons = [r for r in self._reasons if now - r.shown_at < self.reason_ttl]
        return [r.reset.reason for r in self._reasons]

    def _absorb(self, result: CommitResult) -> None:
        if not result.accepted:
            return
        self.selections = result.selections
        now = self.clock()
        self._reasons.extend(_ShownReason(reset=r, shown_at=now) for r in result.resets)


__all__ = [
    "Slot",
    "NounType",
    "PLURAL",
    "UNCOUNTABLE",
    "SLOT_VALUES",
    "EXCLUSIONS",
    "NOUN_TYPE_CONSTRAINTS",
    "Selections",
    "Option",
    "Reset",
    "CommitResult",
    "available_options",
    "commit",
    "apply_noun_type",
    "invalid_for_noun_type",
    "find_conflicts",
    "implied_number",
    "surface_values",
    "DeterminerResolver",
]
