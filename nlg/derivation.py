"""
nlg/derivation.py
-----------------

Per-render record of every grammatical transformation.

One `DerivationTracker` is created for each sentence render and threaded
explicitly through the engines (conjugation, noun phrases, clause
assembly). When the render finishes, `tracker.derivation(output)` freezes
the steps into an immutable `Derivation`.

Two step kinds exist:

    MorphologyStep   a word changes shape   (eat -> ate, I -> me, a -> an)
    SyntaxStep       tokens move or appear  (do-support, inversion, ...)

`diff(current, previous)` compares two derivations step by step using the
(type, rule) pair as identity, so reordering unrelated parts of a sentence
never marks untouched rules as changed.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union


class StepCategory(str, Enum):
    MORPHOLOGY = "morphology"
    SYNTAX = "syntax"


class TransformationType(str, Enum):
    AGREEMENT = "agreement"
    TENSE = "tense"
    ASPECT = "aspect"
    MODAL = "modal"
    CASE = "case"
    ARTICLE = "article"
    NUMBER = "number"
    POLARITY = "polarity"
    DO_SUPPORT = "do_support"
    NEGATION = "negation"
    INVERSION = "inversion"
    WH_MOVEMENT = "wh_movement"
    SUBJECT_OMISSION = "subject_omission"
    PARTICLE = "particle"
    WORD_ORDER = "word_order"


class SyntaxOperation(str, Enum):
    INSERT = "insert"
    MOVE = "move"
    DELETE = "delete"


# ---------------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MorphologyStep:
    type: str
    rule: str
    before: str
    after: str
    trigger: Optional[str] = None
    description: str = ""
    category: str = field(default=StepCategory.MORPHOLOGY.value, init=False)

    @property
    def key(self) -> str:
        return f"{self.type}:{self.rule}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "type": self.type,
            "rule": self.rule,
            "before": self.before,
            "after": self.after,
            "trigger": self.trigger,
            "description": self.description,
        }


@dataclass(frozen=True)
class SyntaxStep:
    type: str
    rule: str
    operation: str
    element: Optional[str] = None
    before: Tuple[str, ...] = ()
    after: Tuple[str, ...] = ()
    description: str = ""
    category: str = field(default=StepCategory.SYNTAX.value, init=False)

    @property
    def key(self) -> str:
        return f"{self.type}:{self.rule}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "type": self.type,
            "rule": self.rule,
            "operation": self.operation,
            "element": self.element,
            "before": list(self.before),
            "after": list(self.after),
            "description": self.description,
        }


DerivationStep = Union[MorphologyStep, SyntaxStep]


@dataclass(frozen=True)
class Derivation:
    """Input, output and ordered steps of one render pass. Never mutated."""

    input: str
    output: str
    steps: Tuple[DerivationStep, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "input": self.input,
            "output": self.output,
            "steps": [s.to_dict() for s in self.steps],
        }


def step_from_dict(data: Mapping[str, Any]) -> DerivationStep:
    """Rebuild a step from its `to_dict()` form (e.g. posted back by a client)."""
    if data.get("category") == StepCategory.SYNTAX.value:
        return SyntaxStep(
            type=str(data["type"]),
            rule=str(data["rule"]),
            operation=str(data.get("operation", "")),
            element=data.get("element"),
            before=tuple(data.get("before") or ()),
            after=tuple(data.get("after") or ()),
            description=str(data.get("description", "")),
        )
    return MorphologyStep(
        type=str(data["type"]),
        rule=str(data["rule"]),
        before=str(data.get("before", "")),
        after=str(data.get("after", "")),
        trigger=data.get("trigger"),
        description=str(data.get("description", "")),
    )


def derivation_from_dict(data: Mapping[str, Any]) -> Derivation:
    return Derivation(
        input=str(data.get("input", "")),
        output=str(data.get("output", "")),
        steps=tuple(step_from_dict(s) for s in data.get("steps") or ()),
    )


# ---------------------------------------------------------------------------
# Tracker
# ---------------------------------------------------------------------------


class DerivationTracker:
    """
    Append-only step log for one render pass.

    Usage:

        tracker = DerivationTracker(input_text="sentence(...)")
        word = tracker.record_morphology("tense", "eat", "ate", "past", ...)
        tracker.record_syntax("inversion", "move", "subject_aux_inversion", ...)
        derivation = tracker.derivation("He ate.")
    """

    def __init__(self, input_text: str = "") -> None:
        self.input_text = input_text
        self._steps: List[DerivationStep] = []

    def record_morphology(
        self,
        type: Union[TransformationType, str],
        before: str,
        after: str,
        rule: str,
        description: str = "",
        trigger: Optional[str] = None,
    ) -> str:
        """Record `before -> after` if the word actually changed; return `after`."""
        if before != after:
            self._steps.append(
                MorphologyStep(
                    type=_value(type),
                    rule=rule,
                    before=before,
                    after=after,
                    trigger=trigger,
                    description=description,
                )
            )
        return after

    def record_syntax(
        self,
        type: Union[TransformationType, str],
        operation: Union[SyntaxOperation, str],
        rule: str,
        description: str = "",
        *,
        element: Optional[str] = None,
        before: Sequence[str] = (),
        after: Sequence[str] = (),
    ) -> None:
        """Record a syntactic operation. Always recorded, even when vacuous."""
        self._steps.append(
            SyntaxStep(
                type=_value(type),
                rule=rule,
                operation=_value(operation),
                element=element,
                before=tuple(before),
                after=tuple(after),
                description=description,
            )
        )

    # Views ---------------------------------------------------------------

    def steps(self) -> List[DerivationStep]:
        return list(self._steps)

    def morphology_steps(self) -> List[MorphologyStep]:
        return [s for s in self._steps if isinstance(s, MorphologyStep)]

    def syntax_steps(self) -> List[SyntaxStep]:
        return [s for s in self._steps if isinstance(s, SyntaxStep)]

    def steps_by_type(self, type: Union[TransformationType, str]) -> List[DerivationStep]:
        wanted = _value(type)
        return [s for s in self._steps if s.type == wanted]

    def derivation(self, output: str) -> Derivation:
        return Derivation(input=self.input_text, output=output, steps=tuple(self._steps))


def _value(v: Union[Enum, str]) -> str:
    return v.value if isinstance(v, Enum) else str(v)


# ---------------------------------------------------------------------------
# Diff
# ---------------------------------------------------------------------------


class StepStatus(str, Enum):
    ADDED = "added"
    UNCHANGED = "unchanged"
    CHANGED = "changed"
    REMOVED = "removed"


@dataclass(frozen=True)
class StepWithStatus:
    step: DerivationStep
    status: StepStatus
    previous: Optional[DerivationStep] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"status": self.status.value, "step": self.step.to_dict()}
        if self.previous is not None:
            data["previous"] = self.previous.to_dict()
        return data


@dataclass(frozen=True)
class DiffSummary:
    added: int = 0
    removed: int = 0
    changed: int = 0
    unchanged: int = 0


@dataclass(frozen=True)
class DerivationDiff:
    steps: Tuple[StepWithStatus, ...]
    summary: DiffSummary

    def by_status(self, status: StepStatus) -> List[StepWithStatus]:
        return [s for s in self.steps if s.status is status]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "steps": [s.to_dict() for s in self.steps],
            "summary": {
                "added": self.summary.added,
                "removed": self.summary.removed,
                "changed": self.summary.changed,
                "unchanged": self.summary.unchanged,
            },
        }


def _grouped(steps: Sequence[DerivationStep]) -> Dict[str, List[int]]:
    grouped: Dict[str, List[int]] = defaultdict(list)
    for index, step in enumerate(steps):
        grouped[step.key].append(index)
    return grouped


def _same_content(a: DerivationStep, b: DerivationStep) -> bool:
    if a.category != b.category or a.key != b.key:
        return False
    if isinstance(a, MorphologyStep):
        return (a.before, a.after) == (b.before, b.after)
    return (a.operation, a.element, a.before, a.after) == (b.operation, b.element, b.before, b.after)  # type: ignore[union-attr]


def _pair(
    current: Sequence[DerivationStep],
    previous: Sequence[DerivationStep],
) -> Tuple[Dict[int, int], List[int]]:
    """
    Match steps that share a (type, rule) key as a multiset: identical
    steps pair first wherever they sit, the leftovers then pair in order.

    Returns the current-index -> previous-index pairs and the previous
    indices left without a partner.
    """
    previous_grouped = _grouped(previous)
    pairs: Dict[int, int] = {}

    for key, indices in _grouped(current).items():
        free = previous_grouped.get(key, [])
        for i in indices:
            match = next((j for j in free if _same_content(current[i], previous[j])), None)
            if match is not None:
                free.remove(match)
                pairs[i] = match
        for i in indices:
            if i not in pairs and free:
                pairs[i] = free.pop(0)

    unmatched = sorted(j for free in previous_grouped.values() for j in free)
    return pairs, unmatched


def diff(current: Derivation, previous: Derivation) -> DerivationDiff:
    """
    Classify each step of `current` against `previous`.

    added      key only in current
    unchanged  same key, same content
    changed    same key, different before/after
    removed    key only in previous

    Steps repeating a key are matched by content before position, so
    swapping two conjuncts leaves both of their steps unchanged.
    """
    pairs, unmatched = _pair(current.steps, previous.steps)

    results: List[StepWithStatus] = []
    counts = {status: 0 for status in StepStatus}

    for i, step in enumerate(current.steps):
        prev = previous.steps[pairs[i]] if i in pairs else None
        if prev is None:
            status = StepStatus.ADDED
        elif _same_content(step, prev):
            status = StepStatus.UNCHANGED
        else:
            status = StepStatus.CHANGED
        results.append(StepWithStatus(step=step, status=status, previous=prev if status is StepStatus.CHANGED else None))
        counts[status] += 1

    for j in unmatched:
        results.append(StepWithStatus(step=previous.steps[j], status=StepStatus.REMOVED))
        counts[StepStatus.REMOVED] += 1

    return DerivationDiff(
        steps=tuple(results),
        summary=DiffSummary(
            added=counts[StepStatus.ADDED],
            removed=counts[StepStatus.REMOVED],
            changed=counts[StepStatus.CHANGED],
            unchanged=counts[StepStatus.UNCHANGED],
        ),
    )


__all__ = [
    "StepCategory",
    "TransformationType",
    "SyntaxOperation",
    "MorphologyStep",
    "SyntaxStep",
    "DerivationStep",
    "Derivation",
    "DerivationTracker",
    "StepStatus",
    "StepWithStatus",
    "DiffSummary",
    "DerivationDiff",
    "diff",
    "step_from_dict",
    "derivation_from_dict",
]
