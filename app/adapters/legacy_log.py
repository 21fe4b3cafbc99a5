# app/adapters/legacy_log.py
"""
Flat log projection of a Derivation.

Older consumers (the grammar console) read one flat entry per step:

    {"type": "tense", "rule": "past", "from": "eat", "to": "ate", "trigger": "tense: past"}

This is a pure projection kept at the boundary; the tracker itself only
knows about structured steps.
"""
from typing import Dict, Iterable, List, Optional

from nlg.derivation import Derivation, MorphologyStep, SyntaxStep


def _project_morphology(step: MorphologyStep) -> Dict[str, Optional[str]]:
    return {
        "type": step.type,
        "rule": step.rule,
        "from": step.before,
        "to": step.after,
        "trigger": step.trigger or step.description,
    }


def _project_syntax(step: SyntaxStep) -> Dict[str, Optional[str]]:
    source = " ".join(step.before) or step.element or ""
    target = " ".join(step.after) or f"{step.operation} {step.element or ''}".strip()
    return {
        "type": step.type,
        "rule": step.rule,
        "from": source,
        "to": target,
        "trigger": step.description,
    }


def to_legacy_logs(derivation: Derivation) -> List[Dict[str, Optional[str]]]:
    """Project every step of `derivation` to a `{type, rule, from, to, trigger}` entry."""
    logs: List[Dict[str, Optional[str]]] = []
    for step in derivation.steps:
        if isinstance(step, MorphologyStep):
            logs.append(_project_morphology(step))
        else:
            logs.append(_project_syntax(step))
    return logs


def merge_legacy_logs(derivations: Iterable[Derivation]) -> List[Dict[str, Optional[str]]]:
    """Concatenate the projections of several sentences in workspace order."""
    merged: List[Dict[str, Optional[str]]] = []
    for derivation in derivations:
        merged.extend(to_legacy_logs(derivation))
    return merged
