"""
constructions/logic.py

English realisation of logical propositions (fact sentences).

    AND(P, Q)        both P and Q
    OR(P, Q)         either P or Q
    NOT(P)           it is not the case that P
    NOT(OR(P, Q))    neither P nor Q
    IF(P, Q)         if P, then Q
    BECAUSE(P, Q)    Q because P

Operands are clauses (rendered declaratively by the clause orchestrator)
or nested propositions; an empty operand renders as the placeholder.
Three or more operands of AND/OR use the shared Oxford-comma coordination.
"""

from __future__ import annotations

from typing import Callable, List

from app.core.domain.models import ClauseNode, LogicOperator, PropositionNode
from app.shared.config import settings
from constructions.coordination import coordinate
from nlg.derivation import DerivationTracker

ClauseRenderer = Callable[[ClauseNode, DerivationTracker], str]


class PropositionRenderer:
    def __init__(self, render_clause: ClauseRenderer) -> None:
        self._render_clause = render_clause

    def render(self, proposition: PropositionNode, tracker: DerivationTracker) -> str:
        op = proposition.operator

        if op is LogicOperator.NOT:
            inner = proposition.operands[0]
            if isinstance(inner, PropositionNode) and inner.operator is LogicOperator.OR:
                return coordinate(self._operands(inner, tracker), "or", polarity="negative")
            return f"it is not the case that {self._operand(inner, tracker)}"

        parts = self._operands(proposition, tracker)
        if op is LogicOperator.AND:
            return coordinate(parts, "and", correlative=True)
        if op is LogicOperator.OR:
            return coordinate(parts, "or", correlative=True)
        if op is LogicOperator.IF:
            return f"if {parts[0]}, then {parts[1]}"
        if op is LogicOperator.BECAUSE:
            return f"{parts[1]} because {parts[0]}"
        raise ValueError(f"Unknown logic operator: {op!r}")

    def _operands(self, proposition: PropositionNode, tracker: DerivationTracker) -> List[str]:
        return [self._operand(o, tracker) for o in proposition.operands]

    def _operand(self, operand, tracker: DerivationTracker) -> str:
        if operand is None:
            return settings.PLACEHOLDER
        if isinstance(operand, PropositionNode):
            return self.render(operand, tracker)
        return self._render_clause(operand, tracker)


__all__ = ["PropositionRenderer"]
