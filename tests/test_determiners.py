# tests/test_determiners.py
"""
Tests for the determiner co-occurrence rules in
:mod:`app.core.domain.determiners`.

Two properties matter most for the editor:

- an invalid combination can never be committed at the same time;
- the end state does not depend on the order values are committed in.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from app.core.domain.determiners import (
    PLURAL,
    SLOT_VALUES,
    DeterminerResolver,
    NounType,
    Selections,
    Slot,
    apply_noun_type,
    available_options,
    commit,
    find_conflicts,
    implied_number,
    surface_values,
)
from app.core.domain.models import DeterminerConfig


def _option(options, value):
    return next(o for o in options if o.value == value)


def test_every_clears_a_committed_plural_marker() -> None:
    start = Selections(post=PLURAL)
    result = commit(Slot.CENTRAL, "every", start)

    assert result.accepted
    assert result.selections == Selections(central="every")
    (reset,) = result.resets
    assert reset.slot is Slot.POST
    assert reset.previous == PLURAL
    assert "every" in reset.reason


def test_reverse_order_reaches_the_same_state() -> None:
    start = Selections(central="every")
    result = commit(Slot.POST, PLURAL, start)

    assert not result.accepted
    assert result.selections == Selections(central="every")
    assert result.resets == ()


def test_options_are_disabled_with_a_reason() -> None:
    options = available_options(Slot.POST, Selections(central="every"))

    plural = _option(options, PLURAL)
    assert not plural.enabled
    assert plural.reason == "[plural] cannot be used with 'every' (central)."
    assert plural.label == "[plural]"

    assert _option(options, None).enabled
    assert _option(options, "one").enabled


def test_every_option_list_covers_the_whole_slot() -> None:
    for slot in Slot:
        values = [o.value for o in available_options(slot, Selections())]
        assert values == [None, *SLOT_VALUES[slot]]
        assert all(o.enabled for o in available_options(slot, Selections()))


def test_unknown_value_is_rejected_silently() -> None:
    start = Selections(central="the")
    result = commit(Slot.CENTRAL, "zebra", start)
    assert not result.accepted
    assert result.selections is start


def test_commit_never_leaves_a_conflict() -> None:
    for slot in Slot:
        for value in SLOT_VALUES[slot]:
            for other in Slot:
                for other_value in SLOT_VALUES[other]:
                    first = commit(slot, value, Selections())
                    second = commit(other, other_value, first.selections)
                    assert find_conflicts(second.selections) == []


def test_clearing_a_slot_is_always_allowed() -> None:
    result = commit(Slot.CENTRAL, None, Selections(pre="all", central="the"))
    assert result.accepted
    assert result.selections == Selections(pre="all")


def test_noun_type_resets_invalid_selections() -> None:
    result = apply_noun_type(NounType.UNCOUNTABLE, Selections(central="these", post=PLURAL))
    assert result.selections == Selections(post="uncountable")
    assert {r.slot for r in result.resets} == {Slot.CENTRAL, Slot.POST}

    fresh = apply_noun_type(NounType.COUNTABLE, Selections())
    assert fresh.selections == Selections(central="a")

    proper = apply_noun_type(NounType.PROPER, Selections(central="the"))
    assert proper.selections == Selections()


def test_number_and_surface_projection() -> None:
    assert implied_number(Selections(central="the")) is None
    assert implied_number(Selections(central="these")) == "plural"
    assert implied_number(Selections(pre="all", central="the", post="two")) == "plural"
    assert surface_values(Selections(pre="all", central="the", post=PLURAL)) == ["all", "the"]


def test_ast_rejects_forbidden_combinations() -> None:
    with pytest.raises(ValidationError):
        DeterminerConfig(central="every", post=PLURAL)
    with pytest.raises(ValidationError):
        DeterminerConfig(central="bogus")
    assert DeterminerConfig(pre="all", central="the", post=PLURAL).post == PLURAL


class _Clock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


def test_resolver_reasons_expire() -> None:
    clock = _Clock()
    resolver = DeterminerResolver(reason_ttl=1.0, clock=clock)

    resolver.commit(Slot.POST, PLURAL)
    resolver.commit(Slot.CENTRAL, "each")
    assert resolver.selections == Selections(central="each")
    assert len(resolver.reasons()) == 1

    clock.now += 0.5
    assert len(resolver.reasons()) == 1

    clock.now += 0.6
    assert resolver.reasons() == []


def test_noun_type_disables_and_rejects_its_invalid_values() -> None:
    options = available_options(Slot.CENTRAL, Selections(), NounType.UNCOUNTABLE)
    assert _option(options, "every").enabled is False
    assert _option(options, "every").reason == "'every' cannot be used with an uncountable noun."
    assert _option(options, "the").enabled is True

    result = commit(Slot.POST, PLURAL, Selections(), NounType.UNCOUNTABLE)
    assert not result.accepted


def test_resolver_honours_the_noun_type() -> None:
    resolver = DeterminerResolver()
    resolver.set_noun_type(NounType.PROPER)

    result = resolver.commit(Slot.CENTRAL, "the")
    assert not result.accepted
    assert resolver.selections == Selections()
    assert all(not o.enabled for o in resolver.options(Slot.CENTRAL)[1:])
    assert resolver.options(Slot.CENTRAL)[0].enabled


def test_resolver_ignores_rejected_commits() -> None:
    resolver = DeterminerResolver()
    resolver.commit(Slot.CENTRAL, "a")
    result = resolver.commit(Slot.POST, "two")
    assert not result.accepted
    assert resolver.selections == Selections(central="a")
    assert resolver.options(Slot.POST)[0].value is None
