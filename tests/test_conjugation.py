# tests/test_conjugation.py
"""
Unit tests for :mod:`morphology.conjugation`.

Covers the 12-paradigm tense x aspect grid, do-support under negation,
modal chains and the steps each layer records on the tracker.
"""

from __future__ import annotations

import pytest

from app.core.domain.models import Aspect, ModalKind, Polarity, Tense
from morphology.conjugation import PARADIGMS, Agreement, ConjugationEngine, paradigm
from nlg.derivation import DerivationTracker, MorphologyStep

HE = Agreement(3, "singular")
FIRST = Agreement(1, "singular")
THEY = Agreement(3, "plural")


def _chain(engine: ConjugationEngine, tense, aspect, agreement=HE, polarity=Polarity.AFFIRMATIVE, **kw) -> str:
    return engine.conjugate("eat", agreement, tense, aspect, polarity, DerivationTracker(), **kw).text()


GRID = [
    (Tense.PAST, Aspect.SIMPLE, "ate"),
    (Tense.PAST, Aspect.PROGRESSIVE, "was eating"),
    (Tense.PAST, Aspect.PERFECT, "had eaten"),
    (Tense.PAST, Aspect.PERFECT_PROGRESSIVE, "had been eating"),
    (Tense.PRESENT, Aspect.SIMPLE, "eats"),
    (Tense.PRESENT, Aspect.PROGRESSIVE, "is eating"),
    (Tense.PRESENT, Aspect.PERFECT, "has eaten"),
    (Tense.PRESENT, Aspect.PERFECT_PROGRESSIVE, "has been eating"),
    (Tense.FUTURE, Aspect.SIMPLE, "will eat"),
    (Tense.FUTURE, Aspect.PROGRESSIVE, "will be eating"),
    (Tense.FUTURE, Aspect.PERFECT, "will have eaten"),
    (Tense.FUTURE, Aspect.PERFECT_PROGRESSIVE, "will have been eating"),
]


def test_grid_has_exactly_twelve_paradigms() -> None:
    assert len(PARADIGMS) == 12
    for tense in Tense:
        for aspect in Aspect:
            assert paradigm(tense, aspect).tense is tense


@pytest.mark.parametrize("tense,aspect,expected", GRID)
def test_third_singular_grid_for_eat(conjugation, tense, aspect, expected) -> None:
    assert _chain(conjugation, tense, aspect) == expected


def test_plural_and_first_person_agreement(conjugation) -> None:
    assert _chain(conjugation, Tense.PRESENT, Aspect.SIMPLE, THEY) == "eat"
    assert _chain(conjugation, Tense.PRESENT, Aspect.PROGRESSIVE, FIRST) == "am eating"
    assert _chain(conjugation, Tense.PAST, Aspect.PROGRESSIVE, THEY) == "were eating"


def test_negation_inserts_do_with_agreement(conjugation) -> None:
    assert _chain(conjugation, Tense.PRESENT, Aspect.SIMPLE, FIRST, Polarity.NEGATIVE) == "do not eat"
    assert _chain(conjugation, Tense.PRESENT, Aspect.SIMPLE, HE, Polarity.NEGATIVE) == "does not eat"
    assert _chain(conjugation, Tense.PAST, Aspect.SIMPLE, HE, Polarity.NEGATIVE) == "did not eat"


def test_negation_with_an_auxiliary_needs_no_do(conjugation) -> None:
    tracker = DerivationTracker()
    chain = conjugation.conjugate("eat", HE, Tense.PRESENT, Aspect.PERFECT, Polarity.NEGATIVE, tracker)
    assert chain.text() == "has not eaten"
    assert not tracker.steps_by_type("do_support")
    assert [s.rule for s in tracker.steps_by_type("negation")] == ["not_insertion"]


def test_do_support_is_logged_before_agreement_on_do(conjugation) -> None:
    tracker = DerivationTracker()
    conjugation.conjugate("eat", HE, Tense.PRESENT, Aspect.SIMPLE, Polarity.NEGATIVE, tracker)
    keys = [s.key for s in tracker.steps()]
    assert keys == ["do_support:do_support", "agreement:third_person_singular", "negation:not_insertion"]

    agreement = tracker.steps()[1]
    assert isinstance(agreement, MorphologyStep)
    assert (agreement.before, agreement.after) == ("do", "does")


def test_modal_blocks_do_support(conjugation) -> None:
    tracker = DerivationTracker()
    chain = conjugation.conjugate(
        "eat", HE, Tense.PRESENT, Aspect.SIMPLE, Polarity.NEGATIVE, tracker, modal=ModalKind.ABILITY
    )
    assert chain.text() == "can not eat"
    assert not tracker.steps_by_type("do_support")

    inverted = conjugation.conjugate(
        "eat", HE, Tense.PRESENT, Aspect.SIMPLE, Polarity.AFFIRMATIVE, DerivationTracker(),
        modal=ModalKind.ABILITY, needs_inversion=True,
    )
    assert inverted.auxiliary == "can"


def test_modal_forms_by_tense(conjugation) -> None:
    assert _chain(conjugation, Tense.PRESENT, Aspect.SIMPLE, modal=ModalKind.ADVICE) == "should eat"
    assert _chain(conjugation, Tense.PAST, Aspect.SIMPLE, modal=ModalKind.ABILITY) == "could eat"
    assert _chain(conjugation, Tense.PAST, Aspect.SIMPLE, modal=ModalKind.OBLIGATION) == "had to eat"
    assert _chain(conjugation, Tense.PRESENT, Aspect.PERFECT, modal=ModalKind.POSSIBILITY) == "might have eaten"


def test_negated_modals(conjugation) -> None:
    neg = Polarity.NEGATIVE
    assert _chain(conjugation, Tense.PRESENT, Aspect.SIMPLE, modal=ModalKind.ABILITY, modal_polarity=neg) == "can't eat"
    assert (
        _chain(conjugation, Tense.PRESENT, Aspect.SIMPLE, modal=ModalKind.OBLIGATION, modal_polarity=neg)
        == "doesn't have to eat"
    )
    assert (
        _chain(conjugation, Tense.PAST, Aspect.SIMPLE, THEY, modal=ModalKind.VOLITION, modal_polarity=neg)
        == "weren't going to eat"
    )


def test_negated_modal_in_a_negative_clause_negates_the_main_verb(conjugation) -> None:
    neg = Polarity.NEGATIVE
    tracker = DerivationTracker()
    chain = conjugation.conjugate(
        "eat", HE, Tense.PRESENT, Aspect.SIMPLE, neg, tracker, modal=ModalKind.OBLIGATION, modal_polarity=neg
    )
    assert chain.text() == "doesn't have to not eat"
    assert [s.rule for s in tracker.steps_by_type("negation")] == ["not_before_verb", "modal_negation"]

    assert (
        _chain(conjugation, Tense.PRESENT, Aspect.SIMPLE, HE, neg, modal=ModalKind.ABILITY, modal_polarity=neg)
        == "can't not eat"
    )
    assert (
        _chain(conjugation, Tense.PAST, Aspect.SIMPLE, THEY, neg, modal=ModalKind.VOLITION, modal_polarity=neg)
        == "weren't going to not eat"
    )


def test_copula_agrees_without_do_support(conjugation) -> None:
    tracker = DerivationTracker()
    chain = conjugation.conjugate("be", FIRST, Tense.PRESENT, Aspect.SIMPLE, Polarity.NEGATIVE, tracker)
    assert chain.text() == "am not"
    assert not tracker.steps_by_type("do_support")


def test_unchanged_words_record_no_morphology(conjugation) -> None:
    tracker = DerivationTracker()
    chain = conjugation.conjugate("eat", THEY, Tense.PRESENT, Aspect.SIMPLE, Polarity.AFFIRMATIVE, tracker)
    assert chain.text() == "eat"
    assert tracker.morphology_steps() == []


def test_unknown_verb_falls_back_to_lemma(conjugation) -> None:
    tracker = DerivationTracker()
    chain = conjugation.conjugate("zorble", HE, Tense.PAST, Aspect.SIMPLE, Polarity.AFFIRMATIVE, tracker)
    assert chain.text() == "zorble"
    assert tracker.steps() == []


def test_negative_imperative_always_takes_do(conjugation) -> None:
    tracker = DerivationTracker()
    assert conjugation.imperative("be", Polarity.NEGATIVE, tracker).text() == "do not be"
    assert conjugation.imperative("run", Polarity.AFFIRMATIVE, DerivationTracker()).text() == "run"
