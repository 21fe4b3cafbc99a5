# tests/test_japanese.py
"""
Tests for the SOV orchestrator in :mod:`constructions.japanese`.

Words stay English; only order, particles and final punctuation change.
"""

from __future__ import annotations

import pytest

from app.core.domain.exceptions import ValencyError
from app.core.domain.models import PropositionNode, SentenceNode
from constructions.japanese import JapaneseClauseOrchestrator, particle_for
from nlg.api import RenderOptions
from nlg.derivation import DerivationTracker
from tests.builders import adj, clause, noun, pron, sentence


@pytest.fixture
def japanese(lexicon) -> JapaneseClauseOrchestrator:
    return JapaneseClauseOrchestrator(lexicon)


def _ja(orchestrator: JapaneseClauseOrchestrator, s: SentenceNode) -> str:
    return orchestrator.render_sentence(s, DerivationTracker())


def test_particles_follow_the_semantic_role() -> None:
    assert particle_for("agent") == "は"
    assert particle_for("patient") == "を"
    assert particle_for("recipient") == "に"
    assert particle_for("instrument") == "で"
    assert particle_for("attribute") is None
    assert particle_for("theme", topic=True) == "は"


def test_declarative_is_subject_object_verb(japanese) -> None:
    s = sentence(clause("eat", agent=pron("he"), patient=noun("apple"), tense="past"))
    assert _ja(japanese, s) == "heは an appleを eat。"


def test_arguments_keep_valency_order(japanese) -> None:
    s = sentence(clause("give", agent=pron("he"), theme=noun("book", det="the"), recipient=pron("she")))
    assert _ja(japanese, s) == "heは the bookを sheに give。"


def test_roles_without_a_particle_stand_bare(japanese) -> None:
    s = sentence(clause("be", theme=pron("they"), attribute=adj("hungry")))
    assert _ja(japanese, s) == "theyは hungry be。"


@pytest.mark.parametrize(
    "s, expected",
    [
        (
            sentence(clause("eat", agent=pron("you"), patient=noun("apple", det="the")), "yes_no_question"),
            "youは the appleを eatか？",
        ),
        (
            sentence(clause("eat", agent=pron("you"), patient=pron("?what")), "wh_question"),
            "youは whatを eatか？",
        ),
    ],
)
def test_questions_end_in_the_question_particle(japanese, s: SentenceNode, expected: str) -> None:
    assert _ja(japanese, s) == expected


def test_imperative_drops_the_topic(japanese) -> None:
    tracker = DerivationTracker()
    text = japanese.render_sentence(sentence(clause("read", theme=noun("book", det="the")), "imperative"), tracker)

    assert text == "the bookを read。"
    assert [s.rule for s in tracker.steps_by_type("subject_omission")] == ["imperative_subject"]


def test_particles_and_word_order_are_logged(japanese) -> None:
    tracker = DerivationTracker()
    japanese.render_sentence(sentence(clause("eat", agent=pron("he"), patient=noun("apple", det="the"))), tracker)

    assert [(s.rule, s.element) for s in tracker.steps_by_type("particle")] == [
        ("topic_particle", "は"),
        ("case_particle", "を"),
    ]
    (order,) = tracker.steps_by_type("word_order")
    assert order.after[-1] == "eat"


def test_empty_required_slot_keeps_its_particle(japanese) -> None:
    s = sentence(clause("give", agent=pron("he"), theme=None, recipient=None))
    assert _ja(japanese, s) == "heは ___を ___に give。"


def test_facts_reuse_the_logic_renderer(japanese) -> None:
    walks = clause("walk", agent=pron("he"))
    s = SentenceNode(sentence_type="fact", proposition=PropositionNode(operator="AND", operands=(walks, None)))
    assert _ja(japanese, s) == "⊨ both heは walk and ___。"


def test_unlicensed_role_still_raises(japanese) -> None:
    with pytest.raises(ValencyError):
        _ja(japanese, sentence(clause("sleep", agent=pron("he"), theme=noun("apple"))))


def test_session_renders_the_requested_target(session) -> None:
    s = sentence(clause("eat", agent=pron("he"), patient=noun("apple"), tense="past"))

    assert session.render([s]).sentences == ["He ate an apple."]
    assert session.render([s], options=RenderOptions(target="ja")).sentences == ["heは an appleを eat。"]
    assert session.orchestrator_for("ja") is session.orchestrator_for("ja")

    with pytest.raises(ValueError):
        session.render([s], options=RenderOptions(target="xx"))
