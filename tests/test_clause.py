# tests/test_clause.py
"""
End-to-end sentence tests for :mod:`constructions.clause`.

Each test builds a sentence AST and checks the surface string; the
question and imperative tests also check the movement steps recorded on
the derivation.
"""

from __future__ import annotations

from app.core.domain.models import ClauseNode, PropositionNode, SentenceNode
from constructions.clause import ClauseOrchestrator
from nlg.derivation import DerivationTracker
from tests.builders import adj, adv, both, clause, noun, pron, sentence, vp


def _rules(orchestrator, s: SentenceNode):
    tracker = DerivationTracker()
    text = orchestrator.render_sentence(s, tracker)
    return text, [step.key for step in tracker.steps()]


# ---------------------------------------------------------------------------
# Declaratives
# ---------------------------------------------------------------------------


def test_simple_past_declarative(render) -> None:
    s = sentence(clause("eat", agent=pron("he"), patient=noun("apple"), tense="past"))
    assert render(s) == "He ate an apple."


def test_negation_with_do_support(render) -> None:
    s = sentence(clause("like", experiencer=pron("she"), stimulus=noun("teacher", det="the"), polarity="negative"))
    assert render(s) == "She does not like the teacher."


def test_copula_with_adjective(render) -> None:
    s = sentence(clause("be", theme=pron("they"), attribute=adj("hungry", degree="very"), tense="past"))
    assert render(s) == "They were very hungry."


def test_arguments_follow_valency_order_with_prepositions(render) -> None:
    s = sentence(clause("give", recipient=pron("she"), theme=noun("book", det="the"), agent=pron("I")))
    assert render(s) == "I give the book to her."


def test_empty_required_slots_render_placeholders(render) -> None:
    s = sentence(clause("give", agent=pron("he"), theme=None, recipient=None))
    assert render(s) == "He gives ___ to ___."


def test_empty_optional_slot_is_skipped(render) -> None:
    s = sentence(clause("eat", agent=pron("we"), patient=None))
    assert render(s) == "We eat."


def test_negative_polarity_item_in_object_position(render) -> None:
    s = sentence(clause("see", experiencer=pron("I"), stimulus=pron("someone"), polarity="negative"))
    assert render(s) == "I do not see anyone."


def test_frequency_adverb_position(render) -> None:
    s = sentence(clause("eat", agent=pron("he"), adverbs=[adv("always")]))
    assert render(s) == "He always eats."

    negated = sentence(clause("eat", agent=pron("he"), adverbs=[adv("always")], polarity="negative"))
    assert render(negated) == "He does not always eat."

    perfect = sentence(clause("eat", agent=pron("he"), adverbs=[adv("often")], aspect="perfect"))
    assert render(perfect) == "He has often eaten."


def test_clause_final_adverbs_are_manner_place_time(render) -> None:
    s = sentence(
        clause(
            "read",
            agent=pron("she"),
            theme=noun("book", det="the"),
            adverbs=[adv("yesterday"), adv("quickly"), adv("here")],
            tense="past",
        )
    )
    assert render(s) == "She read the book quickly here yesterday."


def test_time_adverbial_closes_the_sentence(render) -> None:
    s = sentence(clause("eat", agent=pron("he"), patient=noun("apple"), tense="past"), time="last week")
    assert render(s) == "He ate an apple last week."


def test_coordinated_subject_agreement(render) -> None:
    s = sentence(clause("be", theme=both(pron("he"), pron("I")), attribute=adj("tired")))
    assert render(s) == "He and I are tired."


def test_coordinated_verb_phrases(render) -> None:
    body = ClauseNode(verb_phrase=vp("walk", agent=pron("he"), then=vp("sleep", agent=pron("she"))))
    assert render(sentence(body)) == "He walks, and she sleeps."


def test_modals(render) -> None:
    assert render(sentence(clause("read", agent=pron("I"), modal="ability"), "modal")) == "I can read."
    assert render(sentence(clause("eat", agent=pron("you"), modal="advice"), "negated_modal")) == "You shouldn't eat."
    assert render(sentence(clause("go", agent=pron("she"), modal="obligation", tense="past"), "modal")) == "She had to go."


def test_negated_obligation_in_a_negative_clause(render) -> None:
    s = sentence(
        clause("eat", agent=pron("he"), patient=noun("apple"), modal="obligation", polarity="negative"),
        "negated_modal",
    )
    assert render(s) == "He doesn't have to not eat an apple."


# ---------------------------------------------------------------------------
# Questions
# ---------------------------------------------------------------------------


def test_yes_no_question_inverts_do(orchestrator) -> None:
    s = sentence(
        clause("eat", agent=pron("they"), patient=noun("apple", det="the", post="plural")), "yes_no_question"
    )
    text, keys = _rules(orchestrator, s)
    assert text == "Do they eat the apples?"
    assert "do_support:do_support" in keys
    assert keys.index("do_support:do_support") < keys.index("inversion:subject_aux_inversion")


def test_yes_no_question_with_an_auxiliary(orchestrator) -> None:
    text, keys = _rules(orchestrator, sentence(clause("eat", agent=pron("he"), aspect="progressive"), "yes_no_question"))
    assert text == "Is he eating?"
    assert "do_support:do_support" not in keys


def test_subject_wh_question_needs_no_do(orchestrator) -> None:
    s = sentence(clause("eat", agent=pron("?who"), patient=noun("apple", det="the"), tense="past"), "wh_question")
    text, keys = _rules(orchestrator, s)
    assert text == "Who ate the apple?"
    assert "wh_movement:wh_subject" in keys
    assert "do_support:do_support" not in keys
    assert "inversion:subject_aux_inversion" not in keys


def test_object_wh_question_fronts_and_inverts(orchestrator) -> None:
    s = sentence(clause("eat", agent=pron("you"), patient=pron("?what"), tense="past"), "wh_question")
    text, keys = _rules(orchestrator, s)
    assert text == "What did you eat?"
    assert keys[-1] == "wh_movement:wh_fronting"
    assert "inversion:subject_aux_inversion" in keys


def test_whom_with_pied_piped_preposition(orchestrator) -> None:
    s = sentence(
        clause("give", agent=pron("you"), theme=noun("book", det="the"), recipient=pron("?who"), tense="past"),
        "wh_question",
    )
    text, keys = _rules(orchestrator, s)
    assert text == "To whom did you give the book?"
    assert "case:who_whom" in keys


def test_wh_adverb_question(render) -> None:
    s = sentence(clause("live", agent=pron("she"), adverbs=[adv("?where")]), "wh_question")
    assert render(s) == "Where does she live?"


def test_choice_question(render) -> None:
    theme = both(noun("tea"), noun("coffee"), choice=True)
    s = sentence(clause("want", experiencer=pron("you"), theme=theme), "choice_question")
    assert render(s) == "Do you want tea or coffee?"


# ---------------------------------------------------------------------------
# Imperatives & facts
# ---------------------------------------------------------------------------


def test_imperative_omits_the_subject(orchestrator) -> None:
    text, keys = _rules(orchestrator, sentence(clause("eat", patient=noun("apple")), "imperative"))
    assert text == "Eat an apple!"
    assert "subject_omission:imperative_subject" in keys


def test_negative_imperative(render) -> None:
    assert render(sentence(clause("run", polarity="negative"), "imperative")) == "Do not run!"


def _fact(operator: str, *operands) -> SentenceNode:
    return SentenceNode(sentence_type="fact", proposition=PropositionNode(operator=operator, operands=operands))


def test_logical_facts(render) -> None:
    walks = clause("walk", agent=pron("he"))
    sleep = clause("sleep", agent=pron("I"))

    assert render(_fact("IF", walks, sleep)) == "⊨ If he walks, then I sleep."
    assert render(_fact("BECAUSE", walks, sleep)) == "⊨ I sleep because he walks."
    assert render(_fact("AND", walks, sleep)) == "⊨ Both he walks and I sleep."
    assert render(_fact("NOT", walks)) == "⊨ It is not the case that he walks."

    neither = _fact("NOT", PropositionNode(operator="OR", operands=(walks, sleep)))
    assert render(neither) == "⊨ Neither he walks nor I sleep."


def test_facts_with_empty_operands_render_the_placeholder(render) -> None:
    eats = clause("eat", agent=pron("he"), patient=noun("apple"))

    assert render(_fact("AND", eats, None)) == "⊨ Both he eats an apple and ___."
    assert render(_fact("IF", None, eats)) == "⊨ If ___, then he eats an apple."
    assert render(_fact("NOT", None)) == "⊨ It is not the case that ___."


# ---------------------------------------------------------------------------
# Robustness
# ---------------------------------------------------------------------------


def test_unlicensed_role_renders_the_incomplete_marker(session) -> None:
    good = sentence(clause("walk", agent=pron("he")))
    bad = sentence(clause("sleep", agent=pron("he"), patient=noun("apple")))

    result = session.render([bad, good])
    assert result.sentences == ["[incomplete]", "He walks."]
    assert result.derivations[0].steps == ()


def test_rendering_is_deterministic(lexicon) -> None:
    s = sentence(
        clause("give", agent=pron("she"), theme=noun("apple"), recipient=pron("they"), tense="past", polarity="negative")
    )
    first, second = DerivationTracker(), DerivationTracker()
    a = ClauseOrchestrator(lexicon).render_sentence(s, first)
    b = ClauseOrchestrator(lexicon).render_sentence(s, second)

    assert a == b == "She did not give an apple to them."
    assert sorted(map(repr, first.steps())) == sorted(map(repr, second.steps()))
