# tests/builders.py
"""
Small AST constructors so the tests read like the sentences they build.

    clause("eat", agent=pron("he"), patient=noun("apple"), tense="past")
"""

from __future__ import annotations

from typing import Optional, Sequence

from app.core.domain.models import (
    AdjectivePhraseNode,
    AdverbNode,
    ClauseNode,
    CoordinatedNounPhraseNode,
    DeterminerConfig,
    FilledArgument,
    NounHead,
    NounPhraseNode,
    PrepositionalPhraseNode,
    PronounHead,
    SemanticRole,
    SentenceNode,
    VerbCoordination,
    VerbPhraseNode,
    VerbRef,
)


def pron(lemma: str, adjectives: Sequence[str] = ()) -> NounPhraseNode:
    return NounPhraseNode(head=PronounHead(lemma=lemma), adjectives=tuple(adjectives))


def noun(
    lemma: str,
    *,
    pre: Optional[str] = None,
    det: Optional[str] = None,
    post: Optional[str] = None,
    adjectives: Sequence[str] = (),
    pp: Optional[PrepositionalPhraseNode] = None,
) -> NounPhraseNode:
    return NounPhraseNode(
        head=NounHead(lemma=lemma),
        determiners=DeterminerConfig(pre=pre, central=det, post=post),
        adjectives=tuple(adjectives),
        prep_modifier=pp,
    )


def adj(lemma: str, degree: Optional[str] = None) -> AdjectivePhraseNode:
    return AdjectivePhraseNode(lemma=lemma, degree=degree)


def both(*conjuncts, conjunction: str = "and", choice: bool = False) -> CoordinatedNounPhraseNode:
    return CoordinatedNounPhraseNode(conjunction=conjunction, conjuncts=tuple(conjuncts), choice=choice)


def pp(preposition: str, obj=None) -> PrepositionalPhraseNode:
    return PrepositionalPhraseNode(preposition=preposition, object=obj)


def adv(lemma: str, type: Optional[str] = None) -> AdverbNode:
    return AdverbNode(lemma=lemma, type=type)


def vp(
    verb: str,
    *,
    adverbs: Sequence[AdverbNode] = (),
    pps: Sequence[PrepositionalPhraseNode] = (),
    then: Optional[VerbPhraseNode] = None,
    conjunction: str = "and",
    **roles,
) -> VerbPhraseNode:
    """Keyword arguments are semantic roles; a value of None leaves the slot empty."""
    return VerbPhraseNode(
        verb=VerbRef(lemma=verb),
        arguments=tuple(FilledArgument(role=SemanticRole(r), filler=f) for r, f in roles.items()),
        adverbs=tuple(adverbs),
        prepositional_phrases=tuple(pps),
        coordinated_with=VerbCoordination(conjunction=conjunction, verb_phrase=then) if then else None,
    )


def clause(verb: str, *, tense: str = "present", aspect: str = "simple", polarity: str = "affirmative",
           modal: Optional[str] = None, modal_polarity: str = "affirmative",
           adverbs: Sequence[AdverbNode] = (), **roles) -> ClauseNode:
    return ClauseNode(
        verb_phrase=vp(verb, adverbs=adverbs, **roles),
        tense=tense,
        aspect=aspect,
        polarity=polarity,
        modal=modal,
        modal_polarity=modal_polarity,
    )


def sentence(body: ClauseNode, sentence_type: str = "declarative", time: Optional[str] = None) -> SentenceNode:
    return SentenceNode(sentence_type=sentence_type, clause=body, time_adverbial=time)
