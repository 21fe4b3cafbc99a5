"""
constructions/japanese.py
-------------------------

Japanese clause orchestration over the same sentence ASTs: SOV word order
with case particles.

Only the syntax changes. Words stay as the English renderer produces them
(noun phrases keep their determiners, the verb keeps its bare form), so the
output shows where each constituent goes and which particle marks it:

    He ate an apple.        ->  heは an appleを eat。
    Did you eat the apple?  ->  youは the appleを eatか？
    Read the book!          ->  the bookを read。

Pipeline for a clause:

    1. topic: the subject role of the verb's valency, marked with は
    2. the remaining arguments in valency order, each followed by its
       particle (roles without one stand bare)
    3. prepositional phrases, then adverbs
    4. the verb, clause-final
    5. 。 for statements and imperatives, か？ for every kind of question

Imperatives drop the topic. Coordinated verb phrases are joined with
their conjunction. Tense, aspect, polarity and modals are not expressed.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from app.core.domain.models import ClauseNode, Polarity, SentenceNode, SentenceType, VerbPhraseNode
from app.shared.config import settings
from constructions.clause import ClauseOrchestrator, _layout
from nlg.derivation import DerivationTracker, SyntaxOperation, TransformationType

TOPIC_PARTICLE = "は"

PARTICLES: Dict[str, str] = {
    "agent": TOPIC_PARTICLE,
    "experiencer": TOPIC_PARTICLE,
    "possessor": TOPIC_PARTICLE,
    "patient": "を",
    "theme": "を",
    "stimulus": "を",
    "recipient": "に",
    "beneficiary": "に",
    "goal": "に",
    "source": "から",
    "location": "で",
    "instrument": "で",
}

STATEMENT_END = "。"
QUESTION_END = "か？"

_QUESTIONS = (SentenceType.YES_NO_QUESTION, SentenceType.WH_QUESTION, SentenceType.CHOICE_QUESTION)


def particle_for(role: str, *, topic: bool = False) -> Optional[str]:
    """Particle marking `role`; the topic always takes は."""
    if topic:
        return TOPIC_PARTICLE
    return PARTICLES.get(role)


class JapaneseClauseOrchestrator(ClauseOrchestrator):
    """
    SOV counterpart of `ClauseOrchestrator`. Valency checks, the argument
    layout, adverb lookup and fact rendering are shared with it.
    """

    def render_sentence(self, sentence: SentenceNode, tracker: DerivationTracker) -> str:
        stype = SentenceType(sentence.sentence_type)

        if sentence.proposition is not None:
            body = self.logic.render(sentence.proposition, tracker)
        elif stype is SentenceType.IMPERATIVE:
            body = self.render_imperative(sentence.clause, tracker)
        else:
            body = self.render_clause(sentence.clause, tracker, time_adverbial=sentence.time_adverbial)

        if sentence.time_adverbial and sentence.proposition is not None:
            body = f"{sentence.time_adverbial} {body}"

        text = body + (QUESTION_END if stype in _QUESTIONS else STATEMENT_END)
        if stype is SentenceType.FACT:
            text = f"{settings.FACT_MARKER} {text}"
        return text

    # Clause types --------------------------------------------------------

    def render_clause(
        self,
        clause: ClauseNode,
        tracker: DerivationTracker,
        *,
        time_adverbial: Optional[str] = None,
    ) -> str:
        return self._join(clause, tracker, omit_topic=False, time_adverbial=time_adverbial)

    def render_question(self, clause: ClauseNode, tracker: DerivationTracker) -> str:
        # No movement: the question particle alone marks the question
        return self.render_clause(clause, tracker)

    def render_imperative(self, clause: ClauseNode, tracker: DerivationTracker) -> str:
        return self._join(clause, tracker, omit_topic=True)

    # Assembly ------------------------------------------------------------

    def _join(
        self,
        clause: ClauseNode,
        tracker: DerivationTracker,
        *,
        omit_topic: bool,
        time_adverbial: Optional[str] = None,
    ) -> str:
        texts: List[str] = []
        for index, (conjunction, vp) in enumerate(clause.verb_phrase.chain()):
            tokens = self._sov(
                vp, tracker, omit_topic=omit_topic, time_adverbial=time_adverbial if index == 0 else None
            )
            if conjunction is not None:
                texts.append(conjunction.value)
            texts.append(" ".join(tokens))
        return " ".join(texts)

    def _sov(
        self,
        vp: VerbPhraseNode,
        tracker: DerivationTracker,
        *,
        omit_topic: bool,
        time_adverbial: Optional[str] = None,
    ) -> List[str]:
        lemma = vp.verb.lemma
        entry = self.lexicon.verb(lemma)
        self._check_valency(vp, entry)
        subject_role, positions = _layout(vp, entry)
        verb = entry.forms.base if entry is not None else lemma

        tokens: List[str] = []
        if omit_topic:
            addressee = "you" + TOPIC_PARTICLE
            tracker.record_syntax(
                TransformationType.SUBJECT_OMISSION,
                SyntaxOperation.DELETE,
                "imperative_subject",
                "Imperatives leave the topic unexpressed",
                element=addressee,
                before=[addressee, verb],
                after=[verb],
            )
        elif subject_role is not None:
            arg = vp.argument(subject_role)
            tokens.append(self._marked(subject_role, arg.filler if arg else None, tracker, topic=True))

        if time_adverbial:
            tokens.append(time_adverbial)

        for pos in positions:
            arg = vp.argument(pos.role)
            filler = arg.filler if arg is not None else None
            if filler is None and not pos.required:
                continue
            tokens.append(self._marked(pos.role, filler, tracker))

        for pp in vp.prepositional_phrases:
            tokens.append(self.noun_phrases.render_pp(pp, tracker))
        for adverb in vp.adverbs:
            tokens.append(self._adverb_word(adverb, Polarity.AFFIRMATIVE, tracker))

        tracker.record_syntax(
            TransformationType.WORD_ORDER,
            SyntaxOperation.MOVE,
            "verb_final",
            "The verb closes the clause",
            element=verb,
            before=[verb, *tokens],
            after=[*tokens, verb],
        )
        return [*tokens, verb]

    def _marked(self, role: str, filler, tracker: DerivationTracker, *, topic: bool = False) -> str:
        text = self.noun_phrases.render(filler, tracker, is_subject=True).text
        particle = particle_for(role, topic=topic)
        if particle is None:
            return text
        tracker.record_syntax(
            TransformationType.PARTICLE,
            SyntaxOperation.INSERT,
            "topic_particle" if topic else "case_particle",
            f"The {role} is marked with '{particle}'",
            element=particle,
            before=[text],
            after=[text + particle],
        )
        return text + particle


__all__ = ["JapaneseClauseOrchestrator", "PARTICLES", "TOPIC_PARTICLE", "particle_for"]
