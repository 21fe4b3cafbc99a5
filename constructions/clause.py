"""
constructions/clause.py
-----------------------

Clause orchestration: turns one `SentenceNode` into English text while the
engines record every transformation on the sentence's tracker.

Pipeline for a clause (fixed per sentence type):

    1. subject noun phrase (first of agent / experiencer / possessor / theme
       in the verb's valency)
    2. verb chain (ConjugationEngine)
    3. remaining arguments in valency order, with their prepositions
    4. adverbials: frequency after the first auxiliary (before the main verb
       when there is none); prepositional phrases, manner, place and time
       adverbs clause-final in that order
    5. movement: inversion, wh-fronting or subject omission
    6. coordinated verb phrases
    7. capitalisation and final punctuation

Empty required slots render the placeholder; empty optional slots are
skipped. Filling a role the verb does not license raises `ValencyError`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from app.core.domain.exceptions import ValencyError
from app.core.domain.models import (
    AdverbNode,
    AdverbType,
    Aspect,
    ClauseNode,
    FilledArgument,
    Polarity,
    SentenceNode,
    SentenceType,
    Tense,
    VerbPhraseNode,
)
from app.shared.config import settings
from constructions.coordination import CoordElement, coordinate_groups, placeholder_group_ids
from constructions.logic import PropositionRenderer
from constructions.noun_phrase import NounPhraseRenderer, is_interrogative
from lexicon.index import LexiconIndex
from lexicon.types import VerbEntry
from morphology.conjugation import THIRD_SINGULAR, Agreement, ConjugationEngine, VerbChain
from morphology.nominal import negative_polarity_form
from nlg.derivation import DerivationTracker, SyntaxOperation, TransformationType

SUBJECT_ROLES = ("agent", "experiencer", "possessor", "theme")

_QUESTIONS = (SentenceType.YES_NO_QUESTION, SentenceType.WH_QUESTION, SentenceType.CHOICE_QUESTION)

_PUNCTUATION = {
    SentenceType.YES_NO_QUESTION: "?",
    SentenceType.WH_QUESTION: "?",
    SentenceType.CHOICE_QUESTION: "?",
    SentenceType.IMPERATIVE: "!",
}

# Clause-final adverb order
_TRAILING_TYPES = ("manner", "place", "time")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class _Position:
    role: str
    required: bool = True
    preposition: Optional[str] = None


def _layout(vp: VerbPhraseNode, entry: Optional[VerbEntry]) -> Tuple[Optional[str], List[_Position]]:
    """Subject role plus the other argument positions, in valency order."""
    if entry is not None:
        subject = next((r for r in SUBJECT_ROLES if r in entry.roles), None)
        positions = [_Position(s.role, s.required, s.preposition) for s in entry.valency if s.role != subject]
        return subject, positions

    # Unknown verb: the given arguments in the given order
    given = [a.role.value for a in vp.arguments]
    subject = next((r for r in SUBJECT_ROLES if r in given), None)
    return subject, [_Position(r) for r in given if r != subject]


def _capitalise(text: str) -> str:
    return text[:1].upper() + text[1:]


@dataclass
class _Parts:
    """Rendered pieces of one verb phrase, before word order is decided."""

    subject: Optional[str]
    chain: VerbChain
    frequency: List[str] = field(default_factory=list)
    arguments: List[str] = field(default_factory=list)
    trailing: List[str] = field(default_factory=list)

    @property
    def can_invert(self) -> bool:
        return bool(self.chain.auxiliary and self.subject)

    def declarative(self) -> List[str]:
        head = [self.subject] if self.subject else []
        return [*head, *self.chain.tokens(self.frequency), *self.arguments, *self.trailing]

    def inverted(self) -> List[str]:
        if not self.can_invert:
            return self.declarative()
        out = [self.chain.auxiliary, self.subject]
        if self.chain.negation:
            out.append(self.chain.negation)
        return [*out, *self.frequency, *self.chain.tail, *self.arguments, *self.trailing]


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------


class ClauseOrchestrator:
    """
    Renders sentences for one lexicon. Holds no per-render state: the
    tracker is passed into every call.
    """

    def __init__(
        self,
        lexicon: LexiconIndex,
        conjugation: Optional[ConjugationEngine] = None,
        noun_phrases: Optional[NounPhraseRenderer] = None,
    ) -> None:
        self.lexicon = lexicon
        self.conjugation = conjugation or ConjugationEngine(lexicon)
        self.noun_phrases = noun_phrases or NounPhraseRenderer(lexicon)
        self.logic = PropositionRenderer(self.render_clause)

    # Sentence level ------------------------------------------------------

    def render_sentence(self, sentence: SentenceNode, tracker: DerivationTracker) -> str:
        stype = SentenceType(sentence.sentence_type)

        if sentence.proposition is not None:
            body = self.logic.render(sentence.proposition, tracker)
        else:
            clause = sentence.clause
            if stype is SentenceType.NEGATED_MODAL and clause.modal is not None:
                clause = clause.model_copy(update={"modal_polarity": Polarity.NEGATIVE})

            if stype in _QUESTIONS:
                body = self.render_question(clause, tracker)
            elif stype is SentenceType.IMPERATIVE:
                body = self.render_imperative(clause, tracker)
            else:
                body = self.render_clause(clause, tracker)

        if sentence.time_adverbial:
            body = f"{body} {sentence.time_adverbial}"

        text = _capitalise(body) + _PUNCTUATION.get(stype, ".")
        if stype is SentenceType.FACT:
            text = f"{settings.FACT_MARKER} {text}"
        return text

    # Clause types --------------------------------------------------------

    def render_clause(self, clause: ClauseNode, tracker: DerivationTracker) -> str:
        """Declarative word order, without capitalisation or punctuation."""
        parts = self._verb_phrase(clause.verb_phrase, clause, tracker)
        return self._coordinate(clause, tracker, " ".join(parts.declarative()))

    def render_question(self, clause: ClauseNode, tracker: DerivationTracker) -> str:
        vp = clause.verb_phrase

        wh_argument = next((a for a in vp.arguments if is_interrogative(a.filler)), None)
        if wh_argument is not None:
            return self._wh_argument_question(clause, wh_argument, tracker)

        wh_adverb = next((a for a in vp.adverbs if a.is_interrogative), None)
        if wh_adverb is not None:
            return self._wh_adverb_question(clause, wh_adverb, tracker)

        parts = self._verb_phrase(vp, clause, tracker, needs_inversion=True)
        self._log_inversion(parts, tracker)
        return self._coordinate(clause, tracker, " ".join(parts.inverted()))

    def render_imperative(self, clause: ClauseNode, tracker: DerivationTracker) -> str:
        elements = []
        for index, (conjunction, vp) in enumerate(clause.verb_phrase.chain()):
            text = self._imperative_phrase(vp, clause, tracker, first=index == 0)
            elements.append(CoordElement(text, "you", conjunction.value if conjunction else None))
        return coordinate_groups(elements)

    # Questions -----------------------------------------------------------

    def _wh_argument_question(
        self, clause: ClauseNode, wh_argument: FilledArgument, tracker: DerivationTracker
    ) -> str:
        vp = clause.verb_phrase
        role = wh_argument.role.value
        subject_role, positions = _layout(vp, self.lexicon.verb(vp.verb.lemma))

        if role == subject_role:
            # Who ate the apple? No inversion, no do-support
            parts = self._verb_phrase(vp, clause, tracker)
            tokens = parts.declarative()
            tracker.record_syntax(
                TransformationType.WH_MOVEMENT,
                SyntaxOperation.MOVE,
                "wh_subject",
                "The wh-word is already the subject, so the word order does not change",
                element=parts.subject,
                before=tokens,
                after=tokens,
            )
            return self._coordinate(clause, tracker, " ".join(tokens))

        parts = self._verb_phrase(vp, clause, tracker, needs_inversion=True, skip_role=role)
        wh_word = self.noun_phrases.render(wh_argument.filler, tracker, is_subject=False).text
        preposition = next((p.preposition for p in positions if p.role == role), None)
        fronted = f"{preposition} {wh_word}" if preposition else wh_word
        return self._front(clause, parts, fronted, tracker)

    def _wh_adverb_question(self, clause: ClauseNode, wh_adverb: AdverbNode, tracker: DerivationTracker) -> str:
        parts = self._verb_phrase(clause.verb_phrase, clause, tracker, needs_inversion=True, skip_adverb=wh_adverb)
        fronted = self._adverb_word(wh_adverb, Polarity.AFFIRMATIVE, tracker)
        return self._front(clause, parts, fronted, tracker)

    def _front(self, clause: ClauseNode, parts: _Parts, fronted: str, tracker: DerivationTracker) -> str:
        self._log_inversion(parts, tracker)
        inverted = parts.inverted()
        tracker.record_syntax(
            TransformationType.WH_MOVEMENT,
            SyntaxOperation.MOVE,
            "wh_fronting",
            f"'{fronted}' moves to the front of the question",
            element=fronted,
            before=[*inverted, fronted],
            after=[fronted, *inverted],
        )
        return self._coordinate(clause, tracker, " ".join([fronted, *inverted]))

    @staticmethod
    def _log_inversion(parts: _Parts, tracker: DerivationTracker) -> None:
        if not parts.can_invert:
            return
        aux = parts.chain.auxiliary
        tracker.record_syntax(
            TransformationType.INVERSION,
            SyntaxOperation.MOVE,
            "subject_aux_inversion",
            "In a question the first auxiliary moves in front of the subject",
            element=aux,
            before=[parts.subject, aux],
            after=[aux, parts.subject],
        )

    # Verb phrases --------------------------------------------------------

    def _verb_phrase(
        self,
        vp: VerbPhraseNode,
        clause: ClauseNode,
        tracker: DerivationTracker,
        *,
        needs_inversion: bool = False,
        skip_role: Optional[str] = None,
        skip_adverb: Optional[AdverbNode] = None,
    ) -> _Parts:
        lemma = vp.verb.lemma
        entry = self.lexicon.verb(lemma)
        self._check_valency(vp, entry)
        subject_role, positions = _layout(vp, entry)
        polarity = Polarity(clause.polarity)

        subject: Optional[str] = None
        agreement = THIRD_SINGULAR
        if subject_role is not None:
            arg = vp.argument(subject_role)
            rendered = self.noun_phrases.render(arg.filler if arg else None, tracker, is_subject=True)
            subject, agreement = rendered.text, rendered.agreement

        chain = self.conjugation.conjugate(
            lemma,
            agreement,
            clause.tense,
            clause.aspect,
            polarity,
            tracker,
            modal=clause.modal,
            modal_polarity=clause.modal_polarity,
            needs_inversion=needs_inversion,
            trigger=f"subject '{subject}'" if subject else None,
        )

        arguments = self._arguments(vp, positions, polarity, tracker, skip_role)
        frequency, trailing = self._adverbials(vp, polarity, tracker, skip_adverb)
        return _Parts(subject, chain, frequency, arguments, trailing)

    def _imperative_phrase(
        self, vp: VerbPhraseNode, clause: ClauseNode, tracker: DerivationTracker, *, first: bool
    ) -> str:
        lemma = vp.verb.lemma
        entry = self.lexicon.verb(lemma)
        self._check_valency(vp, entry)
        _, positions = _layout(vp, entry)
        polarity = Polarity(clause.polarity)

        if not first:
            # Later conjuncts share the first verb's negation: "don't run or shout"
            chain = VerbChain(tail=(entry.forms.base if entry else lemma,))
        elif clause.modal is not None:
            chain = self.conjugation.conjugate(
                lemma,
                Agreement(2, "singular"),
                Tense.PRESENT,
                Aspect.SIMPLE,
                polarity,
                tracker,
                modal=clause.modal,
                modal_polarity=clause.modal_polarity,
            )
        else:
            chain = self.conjugation.imperative(lemma, polarity, tracker)

        if first:
            verb_tokens = chain.tokens()
            tracker.record_syntax(
                TransformationType.SUBJECT_OMISSION,
                SyntaxOperation.DELETE,
                "imperative_subject",
                "Imperatives leave the addressee 'you' unexpressed",
                element="you",
                before=["you", *verb_tokens],
                after=verb_tokens,
            )

        arguments = self._arguments(vp, positions, polarity, tracker)
        frequency, trailing = self._adverbials(vp, polarity, tracker)
        return " ".join([*chain.tokens(frequency), *arguments, *trailing])

    def _coordinate(self, clause: ClauseNode, tracker: DerivationTracker, first_text: str) -> str:
        """Append the verb phrases coordinated after the first one."""
        links = clause.verb_phrase.chain()
        if len(links) == 1:
            return first_text

        texts = [first_text]
        for _, vp in links[1:]:
            texts.append(" ".join(self._verb_phrase(vp, clause, tracker).declarative()))

        group_ids = placeholder_group_ids(
            [self._subject_filler(vp) for _, vp in links],
            key=lambda filler: filler.model_dump_json(),
        )
        elements = [
            CoordElement(text, group_id, conjunction.value if conjunction else None)
            for (conjunction, _), text, group_id in zip(links, texts, group_ids)
        ]
        return coordinate_groups(elements)

    def _subject_filler(self, vp: VerbPhraseNode):
        subject_role, _ = _layout(vp, self.lexicon.verb(vp.verb.lemma))
        if subject_role is None:
            return None
        arg = vp.argument(subject_role)
        return arg.filler if arg is not None else None

    # Arguments & adverbials ---------------------------------------------

    @staticmethod
    def _check_valency(vp: VerbPhraseNode, entry: Optional[VerbEntry]) -> None:
        if entry is None:
            return
        for arg in vp.arguments:
            if arg.role.value not in entry.roles:
                raise ValencyError(entry.lemma, arg.role.value, entry.roles)

    def _arguments(
        self,
        vp: VerbPhraseNode,
        positions: List[_Position],
        polarity: Polarity,
        tracker: DerivationTracker,
        skip_role: Optional[str] = None,
    ) -> List[str]:
        out: List[str] = []
        for pos in positions:
            if pos.role == skip_role:
                continue
            arg = vp.argument(pos.role)
            filler = arg.filler if arg is not None else None
            if filler is None and not pos.required:
                continue
            text = self.noun_phrases.render(filler, tracker, is_subject=False, polarity=polarity).text
            out.append(f"{pos.preposition} {text}" if pos.preposition else text)
        return out

    def _adverb_type(self, adverb: AdverbNode) -> str:
        if adverb.type is not None:
            return AdverbType(adverb.type).value
        entry = self.lexicon.adverb(adverb.lemma)
        return entry.type if entry is not None else AdverbType.MANNER.value

    def _adverb_word(self, adverb: AdverbNode, polarity: Polarity, tracker: DerivationTracker) -> str:
        entry = self.lexicon.adverb(adverb.lemma)
        word = entry.surface if entry is not None else adverb.lemma.lstrip("?")
        if polarity is Polarity.NEGATIVE:
            npi = negative_polarity_form(entry)
            if npi:
                word = tracker.record_morphology(
                    TransformationType.POLARITY,
                    word,
                    npi,
                    "negative_polarity_item",
                    f"Under negation '{word}' becomes '{npi}'",
                    trigger="negative polarity",
                )
        return word

    def _adverbials(
        self,
        vp: VerbPhraseNode,
        polarity: Polarity,
        tracker: DerivationTracker,
        skip_adverb: Optional[AdverbNode] = None,
    ) -> Tuple[List[str], List[str]]:
        """(frequency adverbs, clause-final words)."""
        frequency: List[str] = []
        by_type = {t: [] for t in _TRAILING_TYPES}
        for adverb in vp.adverbs:
            if adverb is skip_adverb:
                continue
            kind = self._adverb_type(adverb)
            word = self._adverb_word(adverb, polarity, tracker)
            if kind == AdverbType.FREQUENCY.value:
                frequency.append(word)
            elif kind in by_type:
                by_type[kind].append(word)
            else:
                by_type["manner"].append(word)

        trailing = [self.noun_phrases.render_pp(pp, tracker, polarity=polarity) for pp in vp.prepositional_phrases]
        for kind in _TRAILING_TYPES:
            trailing.extend(by_type[kind])
        return frequency, trailing


__all__ = ["ClauseOrchestrator", "SUBJECT_ROLES"]
