"""
constructions/noun_phrase.py
----------------------------

Surface realisation of noun phrases (and the other argument fillers).

Responsibilities:

- Determiners in PRE / CENTRAL / POST order; number markers are silent
- Default indefinite article for bare count singular nouns
- a/an selection against the next rendered word
- Plural head nouns when the determiners imply plural
- Pronoun case (I -> me, ?who -> whom) outside subject position
- Negative polarity items (someone -> anyone) under negation
- Adjective pre-modifiers, post-modifiers after indefinite pronouns
  ("something good"), prepositional post-modifiers
- Coordinated noun phrases, with subject agreement for the conjunction

Every change is logged on the caller's `DerivationTracker`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from app.core.domain.determiners import implied_number, surface_values
from app.core.domain.models import (
    AdjectivePhraseNode,
    Conjunction,
    CoordinatedNounPhraseNode,
    NounPhraseNode,
    Polarity,
    PrepositionalPhraseNode,
    PronounHead,
)
from app.shared.config import settings
from constructions.coordination import coordinate
from lexicon.index import LexiconIndex
from morphology.conjugation import THIRD_SINGULAR, Agreement
from morphology.nominal import indefinite_article, negative_polarity_form, objective_form, plural_form
from nlg.derivation import DerivationTracker, SyntaxOperation, TransformationType

_ARTICLE_REASONS = {
    "silent_h": "The h of '{word}' is silent, so the article is 'an'",
    "vowel": "'{word}' starts with a vowel sound, so the article is 'an'",
}


@dataclass(frozen=True)
class RenderedPhrase:
    text: str
    agreement: Agreement = THIRD_SINGULAR
    interrogative: bool = False


def is_interrogative(filler) -> bool:
    """True for a noun phrase headed by an interrogative pronoun (?who, ?what)."""
    return isinstance(filler, NounPhraseNode) and isinstance(filler.head, PronounHead) and filler.head.is_interrogative


class NounPhraseRenderer:
    def __init__(self, lexicon: LexiconIndex) -> None:
        self.lexicon = lexicon

    # Dispatch -------------------------------------------------------------

    def render(
        self,
        filler,
        tracker: DerivationTracker,
        *,
        is_subject: bool,
        polarity: Polarity = Polarity.AFFIRMATIVE,
    ) -> RenderedPhrase:
        """Render any argument filler; None renders the placeholder."""
        if filler is None:
            return RenderedPhrase(settings.PLACEHOLDER)
        if isinstance(filler, NounPhraseNode):
            return self.render_noun_phrase(filler, tracker, is_subject=is_subject, polarity=polarity)
        if isinstance(filler, CoordinatedNounPhraseNode):
            return self.render_coordinated(filler, tracker, is_subject=is_subject, polarity=polarity)
        if isinstance(filler, AdjectivePhraseNode):
            words = [filler.degree, filler.lemma] if filler.degree else [filler.lemma]
            return RenderedPhrase(" ".join(words))
        raise TypeError(f"Unsupported filler: {type(filler).__name__}")

    # Noun phrases -------------------------------------------------------

    def render_noun_phrase(
        self,
        np: NounPhraseNode,
        tracker: DerivationTracker,
        *,
        is_subject: bool,
        polarity: Polarity = Polarity.AFFIRMATIVE,
    ) -> RenderedPhrase:
        if isinstance(np.head, PronounHead):
            result = self._render_pronoun(np, tracker, is_subject=is_subject, polarity=polarity)
        else:
            result = self._render_noun(np, tracker)

        if np.prep_modifier is not None:
            pp = self.render_pp(np.prep_modifier, tracker, polarity=polarity)
            result = RenderedPhrase(f"{result.text} {pp}", result.agreement, result.interrogative)
        return result

    def _render_pronoun(
        self,
        np: NounPhraseNode,
        tracker: DerivationTracker,
        *,
        is_subject: bool,
        polarity: Polarity,
    ) -> RenderedPhrase:
        lemma = np.head.lemma
        entry = self.lexicon.pronoun(lemma)
        if entry is None:
            # Lexicon miss: raw lemma, nothing logged
            text = lemma.lstrip("?")
            if np.adjectives:
                text = " ".join([text, *np.adjectives])
            return RenderedPhrase(text, THIRD_SINGULAR, lemma.startswith("?"))

        word = entry.surface
        if Polarity(polarity) is Polarity.NEGATIVE:
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

        if not is_subject and word == entry.surface:
            if entry.is_interrogative:
                word = tracker.record_morphology(
                    TransformationType.CASE,
                    word,
                    objective_form(entry),
                    "who_whom",
                    "An interrogative fronted from object position takes the objective case",
                    trigger="object position",
                )
            else:
                word = tracker.record_morphology(
                    TransformationType.CASE,
                    word,
                    objective_form(entry),
                    "objective_case",
                    "Pronouns outside subject position take the objective case",
                    trigger="object position",
                )

        # Adjectives follow indefinite pronouns: "something good"
        text = " ".join([word, *np.adjectives]) if np.adjectives else word
        return RenderedPhrase(text, Agreement(entry.person, entry.number), entry.is_interrogative)

    def _render_noun(self, np: NounPhraseNode, tracker: DerivationTracker) -> RenderedPhrase:
        lemma = np.head.lemma
        entry = self.lexicon.noun(lemma)
        selections = np.determiners.selections()
        number = implied_number(selections)
        if number is None:
            number = "uncountable" if entry is not None and not entry.countable else "singular"

        determiners = surface_values(selections)

        if (
            not determiners
            and number == "singular"
            and entry is not None
            and entry.countable
            and not entry.proper
            and not entry.zero_article
        ):
            determiners = ["a"]
            tracker.record_syntax(
                TransformationType.ARTICLE,
                SyntaxOperation.INSERT,
                "default_indefinite",
                f"A singular count noun needs a determiner; '{lemma}' gets the indefinite article",
                element="a",
                before=[lemma],
                after=["a", lemma],
            )

        head = lemma
        if number == "plural":
            head = tracker.record_morphology(
                TransformationType.NUMBER,
                lemma,
                plural_form(lemma, entry),
                "plural",
                f"Plural noun form of '{lemma}'",
                trigger=self._number_trigger(selections),
            )

        words: List[str] = [*determiners, *np.adjectives, head]
        if "a" in determiners:
            idx = determiners.index("a")
            words[idx] = self._indefinite_article(words[idx + 1], tracker)

        agreement = Agreement(3, "plural" if number == "plural" else "singular")
        return RenderedPhrase(" ".join(words), agreement)

    @staticmethod
    def _number_trigger(selections) -> str:
        for value in (selections.post, selections.central, selections.pre):
            if value is not None:
                return f"determiner '{value}'"
        return "plural"

    def _indefinite_article(self, next_word: str, tracker: DerivationTracker) -> str:
        entry = self.lexicon.noun(next_word) or self.lexicon.adjective(next_word)
        silent_h = bool(entry is not None and entry.silent_h)
        sounded_u = bool(entry is not None and entry.sounded_u)
        article, reason = indefinite_article(next_word, silent_h=silent_h, sounded_u=sounded_u)
        return tracker.record_morphology(
            TransformationType.ARTICLE,
            "a",
            article,
            "a_an",
            _ARTICLE_REASONS.get(reason, "").format(word=next_word),
            trigger=f"next word '{next_word}'",
        )

    # Coordination -------------------------------------------------------

    def render_coordinated(
        self,
        cnp: CoordinatedNounPhraseNode,
        tracker: DerivationTracker,
        *,
        is_subject: bool,
        polarity: Polarity = Polarity.AFFIRMATIVE,
        nested: bool = False,
    ) -> RenderedPhrase:
        parts: List[Optional[str]] = []
        agreements: List[Agreement] = []
        for conjunct in cnp.conjuncts:
            if conjunct is None:
                parts.append(None)
                agreements.append(THIRD_SINGULAR)
                continue
            if isinstance(conjunct, CoordinatedNounPhraseNode):
                rendered = self.render_coordinated(
                    conjunct, tracker, is_subject=is_subject, polarity=polarity, nested=True
                )
            else:
                rendered = self.render_noun_phrase(conjunct, tracker, is_subject=is_subject, polarity=polarity)
            parts.append(rendered.text)
            agreements.append(rendered.agreement)

        conjunction = Conjunction.OR if cnp.choice else cnp.conjunction
        text = coordinate(parts, conjunction.value, correlative=nested)
        return RenderedPhrase(text, self._coordinated_agreement(conjunction, agreements))

    @staticmethod
    def _coordinated_agreement(conjunction: Conjunction, agreements: List[Agreement]) -> Agreement:
        if not agreements:
            return THIRD_SINGULAR
        if conjunction is Conjunction.OR:
            # Agreement with the nearest conjunct
            return agreements[-1]
        return Agreement(min(a.person for a in agreements), "plural")

    # Prepositional phrases ----------------------------------------------

    def render_pp(
        self,
        pp: PrepositionalPhraseNode,
        tracker: DerivationTracker,
        *,
        polarity: Polarity = Polarity.AFFIRMATIVE,
    ) -> str:
        obj = self.render(pp.object, tracker, is_subject=False, polarity=polarity)
        return f"{pp.preposition} {obj.text}"


__all__ = ["NounPhraseRenderer", "RenderedPhrase", "is_interrogative"]
