"""
morphology/conjugation.py

English verb conjugation with derivation logging.

Given a lemma, subject agreement and the clause's tense / aspect /
polarity / modality, the engine builds the verb chain and records one
step per grammatical layer on the caller's `DerivationTracker`.

Layers are applied outer to inner:

    modal        can / could / must / had to / was going to ...
                 (blocks tense marking on the rest of the chain)
    perfect      have + past participle
    progressive  be + present participle
    tense        past form, 3sg present -s, or "will" for the future

A morphology step is recorded only when a layer actually changes the
words. Negation and do-support are syntax steps:

    He eats.           (agreement: eat -> eats)
    He does not eat.   (do_support, agreement: do -> does, not_insertion)
    He has eaten.      (perfect: eat -> have eaten, agreement: have -> has)

The result is a `VerbChain`:

    auxiliary  first auxiliary (the one that inverts in questions), or None
    negation   "not" or None
    tail       the remaining verb words

The clause assembler (constructions/clause.py) decides word order; this
module only produces forms.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from app.core.domain.models import Aspect, ModalKind, Polarity, Tense
from lexicon.index import LexiconIndex
from lexicon.types import VerbForms
from nlg.derivation import DerivationTracker, SyntaxOperation, TransformationType


# ---------------------------------------------------------------------------
# Agreement & chain value objects
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Agreement:
    person: int = 3
    number: str = "singular"

    @property
    def is_singular(self) -> bool:
        return self.number != "plural"

    @property
    def is_third_singular(self) -> bool:
        return self.person == 3 and self.is_singular

    @property
    def key(self) -> str:
        return f"{self.person}{'sg' if self.is_singular else 'pl'}"


THIRD_SINGULAR = Agreement(3, "singular")


@dataclass(frozen=True)
class VerbChain:
    auxiliary: Optional[str] = None
    negation: Optional[str] = None
    tail: Tuple[str, ...] = ()

    def tokens(self, frequency: Sequence[str] = ()) -> List[str]:
        """
        Flatten the chain, placing frequency adverbs after the first
        auxiliary (and "not"), or before the main verb when there is none.
        """
        out: List[str] = []
        if self.auxiliary:
            out.append(self.auxiliary)
            if self.negation:
                out.append(self.negation)
        out.extend(frequency)
        out.extend(self.tail)
        return out

    def text(self) -> str:
        return " ".join(self.tokens())


# ---------------------------------------------------------------------------
# Paradigms
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Paradigm:
    tense: Tense
    aspect: Aspect
    name: str
    pattern: str


PARADIGMS: Dict[Tuple[Tense, Aspect], Paradigm] = {
    (Tense.PAST, Aspect.SIMPLE): Paradigm(Tense.PAST, Aspect.SIMPLE, "past simple", "V-past"),
    (Tense.PAST, Aspect.PROGRESSIVE): Paradigm(Tense.PAST, Aspect.PROGRESSIVE, "past progressive", "was/were + V-ing"),
    (Tense.PAST, Aspect.PERFECT): Paradigm(Tense.PAST, Aspect.PERFECT, "past perfect", "had + V-pp"),
    (Tense.PAST, Aspect.PERFECT_PROGRESSIVE): Paradigm(
        Tense.PAST, Aspect.PERFECT_PROGRESSIVE, "past perfect progressive", "had been + V-ing"
    ),
    (Tense.PRESENT, Aspect.SIMPLE): Paradigm(Tense.PRESENT, Aspect.SIMPLE, "present simple", "V / V-s"),
    (Tense.PRESENT, Aspect.PROGRESSIVE): Paradigm(
        Tense.PRESENT, Aspect.PROGRESSIVE, "present progressive", "am/is/are + V-ing"
    ),
    (Tense.PRESENT, Aspect.PERFECT): Paradigm(Tense.PRESENT, Aspect.PERFECT, "present perfect", "have/has + V-pp"),
    (Tense.PRESENT, Aspect.PERFECT_PROGRESSIVE): Paradigm(
        Tense.PRESENT, Aspect.PERFECT_PROGRESSIVE, "present perfect progressive", "have/has been + V-ing"
    ),
    (Tense.FUTURE, Aspect.SIMPLE): Paradigm(Tense.FUTURE, Aspect.SIMPLE, "future simple", "will + V"),
    (Tense.FUTURE, Aspect.PROGRESSIVE): Paradigm(
        Tense.FUTURE, Aspect.PROGRESSIVE, "future progressive", "will be + V-ing"
    ),
    (Tense.FUTURE, Aspect.PERFECT): Paradigm(Tense.FUTURE, Aspect.PERFECT, "future perfect", "will have + V-pp"),
    (Tense.FUTURE, Aspect.PERFECT_PROGRESSIVE): Paradigm(
        Tense.FUTURE, Aspect.PERFECT_PROGRESSIVE, "future perfect progressive", "will have been + V-ing"
    ),
}


def paradigm(tense: Tense, aspect: Aspect) -> Paradigm:
    return PARADIGMS[(Tense(tense), Aspect(aspect))]


# ---------------------------------------------------------------------------
# Auxiliaries & modals
# ---------------------------------------------------------------------------

_BE = VerbForms(
    base="be", past="was", pp="been", ing="being", s="is",
    irregular={
        "1sg_present": "am", "2sg_present": "are", "3sg_present": "is",
        "1pl_present": "are", "2pl_present": "are", "3pl_present": "are",
        "1sg_past": "was", "2sg_past": "were", "3sg_past": "was",
        "1pl_past": "were", "2pl_past": "were", "3pl_past": "were",
    },
)
_HAVE = VerbForms(base="have", past="had", pp="had", ing="having", s="has")
_DO = VerbForms(base="do", past="did", pp="done", ing="doing", s="does")


@dataclass(frozen=True)
class ModalForm:
    auxiliary: Optional[str] = None
    # "had to" / "was going to": the modal meaning carried by a finite verb
    periphrastic: Optional[str] = None

    @property
    def text(self) -> str:
        return self.auxiliary or self.periphrastic or ""


_PRESENT_MODALS: Dict[ModalKind, ModalForm] = {
    ModalKind.ABILITY: ModalForm("can"),
    ModalKind.PERMISSION: ModalForm("may"),
    ModalKind.POSSIBILITY: ModalForm("might"),
    ModalKind.OBLIGATION: ModalForm("must"),
    ModalKind.CERTAINTY: ModalForm("must"),
    ModalKind.ADVICE: ModalForm("should"),
    ModalKind.VOLITION: ModalForm("will"),
    ModalKind.PREDICTION: ModalForm("will"),
}

_PAST_MODALS: Dict[ModalKind, ModalForm] = {
    ModalKind.ABILITY: ModalForm("could"),
    ModalKind.PERMISSION: ModalForm("could"),
    ModalKind.POSSIBILITY: ModalForm("might"),
    ModalKind.OBLIGATION: ModalForm(periphrastic="had to"),
    ModalKind.CERTAINTY: ModalForm("must"),
    ModalKind.ADVICE: ModalForm("should"),
    ModalKind.VOLITION: ModalForm(periphrastic="was going to"),
    ModalKind.PREDICTION: ModalForm("would"),
}

NEGATED_MODALS: Dict[str, str] = {
    "can": "can't",
    "could": "couldn't",
    "will": "won't",
    "would": "wouldn't",
    "should": "shouldn't",
    "may": "may not",
    "might": "might not",
    "must": "mustn't",
}


def modal_form(modal: ModalKind, tense: Tense) -> ModalForm:
    """Surface form of a modal meaning; the future uses the present forms."""
    table = _PAST_MODALS if tense is Tense.PAST else _PRESENT_MODALS
    return table[ModalKind(modal)]


def negate_modal(aux: str) -> str:
    return NEGATED_MODALS.get(aux, f"{aux} not")


def finite_form(forms: VerbForms, tense: Tense, agreement: Agreement) -> str:
    """Past or present finite form, honouring person/number irregulars."""
    if tense is Tense.PAST:
        return forms.irregular.get(f"{agreement.key}_past", forms.past)
    irregular = forms.irregular.get(f"{agreement.key}_present")
    if irregular:
        return irregular
    return forms.s if agreement.is_third_singular else forms.base


def _agreement_rule(agreement: Agreement) -> str:
    if agreement.is_third_singular:
        return "third_person_singular"
    if agreement.person == 1 and agreement.is_singular:
        return "first_person_singular"
    return "plural" if not agreement.is_singular else "second_person"


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


class ConjugationEngine:
    """
    Builds verb chains from lexicon forms.

    Stateless apart from the read-only lexicon; every call records onto
    the tracker it is handed.
    """

    def __init__(self, lexicon: LexiconIndex) -> None:
        self.lexicon = lexicon

    # Forms ---------------------------------------------------------------

    def _aux_forms(self, lemma: str) -> VerbForms:
        entry = self.lexicon.verb(lemma)
        if entry is not None:
            return entry.forms
        return {"be": _BE, "have": _HAVE, "do": _DO}[lemma]

    def _aspect_core(self, forms: VerbForms, aspect: Aspect, tracker: DerivationTracker) -> List[str]:
        """Non-finite chain for the aspect, e.g. ["have", "been", "eating"]."""
        base = forms.base
        progressive = ["be", forms.ing]

        if aspect is Aspect.PERFECT_PROGRESSIVE:
            core = ["have", "been", forms.ing]
            tracker.record_morphology(
                TransformationType.ASPECT,
                " ".join(progressive),
                " ".join(core),
                "perfect",
                "Perfect aspect: have + past participle of the next verb",
                trigger="aspect: perfect progressive",
            )
            tracker.record_morphology(
                TransformationType.ASPECT,
                base,
                " ".join(progressive),
                "progressive",
                "Progressive aspect: be + present participle",
                trigger="aspect: perfect progressive",
            )
            return core

        if aspect is Aspect.PERFECT:
            core = ["have", forms.pp]
            tracker.record_morphology(
                TransformationType.ASPECT,
                base,
                " ".join(core),
                "perfect",
                "Perfect aspect: have + past participle",
                trigger="aspect: perfect",
            )
            return core

        if aspect is Aspect.PROGRESSIVE:
            tracker.record_morphology(
                TransformationType.ASPECT,
                base,
                " ".join(progressive),
                "progressive",
                "Progressive aspect: be + present participle",
                trigger="aspect: progressive",
            )
            return progressive

        return [base]

    def _mark_finite(
        self,
        forms: VerbForms,
        tense: Tense,
        agreement: Agreement,
        tracker: DerivationTracker,
        trigger: Optional[str],
    ) -> str:
        """Past or present form of the first verb in the chain, logged."""
        finite = finite_form(forms, tense, agreement)
        if tense is Tense.PAST:
            tracker.record_morphology(
                TransformationType.TENSE,
                forms.base,
                finite,
                "past",
                "Past tense marked on the finite verb",
                trigger="tense: past",
            )
        else:
            tracker.record_morphology(
                TransformationType.AGREEMENT,
                forms.base,
                finite,
                _agreement_rule(agreement),
                "The finite verb agrees with the subject in person and number",
                trigger=trigger,
            )
        return finite

    def _do_support(
        self,
        tense: Tense,
        agreement: Agreement,
        tracker: DerivationTracker,
        before: Sequence[str],
        after_tail: Sequence[str],
        reason: str,
        trigger: Optional[str],
    ) -> str:
        do = finite_form(_DO, tense, agreement)
        tracker.record_syntax(
            TransformationType.DO_SUPPORT,
            SyntaxOperation.INSERT,
            "do_support",
            f"No auxiliary is available for {reason}, so 'do' is inserted",
            element=do,
            before=before,
            after=[do, *after_tail],
        )
        self._mark_finite(_DO, tense, agreement, tracker, trigger)
        return do

    @staticmethod
    def _negate_main_verb(core: List[str], tracker: DerivationTracker) -> List[str]:
        negated = ["not", *core]
        tracker.record_syntax(
            TransformationType.NEGATION,
            SyntaxOperation.INSERT,
            "not_before_verb",
            "The modal is already negated, so the clause negation goes before the main verb",
            element="not",
            before=core,
            after=negated,
        )
        return negated

    @staticmethod
    def _negate(chain: VerbChain, tracker: DerivationTracker) -> VerbChain:
        before = [chain.auxiliary, *chain.tail]
        tracker.record_syntax(
            TransformationType.NEGATION,
            SyntaxOperation.INSERT,
            "not_insertion",
            "'not' follows the first auxiliary",
            element="not",
            before=before,
            after=[chain.auxiliary, "not", *chain.tail],
        )
        return VerbChain(auxiliary=chain.auxiliary, negation="not", tail=chain.tail)

    # Public API ----------------------------------------------------------

    def conjugate(
        self,
        lemma: str,
        agreement: Agreement,
        tense: Tense,
        aspect: Aspect,
        polarity: Polarity,
        tracker: DerivationTracker,
        *,
        modal: Optional[ModalKind] = None,
        modal_polarity: Polarity = Polarity.AFFIRMATIVE,
        needs_inversion: bool = False,
        trigger: Optional[str] = None,
    ) -> VerbChain:
        """
        Conjugate `lemma` for a finite clause.

        Args:
            needs_inversion:
                True for yes/no questions and non-subject wh-questions; a
                chain without an auxiliary then gets do-support.
            trigger:
                Human-readable agreement trigger, e.g. "subject 'he'".
        """
        tense, aspect, polarity = Tense(tense), Aspect(aspect), Polarity(polarity)
        entry = self.lexicon.verb(lemma)
        if entry is None:
            return VerbChain(tail=(lemma,))

        negative = polarity is Polarity.NEGATIVE
        forms = entry.forms

        if modal is not None:
            chain = self._modal_chain(
                forms, ModalKind(modal), Polarity(modal_polarity), tense, aspect,
                agreement, negative, needs_inversion, tracker, trigger,
            )
        else:
            core = self._aspect_core(forms, aspect, tracker)
            chain = self._finite_chain(
                forms, core, tense, aspect, agreement, entry.is_copula,
                negative, needs_inversion, tracker, trigger,
            )

        # A negated modal already carries the auxiliary negation
        modal_negated = modal is not None and Polarity(modal_polarity) is Polarity.NEGATIVE
        if negative and chain.auxiliary and not modal_negated:
            chain = self._negate(chain, tracker)
        return chain

    def _finite_chain(
        self,
        forms: VerbForms,
        core: List[str],
        tense: Tense,
        aspect: Aspect,
        agreement: Agreement,
        copula: bool,
        negative: bool,
        needs_inversion: bool,
        tracker: DerivationTracker,
        trigger: Optional[str],
    ) -> VerbChain:
        if tense is Tense.FUTURE:
            tracker.record_morphology(
                TransformationType.TENSE,
                " ".join(core),
                " ".join(["will", *core]),
                "future",
                "Future tense: will + bare form",
                trigger="tense: future",
            )
            return VerbChain(auxiliary="will", tail=tuple(core))

        # The chain starts with an auxiliary (have/be) or with copular "be"
        if aspect is not Aspect.SIMPLE or copula:
            head_forms = forms if aspect is Aspect.SIMPLE else self._aux_forms(core[0])
            finite = self._mark_finite(head_forms, tense, agreement, tracker, trigger)
            return VerbChain(auxiliary=finite, tail=tuple(core[1:]))

        if negative or needs_inversion:
            declarative = finite_form(forms, tense, agreement)
            reason = "negation" if negative else "the question"
            do = self._do_support(tense, agreement, tracker, [declarative], core, reason, trigger)
            return VerbChain(auxiliary=do, tail=tuple(core))

        finite = self._mark_finite(forms, tense, agreement, tracker, trigger)
        return VerbChain(tail=(finite,))

    def _modal_chain(
        self,
        forms: VerbForms,
        modal: ModalKind,
        modal_polarity: Polarity,
        tense: Tense,
        aspect: Aspect,
        agreement: Agreement,
        negative: bool,
        needs_inversion: bool,
        tracker: DerivationTracker,
        trigger: Optional[str],
    ) -> VerbChain:
        present = modal_form(modal, Tense.PRESENT)
        form = modal_form(modal, tense)
        core = self._aspect_core(forms, aspect, tracker)
        core_text = " ".join(core)

        tracker.record_morphology(
            TransformationType.MODAL,
            core_text,
            f"{present.text} {core_text}",
            modal.value,
            f"Modal of {modal.value}; the following verb stays in its bare form",
            trigger=f"modal: {modal.value}",
        )
        if form != present:
            tracker.record_morphology(
                TransformationType.MODAL,
                present.text,
                form.text,
                "past_modal",
                "Past form of the modal",
                trigger="tense: past",
            )

        modal_negative = modal_polarity is Polarity.NEGATIVE
        if modal_negative and negative:
            core = self._negate_main_verb(core, tracker)

        if modal_negative and modal is ModalKind.OBLIGATION:
            # "must not" forbids; absence of obligation is "don't have to"
            do_tense = Tense.PAST if tense is Tense.PAST else Tense.PRESENT
            aux = finite_form(_DO, do_tense, agreement) + "n't"
            tracker.record_morphology(
                TransformationType.NEGATION,
                form.text,
                f"{aux} have to",
                "modal_negation",
                "Negated obligation is expressed as 'not have to'",
                trigger="modal polarity: negative",
            )
            return VerbChain(auxiliary=aux, tail=("have", "to", *core))

        if form.periphrastic == "had to":
            if negative or needs_inversion:
                reason = "negation" if negative else "the question"
                do = self._do_support(
                    Tense.PAST, agreement, tracker, ["had", "to", *core], ["have", "to", *core], reason, trigger
                )
                return VerbChain(auxiliary=do, tail=("have", "to", *core))
            return VerbChain(tail=("had", "to", *core))

        if form.periphrastic == "was going to":
            be_past = finite_form(self._aux_forms("be"), Tense.PAST, agreement)
            tracker.record_morphology(
                TransformationType.AGREEMENT,
                "was",
                be_past,
                _agreement_rule(agreement),
                "The finite verb agrees with the subject in person and number",
                trigger=trigger,
            )
            aux = be_past
            if modal_negative:
                aux = tracker.record_morphology(
                    TransformationType.NEGATION,
                    be_past,
                    be_past + "n't",
                    "modal_negation",
                    "Negated modal",
                    trigger="modal polarity: negative",
                )
            return VerbChain(auxiliary=aux, tail=("going", "to", *core))

        aux = form.auxiliary or ""
        if modal_negative:
            aux = tracker.record_morphology(
                TransformationType.NEGATION,
                aux,
                negate_modal(aux),
                "modal_negation",
                "Negated modal",
                trigger="modal polarity: negative",
            )
        return VerbChain(auxiliary=aux, tail=tuple(core))

    def imperative(self, lemma: str, polarity: Polarity, tracker: DerivationTracker) -> VerbChain:
        """Bare form; the negative imperative always takes "do not"."""
        entry = self.lexicon.verb(lemma)
        base = entry.forms.base if entry is not None else lemma
        if Polarity(polarity) is not Polarity.NEGATIVE:
            return VerbChain(tail=(base,))

        tracker.record_syntax(
            TransformationType.DO_SUPPORT,
            SyntaxOperation.INSERT,
            "do_support",
            "Negative imperatives take 'do', even with 'be'",
            element="do",
            before=[base],
            after=["do", base],
        )
        return self._negate(VerbChain(auxiliary="do", tail=(base,)), tracker)


__all__ = [
    "Agreement",
    "THIRD_SINGULAR",
    "VerbChain",
    "Paradigm",
    "PARADIGMS",
    "paradigm",
    "ModalForm",
    "modal_form",
    "negate_modal",
    "finite_form",
    "ConjugationEngine",
]
