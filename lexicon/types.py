"""
lexicon/types.py

Typed, immutable lexical entries for the English grammar engine.

The JSON files under data/lexicon/<lang>/ are parsed into these objects by
`lexicon.loader`; every consumer (conjugation, noun phrases, clause
assembly) reads them through `lexicon.index.LexiconIndex`.

Entry kinds
-----------

    VerbEntry       forms + kind + ordered valency
    NounEntry       plural + countability / article flags
    PronounEntry    case forms + agreement features
    AdjectiveEntry  degree forms + article flags
    AdverbEntry     position type + polarity behaviour
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple, Union


# ---------------------------------------------------------------------------
# Verbs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ArgumentSlot:
    """
    One argument position licensed by a verb.

    Attributes:
        role:
            Semantic role name ("agent", "theme", "recipient", ...).
        required:
            Required slots render the placeholder when left empty;
            optional slots are simply skipped.
        preposition:
            Preposition introducing the argument ("to", "in"), if any.
        label:
            Short question word used by editors ("what", "to whom").
    """

    role: str
    required: bool = True
    preposition: Optional[str] = None
    label: Optional[str] = None


@dataclass(frozen=True)
class VerbForms:
    base: str
    past: str
    pp: str
    ing: str
    s: str
    # Person/number overrides, e.g. {"1sg_present": "am"} for "be"
    irregular: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class VerbEntry:
    lemma: str
    forms: VerbForms
    kind: str = "action"  # action | stative | copula
    category: Optional[str] = None
    valency: Tuple[ArgumentSlot, ...] = ()

    @property
    def roles(self) -> Tuple[str, ...]:
        return tuple(slot.role for slot in self.valency)

    def slot(self, role: str) -> Optional[ArgumentSlot]:
        for s in self.valency:
            if s.role == role:
                return s
        return None

    @property
    def is_copula(self) -> bool:
        return self.kind == "copula"


# ---------------------------------------------------------------------------
# Nominals
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NounEntry:
    lemma: str
    plural: str
    category: Optional[str] = None
    countable: bool = True
    proper: bool = False
    zero_article: bool = False
    silent_h: bool = False
    sounded_u: bool = False


@dataclass(frozen=True)
class PronounEntry:
    lemma: str
    object_form: str
    possessive: Optional[str] = None
    person: int = 3
    number: str = "singular"
    type: str = "personal"  # personal | indefinite | interrogative
    polarity_sensitive: bool = False
    negative_form: Optional[str] = None

    @property
    def is_interrogative(self) -> bool:
        return self.type == "interrogative"

    @property
    def surface(self) -> str:
        """Nominative surface form; interrogatives drop their '?' prefix."""
        return self.lemma.lstrip("?")


@dataclass(frozen=True)
class AdjectiveEntry:
    lemma: str
    category: Optional[str] = None
    comparative: Optional[str] = None
    superlative: Optional[str] = None
    silent_h: bool = False
    sounded_u: bool = False


@dataclass(frozen=True)
class AdverbEntry:
    lemma: str
    type: str = "manner"  # manner | frequency | degree | time | place
    polarity_sensitive: bool = False
    negative_form: Optional[str] = None
    interrogative: bool = False

    @property
    def surface(self) -> str:
        return self.lemma.lstrip("?")


LexicalEntry = Union[VerbEntry, NounEntry, PronounEntry, AdjectiveEntry, AdverbEntry]


__all__ = [
    "ArgumentSlot",
    "VerbForms",
    "VerbEntry",
    "NounEntry",
    "PronounEntry",
    "AdjectiveEntry",
    "AdverbEntry",
    "LexicalEntry",
]
