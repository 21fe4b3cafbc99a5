"""
morphology/nominal.py

Word-level morphology for English nominals:

- Indefinite article selection (a/an), with lexicon overrides
- Noun plural forms
- Pronoun case (nominative -> objective, who -> whom)
- Polarity-sensitive forms (someone -> anyone, somewhere -> anywhere)

All functions are stateless and never log; the noun phrase renderer
decides what gets recorded on the derivation tracker.
"""

from typing import Optional, Tuple

from lexicon.types import AdverbEntry, NounEntry, PronounEntry

VOWELS = "aeiouAEIOU"


# ---------------------------------------------------------------------------
# 1. Article selection
# ---------------------------------------------------------------------------


def indefinite_article(next_word: str, silent_h: bool = False, sounded_u: bool = False) -> Tuple[str, str]:
    """
    Choose "a" or "an" for the word that follows the article.

    Returns (article, reason) where reason is one of:
        "silent_h"   lexicon says the initial h is silent   (an hour)
        "sounded_u"  lexicon says the initial u sounds /ju/ (a university)
        "vowel"      the word starts with a vowel letter    (an apple)
        "consonant"  default                                (a book)
    """
    word = next_word.strip()
    if silent_h:
        return "an", "silent_h"
    if sounded_u:
        return "a", "sounded_u"
    if word and word[0] in VOWELS:
        return "an", "vowel"
    return "a", "consonant"


# ---------------------------------------------------------------------------
# 2. Number
# ---------------------------------------------------------------------------


def plural_form(lemma: str, entry: Optional[NounEntry]) -> str:
    """Plural from the lexicon; unknown nouns keep their raw lemma."""
    if entry is None:
        return lemma
    return entry.plural


# ---------------------------------------------------------------------------
# 3. Case
# ---------------------------------------------------------------------------


def objective_form(entry: PronounEntry) -> str:
    return entry.object_form


# ---------------------------------------------------------------------------
# 4. Polarity
# ---------------------------------------------------------------------------


def negative_polarity_form(entry) -> Optional[str]:
    """
    The negative-polarity counterpart of a pronoun or adverb, if any.

    Works for both `PronounEntry` (someone -> anyone) and `AdverbEntry`
    (somewhere -> anywhere).
    """
    if not isinstance(entry, (PronounEntry, AdverbEntry)):
        return None
    if entry.polarity_sensitive and entry.negative_form:
        return entry.negative_form
    return None
