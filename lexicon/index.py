"""
lexicon/index.py

Read-only access layer over the per-language lexicon stored in JSON under:

    data/lexicon/{lang_code}/*.json

The index is built once per language (see `load_lexicon`) and shared by
every render; nothing in the grammar engine mutates it.

Lookup contract
---------------

    lex = load_lexicon("en")
    lex.verb("eat")        -> VerbEntry | None
    lex.noun("hour")       -> NounEntry | None
    lex.lookup("someone")  -> PronounEntry | None

A miss returns None. Callers fall back to the raw lemma and record no
derivation step: half-built sentences are a normal state for the editor,
not an error.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional

import structlog

from app.shared.config import settings
from lexicon.loader import SECTIONS, load_entries
from lexicon.types import (
    AdjectiveEntry,
    AdverbEntry,
    LexicalEntry,
    NounEntry,
    PronounEntry,
    VerbEntry,
)

logger = structlog.get_logger()


# ---------------------------------------------------------------------------
# Lexicon index
# ---------------------------------------------------------------------------


class LexiconIndex:
    """
    In-memory index for a single language's lexicon.

    Typically constructed via `load_lexicon(lang_code)`.

    Minimal usage:

        lex = load_lexicon("en")
        eat = lex.verb("eat")
        print(eat.forms.past, [s.role for s in eat.valency])
    """

    # Order used by the untyped `lookup`; pronouns first so that "it"
    # or "you" never resolve to something else.
    _LOOKUP_ORDER = ("pronouns", "nouns", "verbs", "adjectives", "adverbs")

    def __init__(
        self,
        lang_code: str,
        meta: Mapping[str, Any],
        sections: Mapping[str, Mapping[str, LexicalEntry]],
    ) -> None:
        self.lang_code = lang_code
        self.meta: Dict[str, Any] = dict(meta)
        self._sections: Dict[str, Dict[str, LexicalEntry]] = {
            name: dict(sections.get(name, {})) for name in SECTIONS
        }

    # Basic introspection -------------------------------------------------

    def __len__(self) -> int:  # pragma: no cover - trivial
        return sum(len(v) for v in self._sections.values())

    def __iter__(self) -> Iterator[LexicalEntry]:  # pragma: no cover - trivial
        for name in SECTIONS:
            yield from self._sections[name].values()

    def __contains__(self, lemma: str) -> bool:
        return self.lookup(lemma) is not None

    def counts(self) -> Dict[str, int]:
        """Number of entries per section."""
        return {name: len(entries) for name, entries in self._sections.items()}

    def lemmas(self, section: str) -> List[str]:
        """Sorted lemmas of one section ("verbs", "nouns", ...)."""
        return sorted(self._sections.get(section, {}))

    # Lookup helpers ------------------------------------------------------

    def lookup(self, lemma: str) -> Optional[LexicalEntry]:
        """Return the first entry for `lemma` in any section, or None."""
        for name in self._LOOKUP_ORDER:
            entry = self._sections[name].get(lemma)
            if entry is not None:
                return entry
        return None

    def verb(self, lemma: str) -> Optional[VerbEntry]:
        return self._sections["verbs"].get(lemma)  # type: ignore[return-value]

    def noun(self, lemma: str) -> Optional[NounEntry]:
        return self._sections["nouns"].get(lemma)  # type: ignore[return-value]

    def pronoun(self, lemma: str) -> Optional[PronounEntry]:
        return self._sections["pronouns"].get(lemma)  # type: ignore[return-value]

    def adjective(self, lemma: str) -> Optional[AdjectiveEntry]:
        return self._sections["adjectives"].get(lemma)  # type: ignore[return-value]

    def adverb(self, lemma: str) -> Optional[AdverbEntry]:
        return self._sections["adverbs"].get(lemma)  # type: ignore[return-value]


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

# Simple in-process cache to avoid re-reading the same JSON files.
_CACHE: Dict[str, LexiconIndex] = {}


def load_lexicon(
    lang_code: Optional[str] = None,
    base_dir: Optional[Path] = None,
    *,
    use_cache: bool = True,
) -> LexiconIndex:
    """
    Load the lexicon for a given language.

    Args:
        lang_code:
            Language code; defaults to `settings.LEXICON_LANG`.

        base_dir:
            Optional directory holding one sub-directory per language.
            Normally omitted; `settings.LEXICON_DIR` is used.

        use_cache:
            If True (default), keep a process-local cache per language.

    Raises:
        LexiconNotFound: if the language directory does not exist.
    """
    lang = lang_code or settings.LEXICON_LANG
    cache_key = f"{lang}@{base_dir}" if base_dir is not None else lang
    if use_cache and cache_key in _CACHE:
        return _CACHE[cache_key]

    loaded = load_entries(lang, base_dir)
    index = LexiconIndex(lang, loaded.meta, loaded.sections)
    logger.info("lexicon_loaded_success", lang=lang, files=len(loaded.files), **index.counts())

    if use_cache:
        _CACHE[cache_key] = index
    return index


def clear_cache() -> None:
    """Drop every cached index (tests and reload hooks)."""
    _CACHE.clear()


__all__ = ["LexiconIndex", "load_lexicon", "clear_cache"]
