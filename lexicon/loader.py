"""
lexicon/loader.py
=================

Loader for per-language lexicon data.

What it loads
-------------
Lexica live under a directory configured via `settings.LEXICON_DIR`:

    data/lexicon/
      en/
        verbs.json
        nouns.json
        pronouns.json
        ...

Each file is a JSON object holding a `_meta` block and any of the
sections "verbs", "nouns", "pronouns", "adjectives", "adverbs", each
mapping lemma -> feature bundle.

Behaviour
---------
- Deterministic loading/override order: files are processed in sorted
  filename order; when two files define the same lemma in the same
  section, the last writer wins.
- Resilient parsing: corrupt JSON files are skipped with a warning.
- Entries without explicit forms get regular English forms
  (walk -> walks/walked/walking, box -> boxes).

Error behaviour
---------------
- If the directory for a language does not exist, `load_entries()` raises
  `LexiconNotFound`.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import structlog

from app.core.domain.exceptions import LexiconNotFound
from app.shared.config import settings
from lexicon.types import (
    AdjectiveEntry,
    AdverbEntry,
    ArgumentSlot,
    NounEntry,
    PronounEntry,
    VerbEntry,
    VerbForms,
)

logger = structlog.get_logger()

SECTIONS = ("verbs", "nouns", "pronouns", "adjectives", "adverbs")

_VOWELS = "aeiou"


# ---------------------------------------------------------------------------
# Path resolution
# ---------------------------------------------------------------------------


def _project_root() -> Path:
    """The repository root: parent of the `lexicon/` package directory."""
    return Path(__file__).resolve().parent.parent


def language_dir(lang_code: str, base_dir: Optional[Path] = None) -> Path:
    """Compute the directory holding the JSON files for `lang_code`."""
    if base_dir is not None:
        return Path(base_dir) / lang_code
    lex_dir = Path(settings.LEXICON_DIR)
    if not lex_dir.is_absolute():
        lex_dir = _project_root() / lex_dir
    return lex_dir / lang_code


# ---------------------------------------------------------------------------
# Regular morphology fallback
# ---------------------------------------------------------------------------


def regular_s_form(word: str) -> str:
    """Third-person singular / plural -s with the usual spelling rules."""
    if word.endswith(("s", "x", "z", "ch", "sh", "o")):
        return word + "es"
    if len(word) > 1 and word.endswith("y") and word[-2] not in _VOWELS:
        return word[:-1] + "ies"
    return word + "s"


def regular_past(word: str) -> str:
    if word.endswith("e"):
        return word + "d"
    if len(word) > 1 and word.endswith("y") and word[-2] not in _VOWELS:
        return word[:-1] + "ied"
    return word + "ed"


def regular_ing(word: str) -> str:
    if word.endswith("ie"):
        return word[:-2] + "ying"
    if word.endswith("e") and not word.endswith("ee") and len(word) > 2:
        return word[:-1] + "ing"
    return word + "ing"


# ---------------------------------------------------------------------------
# Entry builders
# ---------------------------------------------------------------------------


def _build_verb(lemma: str, data: Mapping[str, Any]) -> VerbEntry:
    forms = data.get("forms") or {}
    base = forms.get("base") or lemma
    past = forms.get("past") or regular_past(base)
    verb_forms = VerbForms(
        base=base,
        past=past,
        pp=forms.get("pp") or past,
        ing=forms.get("ing") or regular_ing(base),
        s=forms.get("s") or regular_s_form(base),
        irregular=dict(forms.get("irregular") or {}),
    )
    valency = tuple(
        ArgumentSlot(
            role=str(slot["role"]),
            required=bool(slot.get("required", True)),
            preposition=slot.get("preposition"),
            label=slot.get("label"),
        )
        for slot in data.get("valency") or []
        if isinstance(slot, dict) and slot.get("role")
    )
    return VerbEntry(
        lemma=lemma,
        forms=verb_forms,
        kind=data.get("type", "action"),
        category=data.get("category"),
        valency=valency,
    )


def _build_noun(lemma: str, data: Mapping[str, Any]) -> NounEntry:
    return NounEntry(
        lemma=lemma,
        plural=data.get("plural") or regular_s_form(lemma),
        category=data.get("category"),
        countable=bool(data.get("countable", True)),
        proper=bool(data.get("proper", False)),
        zero_article=bool(data.get("zero_article", False)),
        silent_h=bool(data.get("silent_h", False)),
        sounded_u=bool(data.get("sounded_u", False)),
    )


def _build_pronoun(lemma: str, data: Mapping[str, Any]) -> PronounEntry:
    return PronounEntry(
        lemma=lemma,
        object_form=data.get("object_form") or lemma.lstrip("?"),
        possessive=data.get("possessive"),
        person=int(data.get("person", 3)),
        number=data.get("number", "singular"),
        type=data.get("type", "personal"),
        polarity_sensitive=bool(data.get("polarity_sensitive", False)),
        negative_form=data.get("negative_form"),
    )


def _build_adjective(lemma: str, data: Mapping[str, Any]) -> AdjectiveEntry:
    return AdjectiveEntry(
        lemma=lemma,
        category=data.get("category"),
        comparative=data.get("comparative"),
        superlative=data.get("superlative"),
        silent_h=bool(data.get("silent_h", False)),
        sounded_u=bool(data.get("sounded_u", False)),
    )


def _build_adverb(lemma: str, data: Mapping[str, Any]) -> AdverbEntry:
    return AdverbEntry(
        lemma=lemma,
        type=data.get("type", "manner"),
        polarity_sensitive=bool(data.get("polarity_sensitive", False)),
        negative_form=data.get("negative_form"),
        interrogative=bool(data.get("interrogative", lemma.startswith("?"))),
    )


_BUILDERS = {
    "verbs": _build_verb,
    "nouns": _build_noun,
    "pronouns": _build_pronoun,
    "adjectives": _build_adjective,
    "adverbs": _build_adverb,
}


# ---------------------------------------------------------------------------
# File loading
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LoadedEntries:
    """Parsed sections plus merged metadata for one language."""

    lang_code: str
    meta: Dict[str, Any]
    sections: Dict[str, Dict[str, Any]]
    files: List[str]


def _load_json_file(path: Path) -> Dict[str, Any]:
    """Load a single JSON file. Returns empty dict on failure (logs warning)."""
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.warning("lexicon_file_skipped", file=path.name, reason="json_decode", error=str(e))
        return {}
    except OSError as e:
        logger.warning("lexicon_file_skipped", file=path.name, reason="read_error", error=str(e))
        return {}

    if not isinstance(data, dict):
        logger.warning("lexicon_file_skipped", file=path.name, reason="root_not_object")
        return {}
    return data


def load_entries(lang_code: str, base_dir: Optional[Path] = None) -> LoadedEntries:
    """
    Read every JSON file for a language and build typed entries.

    Raises:
        LexiconNotFound: if the language directory does not exist.
    """
    directory = language_dir(lang_code, base_dir)
    if not directory.is_dir():
        raise LexiconNotFound(lang_code, str(directory))

    meta: Dict[str, Any] = {}
    sections: Dict[str, Dict[str, Any]] = {name: {} for name in SECTIONS}
    files: List[str] = []

    for path in sorted(directory.glob("*.json")):
        raw = _load_json_file(path)
        if not raw:
            continue
        files.append(path.name)

        file_meta = raw.get("_meta") or raw.get("meta")
        if isinstance(file_meta, dict):
            meta.setdefault("files", {})[path.name] = file_meta

        for section in SECTIONS:
            block = raw.get(section)
            if not isinstance(block, dict):
                continue
            build = _BUILDERS[section]
            for lemma, data in block.items():
                if not isinstance(data, dict):
                    continue
                if lemma in sections[section]:
                    logger.debug("lexicon_entry_overridden", section=section, lemma=lemma, file=path.name)
                sections[section][lemma] = build(lemma, data)

    meta["language"] = lang_code
    return LoadedEntries(lang_code=lang_code, meta=meta, sections=sections, files=files)


__all__ = [
    "SECTIONS",
    "LoadedEntries",
    "language_dir",
    "load_entries",
    "regular_s_form",
    "regular_past",
    "regular_ing",
]
