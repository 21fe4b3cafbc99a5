"""
lexicon
=======

JSON-backed English lexicon: typed entries, loader and lookup index.

    from lexicon import load_lexicon

    lex = load_lexicon("en")
    lex.verb("eat").forms.past   # "ate"
"""

from .index import LexiconIndex, clear_cache, load_lexicon

__all__ = ["LexiconIndex", "load_lexicon", "clear_cache"]
