# app/core/domain/exceptions.py
from typing import Optional


class DomainError(Exception):
    """Base class for every error raised by the grammar engine."""


class LexiconError(DomainError):
    """Base exception for lexicon-related problems."""


class LexiconNotFound(LexiconError):
    """Raised when no lexicon directory/files exist for a language."""

    def __init__(self, lang_code: str, path: Optional[str] = None):
        self.lang_code = lang_code
        self.path = path
        where = f" (expected at {path})" if path else ""
        super().__init__(f"No lexicon found for language '{lang_code}'{where}.")


class ValencyError(DomainError):
    """
    Raised when a clause fills a role the verb does not license.

    Caught at the sentence boundary; the sentence renders as the
    incomplete marker instead of taking the whole workspace down.
    """

    def __init__(self, lemma: str, role: str, allowed: tuple = ()):
        self.lemma = lemma
        self.role = role
        self.allowed = tuple(allowed)
        super().__init__(
            f"Verb '{lemma}' does not take a '{role}' argument "
            f"(valency: {', '.join(self.allowed) or 'none'})."
        )


class NotationError(DomainError):
    """Raised when compact notation text cannot be parsed."""

    def __init__(self, message: str, position: Optional[int] = None):
        self.position = position
        if position is not None:
            message = f"{message} (at offset {position})"
        super().__init__(message)
