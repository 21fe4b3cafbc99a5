# tests/conftest.py
import pytest

from utils.logging_setup import init_logging

from app.shared.container import Container
from constructions.clause import ClauseOrchestrator
from lexicon.index import LexiconIndex, clear_cache, load_lexicon
from morphology.conjugation import ConjugationEngine
from constructions.noun_phrase import NounPhraseRenderer
from nlg.api import RenderSession
from nlg.derivation import DerivationTracker


@pytest.fixture(scope="session", autouse=True)
def _logging() -> None:
    """Configure structlog once, before any test captures stderr."""
    init_logging()


@pytest.fixture(scope="session")
def lexicon() -> LexiconIndex:
    """The real English lexicon from data/lexicon/en, loaded once."""
    clear_cache()
    return load_lexicon("en")


@pytest.fixture
def tracker() -> DerivationTracker:
    """A fresh accumulator, as every render gets."""
    return DerivationTracker(input_text="test")


@pytest.fixture
def conjugation(lexicon) -> ConjugationEngine:
    return ConjugationEngine(lexicon)


@pytest.fixture
def noun_phrases(lexicon) -> NounPhraseRenderer:
    return NounPhraseRenderer(lexicon)


@pytest.fixture
def orchestrator(lexicon) -> ClauseOrchestrator:
    return ClauseOrchestrator(lexicon)


@pytest.fixture
def session(lexicon, orchestrator) -> RenderSession:
    return RenderSession(lexicon, orchestrator=orchestrator)


@pytest.fixture
def render(session):
    """Render one sentence and return its text."""

    def _render(sentence) -> str:
        return session.render([sentence]).sentences[0]

    return _render


@pytest.fixture(scope="function")
def container(lexicon):
    """
    Sets up the Dependency Injection Container for testing.
    The lexicon provider is overridden with the session-wide instance.
    """
    container = Container()
    container.lexicon.override(lexicon)

    yield container

    # Clean up overrides after test
    container.lexicon.reset_override()
