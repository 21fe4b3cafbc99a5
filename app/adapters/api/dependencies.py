# app/adapters/api/dependencies.py
from fastapi import Depends
from dependency_injector.wiring import inject, Provide

from app.shared.container import Container

# Domain
from lexicon.index import LexiconIndex

# Use Cases
from app.core.use_cases.render_text import DiffDerivations, RenderText


# --- Shared resources ---

@inject
def get_lexicon(
    lexicon: LexiconIndex = Depends(Provide[Container.lexicon])
) -> LexiconIndex:
    """The process-wide, read-only lexicon."""
    return lexicon


# --- Use Case Injection ---

@inject
def get_render_text_use_case(
    use_case: RenderText = Depends(Provide[Container.render_text_use_case])
) -> RenderText:
    """A RenderText interactor with a fresh render session per request."""
    return use_case


@inject
def get_diff_use_case(
    use_case: DiffDerivations = Depends(Provide[Container.diff_derivations_use_case])
) -> DiffDerivations:
    return use_case
