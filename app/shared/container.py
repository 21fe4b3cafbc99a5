# app/shared/container.py
from dependency_injector import containers, providers

from app.shared.config import settings

# --- Engines ---
from constructions.clause import ClauseOrchestrator
from lexicon.index import load_lexicon
from nlg.api import RenderSession

# --- Use Cases ---
from app.core.use_cases.render_text import DiffDerivations, RenderText


class Container(containers.DeclarativeContainer):
    """
    Dependency Injection Container.
    Connects the lexicon and the engines to the use cases.
    """

    # 1. Wiring Configuration
    wiring_config = containers.WiringConfiguration(
        modules=[
            "app.adapters.api.routers.render",
            "app.adapters.api.routers.determiners",
            "app.adapters.api.routers.health",
            "app.adapters.api.dependencies",
        ]
    )

    # 2. Shared, read-only resources
    # Loaded once per process and never mutated.
    lexicon = providers.Singleton(
        load_lexicon,
        lang_code=settings.LEXICON_LANG,
    )

    orchestrator = providers.Singleton(ClauseOrchestrator, lexicon=lexicon)

    # 3. Per-editor state
    render_session = providers.Factory(
        RenderSession,
        lexicon=lexicon,
        orchestrator=orchestrator,
        history=settings.DERIVATION_HISTORY,
    )

    # 4. Use Cases (Application Logic)
    render_text_use_case = providers.Factory(
        RenderText,
        session=render_session,
    )

    diff_derivations_use_case = providers.Factory(DiffDerivations)


# Global Container Instance
container = Container()
