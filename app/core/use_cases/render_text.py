# app/core/use_cases/render_text.py
import structlog
from typing import Optional, Sequence

from app.core.domain.exceptions import DomainError
from app.core.domain.models import RenderRequest, RenderResponse, SentenceNode
from nlg.api import RenderOptions, RenderResult, RenderSession
from nlg.derivation import DerivationDiff, derivation_from_dict, diff

logger = structlog.get_logger()


class RenderText:
    """
    Use Case: Renders a workspace of sentence ASTs into text in the
    requested target language plus the derivation of every sentence.

    Responsibilities:
    1. Runs the render session (per-sentence failure isolation lives there).
    2. Shapes the result for the boundary (flat logs, optional derivations).
    3. Wraps unexpected infrastructure errors in a DomainError.
    """

    def __init__(self, session: RenderSession):
        self.session = session

    def execute(self, request: RenderRequest) -> RenderResponse:
        result = self.render(request.sentences, RenderOptions(target=request.target))
        data = result.to_dict(include_derivations=request.include_derivations)
        return RenderResponse(**data)

    def render(self, sentences: Sequence[SentenceNode], options: Optional[RenderOptions] = None) -> RenderResult:
        logger.info("render_started", sentences=len(sentences))
        try:
            result = self.session.render(sentences, options=options)
        except DomainError:
            raise
        except Exception as e:
            logger.error("render_failed", error=str(e), exc_info=True)
            raise DomainError(f"Unexpected render failure: {str(e)}") from e

        logger.info("render_success", sentences=len(result.sentences), steps=sum(len(d.steps) for d in result.derivations))
        return result


class DiffDerivations:
    """Use Case: compares two serialised derivations keyed by (type, rule)."""

    def execute(self, current: dict, previous: dict) -> DerivationDiff:
        try:
            return diff(derivation_from_dict(current), derivation_from_dict(previous))
        except (KeyError, TypeError, ValueError) as e:
            raise DomainError(f"Malformed derivation: {e}") from e
