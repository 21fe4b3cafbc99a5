# nlg/api.py

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Any, Deque, Dict, List, Optional, Sequence, Type

import structlog

from app.adapters.legacy_log import merge_legacy_logs
from app.core.domain.models import SentenceNode
from app.shared.config import settings
from constructions.clause import ClauseOrchestrator
from constructions.japanese import JapaneseClauseOrchestrator
from lexicon.index import LexiconIndex, load_lexicon
from nlg.derivation import Derivation, DerivationDiff, DerivationTracker, diff
from semantics.notation import to_notation

logger = structlog.get_logger()

# Target language -> clause orchestrator
ORCHESTRATORS: Dict[str, Type[ClauseOrchestrator]] = {
    "en": ClauseOrchestrator,
    "ja": JapaneseClauseOrchestrator,
}


# ---------------------------------------------------------------------------
# Public data models
# ---------------------------------------------------------------------------


@dataclass
class RenderOptions:
    """
    Per-call rendering controls.

    Kept small on purpose; grammar behaviour lives in the engines.
    """

    include_derivations: bool = True
    # Replaces settings.INCOMPLETE_MARKER for sentences that fail
    incomplete_marker: Optional[str] = None
    # Key of ORCHESTRATORS
    target: str = "en"


@dataclass
class RenderResult:
    """
    Output of one workspace render: one surface string and one derivation
    per input sentence, in workspace order.
    """

    sentences: List[str]
    derivations: List[Derivation] = field(default_factory=list)

    @property
    def text(self) -> str:
        return " ".join(self.sentences)

    @property
    def logs(self) -> List[Dict[str, Any]]:
        """Flat `{type, rule, from, to, trigger}` entries for every sentence."""
        return merge_legacy_logs(self.derivations)

    def to_dict(self, include_derivations: bool = True) -> Dict[str, Any]:
        data: Dict[str, Any] = {"sentences": list(self.sentences), "logs": self.logs}
        data["derivations"] = [d.to_dict() for d in self.derivations] if include_derivations else []
        return data


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


class RenderSession:
    """
    Renders whole workspaces and keeps the most recent results for diffing.

    One session per editor. The lexicon is shared and read-only; each
    sentence gets its own `DerivationTracker`.
    """

    def __init__(
        self,
        lexicon: Optional[LexiconIndex] = None,
        *,
        orchestrator: Optional[ClauseOrchestrator] = None,
        history: Optional[int] = None,
    ) -> None:
        self.lexicon = lexicon if lexicon is not None else load_lexicon()
        self.orchestrator = orchestrator or ClauseOrchestrator(self.lexicon)
        self._orchestrators: Dict[str, ClauseOrchestrator] = {"en": self.orchestrator}
        self._history: Deque[RenderResult] = deque(maxlen=max(history or settings.DERIVATION_HISTORY, 2))

    # public API -------------------------------------------------------------

    def render(
        self,
        sentences: Sequence[SentenceNode],
        *,
        options: Optional[RenderOptions] = None,
    ) -> RenderResult:
        """Render every sentence; a failing sentence never affects the others."""
        options = options or RenderOptions()
        marker = options.incomplete_marker or settings.INCOMPLETE_MARKER
        orchestrator = self.orchestrator_for(options.target)

        texts: List[str] = []
        derivations: List[Derivation] = []
        for index, sentence in enumerate(sentences):
            text, derivation = self._render_one(orchestrator, index, sentence, marker)
            texts.append(text)
            derivations.append(derivation)

        result = RenderResult(sentences=texts, derivations=derivations)
        self._history.append(result)
        logger.debug("workspace_rendered", sentences=len(texts), target=options.target)
        return result

    def render_sentence(self, sentence: SentenceNode) -> RenderResult:
        return self.render([sentence])

    def orchestrator_for(self, target: str) -> ClauseOrchestrator:
        """The orchestrator for `target`, built on first use and then reused."""
        if target not in ORCHESTRATORS:
            raise ValueError(f"Unknown target language: {target!r}")
        if target not in self._orchestrators:
            self._orchestrators[target] = ORCHESTRATORS[target](self.lexicon)
        return self._orchestrators[target]

    @property
    def history(self) -> List[RenderResult]:
        """Retained results, oldest first."""
        return list(self._history)

    @property
    def current(self) -> Optional[RenderResult]:
        return self._history[-1] if self._history else None

    @property
    def previous(self) -> Optional[RenderResult]:
        return self._history[-2] if len(self._history) > 1 else None

    def diff(self, index: int = 0) -> Optional[DerivationDiff]:
        """
        Diff sentence `index` of the latest render against the render before.

        Returns None until two renders exist or when either render has no
        sentence at `index`.
        """
        current, previous = self.current, self.previous
        if current is None or previous is None:
            return None
        if index >= len(current.derivations) or index >= len(previous.derivations):
            return None
        return diff(current.derivations[index], previous.derivations[index])

    # internal helpers -------------------------------------------------------

    def _render_one(self, orchestrator: ClauseOrchestrator, index: int, sentence: SentenceNode, marker: str):
        input_text = ""
        try:
            input_text = to_notation(sentence)
            tracker = DerivationTracker(input_text=input_text)
            text = orchestrator.render_sentence(sentence, tracker)
            return text, tracker.derivation(text)
        except Exception as e:
            logger.warning(
                "sentence_render_failed",
                index=index,
                error=str(e),
                error_type=type(e).__name__,
            )
            return marker, Derivation(input=input_text, output=marker, steps=())


# ---------------------------------------------------------------------------
# Module-level convenience functions
# ---------------------------------------------------------------------------

_default_session: Optional[RenderSession] = None


def _session() -> RenderSession:
    global _default_session
    if _default_session is None:
        _default_session = RenderSession()
    return _default_session


def render(sentences: Sequence[SentenceNode], *, options: Optional[RenderOptions] = None) -> RenderResult:
    """
    Stateless convenience wrapper around `RenderSession.render`.

    Suitable for scripts, tests, and simple integrations.
    """
    return _session().render(sentences, options=options)


def render_sentence(sentence: SentenceNode) -> str:
    """Surface text of a single sentence."""
    return _session().render([sentence]).sentences[0]
