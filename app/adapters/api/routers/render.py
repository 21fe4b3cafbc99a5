# app/adapters/api/routers/render.py
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException, status
import structlog

from app.core.domain.models import NotationRenderRequest, RenderRequest, RenderResponse
from app.core.domain.exceptions import DomainError
from app.core.use_cases.render_text import DiffDerivations, RenderText
from app.adapters.api.dependencies import get_diff_use_case, get_render_text_use_case
from semantics.notation import parse_notation

logger = structlog.get_logger()

router = APIRouter(
    prefix="/render",
    tags=["Render"],
)


@router.post(
    "",
    response_model=RenderResponse,
    status_code=status.HTTP_200_OK,
    summary="Render a workspace of sentence ASTs (English, or Japanese word order)",
)
def render_workspace(
    request: RenderRequest,
    use_case: RenderText = Depends(get_render_text_use_case),
):
    """
    Renders every sentence and returns the surface strings, the flat log
    entries and (optionally) the structured derivations.

    A sentence that fails renders as the incomplete marker; the others are
    unaffected.
    """
    try:
        return use_case.execute(request)
    except DomainError as e:
        logger.error("render_request_failed", error=str(e))
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.post(
    "/diff",
    status_code=status.HTTP_200_OK,
    summary="Compare two derivations step by step",
)
def diff_derivations(
    current: Dict[str, Any] = Body(..., description="Derivation of the latest render"),
    previous: Dict[str, Any] = Body(..., description="Derivation of the render before"),
    use_case: DiffDerivations = Depends(get_diff_use_case),
) -> Dict[str, Any]:
    """Steps are matched by (type, rule); each is added, unchanged, changed or removed."""
    try:
        return use_case.execute(current, previous).to_dict()
    except DomainError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))


@router.post(
    "/notation",
    response_model=RenderResponse,
    status_code=status.HTTP_200_OK,
    summary="Render sentences written in compact notation",
)
def render_notation(
    request: NotationRenderRequest,
    use_case: RenderText = Depends(get_render_text_use_case),
):
    """Malformed notation is rejected with 422 before anything renders."""
    sentences = [parse_notation(text) for text in request.sentences]
    return use_case.execute(
        RenderRequest(sentences=sentences, include_derivations=request.include_derivations, target=request.target)
    )
