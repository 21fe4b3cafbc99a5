# app/adapters/api/routers/health.py
from typing import Any, Dict

from fastapi import APIRouter, Depends

from app.shared.config import settings
from app.adapters.api.dependencies import get_lexicon
from lexicon.index import LexiconIndex

router = APIRouter(tags=["System"])


@router.get("/health", summary="Liveness and lexicon status")
def health(lexicon: LexiconIndex = Depends(get_lexicon)) -> Dict[str, Any]:
    counts = lexicon.counts()
    return {
        "status": "ok",
        "app": settings.APP_NAME,
        "env": settings.APP_ENV.value,
        "lexicon_loaded": sum(counts.values()) > 0,
        "lexicon": {"lang": lexicon.lang_code, **counts},
    }
