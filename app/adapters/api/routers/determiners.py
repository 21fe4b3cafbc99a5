# app/adapters/api/routers/determiners.py
"""
Determiner slot editing over HTTP.

The resolver functions are pure, so the client sends the current
selections with every call and keeps the returned ones. Reset reasons
come back with the commit; the client decides how long to show them
(settings.RESET_REASON_TTL_SEC is the reference window).
"""
from typing import List, Optional

from fastapi import APIRouter, status
from pydantic import BaseModel, Field

from app.core.domain.determiners import (
    NounType,
    Selections,
    Slot,
    apply_noun_type,
    available_options,
    commit,
)
from app.shared.config import settings

router = APIRouter(
    prefix="/determiners",
    tags=["Determiners"],
)


# --- Schemas ---

class SelectionsModel(BaseModel):
    pre: Optional[str] = None
    central: Optional[str] = None
    post: Optional[str] = None

    def to_domain(self) -> Selections:
        return Selections(pre=self.pre, central=self.central, post=self.post)

    @classmethod
    def from_domain(cls, selections: Selections) -> "SelectionsModel":
        return cls(**selections.as_dict())


class OptionsRequest(BaseModel):
    slot: Slot
    selections: SelectionsModel = Field(default_factory=SelectionsModel)
    noun_type: Optional[NounType] = None


class OptionModel(BaseModel):
    value: Optional[str]
    label: str
    enabled: bool
    reason: Optional[str] = None


class CommitRequest(BaseModel):
    slot: Slot
    value: Optional[str] = None
    selections: SelectionsModel = Field(default_factory=SelectionsModel)
    # Values the head noun rules out are rejected; the rest is re-validated after the commit
    noun_type: Optional[NounType] = None


class ResetModel(BaseModel):
    slot: Slot
    previous: str
    reason: str


class CommitResponse(BaseModel):
    accepted: bool
    selections: SelectionsModel
    resets: List[ResetModel] = Field(default_factory=list)
    reason_ttl_sec: float = settings.RESET_REASON_TTL_SEC


# --- Routes ---

@router.post(
    "/options",
    response_model=List[OptionModel],
    status_code=status.HTTP_200_OK,
    summary="Options for one slot, with disabled entries and reasons",
)
def options(request: OptionsRequest) -> List[OptionModel]:
    return [
        OptionModel(value=o.value, label=o.label, enabled=o.enabled, reason=o.reason)
        for o in available_options(request.slot, request.selections.to_domain(), request.noun_type)
    ]


@router.post(
    "/commit",
    response_model=CommitResponse,
    status_code=status.HTTP_200_OK,
    summary="Commit a value; invalid values are rejected without changes",
)
def commit_value(request: CommitRequest) -> CommitResponse:
    result = commit(request.slot, request.value, request.selections.to_domain(), request.noun_type)
    resets = list(result.resets)
    selections = result.selections

    if result.accepted and request.noun_type is not None:
        typed = apply_noun_type(request.noun_type, selections)
        selections = typed.selections
        resets.extend(typed.resets)

    return CommitResponse(
        accepted=result.accepted,
        selections=SelectionsModel.from_domain(selections),
        resets=[ResetModel(slot=r.slot, previous=r.previous, reason=r.reason) for r in resets],
    )
