from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import field_validator
from sqlalchemy.exc import SQLAlchemyError

from ..config import Settings
from ..models.candidate import Candidate, Gender
from ..models.setting import Phase
from ..models.user import User
from ..storage import DatabaseStorage
from .deps import ensure_phase, get_app_settings, get_storage, require_admin, require_claims
from .schemas import CamelModel, CandidateRead

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/candidates", tags=["candidates"])


# -------------------------
# Schemas (do NOT use DB model as input)
# -------------------------

class CandidateCreate(CamelModel):
    """
    Self-registration payload. approved/votes/id/createdAt are not accepted
    from clients; unknown keys are ignored.
    """

    name: str
    nickname: str
    bio: str
    platform: str
    photo_url: Optional[str] = None
    gender: Gender

    @field_validator("name", "nickname", "bio", "platform", mode="before")
    @classmethod
    def _require_text(cls, v, info):  # noqa: ANN001
        s = ("" if v is None else str(v)).strip()
        if not s:
            raise ValueError(f"{info.field_name} is required")
        return s

    @field_validator("photo_url", mode="before")
    @classmethod
    def _blank_photo_is_none(cls, v):  # noqa: ANN001
        if v is None:
            return None
        s = str(v).strip()
        return s or None


def _to_read(candidate: Candidate) -> CandidateRead:
    return CandidateRead.model_validate(candidate)


# -------------------------
# Routes
# -------------------------

@router.get("", response_model=list[CandidateRead])
def list_candidates(storage: DatabaseStorage = Depends(get_storage)) -> list[CandidateRead]:
    """
    All candidates (approved or not), ordered by name.
    """
    return [_to_read(c) for c in storage.get_candidates()]


@router.post("", response_model=CandidateRead, status_code=201)
def create_candidate(
    payload: CandidateCreate,
    claims: dict = Depends(require_claims),
    storage: DatabaseStorage = Depends(get_storage),
    cfg: Settings = Depends(get_app_settings),
) -> CandidateRead:
    ensure_phase(storage, cfg, Phase.REGISTRATION, "Candidate registration")

    candidate = storage.create_candidate(
        name=payload.name,
        nickname=payload.nickname,
        bio=payload.bio,
        platform=payload.platform,
        photo_url=payload.photo_url,
        gender=payload.gender,
    )
    logger.info("Candidate %s registered by user %s", candidate.id, claims.get("sub"))
    return _to_read(candidate)


@router.patch("/{candidate_id}/approve", response_model=CandidateRead)
def approve_candidate(
    candidate_id: int,
    admin: User = Depends(require_admin),
    storage: DatabaseStorage = Depends(get_storage),
) -> CandidateRead:
    candidate = storage.approve_candidate(candidate_id)
    if candidate is None:
        raise HTTPException(status_code=404, detail="Candidate not found")
    logger.info("Candidate %s approved by %s", candidate_id, admin.id)
    return _to_read(candidate)


@router.delete("/{candidate_id}", status_code=204)
def delete_candidate(
    candidate_id: int,
    admin: User = Depends(require_admin),
    storage: DatabaseStorage = Depends(get_storage),
) -> Response:
    """
    Remove a candidate. Deleting a candidate that already received votes
    fails on the votes foreign key (no cascade) and answers 500.
    """
    try:
        deleted = storage.delete_candidate(candidate_id)
    except SQLAlchemyError:
        logger.exception("Failed to delete candidate %s", candidate_id)
        raise HTTPException(status_code=500, detail="Failed to delete candidate")

    if deleted:
        logger.info("Candidate %s deleted by %s", candidate_id, admin.id)
    return Response(status_code=204)
