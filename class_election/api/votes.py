from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException

from ..config import Settings
from ..models.setting import Phase
from ..storage import DatabaseStorage
from .deps import ensure_phase, get_app_settings, get_claims, get_storage, require_claims
from .schemas import CamelModel, MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/votes", tags=["votes"])


class VoteRequest(CamelModel):
    male_candidate_id: int
    female_candidate_id: int


class VoteStatus(CamelModel):
    has_voted: bool


@router.get("/status", response_model=VoteStatus)
def vote_status(
    claims: Optional[Dict[str, Any]] = Depends(get_claims),
    storage: DatabaseStorage = Depends(get_storage),
) -> VoteStatus:
    if claims is None:
        return VoteStatus(has_voted=False)
    return VoteStatus(has_voted=storage.has_user_voted(str(claims["sub"])))


@router.post("", response_model=MessageResponse)
def submit_vote(
    payload: VoteRequest,
    claims: Dict[str, Any] = Depends(require_claims),
    storage: DatabaseStorage = Depends(get_storage),
    cfg: Settings = Depends(get_app_settings),
) -> MessageResponse:
    """
    Cast a full ballot (one male + one female candidate).

    The already-voted check happens here, not in storage. Candidate ids are
    taken as given: no approval or gender check on the referenced rows.
    """
    user_id = str(claims["sub"])

    ensure_phase(storage, cfg, Phase.VOTING, "Voting")

    if storage.has_user_voted(user_id):
        raise HTTPException(status_code=400, detail="Already voted")

    try:
        storage.submit_vote(user_id, payload.male_candidate_id, payload.female_candidate_id)
    except Exception:
        logger.exception("Ballot for user %s failed", user_id)
        raise HTTPException(status_code=500, detail="Failed to submit vote")

    logger.info("Ballot recorded for user %s", user_id)
    return MessageResponse(message="Vote submitted")
