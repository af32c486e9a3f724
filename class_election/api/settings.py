from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from ..models.user import User
from ..storage import DatabaseStorage
from .deps import get_storage, require_admin
from .schemas import PhaseBody

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/settings", tags=["settings"])


@router.get("/phase", response_model=PhaseBody)
def get_phase(storage: DatabaseStorage = Depends(get_storage)) -> PhaseBody:
    return PhaseBody(phase=storage.get_phase())


@router.post("/phase", response_model=PhaseBody)
def set_phase(
    payload: PhaseBody,
    admin: User = Depends(require_admin),
    storage: DatabaseStorage = Depends(get_storage),
) -> PhaseBody:
    """
    Switch the election phase. Any phase may follow any phase.
    """
    previous = storage.get_phase()
    phase = storage.set_phase(payload.phase)
    logger.info("Phase changed %s -> %s by %s", previous.value, phase.value, admin.id)
    return PhaseBody(phase=phase)
