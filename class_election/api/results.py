from __future__ import annotations

from fastapi import APIRouter, Depends

from ..storage import DatabaseStorage
from .deps import get_storage
from .schemas import CamelModel

router = APIRouter(prefix="/api/results", tags=["results"])


class CandidateTally(CamelModel):
    candidate_id: int
    votes: int


@router.get("", response_model=list[CandidateTally])
def get_results(storage: DatabaseStorage = Depends(get_storage)) -> list[CandidateTally]:
    return [CandidateTally(**row) for row in storage.get_results()]
