from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ..models.candidate import Gender
from ..models.setting import Phase


class CamelModel(BaseModel):
    """
    Wire format is camelCase; Python attributes stay snake_case.
    Accepts either spelling on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(CamelModel):
    message: str


class CandidateRead(CamelModel):
    id: int
    name: str
    nickname: str
    bio: str
    platform: str
    photo_url: Optional[str] = None
    gender: Gender
    approved: bool
    votes: int
    created_at: Optional[datetime] = None


class UserRead(CamelModel):
    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    is_admin: bool = False
    created_at: Optional[datetime] = None


class PhaseBody(CamelModel):
    phase: Phase
