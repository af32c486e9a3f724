from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from sqlmodel import SQLModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Gender(str, Enum):
    """
    Ballot slot a candidate runs in. Each voter picks one of each.
    """

    MALE = "male"
    FEMALE = "female"


class Candidate(SQLModel, table=True):
    """
    A student running for class representative.

    Notes:
    - Self-registration always creates approved=False, votes=0.
    - votes is a denormalized tally maintained by the ballot transaction.
    """

    __tablename__ = "candidates"

    id: Optional[int] = Field(default=None, primary_key=True)

    name: str = Field(index=True)
    nickname: str
    bio: str
    # "Why I should be representative"
    platform: str
    photo_url: Optional[str] = Field(default=None)

    gender: Gender = Field(index=True)

    approved: bool = Field(default=False, index=True)
    votes: int = Field(default=0)

    created_at: datetime = Field(default_factory=utcnow)
