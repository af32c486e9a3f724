from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlmodel import SQLModel, Field

from .candidate import Gender


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Vote(SQLModel, table=True):
    """
    One ballot slot cast by one identity.

    Notes:
    - user_id is the identity provider subject, not a FK (users may predate the users table row).
    - No unique constraint on (user_id, gender): the API checks has-voted before inserting.
    """

    __tablename__ = "votes"

    id: Optional[int] = Field(default=None, primary_key=True)

    user_id: str = Field(index=True)
    candidate_id: int = Field(foreign_key="candidates.id", index=True)
    gender: Gender = Field(index=True)

    created_at: datetime = Field(default_factory=utcnow)
