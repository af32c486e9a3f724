from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlmodel import SQLModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    """
    Identity record mirrored from the external identity provider.

    Notes:
    - id is the provider's subject claim ("sub"), stored as a string.
    - is_admin is flipped on by the admin detection heuristic; never flipped off by the app.
    """

    __tablename__ = "users"

    id: str = Field(primary_key=True, max_length=255)

    email: Optional[str] = Field(default=None, index=True)
    first_name: Optional[str] = Field(default=None)
    last_name: Optional[str] = Field(default=None)
    profile_image_url: Optional[str] = Field(default=None)

    is_admin: bool = Field(default=False, index=True)

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def display_name(self) -> str:
        parts = [p for p in (self.first_name, self.last_name) if p]
        if parts:
            return " ".join(parts)
        return self.email or self.id
