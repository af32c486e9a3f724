from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import field_validator

from ..config import Settings
from ..storage import DatabaseStorage
from .deps import (
    SESSION_USER_KEY,
    get_app_settings,
    get_storage,
    load_user,
    matches_admin_identity,
    require_claims,
)
from .schemas import CamelModel, MessageResponse, UserRead

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])


class LoginClaims(CamelModel):
    """
    Identity provider claim as stored in the session.
    Only accepted by the local login shim (DEV_LOGIN).
    """

    sub: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None

    @field_validator("sub", mode="before")
    @classmethod
    def _require_sub(cls, v):  # noqa: ANN001
        s = ("" if v is None else str(v)).strip()
        if not s:
            raise ValueError("sub is required")
        return s


def _user_read(user, cfg: Settings) -> UserRead:  # noqa: ANN001
    out = UserRead.model_validate(user)
    # Report what an admin-guarded route would decide, without persisting it.
    out.is_admin = bool(user.is_admin) or matches_admin_identity(user, cfg)
    return out


@router.get("/auth/user", response_model=UserRead)
def current_user(
    claims: Dict[str, Any] = Depends(require_claims),
    storage: DatabaseStorage = Depends(get_storage),
    cfg: Settings = Depends(get_app_settings),
) -> UserRead:
    return _user_read(load_user(storage, claims), cfg)


@router.post("/login", response_model=UserRead)
def login(
    payload: LoginClaims,
    request: Request,
    storage: DatabaseStorage = Depends(get_storage),
    cfg: Settings = Depends(get_app_settings),
) -> UserRead:
    if not cfg.dev_login_enabled:
        raise HTTPException(status_code=404, detail="Not found")

    user = storage.upsert_user(
        user_id=payload.sub,
        email=payload.email,
        first_name=payload.first_name,
        last_name=payload.last_name,
        profile_image_url=payload.profile_image_url,
    )
    request.session[SESSION_USER_KEY] = payload.model_dump(by_alias=False)
    logger.info("User %s logged in", user.id)
    return _user_read(user, cfg)


@router.post("/logout", response_model=MessageResponse)
def logout(request: Request) -> MessageResponse:
    request.session.clear()
    return MessageResponse(message="Logged out")
