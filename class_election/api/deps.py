from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, Request
from sqlmodel import Session

from ..config import Settings, settings as default_settings
from ..database import get_db
from ..models.setting import Phase
from ..models.user import User
from ..storage import DatabaseStorage

logger = logging.getLogger(__name__)

# Key under which the identity provider claim lives in the session cookie.
SESSION_USER_KEY = "user"


def get_app_settings(request: Request) -> Settings:
    return getattr(request.app.state, "settings", None) or default_settings


def get_storage(db: Session = Depends(get_db)) -> DatabaseStorage:
    return DatabaseStorage(db)


def get_claims(request: Request) -> Optional[Dict[str, Any]]:
    """
    Authenticated user claim from the session, or None.
    A claim without a subject is treated as no session.
    """
    claims = request.session.get(SESSION_USER_KEY)
    if not isinstance(claims, dict) or not claims.get("sub"):
        return None
    return claims


def require_claims(claims: Optional[Dict[str, Any]] = Depends(get_claims)) -> Dict[str, Any]:
    if claims is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return claims


_CLAIM_FIELDS = ("email", "first_name", "last_name", "profile_image_url")


def load_user(storage: DatabaseStorage, claims: Dict[str, Any]) -> User:
    """
    Users row for the claim. Sessions created by an external provider may not
    have gone through /api/login, so the claim is mirrored on first sight and
    again whenever the provider reports different profile fields.
    """
    user = storage.get_user(str(claims["sub"]))
    if user is not None and all(getattr(user, f) == claims.get(f) for f in _CLAIM_FIELDS):
        return user
    return storage.upsert_user(
        user_id=str(claims["sub"]),
        email=claims.get("email"),
        first_name=claims.get("first_name"),
        last_name=claims.get("last_name"),
        profile_image_url=claims.get("profile_image_url"),
    )


def matches_admin_identity(user: User, cfg: Settings) -> bool:
    """
    Admin detection: explicit id allow-list, else case-insensitive substring
    of ADMIN_NAME_MATCH in first name or email.
    """
    if user.id in cfg.admin_user_ids:
        return True

    needle = (cfg.admin_name_match or "").strip().lower()
    if not needle:
        return False

    first_name = (user.first_name or "").lower()
    email = (user.email or "").lower()
    return needle in first_name or needle in email


def require_admin(
    claims: Dict[str, Any] = Depends(require_claims),
    storage: DatabaseStorage = Depends(get_storage),
    cfg: Settings = Depends(get_app_settings),
) -> User:
    user = load_user(storage, claims)

    if matches_admin_identity(user, cfg) and not user.is_admin:
        storage.make_admin(user.id)
        user.is_admin = True

    if not user.is_admin:
        logger.info("Forbidden admin request from user %s", user.id)
        raise HTTPException(status_code=403, detail="Forbidden")
    return user


def ensure_phase(storage: DatabaseStorage, cfg: Settings, expected: Phase, action: str) -> None:
    """
    Reject a mutation made outside its phase (when phase gates are enforced).
    """
    if not cfg.enforce_phase_gates:
        return
    current = storage.get_phase()
    if current != expected:
        raise HTTPException(
            status_code=400,
            detail=f"{action} is only allowed during the {expected.value} phase (current phase: {current.value})",
        )
