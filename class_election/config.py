from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


def _split_csv(raw: Any, default: List[str]) -> List[str]:
    """
    Normalize list-ish env values.

    Supports:
      - list[str] (already parsed)
      - "*" or a single value
      - comma-separated string: "https://a.com, https://b.com"
    """
    if raw is None:
        return list(default)

    if isinstance(raw, list):
        items = [str(x).strip() for x in raw]
        items = [x for x in items if x]
        return items or list(default)

    s = str(raw).strip()
    if not s:
        return list(default)

    parts = [p.strip() for p in s.split(",")]
    parts = [p for p in parts if p]
    return parts or list(default)


class Settings(BaseSettings):
    """
    Central app settings (backend + bundled client).

    - Env var names are the aliases below (case-insensitive, .env supported)
    - User-provided values are normalized by the validators
    - resolved_database_url is the single DB URL source of truth
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
    )

    # App identity
    env: str = Field(default="local", alias="APP_ENV")
    app_name: str = Field(default="class-election", alias="APP_NAME")
    app_version: str = Field(default="1.0.0", alias="APP_VERSION")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Server runtime (uvicorn)
    host: str = Field(default="127.0.0.1", alias="HOST")
    port: int = Field(default=8000, alias="PORT")
    reload: bool = Field(default=False, alias="RELOAD")

    cors_allow_origins: Annotated[list[str], NoDecode] = Field(default_factory=lambda: ["*"], alias="CORS_ALLOW_ORIGINS")

    # Preferred: a real SQLAlchemy URL (SQLite or Postgres)
    database_url: str = Field(default="", alias="DATABASE_URL")
    db_path: str = Field(default="./data/election.sqlite", alias="DB_PATH")

    # Session cookie carrying the identity provider claim
    session_secret: str = Field(default="change-me-in-production", alias="SESSION_SECRET")
    session_cookie_name: str = Field(default="election_session", alias="SESSION_COOKIE_NAME")
    session_max_age: int = Field(default=7 * 24 * 3600, alias="SESSION_MAX_AGE")

    # Admin detection: substring on first name / email, plus explicit ids
    admin_name_match: str = Field(default="johnny", alias="ADMIN_NAME_MATCH")
    admin_user_ids: Annotated[list[str], NoDecode] = Field(default_factory=list, alias="ADMIN_USER_IDS")

    # Election behavior
    enforce_phase_gates: bool = Field(default=True, alias="ENFORCE_PHASE_GATES")
    seed_candidates: bool = Field(default=True, alias="SEED_CANDIDATES")

    # Local identity shim (POST /api/login). Opt-in, never on in production.
    dev_login: bool = Field(default=False, alias="DEV_LOGIN")

    # Bundled API client
    client_api_base: str = Field(default="http://127.0.0.1:8000", alias="CLIENT_API_BASE")
    client_timeout_s: float = Field(default=20.0, alias="CLIENT_TIMEOUT")

    # -------------------------
    # Validators / normalizers
    # -------------------------

    @field_validator("log_level", mode="before")
    @classmethod
    def _norm_log_level(cls, v: Any) -> str:
        s = ("" if v is None else str(v)).strip().upper()
        return s or "INFO"

    @field_validator("cors_allow_origins", mode="before")
    @classmethod
    def _norm_cors_allow_origins(cls, v: Any) -> list[str]:
        return _split_csv(v, ["*"])

    @field_validator("admin_user_ids", mode="before")
    @classmethod
    def _norm_admin_user_ids(cls, v: Any) -> list[str]:
        return _split_csv(v, [])

    @field_validator("admin_name_match", mode="before")
    @classmethod
    def _norm_admin_name_match(cls, v: Any) -> str:
        return ("" if v is None else str(v)).strip().lower()

    @field_validator("host", mode="before")
    @classmethod
    def _norm_host(cls, v: Any) -> str:
        s = ("" if v is None else str(v)).strip()
        return s or "127.0.0.1"

    @field_validator("client_api_base", mode="before")
    @classmethod
    def _norm_client_api_base(cls, v: Any) -> str:
        s = ("" if v is None else str(v)).strip().rstrip("/")
        return s or "http://127.0.0.1:8000"

    @field_validator("database_url", mode="before")
    @classmethod
    def _norm_database_url(cls, v: Any) -> str:
        return ("" if v is None else str(v)).strip()

    @field_validator("db_path", mode="before")
    @classmethod
    def _norm_db_path(cls, v: Any) -> str:
        s = ("" if v is None else str(v)).strip()
        return s or "./data/election.sqlite"

    # -------------------------
    # Derived helpers
    # -------------------------

    @property
    def is_prod(self) -> bool:
        return str(self.env).strip().lower() in ("prod", "production")

    @property
    def dev_login_enabled(self) -> bool:
        return bool(self.dev_login) and not self.is_prod

    @property
    def resolved_database_url(self) -> str:
        """
        Priority:
        1) DATABASE_URL if provided
        2) Build sqlite:/// URL from DB_PATH (file path or full sqlite URL)
        """
        if self.database_url:
            return self.database_url

        path = (self.db_path or "").strip() or "./data/election.sqlite"

        if path.startswith("sqlite:"):
            return path

        p = Path(path)
        if not p.is_absolute():
            if str(p).startswith("./"):
                return f"sqlite:///{p.as_posix()}"
            return f"sqlite:///./{p.as_posix()}"

        # Absolute path needs 4 slashes after scheme (sqlite:////abs/path)
        return f"sqlite:////{p.as_posix().lstrip('/')}"


settings = Settings()
