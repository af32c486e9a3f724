from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from .config import Settings, settings as default_settings
from .database import get_engine, init_db

from .api.auth import router as auth_router
from .api.candidates import router as candidates_router
from .api.results import router as results_router
from .api.settings import router as settings_router
from .api.votes import router as votes_router

logger = logging.getLogger(__name__)


def _first_validation_message(exc: RequestValidationError) -> Dict[str, Any]:
    """
    Collapse pydantic's error list into the {message, field} envelope.
    Only the first error is reported.
    """
    errors = exc.errors()
    if not errors:
        return {"message": "Invalid request"}

    first = errors[0]
    msg = str(first.get("msg") or "Invalid request")
    if msg.startswith("Value error, "):
        msg = msg[len("Value error, "):]

    loc = [str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path")]
    payload: Dict[str, Any] = {"message": msg}
    if loc:
        payload["field"] = ".".join(loc)
    return payload


def create_app(
    app_settings: Optional[Settings] = None,
    engine: Optional[Engine] = None,
) -> FastAPI:
    cfg = app_settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Creates tables for all registered SQLModel models (idempotent)
        db_engine = app.state.engine or get_engine()
        init_db(db_engine)
        if cfg.seed_candidates:
            from .scripts.seed_candidates import seed_candidates

            created = seed_candidates(db_engine)
            if created:
                logger.info("Seeded %s demo candidates", created)
        yield

    app = FastAPI(
        title="Class Election API",
        version=cfg.app_version,
        lifespan=lifespan,
    )
    app.state.settings = cfg
    # None means the shared engine from settings, built on first use
    app.state.engine = engine

    # --- Middleware ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(
        SessionMiddleware,
        secret_key=cfg.session_secret,
        session_cookie=cfg.session_cookie_name,
        max_age=cfg.session_max_age,
        same_site="lax",
        https_only=cfg.is_prod,
    )

    # --- Error envelope: every error body is {"message": ...} ---
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content=_first_validation_message(exc))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"message": "Internal server error"})

    # --- Health / meta ---
    @app.get("/health", tags=["meta"])
    def health() -> Dict[str, Any]:
        return {"ok": True, "env": cfg.env}

    @app.get("/version", tags=["meta"])
    def version() -> Dict[str, Any]:
        return {"version": cfg.app_version}

    # --- API routers ---
    app.include_router(auth_router)
    app.include_router(candidates_router)
    app.include_router(votes_router)
    app.include_router(settings_router)
    app.include_router(results_router)

    return app


app = create_app()


def run() -> None:
    logging.basicConfig(level=getattr(logging, str(default_settings.log_level).upper(), logging.INFO))
    import uvicorn

    # reload should be True in local dev, False in prod.
    uvicorn.run(
        "class_election.main:app",
        host=default_settings.host,
        port=int(default_settings.port),
        reload=bool(default_settings.reload),
    )
