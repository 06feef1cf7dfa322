from __future__ import annotations

import logging
from typing import Callable

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from sqlalchemy import text as sql_text
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from survey_tool.config import AppConfig, load_config
from survey_tool.db.base import get_engine
from survey_tool.db.migrations_runner import apply_migrations
from survey_tool.http.problem import (
    handle_domain_error,
    handle_http_exception,
    handle_request_validation_error,
    handle_unexpected_error,
)
from survey_tool.http.request_id import RequestIdMiddleware
from survey_tool.logging_setup import configure_logging
from survey_tool.logic.errors import SurveyToolError
from survey_tool.logic.seed import ensure_seeded
from survey_tool.middleware.cors import apply_cors
from survey_tool.routes import api_router

logger = logging.getLogger(__name__)


def _health_check() -> Callable[[], dict]:
    def check() -> dict:
        try:
            with get_engine().connect() as conn:
                conn.execute(sql_text("SELECT 1")).fetchone()
            return {"status": "ok", "db": True}
        except SQLAlchemyError as e:
            logger.error("Health DB check failed", exc_info=True)
            return {"status": "degraded", "db": False, "reason": str(e)}

    return check


def create_app(config: AppConfig | None = None) -> FastAPI:
    configure_logging()
    cfg = config or load_config()

    app = FastAPI(
        title="Survey Tool API",
        version="1.0.0",
        description="Author branching surveys with weighted options and score submitted responses.",
    )
    app.state.config = cfg

    app.add_exception_handler(SurveyToolError, handle_domain_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    app.add_middleware(RequestIdMiddleware)
    apply_cors(app, origins=cfg.cors.allow_origins)

    # Bind the shared engine to the configured DSN before any repository call
    engine = get_engine(cfg.database.dsn)

    # Apply migrations and seed on startup to avoid import-time side effects
    @app.on_event("startup")
    def _startup_bootstrap() -> None:
        if cfg.migrations.auto_apply:
            applied = apply_migrations(engine, migrations_dir=cfg.migrations.directory)
            logger.info("startup_migrations applied=%s", applied)
        else:
            logger.info("AUTO_APPLY_MIGRATIONS disabled; skipping migrations at startup")
        if cfg.seed.enabled:
            ensure_seeded()

    app.include_router(api_router, prefix="/api/v1")

    health_check = _health_check()

    @app.get("/health", include_in_schema=False)
    def health():  # pragma: no cover - trivial
        return health_check()

    return app


# Intentionally do not instantiate the app at import time to prevent side effects.
