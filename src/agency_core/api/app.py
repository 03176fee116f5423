"""
agency_core.api.app

FastAPI app factory for the agency core service.

Responsibilities:
- Build the FastAPI application and register routers/middleware.
- Initialize and dispose shared infrastructure (DB engine/session factory, drafter).
- Map core errors onto HTTP responses in one place.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from agency_core import __version__
from agency_core.api.routers.agency import router as agency_router
from agency_core.api.routers.auth import dev_router as dev_auth_router
from agency_core.api.routers.auth import router as auth_router
from agency_core.api.routers.creators import router as creators_router
from agency_core.api.routers.deals import router as deals_router
from agency_core.api.routers.drafts import router as drafts_router
from agency_core.api.routers.health import router as health_router
from agency_core.db.init_db import init_db
from agency_core.db.session import create_engine, create_sessionmaker
from agency_core.drafting_clients.openai_client import OpenAIEmailDrafter
from agency_core.errors import AgencyCoreError, StorageError, ValidationError
from agency_core.observability.logging import configure_logging, get_logger
from agency_core.observability.middleware import RequestContextMiddleware
from agency_core.services.drafting import EmailDrafter
from agency_core.settings import Settings, get_settings

log = get_logger(__name__)


def create_app(*, settings: Settings, drafter: EmailDrafter | None = None) -> FastAPI:
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        app.state.email_drafter = drafter or OpenAIEmailDrafter(settings=settings)
        if settings.env in ("dev", "test"):
            # Prod schema is managed by Alembic.
            await init_db(engine)
        try:
            yield
        finally:
            close = getattr(app.state.email_drafter, "aclose", None)
            if close is not None:
                await close()
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Talent Agency Core",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    # Route dependencies see the same Settings the app was built from.
    app.dependency_overrides[get_settings] = lambda: settings

    app.add_middleware(RequestContextMiddleware)
    _register_error_handlers(app)

    app.include_router(health_router, tags=["health"])
    app.include_router(auth_router)
    app.include_router(dev_auth_router)
    app.include_router(agency_router)
    app.include_router(creators_router)
    app.include_router(deals_router)
    app.include_router(drafts_router)
    return app


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(AgencyCoreError)
    async def _core_error(request: Request, exc: AgencyCoreError) -> JSONResponse:
        if exc.status_code >= 500:
            log.error("request_failed", error=exc.code, detail=exc.message)
        else:
            log.info("request_rejected", error=exc.code, status=exc.status_code)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def _request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        err = ValidationError(
            "Invalid request",
            errors=[
                {"loc": [str(p) for p in e["loc"]], "msg": e["msg"], "type": e["type"]}
                for e in exc.errors()
            ],
        )
        return JSONResponse(status_code=err.status_code, content=err.to_dict())

    @app.exception_handler(SQLAlchemyError)
    async def _storage_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        # Reads outside a unit of work can still surface raw driver errors.
        log.error("storage_failure", error=str(exc))
        err = StorageError()
        return JSONResponse(status_code=err.status_code, content=err.to_dict())


# --- Module Notes -----------------------------------------------------------
# Passing `drafter` swaps the AI collaborator (tests use a fake); every other
# dependency comes from `settings`.
