"""
FastAPI application: REST adapter for the settings menu agent.

Usage:
    python run_api.py

Or directly:
    uvicorn adapters.rest.app:app --host 0.0.0.0 --port 8000 --reload
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from adapters.rest.routers import agent, menus
from domain.exceptions import (
    CompletionError,
    CompletionTimeoutError,
    DomainError,
    SchemaViolationError,
    ToolExecutionError,
    ToolNotFoundError,
    ToolPermissionError,
)
from factory import ServiceFactory
from infrastructure.config import Settings
from infrastructure.logging_setup import configure_logging

logger = logging.getLogger(__name__)

__version__ = "0.1.0"

# Most specific first.
_STATUS_BY_ERROR: tuple[tuple[type[DomainError], int], ...] = (
    (ToolNotFoundError, 400),
    (ToolPermissionError, 403),
    (SchemaViolationError, 422),
    (CompletionTimeoutError, 504),
    (CompletionError, 502),
    (ToolExecutionError, 502),
)


def status_for(error: DomainError) -> int:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status
    return 500


def create_app(factory: ServiceFactory | None = None) -> FastAPI:
    """Build the app. Pass a factory to skip environment-based wiring."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if factory is None:
            config = Settings.from_env()
            configure_logging(config.log_level)
            app.state.factory = ServiceFactory(config)
        else:
            app.state.factory = factory
        yield

    app = FastAPI(
        title="Settings Menu Agent",
        version=__version__,
        description="Tool-dispatch agent with role-aware settings menu synthesis.",
        lifespan=lifespan,
    )

    # CORS is permissive for development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError):
        status = status_for(exc)
        logger.warning("Request %s failed (%d): %s", request.url.path, status, exc)
        return JSONResponse(
            status_code=status,
            content={"error": type(exc).__name__, "detail": str(exc)},
        )

    app.include_router(agent.router)
    app.include_router(menus.router)

    @app.get("/health", tags=["health"])
    async def health():
        return {"status": "ok", "version": __version__}

    return app


app = create_app()
