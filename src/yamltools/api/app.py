"""FastAPI application factory for yamltools."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from yamltools import __version__
from yamltools.api.deps import init_document_service, reset_document_service
from yamltools.api.middleware import RequestBodyLimitMiddleware, RequestTimingMiddleware
from yamltools.api.routers import documents, reference
from yamltools.api.schemas import HealthResponse
from yamltools.service.document_service import DocumentService
from yamltools.settings import Settings


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Install the DocumentService for the lifetime of the application."""
    settings: Settings = app.state.settings
    init_document_service(DocumentService.from_settings(settings))
    try:
        yield
    finally:
        reset_document_service()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if settings is None:
        settings = Settings()

    app = FastAPI(
        title="yamltools",
        description="Validates, lints, formats, and converts YAML documents.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Middleware
    app.add_middleware(RequestBodyLimitMiddleware, max_body=settings.max_request_body)
    app.add_middleware(RequestTimingMiddleware)

    app.include_router(documents.router, prefix="/documents", tags=["documents"])
    app.include_router(reference.router, prefix="/reference", tags=["reference"])

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", version=__version__)

    return app


def main() -> None:
    """Run the REST API server using settings from environment / .env file."""
    settings = Settings()

    logging.basicConfig(level=settings.log_level.upper())
    logger = logging.getLogger("yamltools.api")
    logger.info(
        "yamltools API Server v%s starting (host=%s, port=%d, engine=%s)",
        __version__, settings.api_server_host, settings.effective_port, settings.engine,
    )

    uvicorn.run(
        "yamltools.api.app:create_app",
        factory=True,
        host=settings.api_server_host,
        port=settings.effective_port,
        log_level=settings.log_level.lower(),
    )
