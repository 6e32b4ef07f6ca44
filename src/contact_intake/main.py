"""
FastAPI application entry point.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

from contact_intake.config import Settings, get_settings
from contact_intake.contacts.gateway import StorageGateway
from contact_intake.contacts.router import router as contacts_router
from contact_intake.shared.database import DatabaseManager, create_database_if_missing
from contact_intake.shared.exceptions import (
    ImportInterruptedError,
    InputSourceError,
    SchemaError,
    StorageError,
    ValidationError,
)
from contact_intake.shared.logging import get_logger, setup_logging
from contact_intake.shared.middleware import (
    RequestContextMiddleware,
    SecurityHeadersMiddleware,
)

logger = get_logger(__name__)


async def _provision(settings: Settings, gateway: StorageGateway) -> None:
    """Startup bootstrap. Failures are logged; requests retry the table check."""
    if settings.db_create_database:
        try:
            await create_database_if_missing(settings.sqlalchemy_url)
        except (SQLAlchemyError, OSError):
            logger.exception("Database bootstrap failed")

    try:
        await gateway.ensure_schema()
    except SchemaError:
        logger.exception("Error creating table at startup")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings: Settings = app.state.settings
    setup_logging(settings.log_level)

    logger.info("Application starting", extra={"env": settings.app_env, "port": settings.port})

    database = DatabaseManager.from_settings(settings)
    gateway = StorageGateway(database)
    app.state.database = database
    app.state.gateway = gateway

    await _provision(settings, gateway)

    yield

    logger.info("Shutting down application")
    await database.close()
    logger.info("Application shutdown complete")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title="Contact Intake API",
        description="Contact record submission and CSV import",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )
    app.state.settings = settings

    # Map domain exceptions to HTTP responses
    @app.exception_handler(ValidationError)
    async def _validation(_: Request, exc: ValidationError) -> PlainTextResponse:
        message = str(exc)
        if exc.fields:
            message = f"{message} Failed fields: {', '.join(exc.fields)}"
        return PlainTextResponse(message, status_code=400)

    @app.exception_handler(InputSourceError)
    async def _input_source(request: Request, exc: InputSourceError) -> PlainTextResponse:
        logger.warning(
            "Import source unavailable",
            extra={"path": request.url.path, "error": str(exc)},
        )
        return PlainTextResponse(str(exc), status_code=exc.status_code)

    @app.exception_handler(ImportInterruptedError)
    async def _import_interrupted(_: Request, exc: ImportInterruptedError) -> PlainTextResponse:
        logger.error("Import interrupted", exc_info=exc, extra={"imported_count": exc.imported_count})
        return PlainTextResponse(str(exc), status_code=500)

    @app.exception_handler(StorageError)
    async def _storage(request: Request, exc: StorageError) -> PlainTextResponse:
        logger.error(
            "Storage failure",
            exc_info=exc,
            extra={"path": request.url.path, "error_type": type(exc).__name__},
        )
        if request.url.path == "/import-csv":
            return PlainTextResponse("Server error during CSV import.", status_code=500)
        return PlainTextResponse("Server error.", status_code=500)

    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestContextMiddleware)

    app.include_router(contacts_router)

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    # Static form last so API routes take precedence.
    if settings.static_dir.is_dir():
        app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")

    return app


def run() -> None:
    """Run the service with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)


app = create_app()


if __name__ == "__main__":
    run()
