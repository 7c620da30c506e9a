"""taskclock - task management and time tracking API."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from taskclock.core.config import settings
from taskclock.core.db_client import close_connection, init_db
from taskclock.core.logging import configure_logfire, instrument_fastapi
from taskclock.interface.comment_router import router as comment_router
from taskclock.interface.error_handlers import register_error_handlers
from taskclock.interface.report_router import router as report_router
from taskclock.interface.task_router import router as task_router
from taskclock.interface.time_entry_router import router as time_entry_router
from taskclock.interface.user_router import admin_router, auth_router
from taskclock.services.container import Services, build_services_from_settings


logger = logging.getLogger(__name__)


def create_app(services: Services | None = None) -> FastAPI:
    """Build the application.

    Args:
        services: Pre-built service graph (tests). When omitted, one is built at
            startup from settings and the SQLite schema is created if needed.
    """
    uses_sqlite = services is None and settings.storage_backend == "sqlite"

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Application lifespan context manager."""
        # Configure logging first so startup logs are captured
        configure_logfire()

        if services is None:
            app.state.services = build_services_from_settings()
        if uses_sqlite:
            await init_db(db_path=settings.sqlite_db_path)
            logger.info("Database initialized")
        yield
        if uses_sqlite:
            await close_connection(db_path=settings.sqlite_db_path)

    app = FastAPI(
        title="taskclock",
        description="Task management and time tracking",
        version="0.1.0",
        lifespan=lifespan,
    )
    if services is not None:
        app.state.services = services

    # Instrument FastAPI with Logfire
    instrument_fastapi(app)
    register_error_handlers(app)

    # Register routers
    app.include_router(auth_router)
    app.include_router(admin_router)
    app.include_router(task_router)
    app.include_router(comment_router)
    app.include_router(time_entry_router)
    app.include_router(report_router)

    @app.get("/health")
    async def health_check() -> JSONResponse:
        """Health check endpoint."""
        return JSONResponse(content={"status": "healthy"}, status_code=200)

    return app


app = create_app()
