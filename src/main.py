"""
Helpdesk Service - Main Application
===================================

Support ticketing with priority-based SLA tracking.

Modules:
- Tickets: Ticket lifecycle, status workflow and comments
- SLA: Due-date policy and read-time SLA state
- Stats: Dashboard counts and debug table view

Clean Architecture Layers:
- Interfaces: FastAPI controllers
- Application: Services and DTOs
- Domain: Entities and value objects
- Infrastructure: Database
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

# Configuration and Core
from src.config import Settings, get_settings
from src.core import ApplicationException, Clock, StorageUnavailableException, SystemClock

# Infrastructure
from src.infrastructure.database import Database

# Module Routers
from src.tickets.interfaces import tickets_router
from src.stats.interfaces import stats_router

# Middleware
from src.shared.api.middleware import (
    CorrelationIDMiddleware,
    LoggingMiddleware,
    application_exception_handler,
    request_validation_exception_handler,
    global_exception_handler
)

# Logging
from src.shared.infrastructure.logging import setup_logging, get_logger

logger = get_logger(__name__)


def create_app(app_settings: Optional[Settings] = None, clock: Optional[Clock] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        app_settings: Settings to use, defaults to the environment
        clock: Source of "now", defaults to the UTC wall clock
    """
    app_settings = app_settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator:
        """
        Application lifespan manager.

        STARTUP:
        1. Setup structured logging
        2. Open the database
        3. Create database tables

        SHUTDOWN:
        1. Close database connections
        """
        # === STARTUP ===
        setup_logging(app_settings.log_level, app_settings.environment)
        logger.info("Starting Helpdesk Service", extra={
            "version": app_settings.app_version,
            "environment": app_settings.environment
        })

        database = Database(app_settings)
        database.connect()
        app.state.database = database

        # If the database is not reachable the server still starts;
        # every database-backed endpoint then answers 500
        logger.info("Creating database tables", extra={"backend": database.backend})
        try:
            await database.create_tables()
        except StorageUnavailableException as e:
            logger.warning(f"Database not available - running in degraded mode: {e.reason}")

        logger.info("Helpdesk Service started successfully")

        yield  # Application runs here

        # === SHUTDOWN ===
        logger.info("Shutting down Helpdesk Service")
        await database.close()
        logger.info("Helpdesk Service shutdown complete")

    app = FastAPI(
        title="Helpdesk API",
        description="""
    ## Helpdesk Ticketing System

    Create support tickets, move them through the workflow, discuss them in
    comments and watch their SLA.

    **SLA windows:** High 4h, Medium 12h, Low 24h, fixed at creation.

    **SLA states:** `ok` (4h or more left), `warning` (under 4h left),
    `breach` (past due).

    **Workflow:** `Open` → `In Progress` → `Resolved` → `Closed`
    """,
        version=app_settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )

    app.state.settings = app_settings
    app.state.clock = clock or SystemClock()

    # === CORS Middleware ===
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # === Custom Middleware (from shared) ===
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(CorrelationIDMiddleware)

    app.add_exception_handler(ApplicationException, application_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    # === Include Module Routers ===
    app.include_router(tickets_router, prefix=app_settings.api_prefix)
    app.include_router(stats_router, prefix=app_settings.api_prefix)

    # === Health Check Endpoint ===

    @app.get("/health", tags=["Health"])
    async def health_check(request: Request):
        """
        Health check endpoint for load balancers and orchestrators.

        Reports database connectivity. Always answers 200 so the process
        is not restarted while the database is down.
        """
        database: Database = request.app.state.database
        try:
            await database.ping()
            db_status = "connected"
        except StorageUnavailableException:
            db_status = "unavailable"

        return {
            "status": "healthy" if db_status == "connected" else "degraded",
            "version": app_settings.app_version,
            "environment": app_settings.environment,
            "checks": {
                "database": db_status,
                "backend": database.backend
            }
        }

    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint with API information."""
        prefix = app_settings.api_prefix
        return {
            "service": "Helpdesk Service",
            "version": app_settings.app_version,
            "docs": "/docs",
            "health": "/health",
            "endpoints": [
                f"GET {prefix}/tickets",
                f"GET {prefix}/tickets/{{id}}",
                f"POST {prefix}/tickets",
                f"PUT {prefix}/tickets/{{id}}",
                f"DELETE {prefix}/tickets/{{id}}",
                f"GET {prefix}/tickets/{{id}}/comments",
                f"POST {prefix}/tickets/{{id}}/comments",
                f"GET {prefix}/stats",
                f"GET {prefix}/debug/tables"
            ]
        }

    return app


app = create_app()


# === Development Entry Point ===

if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "src.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "development",
        log_level=settings.log_level.lower()
    )
