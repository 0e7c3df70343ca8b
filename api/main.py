"""
Astro Audit - Main FastAPI Application.

This is the REST/WebSocket API layer of the storefront audit dashboard:
start audit runs, follow their progress, manage detected issues and the
storefront's provider configuration.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
import time

from api.dependencies import (
    get_audit_settings,
    get_audit_store,
    get_connection_manager,
    get_engine,
    get_run_controller,
    shutdown_dependencies,
)
from api import websocket
from api.routes import audit, connections, dashboard, environment, health, issues
from core.domain.exceptions import DuplicateRecordError, RecordNotFoundError
from core.infrastructure.database.config import init_database
from core.infrastructure.logging import configure_logging
from core.settings import get_app_settings


logger = logging.getLogger(__name__)


# =============================================================================
# STARTUP/SHUTDOWN
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging and storage on startup, stop audit jobs on shutdown."""
    settings = get_app_settings()
    configure_logging(settings.server.log_level)

    logger.info("Astro Audit API starting up...")
    if settings.server.store_backend == "sqlalchemy":
        await init_database(get_engine())
    get_audit_store()
    get_connection_manager()
    controller = get_run_controller()
    logger.info(f"Audit steps: {', '.join(controller.registry.names)}")
    logger.info(f"Project under audit: {get_audit_settings().project_dir.resolve()}")

    yield

    logger.info("Astro Audit API shutting down...")
    await shutdown_dependencies()


# =============================================================================
# CREATE FASTAPI APP
# =============================================================================

app = FastAPI(
    title="Astro Audit - Storefront Audit API",
    description="""
    Audit dashboard backend for the astrology storefront.

    Features:
    - Full audit runs (install, dev server, lint, blocked inputs, production, logs)
    - Live progress over WebSocket with a polling fallback
    - Detected issue tracking
    - Storefront environment variables and provider connection checks
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)


# =============================================================================
# CORS MIDDLEWARE
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_app_settings().server.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)


# =============================================================================
# REQUEST LOGGING MIDDLEWARE
# =============================================================================

@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests with timing."""
    start_time = time.time()

    logger.info(f"→ {request.method} {request.url.path}")

    response = await call_next(request)

    duration = time.time() - start_time
    logger.info(
        f"← {request.method} {request.url.path} "
        f"[{response.status_code}] ({duration:.3f}s)"
    )

    return response


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

@app.exception_handler(RecordNotFoundError)
async def not_found_handler(request: Request, exc: RecordNotFoundError):
    return JSONResponse(
        status_code=404,
        content={"error": "Not found", "detail": str(exc), "path": request.url.path},
    )


@app.exception_handler(DuplicateRecordError)
async def conflict_handler(request: Request, exc: DuplicateRecordError):
    return JSONResponse(
        status_code=409,
        content={"error": "Conflict", "detail": str(exc), "path": request.url.path},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle all uncaught exceptions."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "detail": str(exc),
            "path": request.url.path
        }
    )


# =============================================================================
# INCLUDE ROUTERS
# =============================================================================

app.include_router(
    health.router,
    tags=["Health"]
)

app.include_router(
    dashboard.router,
    prefix="/api/dashboard",
    tags=["Dashboard"]
)

app.include_router(
    audit.router,
    prefix="/api/audit",
    tags=["Audit"]
)

app.include_router(
    issues.router,
    prefix="/api/issues",
    tags=["Issues"]
)

app.include_router(
    environment.router,
    prefix="/api/environment",
    tags=["Environment"]
)

app.include_router(
    connections.router,
    prefix="/api/connections",
    tags=["Connections"]
)

app.include_router(
    websocket.router,
    prefix="/api",
    tags=["WebSocket"]
)


# =============================================================================
# ROOT ENDPOINT
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """API root endpoint."""
    return {
        "message": "Astro Audit - Storefront Audit API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
        "feed": "/api/ws",
    }
