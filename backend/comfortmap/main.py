"""
ComfortMap Backend — FastAPI Application Factory
===================================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes middleware registration, route mounting, the static
       frontend, and lifecycle management in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn comfortmap.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware: Request ID → Logging → GZip → CORS     │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────┐ ┌───────────────┐ ┌────────────┐  │
    │  │GET /api/notes│ │POST /api/notes│ │GET /health │  │
    │  └──────────────┘ └───────────────┘ └────────────┘  │
    │  /  → static frontend (comfortmap/static)           │
    │                                                     │
    │  Exception Handlers:                                │
    │  PersistenceError→500 {error} │ Exception→500       │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging, log masked store URL, create table (optional), probe store
    Shutdown: dispose database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from comfortmap import __version__
from comfortmap.config import settings
from comfortmap.database import (
    check_database,
    create_tables,
    dispose_engine,
    masked_database_url,
)
from comfortmap.exceptions import ComfortMapError, PersistenceError
from comfortmap.middleware.logging import RequestLoggingMiddleware
from comfortmap.middleware.request_id import RequestIDMiddleware, request_id_var
from comfortmap.routes import health, reviews

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Called once during app startup, before anything else logs.
    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup and shutdown procedures.

    A store that can't be reached at startup is logged as an error, not
    fatal: the server still serves the frontend and /health, and API calls
    fail with 500 until the store comes back.
    """
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("ComfortMap Backend %s starting up...", __version__)
    logger.info("Using DATABASE_URL: %s", masked_database_url())

    if settings.db_auto_create:
        try:
            await create_tables()
        except Exception as e:
            logger.error("Could not create the reviews table: %s", str(e))

    if await check_database():
        logger.info("Connected to the review store")
    else:
        logger.error("Review store connection failed; API calls will return 500")

    logger.info("Server listening on http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("ComfortMap Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers.

    Handler hierarchy:
        PersistenceError        → 500 {"error": <static message>}
        ComfortMapError (base)  → 500 {"error": <message>}
        Exception (fallback)    → 500 {"error": generic message}

    Details (driver errors, stack traces) are logged, never returned.
    """

    @app.exception_handler(PersistenceError)
    async def handle_persistence_error(request: Request, exc: PersistenceError):
        rid = request_id_var.get("")
        logger.error("[%s] %s %s: %s | Context: %s",
                     rid, request.method, request.url.path, exc.message, exc.context)
        return JSONResponse(status_code=500, content={"error": exc.message})

    @app.exception_handler(ComfortMapError)
    async def handle_app_error(request: Request, exc: ComfortMapError):
        rid = request_id_var.get("")
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(status_code=500, content={"error": exc.message})

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "An unexpected error occurred"},
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(serve_static: bool = True) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        serve_static: Mount the browser frontend at "/". Disabled by tests
            that only exercise the API.
    """
    app = FastAPI(
        title="ComfortMap API",
        description=(
            "Share sensory-friendly restaurant reviews: comfort rating, noise, "
            "crowd, lighting and texture, pinned on a map."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Executes in reverse order of addition: RequestID → Logging → GZip → CORS
    origins = settings.cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # Credentials can't be combined with a wildcard origin
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(reviews.router)
    app.include_router(health.router)

    # Mounted last so API routes win; check_dir=False keeps a missing
    # frontend from stopping the API
    if serve_static:
        app.mount(
            "/",
            StaticFiles(directory=settings.static_root, html=True, check_dir=False),
            name="static",
        )

    return app


app = create_app()
