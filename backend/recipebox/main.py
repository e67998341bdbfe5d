"""
RecipeBox Backend: FastAPI Application Factory
================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app(settings) returns a configured FastAPI
       instance with its own Database; the lifespan prepares tokens,
       schema and sample data before the first request.
Who:   uvicorn (`uvicorn recipebox.main:app`), the `recipebox` console
       script, and the test suite (one app per test).

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                       FastAPI App                        │
    │                                                          │
    │  Middleware (outermost first):                           │
    │  RequestID → Preflight → Logging → GZip → CORS           │
    │                                                          │
    │  Routes:                                                 │
    │  /api/auth/*   /api/recipes/*   /api/stats   /health     │
    │                                                          │
    │  Exception Handlers:                                     │
    │  RecipeBoxError → 4xx {"error", ...context}              │
    │  ServerError / Exception → 500 {"error": generic}        │
    │  RequestValidationError → 400 {"error", "details"}       │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Configure logging
    2. Validate configuration (JWT_SECRET missing → refuse to start)
    3. Create the TokenService
    4. Create missing tables
    5. Seed empty tables (a SeedError is logged, startup continues)

    Shutdown:
    1. Dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from recipebox import __version__
from recipebox.config import Settings, settings as default_settings
from recipebox.database import Database
from recipebox.exceptions import ConfigurationError, RecipeBoxError, SeedError, ServerError
from recipebox.middleware.cors import PreflightMiddleware
from recipebox.middleware.logging import RequestLoggingMiddleware
from recipebox.middleware.request_id import RequestIDMiddleware, request_id_var
from recipebox.routes import auth, health, recipes
from recipebox.seed import seed_database
from recipebox.services.token_service import TokenService

logger = logging.getLogger(__name__)

GENERIC_SERVER_ERROR = {"error": "Internal server error"}


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure console logging for the entire application.

    Format: 2024-01-15T12:00:00 [INFO] recipebox.access: GET /api/recipes 200 3.1ms [a1b2c3d4] from 127.0.0.1
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Per-request chatter from these libraries drowns the access log
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

async def initialize(app: FastAPI) -> None:
    """
    Prepare everything a request needs: token service, schema, sample data.

    Raises:
        ConfigurationError: JWT_SECRET is missing (the app must not serve)
    """
    app_settings: Settings = app.state.settings
    database: Database = app.state.database

    app_settings.validate_required()
    app.state.token_service = TokenService(
        secret=app_settings.jwt_secret,
        ttl_seconds=app_settings.token_ttl_days * 24 * 60 * 60,
        algorithm=app_settings.jwt_algorithm,
    )

    await database.create_schema()

    if app_settings.seed_sample_data:
        try:
            counts = await seed_database(database)
            logger.info("Sample data: %s", counts)
        except SeedError as e:
            logger.error("Sample data could not be seeded: %s | Context: %s", e.message, e.context)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    app_settings: Settings = app.state.settings

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(app_settings.log_level)
    logger.info("=" * 60)
    logger.info("RecipeBox Backend %s starting up...", __version__)

    try:
        await initialize(app)
    except ConfigurationError as e:
        logger.error("Configuration error: %s", e.message)
        logger.error("Fix the configuration and restart the server.")
        raise

    logger.info("Server ready at http://%s:%d", app_settings.backend_host, app_settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("RecipeBox Backend shutting down...")
    await app.state.database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to HTTP responses with the `{"error": ...}` body shape.

    Handler hierarchy (most specific wins):
        ServerError / DatabaseError → 500, generic body, details logged
        RecipeBoxError (4xx types)  → exc.status_code, exc.to_body()
        RequestValidationError      → 400 Invalid request + field details
        HTTPException (routing)     → its status, {"error": detail}
        Exception (fallback)        → 500, generic body

    Stack traces, SQL and constraint names are logged, never returned.
    """

    @app.exception_handler(ServerError)
    async def handle_server_error(request: Request, exc: ServerError):
        rid = request_id_var.get("")
        logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
        return JSONResponse(status_code=exc.status_code, content=GENERIC_SERVER_ERROR)

    @app.exception_handler(RecipeBoxError)
    async def handle_recipebox_error(request: Request, exc: RecipeBoxError):
        rid = request_id_var.get("")
        if exc.status_code >= 500:
            logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
            return JSONResponse(status_code=500, content=GENERIC_SERVER_ERROR)
        logger.info("[%s] %s: %s", rid, type(exc).__name__, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        details = [
            {
                "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
                "message": err.get("msg", "Invalid value"),
            }
            for err in exc.errors()
        ]
        logger.info("[%s] Request validation failed: %s", rid, details)
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request", "details": details},
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(status_code=500, content=GENERIC_SERVER_ERROR)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Assemble middleware, exception handlers and routes around one Database.

    Args:
        settings: Defaults to the process-wide settings; tests pass their own
                  (e.g. a temporary SQLite file).
    """
    app_settings = settings or default_settings

    app = FastAPI(
        title="RecipeBox API",
        description=(
            "Recipe sharing service: sign up, log in, and create, search, "
            "filter and favorite recipes organized by category."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.database = Database(app_settings.database_url)

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Preflight → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(PreflightMiddleware, allow_origins=app_settings.cors_origins_list)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(auth.router)
    app.include_router(recipes.router)
    app.include_router(health.router)

    return app


# ── Application Instance ─────────────────────────────────────────────────
# uvicorn imports `recipebox.main:app`
app = create_app()


def run() -> None:
    """Console entry point: serve the module-level app with uvicorn."""
    import uvicorn

    uvicorn.run(
        "recipebox.main:app",
        host=default_settings.backend_host,
        port=default_settings.backend_port,
        log_level=default_settings.log_level.lower(),
    )
