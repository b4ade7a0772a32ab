"""
SalesDesk Backend — FastAPI Application Factory
================================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes configuration, middleware, exception handlers, route
       mounting and lifecycle management in one place.
How:   create_app(settings, database) builds the app and stores the
       app-scoped objects on `app.state`:
           settings  → Settings
           database  → Database (engine + pool + session factory)
           tokens    → TokenService (holds the signing secret)
Who:   uvicorn imports `salesdesk.main:app`; tests call create_app() with
       their own Settings and an in-memory SQLite Database.

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware:  Request ID → Access Log → CORS             │
    │                                                          │
    │  Routes:      /  /health  /auth  /company  /item  /sales │
    │               (all but /, /health, register, login       │
    │                require the auth token)                   │
    │                                                          │
    │  Exception Handlers → {success: false, message, error?}  │
    │    ValidationError 400 │ Duplicate/RefIntegrity 400      │
    │    Authentication 401  │ Forbidden 403 │ NotFound 404    │
    │    unknown route 404   │ anything else 500               │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:   configure logging, validate production settings
    Shutdown:  dispose the database engine (close pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from salesdesk import __version__
from salesdesk.config import Settings, settings as default_settings
from salesdesk.database import Database
from salesdesk.exceptions import (
    DatabaseError,
    DuplicateError,
    ReferentialIntegrityError,
    SalesDeskError,
    ValidationError,
)
from salesdesk.middleware.logging import RequestLoggingMiddleware
from salesdesk.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware, request_id_var
from salesdesk.routes import auth, company, health, item, sales
from salesdesk.security import TokenService
from salesdesk.validation import describe_error

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure the root logger once for the whole process.

    Format: 2024-01-15T12:00:00 [INFO] salesdesk.access: GET /company 200 ...
    Output goes to stdout so the container runtime collects it.
    """
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # uvicorn's access log duplicates salesdesk.access
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: Settings = app.state.settings

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(settings.log_level)
    logger.info("=" * 60)
    logger.info("SalesDesk Backend %s starting (environment=%s)", __version__, settings.environment)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))
        raise

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("SalesDesk Backend shutting down...")
    await app.state.database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(status_code: int, message: str, error: Any = None) -> JSONResponse:
    content: Dict[str, Any] = {"success": False, "message": message}
    if error is not None:
        content["error"] = error
    return JSONResponse(status_code=status_code, content=jsonable_encoder(content))


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map every failure to the uniform error envelope.

    Handler hierarchy:
        ValidationError            → 400, error: {field, message, value}
        DuplicateError             → 400, error: {field}
        ReferentialIntegrityError  → 400, error: {field}
        DatabaseError              → 500, generic message, context logged
        SalesDeskError (others)    → exc.status_code, message only
        RequestValidationError     → 400, first error translated like ours
        HTTPException (404 / 405)  → "Route not found" / "Method not allowed"
        Exception (fallback)       → 500, text exposed outside production

    Security: stack traces and SQL never reach the client; they are logged
    with the request id.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error on %s: %s", rid, exc.field, exc.detail)
        return _error_response(
            400,
            exc.message,
            {"field": exc.field, "message": exc.detail, "value": exc.value},
        )

    @app.exception_handler(DuplicateError)
    @app.exception_handler(ReferentialIntegrityError)
    async def handle_integrity_error(request: Request, exc: SalesDeskError):
        rid = request_id_var.get("")
        logger.warning("[%s] %s: %s", rid, type(exc).__name__, exc.message)
        field = getattr(exc, "field", None)
        return _error_response(400, exc.message, {"field": field} if field else None)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        settings: Settings = request.app.state.settings
        detail = exc.message if settings.expose_error_details else "Something went wrong"
        return _error_response(500, "Internal server error", detail)

    @app.exception_handler(SalesDeskError)
    async def handle_app_error(request: Request, exc: SalesDeskError):
        rid = request_id_var.get("")
        if exc.status_code >= 500:
            logger.error("[%s] %s: %s", rid, type(exc).__name__, exc.message)
        else:
            logger.info("[%s] %s: %s", rid, type(exc).__name__, exc.message)
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = describe_error(errors[0], loc_offset=1) if errors else {
            "field": "body", "message": "Invalid request", "value": None,
        }
        logger.warning("[%s] Request validation error on %s", request_id_var.get(""), first["field"])
        return _error_response(400, "Validation error", first)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            message = "Route not found"
        elif exc.status_code == 405:
            message = "Method not allowed"
        else:
            message = str(exc.detail)
        return _error_response(exc.status_code, message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        # Runs outside the middleware stack: the ContextVar is already reset
        # and RequestIDMiddleware never sees this response.
        rid = getattr(request.state, "request_id", "")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        settings: Settings = request.app.state.settings
        detail = str(exc) if settings.expose_error_details else "Something went wrong"
        response = _error_response(500, "Internal server error", detail)
        if rid:
            response.headers[REQUEST_ID_HEADER] = rid
        return response


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Defaults to the process-wide `salesdesk.config.settings`.
        database: Defaults to a Database built from `settings`. Tests pass
                  their own so they can create tables before requests.
    """
    settings = settings or default_settings
    database = database or Database.from_settings(settings)

    app = FastAPI(
        title="SalesDesk API",
        description=(
            "Company, item and sales management with token authentication. "
            "Every write is validated and answered in a uniform envelope."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.database = database
    app.state.tokens = TokenService.from_settings(settings)

    # ── Register Middleware ───────────────────────────────────────────────
    # Executed in reverse order of addition: RequestID → Logging → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(company.router)
    app.include_router(item.router)
    app.include_router(sales.router)

    return app


# uvicorn salesdesk.main:app
app = create_app()
