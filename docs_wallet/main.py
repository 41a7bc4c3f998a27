"""
Docs Wallet Backend — FastAPI Application Factory
==================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() wires middleware, exception handlers and routers; the
       lifespan builds the AppContext (database engine, object store,
       staging, token service) unless one was injected.
Who:   uvicorn (`docs_wallet.main:app` or `python -m docs_wallet`) and the
       test suite (`create_app(context=...)`).

Application Architecture:
    ┌──────────────────────────────────────────────────────┐
    │                    FastAPI App                       │
    │                                                      │
    │  Middleware:  Request ID → Logging → GZip → CORS     │
    │                                                      │
    │  Routes:                                             │
    │   GET /  POST /jwt  POST /users  GET /user  /health  │
    │   POST|GET /images   DELETE /images/{id}             │
    │   POST|GET /works    DELETE /works/{id}              │
    │                                                      │
    │  Exception Handlers:                                 │
    │   BadRequest→400  Unauthorized→401  NotFound→404     │
    │   ObjectStore→500  Database→500  Exception→500       │
    └──────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → config validation → AppContext
    Shutdown: dispose the engine of the context built at startup
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from docs_wallet import __version__
from docs_wallet.config import settings
from docs_wallet.context import AppContext, build_context
from docs_wallet.exceptions import (
    BadRequestError,
    DatabaseError,
    DocsWalletError,
    NotFoundError,
    ObjectStoreError,
    UnauthorizedError,
)
from docs_wallet.middleware.logging import RequestLoggingMiddleware
from docs_wallet.middleware.request_id import RequestIDMiddleware, request_id_var
from docs_wallet.routes import health, images, root, users, works

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the whole process.

    Format: 2024-01-15T12:00:00 [INFO] docs_wallet.services.image_service: ...
    Output: stdout, which container runtimes capture.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Per-request chatter from these libraries drowns the access log
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("boto3").setLevel(logging.WARNING)
    logging.getLogger("s3transfer").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Build the long-lived handles on startup and release them on shutdown.

    A context injected through create_app() is used as-is and left for its
    owner to close.
    """
    setup_logging()
    logger.info("=" * 60)
    logger.info("Docs Wallet backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving: / and /health stay useful for diagnosing the setup
        logger.error("Configuration error: %s", e)

    owned: Optional[AppContext] = None
    if getattr(app.state, "context", None) is None:
        owned = build_context(settings)
        app.state.context = owned

    logger.info("Server ready at http://%s:%d", settings.host, settings.port)
    logger.info("=" * 60)

    yield

    logger.info("Docs Wallet backend shutting down...")
    if owned is not None:
        await owned.aclose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(status_code: int, message: str, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": True, "message": message, "request_id": request_id_var.get("")},
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to HTTP responses.

    Handler hierarchy:
        BadRequestError    → 400
        UnauthorizedError  → 401 (+ WWW-Authenticate: Bearer)
        NotFoundError      → 404
        ObjectStoreError   → 500
        DatabaseError      → 500
        DocsWalletError    → its status_code
        Exception          → 500

    Response bodies carry only the exception's user-facing message; the
    context dict and stack traces are logged server-side.
    """

    @app.exception_handler(BadRequestError)
    async def handle_bad_request(request: Request, exc: BadRequestError):
        logger.warning("[%s] Bad request: %s", request_id_var.get(""), exc.message)
        return _error_response(400, exc.message)

    @app.exception_handler(UnauthorizedError)
    async def handle_unauthorized(request: Request, exc: UnauthorizedError):
        logger.info(
            "[%s] Unauthorized %s %s: %s",
            request_id_var.get(""),
            request.method,
            request.url.path,
            exc.context.get("reason", "unknown"),
        )
        return _error_response(401, exc.message, headers={"WWW-Authenticate": "Bearer"})

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(404, exc.message)

    @app.exception_handler(ObjectStoreError)
    async def handle_object_store_error(request: Request, exc: ObjectStoreError):
        logger.error("[%s] Object store error: %s | Context: %s",
                     request_id_var.get(""), exc.message, exc.context)
        return _error_response(500, exc.message)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error("[%s] Database error: %s | Context: %s",
                     request_id_var.get(""), exc.message, exc.context)
        return _error_response(500, exc.message)

    @app.exception_handler(DocsWalletError)
    async def handle_app_error(request: Request, exc: DocsWalletError):
        logger.error("[%s] %s: %s | Context: %s",
                     request_id_var.get(""), type(exc).__name__, exc.message, exc.context)
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("[%s] Unexpected error: %s", request_id_var.get(""), exc, exc_info=True)
        return _error_response(500, "An unexpected error occurred. Please try again later.")


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(context: Optional[AppContext] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        context: Pre-built handles (tests). When None the lifespan builds
                 them from settings at startup.
    """
    app = FastAPI(
        title="Docs Wallet API",
        description=(
            "Document wallet backend: authenticated image uploads to object storage, "
            "per-user image metadata, works records and user registration."
        ),
        version=__version__,
        lifespan=lifespan,
    )
    app.state.context = context

    # Last added runs first: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials="*" not in settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(root.router)
    app.include_router(users.router)
    app.include_router(images.router)
    app.include_router(works.router)
    app.include_router(health.router)

    return app


app = create_app()
