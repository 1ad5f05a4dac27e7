"""
Alpha Tower Backend — FastAPI Application Factory
===================================================

What:  Builds the FastAPI application from an explicit `Settings` value.
How:   `create_app(settings)` wires state, middleware, exception handlers
       and routers. There is no module-level app object:

           uvicorn alpha_tower.main:create_app --factory
           python -m alpha_tower.main           (calls run())

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │  app.state: settings │ database │ hasher │ files    │
    │                                                     │
    │  Middleware: Request ID → Logging → CORS            │
    │                                                     │
    │  Routers: / │ /health │ /products │ /users │        │
    │           /sessions │ /files                        │
    │                                                     │
    │  Exception Handlers:                                │
    │    AlphaTowerError → its status_code                │
    │    RequestValidationError → 400                     │
    │    HTTPException → its status                       │
    │    Exception → 500                                  │
    └─────────────────────────────────────────────────────┘
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from alpha_tower import __version__
from alpha_tower.config import Settings
from alpha_tower.database import Database
from alpha_tower.exceptions import AlphaTowerError
from alpha_tower.middleware.logging import RequestLoggingMiddleware
from alpha_tower.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware, request_id_var
from alpha_tower.routes import files, health, products, sessions, users
from alpha_tower.security import PasswordHasher
from alpha_tower.services.file_service import FileService

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


def error_body(message: str) -> dict:
    return {"status": "error", "message": message}


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(settings: Settings) -> None:
    """
    Configure the root logger once per process.

    Format: 2024-01-15T12:00:00 [INFO] alpha_tower.services.user_service: ...
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup:  logging, configuration check, optional table creation.
    Shutdown: dispose the database engine.
    """
    settings: Settings = app.state.settings
    database: Database = app.state.database

    setup_logging(settings)
    logger.info("Alpha Tower backend starting up...")

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # The service still starts; development runs use the defaults
        logger.error("Configuration error: %s", str(e))

    if settings.db_create_all:
        await database.create_all()

    logger.info("Upload directory: %s", app.state.file_service.upload_root)
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("Alpha Tower backend shutting down...")
    await database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Translate every failure into `{"status": "error", "message": ...}`.

    Handler hierarchy:
        AlphaTowerError         → exc.status_code (400/401/404/409/500)
        RequestValidationError  → 400 (schema or path parameter rejected)
        StarletteHTTPException  → exc.status_code (unknown route, 405, ...)
        Exception (fallback)    → 500, no internal detail in the body
    """

    @app.exception_handler(AlphaTowerError)
    async def handle_app_error(request: Request, exc: AlphaTowerError):
        rid = request_id_var.get("")
        if exc.status_code >= 500:
            logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
        else:
            logger.info("[%s] %s: %s", rid, type(exc).__name__, exc.message)
        # Messages are written to be client-safe; `context` stays server-side
        return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        errors = exc.errors()
        message = "; ".join(
            f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', 'invalid')}"
            for error in errors
        ) or "Validation failed"
        logger.info("[%s] Request validation failed: %s", rid, message)
        return JSONResponse(status_code=400, content=error_body(message))

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(status_code=500, content=error_body(INTERNAL_ERROR_MESSAGE))


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: configuration for this app instance; read from the
                  environment when omitted (uvicorn --factory).
    """
    settings = settings or Settings()

    app = FastAPI(
        title="Alpha Tower Sales System API",
        description="Products, users, sessions and avatar uploads for the Alpha Tower sales system.",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.database = Database(settings)
    app.state.password_hasher = PasswordHasher(rounds=settings.hash_rounds)
    app.state.file_service = FileService(
        upload_directory=settings.upload_directory,
        max_size=settings.max_avatar_size,
    )

    # Last added runs first: RequestID → Logging → CORS → routes
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(products.router)
    app.include_router(users.router)
    app.include_router(sessions.router)
    app.include_router(files.router)

    return app


def run() -> None:
    """Console entry point: build settings once and serve with uvicorn."""
    settings = Settings()
    uvicorn.run(
        create_app(settings),
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
