"""
Benefícios API: FastAPI Application Factory
=============================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes configuration, middleware, route mounting, static files
       and lifecycle management in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   uvicorn (`uvicorn app.main:app`) or the `beneficios-api` launcher.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  Request ID → Logging → GZip → CORS    │
    │                                                     │
    │  Routes:                                            │
    │    GET /api            GET /health                  │
    │    /api/beneficios/*   (list, id, nome, CRUD)       │
    │    /favicon.ico        / (static public files)      │
    │                                                     │
    │  Exception Handlers:                                │
    │    ValidationError→400  NotFound→404  Database→500  │
    │    RequestValidationError→400  Exception→500        │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → MongoDB connect + ping (retried) → ready
    Shutdown: close the MongoDB client
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, List

import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles

from app import __version__
from app.config import settings
from app.database import close_mongo_connection, connect_to_mongo
from app.exceptions import BeneficiosError, NotFoundError, ValidationError
from app.middleware.logging import RequestLoggingMiddleware
from app.middleware.request_id import RequestIDMiddleware, request_id_var
from app.routes import beneficios, health
from app.schemas.beneficio import ErrorResponse

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Called once during startup, before anything else logs.
    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Docker captures stdout
        ],
        force=True,
    )

    # Chatty at INFO; our access middleware already logs each request
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Open the MongoDB connection once for the whole process, close it on exit.

    A database that stays unreachable after the startup retries aborts the
    startup: the API has nothing to serve without it.
    """
    setup_logging()
    logger.info("=" * 60)
    logger.info("Benefícios API %s starting up...", __version__)

    await connect_to_mongo()

    logger.info("Server ready at http://%s:%d", settings.host, settings.port)
    logger.info("API docs: http://%s:%d/docs", settings.host, settings.port)
    logger.info("=" * 60)

    yield

    logger.info("Benefícios API shutting down...")
    close_mongo_connection()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "") or request_id_var.get("")


def error_response(
    status_code: int,
    code: str,
    message: str,
    errors: List[Dict[str, Any]],
    request_id: str,
) -> JSONResponse:
    """Build the error envelope shared by every failure path."""
    body = ErrorResponse(error=code, message=message, errors=errors, request_id=request_id)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        ValidationError          → 400
        NotFoundError            → 404
        BeneficiosError (others) → their status_code (DatabaseError → 500)
        RequestValidationError   → 400 (body is not a JSON object)
        Exception (fallback)     → 500, details logged server-side only
    """

    @app.exception_handler(BeneficiosError)
    async def handle_app_error(request: Request, exc: BeneficiosError):
        rid = _request_id(request)
        if isinstance(exc, ValidationError):
            logger.warning("[%s] Validation error: %d failure(s)", rid, len(exc.errors))
        elif isinstance(exc, NotFoundError):
            logger.info("[%s] Not found: %s", rid, exc.context)
        else:
            logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
        return error_response(exc.status_code, exc.code, exc.message, exc.errors, rid)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        rid = _request_id(request)
        errors = [
            {
                "value": e.get("input"),
                "msg": e["msg"],
                "param": ".".join(str(loc) for loc in e["loc"]),
            }
            for e in exc.errors()
        ]
        logger.warning("[%s] Malformed request on %s: %s", rid, request.url.path, errors)
        return error_response(400, "validation_error", "Requisição inválida", errors, rid)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """
        Catch-all. The stack trace is logged, never returned.

        Runs in ServerErrorMiddleware, outside RequestIDMiddleware, so the
        X-Request-ID header is set here.
        """
        rid = _request_id(request)
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        response = error_response(
            500,
            "internal_server_error",
            "An unexpected error occurred. Please try again or contact support.",
            [],
            rid,
        )
        if rid:
            response.headers["X-Request-ID"] = rid
        return response


# ══════════════════════════════════════════════════════════════════════════
# Static Content
# ══════════════════════════════════════════════════════════════════════════

def mount_public_files(app: FastAPI) -> None:
    """
    Serve the favicon and the public directory.

    Mounted after the API routes so /api/* always takes precedence.
    Skipped when the files are not deployed.
    """
    favicon = settings.favicon_path
    if favicon.is_file():
        @app.get("/favicon.ico", include_in_schema=False)
        async def favicon_ico() -> FileResponse:
            return FileResponse(favicon, media_type="image/png")

    if settings.public_dir.is_dir():
        app.mount("/", StaticFiles(directory=settings.public_dir, html=True), name="public")
    else:
        logger.warning("Public directory %s not found; static files disabled", settings.public_dir)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Benefícios API",
        description="CRUD de benefícios sociais armazenados no MongoDB.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Last added runs first: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(beneficios.router)

    mount_public_files(app)

    return app


app = create_app()


def run() -> None:
    """
    Launch uvicorn on the configured host/port.

    `server_header=False` drops the `server: uvicorn` response header.
    """
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        server_header=False,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
