"""
Events BFF — FastAPI Application Factory
=========================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn events_bff.main:app --port 9898).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌──────────┐ ┌─────────┐ ┌─────────┐  │
    │  │ Req ID   │→│ Logging  │→│ Session │→│GZip/CORS│  │
    │  └──────────┘ └──────────┘ └─────────┘ └─────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌────────────────────┐ ┌────────────────────────┐  │
    │  │ GET /all-events    │ │ GET /health            │  │
    │  └────────────────────┘ └────────────────────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Session→401 │ Upstream→502/504 │ Other→500   │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging, configuration check, "server started" banner
    Shutdown: close the shared upstream HTTP client
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from events_bff import __version__, http_client
from events_bff.config import settings
from events_bff.exceptions import (
    BffError,
    InvalidRequestOptionsError,
    SessionRequiredError,
    UpstreamServiceError,
)
from events_bff.middleware.logging import RequestLoggingMiddleware
from events_bff.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware, request_id_var
from events_bff.routes import events, health

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s

    Outgoing-call metadata rides on each record as `api_call` / `context`
    attributes, so a structured handler can pick it up without a format change.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # httpx logs every request at INFO; our client already does
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Development still boots; production deploys must set the values
        logger.warning("Configuration error: %s", str(e))

    logger.info("Events API: %s", settings.events_api_base_url)
    logger.info("Server started on port %d", settings.backend_port)

    yield

    logger.warning("Shutting down server")
    await http_client.close_client()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(status_code: int, error: str, message: str, details=None) -> JSONResponse:
    content = {
        "error": error,
        "message": message,
        "request_id": request_id_var.get(""),
    }
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and response formats.

    Handler hierarchy:
        SessionRequiredError        → 401 Unauthorized
        UpstreamServiceError        → 502 Bad Gateway / 504 Gateway Timeout
        InvalidRequestOptionsError  → 500 Internal Server Error
        BffError (base)             → 500 Internal Server Error
        Exception (fallback)        → 500 Internal Server Error

    Errors flagged `has_been_logged` were already logged with full call
    metadata by the HTTP client; handlers only log what nobody logged yet.
    Upstream bodies and URLs never reach the browser.
    """

    @app.exception_handler(SessionRequiredError)
    async def handle_session_required(request: Request, exc: SessionRequiredError):
        return _error_response(401, "session_required", exc.message, details={"missing": exc.missing})

    @app.exception_handler(UpstreamServiceError)
    async def handle_upstream_error(request: Request, exc: UpstreamServiceError):
        if not exc.has_been_logged:
            logger.error("[%s] Upstream error: %s", request_id_var.get(""), exc.message)

        if exc.timed_out:
            return _error_response(504, "upstream_timeout", "The events service did not respond in time.")
        if exc.status_code is None:
            return _error_response(502, "upstream_unreachable", "The events service could not be reached.")
        return _error_response(
            502,
            "upstream_error",
            "The events service returned an error.",
            details={"upstream_status": exc.status_code},
        )

    @app.exception_handler(InvalidRequestOptionsError)
    async def handle_invalid_options(request: Request, exc: InvalidRequestOptionsError):
        if not exc.has_been_logged:
            logger.error("[%s] Invalid request options: %s", request_id_var.get(""), exc.errors)
        return _error_response(500, "server_error", "An internal error occurred. Please try again later.")

    @app.exception_handler(BffError)
    async def handle_bff_error(request: Request, exc: BffError):
        if not exc.has_been_logged:
            logger.error("[%s] Application error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return _error_response(500, "server_error", "An internal error occurred. Please try again later.")

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all: stack trace goes to the log, never into the response."""
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=exc,
        )
        return _error_response(
            500,
            "internal_server_error",
            "An unexpected error occurred. Please try again or contact support.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="Events BFF",
        description="Backend-for-frontend forwarding browser requests to the events API.",
        version=__version__,
        lifespan=lifespan,
    )

    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → Session → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,  # session cookie
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret,
        session_cookie=settings.session_cookie,
        same_site="lax",
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(events.router)
    app.include_router(health.router)

    return app


app = create_app()
