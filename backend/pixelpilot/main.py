"""
PixelPilot Backend — FastAPI Application Factory
===================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn pixelpilot.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware: Rate Limit → Req ID → Logging          │
    │                                                     │
    │  Routes:                                            │
    │    /api/ai-edit[/analyze|/ideas]                    │
    │    /api/ai-enhance/{suggestions|alt-text|detect}    │
    │    /health                                          │
    │                                                     │
    │  Exception Handlers:                                │
    │    ValidationError→400 │ AIServiceUnavailable→503   │
    └─────────────────────────────────────────────────────┘
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from pixelpilot import __version__
from pixelpilot.config import settings
from pixelpilot.exceptions import (
    AIServiceUnavailableError,
    PixelPilotError,
    ValidationError,
)
from pixelpilot.middleware.logging import RequestLoggingMiddleware
from pixelpilot.middleware.rate_limit import RateLimitMiddleware
from pixelpilot.middleware.request_id import RequestIDMiddleware, request_id_var
from pixelpilot.routes import ai_edit, ai_enhance, health
from pixelpilot.services.model_orchestrator import model_registry

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    When:   Called once during app startup, before any other initialization.
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
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("PIL").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("=" * 60)
    logger.info("PixelPilot Backend starting up...")

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving: AI endpoints degrade to rule-based fallbacks
        logger.error("Configuration error: %s", str(e))

    logger.info(
        "AI models (%d): %s | reset interval: %ss | max attempts: %d",
        len(model_registry),
        ", ".join(model_registry.models()),
        settings.model_reset_interval,
        settings.effective_max_attempts,
    )
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("PixelPilot Backend shutting down...")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and response formats.

    Handler hierarchy:
        ValidationError            → 400 Bad Request
        AIServiceUnavailableError  → 503 Service Unavailable
        PixelPilotError (base)     → 500 Internal Server Error
        Exception (fallback)       → 500 Internal Server Error

    Internal details (stack traces, provider error text) are logged, never returned.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s", rid, exc.message)
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": exc.message,
                "details": exc.context,
                "request_id": rid,
            },
        )

    @app.exception_handler(AIServiceUnavailableError)
    async def handle_ai_unavailable(request: Request, exc: AIServiceUnavailableError):
        rid = request_id_var.get("")
        logger.error("[%s] AI service unavailable: %s", rid, exc.message)
        headers = {}
        if exc.retry_after:
            headers["Retry-After"] = str(exc.retry_after)
        return JSONResponse(
            status_code=503,
            content={
                "error": "ai_service_unavailable",
                "message": "AI service temporarily unavailable. Please try again later.",
                "details": {"attempts": len(exc.attempts), "retry_after": exc.retry_after},
                "request_id": rid,
            },
            headers=headers,
        )

    @app.exception_handler(PixelPilotError)
    async def handle_app_error(request: Request, exc: PixelPilotError):
        rid = request_id_var.get("")
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": "An internal error occurred. Please try again later.",
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again or contact support.",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="PixelPilot API",
        description=(
            "AI-assisted image analysis and edit planning on Google Gemini, with "
            "automatic model fallback and rule-based degradation."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Middleware executes in REVERSE order of addition (last added runs first)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(RateLimitMiddleware)

    register_exception_handlers(app)

    app.include_router(ai_edit.router)
    app.include_router(ai_enhance.router)
    app.include_router(health.router)

    return app


app = create_app()
