"""
SmartTodo Backend - FastAPI Application Factory
================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() builds the dispatcher, installs middleware, registers
       the transport-validation handler and mounts the routers.
Who:   uvicorn (`uvicorn smarttodo.main:app`) and the test suite.

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware (outermost first):                           │
    │  CORS → CorrelationId → AccessLog → ExceptionTranslation │
    │                                                          │
    │  Routes:                                                 │
    │  /api/todoitems/*  → Dispatcher                          │
    │                        Validation → Logging → Handler    │
    │  /health                                                 │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:   logging, configuration check
    Shutdown:  dispose database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional, Sequence, Union

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from smarttodo import __version__
from smarttodo.config import Settings, settings
from smarttodo.database import dispose_engine
from smarttodo.exceptions import ValidationErrorMap
from smarttodo.middleware.correlation import CorrelationIdMiddleware, resolve_correlation_id
from smarttodo.middleware.exception_translator import ExceptionTranslationMiddleware
from smarttodo.middleware.logging import RequestLoggingMiddleware
from smarttodo.pipeline.context import new_trace_id
from smarttodo.problem_details import PROBLEM_CONTENT_TYPE, ValidationProblem, build_problem_details
from smarttodo.routes import health, todo_items
from smarttodo.services.registration import build_dispatcher

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

class CorrelationIdFilter(logging.Filter):
    """Gives every record a `correlation_id` so the format string never fails."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "correlation_id"):
            record.correlation_id = "-"
        return True


def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s [%(correlation_id)s] %(message)s

    Records that carry no correlation id (startup, library logs) show "-".
    """
    log_format = "%(asctime)s [%(levelname)s] %(name)s [%(correlation_id)s] %(message)s"

    handler = logging.StreamHandler(sys.stdout)  # Docker captures stdout
    handler.addFilter(CorrelationIdFilter())

    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[handler],
        force=True,  # Override any existing logging config
    )

    # These log at INFO for every operation
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    app_settings: Settings = app.state.settings

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(app_settings.log_level)
    logger.info("=" * 60)
    logger.info("SmartTodo Backend %s starting up (%s)...", __version__, app_settings.environment)

    try:
        app_settings.validate_for_environment()
    except ValueError as e:
        logger.error("Configuration error: %s", e)
        logger.error("Fix the configuration and restart the server.")
        # Keep serving so health checks and logs show the problem

    logger.info(
        "Dispatcher ready with %d request types",
        len(app.state.dispatcher.registry),
    )
    logger.info("Server ready at http://%s:%d", app_settings.backend_host, app_settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("SmartTodo Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Transport Validation → Problem Details
# ══════════════════════════════════════════════════════════════════════════

_LOCATION_SOURCES = {"body", "query", "path", "header", "cookie"}


def _wire_field_name(loc: Sequence[Union[str, int]]) -> str:
    """("body", "dueDate") → "DueDate"; ("path", "item_id") → "Id"."""
    parts = [str(p) for p in loc if isinstance(p, str)]
    if parts and parts[0] in _LOCATION_SOURCES:
        parts = parts[1:]
    if not parts:
        return "Request"
    name = parts[-1]
    if name == "item_id":
        return "Id"
    return "".join(word[:1].upper() + word[1:] for word in name.split("_"))


def request_validation_errors(exc: RequestValidationError) -> ValidationErrorMap:
    errors: ValidationErrorMap = {}
    for error in exc.errors():
        errors.setdefault(_wire_field_name(error.get("loc", ())), []).append(error.get("msg", "Invalid value"))
    return errors


def register_exception_handlers(app: FastAPI, app_settings: Settings) -> None:
    """
    Malformed transport input (bad JSON, wrong types, non-UUID path id)
    never reaches the dispatcher; FastAPI raises RequestValidationError.
    It is rendered as the same 400 Validation problem the pipeline produces.
    Every other exception is left to ExceptionTranslationMiddleware.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        correlation_id = getattr(request.state, "correlation_id", None) or resolve_correlation_id(
            request.headers.get(app_settings.correlation_header)
        )
        trace_id = getattr(request.state, "trace_id", None) or new_trace_id()
        errors = request_validation_errors(exc)
        logger.warning(
            "[%s] Request validation failed on %s %s: %s",
            correlation_id,
            request.method,
            request.url.path,
            errors,
            extra={"correlation_id": correlation_id},
        )
        body = build_problem_details(
            ValidationProblem(errors=errors),
            trace_id=trace_id,
            correlation_id=correlation_id,
        )
        return JSONResponse(
            status_code=body.status,
            content=body.to_dict(),
            media_type=PROBLEM_CONTENT_TYPE,
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    The dispatcher is built here, not in the lifespan, so the handler
    registry self-check fails at import time and test clients that skip
    the lifespan still get a working app.
    """
    app_settings = app_settings or settings

    app = FastAPI(
        title="SmartTodo API",
        description="Todo items over a validated, logged request pipeline.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.dispatcher = build_dispatcher()

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first. Execution order:
    # CORS → CorrelationId → AccessLog → ExceptionTranslation → routes

    app.add_middleware(
        ExceptionTranslationMiddleware,
        development=app_settings.is_development,
        header_name=app_settings.correlation_header,
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationIdMiddleware, header_name=app_settings.correlation_header)

    # Outermost so error responses carry CORS headers too
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[app_settings.correlation_header, "Location"],
    )

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app, app_settings)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(todo_items.router)
    app.include_router(health.router)

    return app


# uvicorn expects `smarttodo.main:app` to be importable
app = create_app()
