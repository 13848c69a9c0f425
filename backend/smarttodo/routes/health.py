"""
SmartTodo Backend - Health Check Route
=======================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Runs SELECT 1 against the database and reports the result.
Who:   Called by Docker health checks, load balancers and monitoring.

Status levels:
    - healthy:   Database reachable (HTTP 200)
    - degraded:  Database unreachable (HTTP 200, flagged for monitoring)

The probe goes straight to the engine, not through the dispatcher, so a
broken pipeline still shows up as a healthy process with a clear log trail.
"""

import logging

from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from smarttodo import __version__
from smarttodo.database import engine
from smarttodo.schemas.todo_item import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check() -> HealthResponse:
    db_status = "connected"
    overall = "healthy"

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        db_status = "disconnected"
        overall = "degraded"
        logger.warning("Health check: database unreachable: %s", e)

    return HealthResponse(status=overall, database=db_status, version=__version__)
