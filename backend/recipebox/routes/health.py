"""
RecipeBox Backend: Health Check Route
=======================================

What:  GET /health for container probes and monitoring.
How:   Runs SELECT 1 against the app's database and reports uptime.

Status levels:
    healthy:    database reachable
    unhealthy:  database unreachable (still HTTP 200, so the body is readable)
"""

import logging
import time

from fastapi import APIRouter, Request
from sqlalchemy.exc import SQLAlchemyError

from recipebox import __version__
from recipebox.database import Database
from recipebox.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request) -> HealthResponse:
    db_status = "connected"
    overall = "healthy"

    database: Database = request.app.state.database
    try:
        await database.ping()
    except (SQLAlchemyError, OSError) as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
