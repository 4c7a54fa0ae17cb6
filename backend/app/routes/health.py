"""
Hidden Gems Backend — Liveness and Health Routes
=================================================

What:  GET / (plain-text liveness banner) and GET /health (database probe).
Why:   `/` is what existing clients and uptime checks hit; `/health` gives
       load balancers and Docker a JSON answer that includes MongoDB.

Status levels for /health:
    - healthy:   MongoDB answers a ping
    - unhealthy: MongoDB ping failed (still HTTP 200, so the body is readable)
"""

import logging
import time

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from app import __version__
from app.database import MongoConnection, get_connection
from app.schemas.gem import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/",
    response_class=PlainTextResponse,
    summary="Liveness message",
)
async def root() -> str:
    return "Dee Why Hidden Gems API is running!"


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description="Reports whether MongoDB answers a ping, plus version and uptime.",
)
async def health_check(connection: MongoConnection = Depends(get_connection)) -> HealthResponse:
    """
    Check the service and its database.

    Runs `ping` against the admin database rather than a collection query,
    so the probe costs the same however many gems are stored.
    """
    if await connection.ping():
        db_status, overall = "connected", "healthy"
    else:
        db_status, overall = "disconnected", "unhealthy"
        logger.warning("Health check: MongoDB unreachable (%s)", connection.describe())

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
