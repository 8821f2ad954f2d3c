"""
Benefícios API: Status and Health Routes
=========================================

What:  GET /api (static status payload) and GET /health (dependency probe).
Why:   /api is the long-standing "is it up" endpoint clients already call;
       /health is for container health checks and load balancers.
How:   /health pings MongoDB through the shared client and reports the
       result; it never fails the request itself.
"""

import logging
import time

from fastapi import APIRouter

from app import __version__
from app.database import get_client, ping
from app.schemas.beneficio import HealthResponse, StatusResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()

STATUS_MESSAGE = "API FATEC 100% funcional🚀"


@router.get(
    "/api",
    response_model=StatusResponse,
    summary="API status",
)
async def api_status() -> StatusResponse:
    return StatusResponse(message=STATUS_MESSAGE, version=__version__)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description="Reports MongoDB connectivity and uptime. Always HTTP 200.",
)
async def health_check() -> HealthResponse:
    """
    Check the service and its database.

    The database counts as disconnected both when the lifespan never
    connected and when the ping fails.
    """
    db_status = "connected"
    overall = "healthy"

    client = get_client()
    try:
        if client is None:
            raise RuntimeError("client not initialized")
        await ping(client)
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
