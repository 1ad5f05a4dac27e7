"""
Alpha Tower Backend — Index and Health Routes
===============================================

What:  GET / returns the service banner; GET /health reports database
       connectivity for load balancers and container health checks.
"""

import logging
import time

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from alpha_tower import __version__
from alpha_tower.database import Database
from alpha_tower.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

BANNER = "Alpha Tower Sales System"

_start_time = time.time()


@router.get("/", summary="Service banner")
async def index() -> str:
    return BANNER


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(request: Request):
    """
    `healthy` (200) when `SELECT 1` succeeds, `unhealthy` (503) otherwise.
    """
    database: Database = request.app.state.database
    connected = await database.ping()

    health = HealthResponse(
        status="healthy" if connected else "unhealthy",
        version=__version__,
        database="connected" if connected else "disconnected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    if not connected:
        return JSONResponse(status_code=503, content=health.model_dump())
    return health
