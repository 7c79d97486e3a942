"""Health Routes — liveness and readiness probes.

Invariants:
    - GET /api/v1/health/ answers 200 whenever the process serves requests
    - GET /api/v1/health/ready answers 503 until the database answers a ping

Design Decisions:
    - db_manager is looked up through the module on every call: it only exists
      after the lifespan has run
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

import daily_trivia.infrastructure.database as database

router = APIRouter(prefix="/api/v1/health", tags=["health"])

SERVICE_NAME = "daily-trivia-api"


@router.get("/")
async def liveness():
    return {"status": "healthy", "service": SERVICE_NAME, "version": "1.0.0"}


@router.get("/ready")
async def readiness():
    manager = database.db_manager
    if manager is None or not await manager.ping():
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "database_unavailable"},
        )
    return {"status": "ready", "checks": {"database": "healthy"}}
