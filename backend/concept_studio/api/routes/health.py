"""Health Routes — liveness plus a readiness check over the usage database.

Invariants:
    - GET /health/ answers 200 while the process is up, without touching IO
    - GET /health/ready answers 503 when the usage database cannot serve a query,
      since no generation can be admitted without the quota ledger
    - Notification state is reported but never fails readiness (delivery is best-effort)
"""

import logging
from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from concept_studio.infrastructure import database

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])

SERVICE_NAME = "concept-studio-api"


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    return {"status": "healthy", "service": SERVICE_NAME, "version": "1.0.0"}


def _notification_state(request: Request) -> str:
    queue = getattr(request.app.state, "notifications", None)
    if queue is None:
        return "unknown"
    return "enabled" if queue.enabled else "disabled"


@router.get("/ready")
async def readiness_check(request: Request):
    """Ready when the usage ledger is reachable."""
    manager = database.db_manager
    db_ok = await manager.health_check() if manager else False
    checks = {
        "database": "healthy" if db_ok else "unavailable",
        "notifications": _notification_state(request),
    }
    if not db_ok:
        logger.warning("Readiness check failed: usage database unavailable")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "database_unavailable", "checks": checks},
        )
    return {"status": "ready", "checks": checks}
