"""Health & Readiness Probes — liveness and readiness endpoints for container orchestration.

Invariants:
    - GET / and GET /health always return 200 if the process is up (liveness)
    - GET /health/ready returns 503 if either store is unreachable (readiness)

Design Decisions:
    - Separate liveness/readiness: liveness restarts, readiness removes from the
      load balancer
    - Root banner kept as plain text for uptime monitors configured against it
"""

import logging
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse, PlainTextResponse

import modelmart.infrastructure.database as db_module

logger = logging.getLogger(__name__)
router = APIRouter(tags=["health"])


@router.get("/", response_class=PlainTextResponse)
async def root():
    return "AI Model Inventory Manager Server is running!"


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {"status": "healthy", "service": "modelmart-api", "version": "1.0.0"}


@router.get("/health/ready")
async def readiness_check():
    """Readiness probe — includes connectivity of both stores."""
    checks = {}
    for name, manager in (
        ("records", db_module.records_db), ("ledger", db_module.ledger_db),
    ):
        ok = await manager.health_check() if manager else False
        checks[name] = "healthy" if ok else "unavailable"
    if any(v != "healthy" for v in checks.values()):
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "database_unavailable",
                "checks": checks,
            },
        )
    return {"status": "ready", "checks": checks}
