"""Health Routes — liveness and readiness of the stats API.

Invariants:
    - GET /health/ answers 200 whenever the process is up
    - GET /health/ready answers 200 only once the lifespan has built the
      StatsEngine and the key-value store answers; otherwise 503 naming the
      failing checks
    - The span source is not checked: its failures only zero a session's spans
"""

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    return {"status": "healthy", "service": "ntrl-stats", "version": "1.0.0"}


@router.get("/ready")
async def readiness_check(request: Request):
    """Readiness: stats engine wired and key-value store reachable."""
    state = request.app.state
    db_manager = getattr(state, "db_manager", None)
    checks = {
        "stats_engine": getattr(state, "engine", None) is not None,
        "kv_store": await db_manager.health_check() if db_manager else False,
    }
    report = {name: "healthy" if ok else "unavailable" for name, ok in checks.items()}
    if not all(checks.values()):
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "checks": report},
        )
    return {"status": "ready", "checks": report}
