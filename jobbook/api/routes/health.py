"""Health Routes — liveness and readiness probes.

Invariants:
    - /health/ answers 200 whenever the process can serve requests
    - /health/ready answers 503 until the database responds and the container is wired
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from jobbook.api import dependencies
from jobbook.infrastructure import database

router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/")
async def liveness():
    return {"status": "healthy", "service": "jobbook-api", "version": "1.0.0"}


@router.get("/ready")
async def readiness():
    """Report database connectivity and which collections hold data."""
    checks = {"database": "unavailable", "container": "missing"}
    manager = database.db_manager
    if manager is not None and await manager.health_check():
        checks["database"] = "healthy"
    container = dependencies.current_container()
    if container is not None:
        checks["container"] = "ready"

    if "unavailable" in checks.values() or "missing" in checks.values():
        return JSONResponse(
            status_code=503, content={"status": "not_ready", "checks": checks},
        )
    return {
        "status": "ready",
        "checks": checks,
        "collections": await container.store.keys(),
    }
