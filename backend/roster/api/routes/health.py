"""Health & Readiness Probes - liveness and readiness endpoints.

Invariants:
    - GET /health always returns 200 {"status": "ok"} and never touches a store
    - GET /health/ready returns 503 if any store fails its ping

Design Decisions:
    - Separate liveness/readiness: a store outage should pull the instance out of
      the load balancer, not restart the process
"""

import logging

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/health", tags=["health"])


@router.get("", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {"status": "ok"}


@router.get("/ready")
async def readiness_check(request: Request):
    """Readiness probe - pings both stores."""
    checks = {}
    for name, attr in (("users", "user_store"), ("items", "item_store")):
        store = getattr(request.app.state, attr, None)
        ok = await store.ping() if store is not None else False
        checks[name] = "healthy" if ok else "unavailable"

    if any(v != "healthy" for v in checks.values()):
        logger.warning(f"Readiness check failed: {checks}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "checks": checks},
        )
    return {"status": "ready", "checks": checks}
