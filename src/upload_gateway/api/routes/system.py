import logging
from typing import Any

from fastapi import APIRouter, Depends, Request

from upload_gateway.api.deps import get_remote_sync
from upload_gateway.remote_sync import RemoteSync

logger = logging.getLogger(__name__)
router = APIRouter(tags=["system"])


@router.get("/system/health")
async def health_check(
    request: Request,
    remote_sync: RemoteSync = Depends(get_remote_sync),
) -> dict[str, Any]:
    """Check connectivity to the static host and list configured endpoints."""
    checks: dict[str, Any] = {}

    if remote_sync.ping():
        checks["static_host"] = "ok"
    else:
        checks["static_host"] = f"error: {remote_sync.host.label} unreachable"

    overall = all(v == "ok" for v in checks.values())
    return {
        "status": "healthy" if overall else "degraded",
        "checks": checks,
        "endpoints": sorted(request.app.state.pipelines),
    }
