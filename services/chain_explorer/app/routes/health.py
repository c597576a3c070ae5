"""
Health Check Endpoint

Provides service health status for container health checks and monitoring.
"""

from datetime import datetime, timezone
from typing import Optional
from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from ...core.errors import QueryFailure
from ..config import settings


router = APIRouter()


class ComponentHealth(BaseModel):
    """Health status of a component."""
    status: str  # "healthy", "degraded", "unhealthy"
    message: Optional[str] = None
    last_check: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str  # "healthy", "degraded", "unhealthy"
    service: str
    version: str
    environment: str
    timestamp: str
    components: dict[str, ComponentHealth]


async def _check_ledger_node(request: Request) -> dict:
    """Probe the ledger node by fetching its frontier block."""
    ledger_client = getattr(request.app.state, "ledger_client", None)
    if not ledger_client:
        return {"status": "unhealthy", "message": "Ledger client not initialized"}

    try:
        frontier = await ledger_client.get_frontier()
    except QueryFailure as e:
        return {"status": "unhealthy", "message": f"{settings.node_url}: {e}"}

    return {"status": "healthy", "message": f"Frontier at #{frontier.index}"}


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """
    Service health check endpoint.

    Returns overall health status and per-component breakdown.
    The only component is the upstream ledger node.
    """
    now = datetime.now(timezone.utc).isoformat()
    components: dict[str, ComponentHealth] = {}

    result = await _check_ledger_node(request)
    components["ledger_node"] = ComponentHealth(
        status=result["status"],
        message=result.get("message"),
        last_check=now,
    )

    overall_status = "healthy"
    if result["status"] == "unhealthy":
        # The explorer still serves its own endpoints without a node
        overall_status = "degraded"

    return HealthResponse(
        status=overall_status,
        service=settings.service_name,
        version=settings.service_version,
        environment=settings.environment,
        timestamp=now,
        components=components,
    )


@router.get("/health/live")
async def liveness_check() -> dict:
    """
    Liveness probe.

    Simple check that the service is running.
    """
    return {"status": "ok"}


@router.get("/health/ready")
async def readiness_check(request: Request) -> dict:
    """
    Readiness probe.

    Ready once the ledger client has been created.
    """
    if not getattr(request.app.state, "ledger_client", None):
        raise HTTPException(status_code=503, detail="Ledger client not initialized")
    return {"status": "ready"}
