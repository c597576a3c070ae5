"""
Prometheus Metrics Endpoint

Exposes /metrics endpoint in Prometheus text format.
"""

import logging
from fastapi import APIRouter, Response
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from ...core.metrics import REGISTRY, set_service_info
from ..config import settings


logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/metrics")
async def prometheus_metrics() -> Response:
    """
    Prometheus metrics endpoint.

    Returns metrics in Prometheus text exposition format.

    Metrics exposed:
    - chain_explorer_node_requests_total{operation, status}
    - chain_explorer_node_request_latency_seconds{operation}
    - chain_explorer_backfill_windows_total{outcome}
    - chain_explorer_backfill_window_length
    - chain_explorer_service_info{version, environment}
    """
    # Set service info on each scrape (idempotent)
    set_service_info(settings.service_version, settings.environment)

    metrics_output = generate_latest(REGISTRY)

    return Response(
        content=metrics_output,
        media_type=CONTENT_TYPE_LATEST,
    )
