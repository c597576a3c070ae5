"""
Prometheus Metrics for Chain Explorer

Exposes operational metrics for monitoring and alerting.

Metrics:
- Node request counters and latency histograms
- Backfill window counters (by outcome) and window length histogram
"""

from prometheus_client import Counter, Gauge, Histogram, CollectorRegistry

# Create a custom registry to avoid conflicts with default registry
REGISTRY = CollectorRegistry()


# =============================================================================
# Node Request Metrics
# =============================================================================

# Requests issued to the node
NODE_REQUESTS_TOTAL = Counter(
    "chain_explorer_node_requests_total",
    "Total requests issued to the ledger node",
    ["operation", "status"],  # status: success, not_found, error
    registry=REGISTRY,
)

# Node request latency
NODE_REQUEST_LATENCY = Histogram(
    "chain_explorer_node_request_latency_seconds",
    "Ledger node request latency in seconds",
    ["operation"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
    registry=REGISTRY,
)


# =============================================================================
# Backfill Metrics
# =============================================================================

# Windows collected, by how the walk ended
BACKFILL_WINDOWS_TOTAL = Counter(
    "chain_explorer_backfill_windows_total",
    "Total backward traversals",
    ["outcome"],  # outcome: genesis, bound, error
    registry=REGISTRY,
)

# Entries per completed window
BACKFILL_WINDOW_LENGTH = Histogram(
    "chain_explorer_backfill_window_length",
    "Number of entries in a collected window",
    buckets=[1, 2, 5, 10, 25, 50, 100],
    registry=REGISTRY,
)


# =============================================================================
# Service Info Metrics
# =============================================================================

SERVICE_INFO = Gauge(
    "chain_explorer_service_info",
    "Service information",
    ["version", "environment"],
    registry=REGISTRY,
)


# =============================================================================
# Helper Functions
# =============================================================================

def record_node_request(operation: str, status: str, latency_seconds: float) -> None:
    """Record metrics for a single node request."""
    NODE_REQUESTS_TOTAL.labels(operation=operation, status=status).inc()
    NODE_REQUEST_LATENCY.labels(operation=operation).observe(latency_seconds)


def record_backfill_window(outcome: str, length: int = 0) -> None:
    """Record metrics for a finished (or aborted) traversal."""
    BACKFILL_WINDOWS_TOTAL.labels(outcome=outcome).inc()
    if outcome != "error":
        BACKFILL_WINDOW_LENGTH.observe(length)


def set_service_info(version: str, environment: str) -> None:
    """Set service info gauge."""
    SERVICE_INFO.labels(version=version, environment=environment).set(1)
