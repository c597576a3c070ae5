"""
Chain Explorer Service

Read-only block explorer for a hash-linked ledger node. Walks back from the
frontier block to show the newest window of the chain.

API Endpoints:
- GET /health - Service health check
- GET /v0/blocks - Newest blocks (JSON, newest first)
- GET /v0/frontier - Current frontier block
- GET /v0/block/{block_hash} - Block by hash
- GET /explorer - Newest blocks (HTML)
- GET /metrics - Prometheus metrics endpoint
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .routes import explorer, health, metrics, v0
from ..backfill import ChainBackfiller
from ..client import NodeClient

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Global instances for app state
_ledger_client: Optional[NodeClient] = None


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Creates the ledger node client and backfiller on startup and closes the
    HTTP client on shutdown.
    """
    global _ledger_client

    logger.info(f"Starting {settings.service_name} v{settings.service_version}")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Ledger node: {settings.node_url} (hash length {settings.hash_length})")

    _ledger_client = NodeClient(
        settings.node_url,
        timeout=settings.request_timeout_seconds,
        hash_length=settings.hash_length,
    )

    # Store references on app.state for route access
    app.state.ledger_client = _ledger_client
    app.state.backfiller = ChainBackfiller(sentinel=settings.sentinel)

    logger.info("Service startup complete")

    yield

    # Shutdown
    logger.info("Shutting down service...")

    if _ledger_client:
        await _ledger_client.close()
        _ledger_client = None

    logger.info("Service shutdown complete")


# Create FastAPI app
app = FastAPI(
    title="Chain Explorer",
    description="Read-only explorer for the newest blocks of a hash-linked ledger",
    version=settings.service_version,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.environment == "local" else [],
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router, tags=["health"])
app.include_router(v0.router, tags=["v0-api"])
app.include_router(explorer.router, tags=["explorer"])
app.include_router(metrics.router, tags=["metrics"])


@app.get("/")
async def root() -> dict:
    """Root endpoint - service info."""
    return {
        "service": settings.service_name,
        "version": settings.service_version,
        "environment": settings.environment,
        "docs": "/docs",
        "health": "/health",
        "explorer": "/explorer",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "services.chain_explorer.app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "local",
    )
