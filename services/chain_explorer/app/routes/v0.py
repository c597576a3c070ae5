"""
Chain Explorer V0 API Endpoints

JSON view of the chain as seen through the configured ledger node.

Endpoints:
- GET /v0/blocks - Newest window of blocks (newest first)
- GET /v0/frontier - Current frontier block
- GET /v0/block/{block_hash} - Single block by hash
"""

import logging
from typing import Annotated, Optional, Union

from fastapi import APIRouter, HTTPException, Query, Request
from pydantic import BaseModel, Field

from ...backfill import ChainBackfiller
from ...core.constants import MAX_WINDOW_SIZE
from ...core.errors import InvalidBound, NotFound, QueryFailure
from ..config import settings


logger = logging.getLogger(__name__)
router = APIRouter(prefix="/v0", tags=["v0"])


# =============================================================================
# Response Models
# =============================================================================

class BlockResponse(BaseModel):
    """Single block, in the node's wire format."""

    index: int
    timestamp: int = Field(..., description="Block time (unix seconds)")
    data: str
    previous: str = Field(..., description="Predecessor hash (all zeros for genesis)")
    nonce: int
    hash: str
    diff_bits: int
    acc_diff: Union[int, float]


class BlocksResponse(BaseModel):
    """Response for /v0/blocks endpoint."""

    node_url: str
    count: int
    reached_genesis: bool = Field(..., description="True if the window ends at genesis")
    blocks: list[BlockResponse]


# =============================================================================
# Dependencies
# =============================================================================

def get_ledger_client(request: Request):
    """Get ledger node client from app state."""
    ledger_client = getattr(request.app.state, "ledger_client", None)
    if not ledger_client:
        raise HTTPException(status_code=503, detail="Ledger client not initialized")
    return ledger_client


def get_backfiller(request: Request) -> ChainBackfiller:
    """Get backfiller from app state, or build one for the configured hash length."""
    backfiller = getattr(request.app.state, "backfiller", None)
    if backfiller is None:
        backfiller = ChainBackfiller(sentinel=settings.sentinel)
    return backfiller


def raise_http_error(e: Exception) -> None:
    """Translate ledger errors into HTTP errors."""
    if isinstance(e, InvalidBound):
        raise HTTPException(status_code=400, detail=str(e))
    if isinstance(e, NotFound):
        raise HTTPException(status_code=404, detail=str(e))
    if isinstance(e, QueryFailure):
        raise HTTPException(status_code=502, detail=f"Ledger node error: {e}")
    raise e


def _to_block_response(entry) -> BlockResponse:
    return BlockResponse(**entry.to_wire())


# =============================================================================
# GET /v0/blocks
# =============================================================================

@router.get("/blocks", response_model=BlocksResponse)
async def get_blocks(
    request: Request,
    limit: Annotated[
        Optional[int],
        Query(ge=1, le=MAX_WINDOW_SIZE, description=f"Blocks to return (1-{MAX_WINDOW_SIZE})")
    ] = None,
):
    """
    Get the newest blocks, walking back from the frontier.

    Returns fewer than `limit` blocks only when the chain is shorter,
    in which case the last block is genesis. Any node failure fails the
    whole request; no partial window is returned.
    """
    ledger_client = get_ledger_client(request)
    backfiller = get_backfiller(request)
    max_count = limit if limit is not None else settings.window_size

    try:
        blocks = await backfiller.collect_recent(max_count, ledger_client)
    except (InvalidBound, QueryFailure) as e:
        raise_http_error(e)

    return BlocksResponse(
        node_url=settings.node_url,
        count=len(blocks),
        reached_genesis=blocks[-1].is_genesis(backfiller.sentinel),
        blocks=[_to_block_response(b) for b in blocks],
    )


# =============================================================================
# GET /v0/frontier
# =============================================================================

@router.get("/frontier", response_model=BlockResponse)
async def get_frontier(request: Request):
    """Get the current frontier block."""
    ledger_client = get_ledger_client(request)

    try:
        entry = await ledger_client.get_frontier()
    except QueryFailure as e:
        raise_http_error(e)

    return _to_block_response(entry)


# =============================================================================
# GET /v0/block/{block_hash}
# =============================================================================

@router.get("/block/{block_hash}", response_model=BlockResponse)
async def get_block(request: Request, block_hash: str):
    """Get a single block by its hash."""
    ledger_client = get_ledger_client(request)

    try:
        entry = await ledger_client.get_by_hash(block_hash)
    except QueryFailure as e:
        raise_http_error(e)

    return _to_block_response(entry)
