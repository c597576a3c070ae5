"""
Block Explorer Page

Human-readable HTML view of the newest blocks.
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Query, Request
from fastapi.responses import HTMLResponse

from ...core.constants import MAX_WINDOW_SIZE
from ...core.errors import QueryFailure
from ...core.render import render_page
from ..config import settings
from .v0 import get_backfiller, get_ledger_client


logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/explorer", response_class=HTMLResponse)
async def explorer_page(
    request: Request,
    limit: Annotated[
        Optional[int],
        Query(ge=1, le=MAX_WINDOW_SIZE, description=f"Blocks to show (1-{MAX_WINDOW_SIZE})")
    ] = None,
) -> HTMLResponse:
    """
    Render the newest blocks, frontier first.

    If the node fails at any point the page shows an error instead of a
    partial chain.
    """
    ledger_client = get_ledger_client(request)
    backfiller = get_backfiller(request)
    max_count = limit if limit is not None else settings.window_size

    try:
        blocks = await backfiller.collect_recent(max_count, ledger_client)
    except QueryFailure as e:
        logger.error(f"Explorer failed to load blocks from {settings.node_url}: {e}")
        return HTMLResponse(content=render_page([], error=str(e)), status_code=502)

    return HTMLResponse(content=render_page(blocks))
