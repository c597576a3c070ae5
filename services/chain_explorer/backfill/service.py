"""
Chain Backfiller

Reconstructs the most recent window of the chain by walking backward from
the frontier along previous-hash links.

Usage:
    backfiller = ChainBackfiller()
    blocks = await backfiller.collect_recent(10, node_client)
"""

import logging
from typing import Optional

from ..client import LedgerQueryService
from ..core.constants import GENESIS_SENTINEL
from ..core.errors import InvalidBound, QueryFailure
from ..core.metrics import record_backfill_window
from ..core.types import LedgerEntry

logger = logging.getLogger(__name__)


class ChainBackfiller:
    """
    Backward traversal over a ledger node.

    The walk stops on whichever comes first:
    1. The window holds max_count entries (bound reached)
    2. The last entry's predecessor is the sentinel (genesis reached)

    Each fetch completes before the next hash is known, so there is never
    more than one request in flight per traversal. Every call builds its own
    list; concurrent traversals share nothing.
    """

    def __init__(self, sentinel: Optional[str] = None):
        self.sentinel = sentinel if sentinel is not None else GENESIS_SENTINEL
        if not self.sentinel:
            raise ValueError("Sentinel must be a non-empty string")

    async def collect_recent(
        self,
        max_count: int,
        ledger_query: LedgerQueryService,
    ) -> list[LedgerEntry]:
        """
        Collect up to max_count of the newest entries.

        Args:
            max_count: Positive bound on the number of entries
            ledger_query: Node capability (frontier + lookup by hash)

        Returns:
            Entries ordered newest first. Shorter than max_count only when
            the chain itself is shorter, in which case the last entry is genesis.

        Raises:
            InvalidBound: If max_count is not a positive integer
            QueryFailure: If any query fails (NotFound included); nothing is returned
        """
        if isinstance(max_count, bool) or not isinstance(max_count, int) or max_count <= 0:
            raise InvalidBound(max_count)

        blocks: list[LedgerEntry] = []

        try:
            blocks.append(await ledger_query.get_frontier())

            while len(blocks) < max_count:
                previous_hash = blocks[-1].previous_hash
                if previous_hash == self.sentinel:
                    break

                logger.debug(f"[backfill] #{blocks[-1].index} -> {previous_hash}")
                blocks.append(await ledger_query.get_by_hash(previous_hash))

        except QueryFailure as e:
            record_backfill_window("error")
            logger.warning(f"[backfill] Traversal aborted after {len(blocks)} blocks: {e}")
            raise

        outcome = "genesis" if blocks[-1].is_genesis(self.sentinel) else "bound"
        record_backfill_window(outcome, len(blocks))
        logger.info(
            f"[backfill] Collected {len(blocks)} blocks "
            f"(#{blocks[0].index}..#{blocks[-1].index}, stopped at {outcome})"
        )
        return blocks
