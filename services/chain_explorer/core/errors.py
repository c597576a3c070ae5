"""
Chain Explorer Errors

- InvalidBound: caller passed a bad window size (programmer error)
- QueryFailure: node unreachable, timed out, or returned a malformed payload
- NotFound: node has no block with the requested hash
"""

from typing import Optional


class LedgerError(Exception):
    """Base class for ledger query and traversal errors."""


class InvalidBound(LedgerError, ValueError):
    """Window size is not a positive integer."""

    def __init__(self, max_count: object):
        self.max_count = max_count
        super().__init__(f"max_count must be a positive integer, got {max_count!r}")


class QueryFailure(LedgerError):
    """A query against the node failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class NotFound(QueryFailure):
    """The node does not know the requested block (inconsistent or pruned chain)."""

    def __init__(self, block_hash: str):
        self.block_hash = block_hash
        super().__init__(f"Block not found: {block_hash!r}", status_code=404)
