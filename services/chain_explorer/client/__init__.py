"""
Chain Explorer Node Client

Read-only queries against a ledger node's REST API.
"""

from .node_client import LedgerQueryService, NodeClient

__all__ = ["LedgerQueryService", "NodeClient"]
