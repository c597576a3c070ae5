"""
Chain Explorer Backfill Module

Reconstructs the newest window of the chain by backward traversal.
"""

from .service import ChainBackfiller

__all__ = ["ChainBackfiller"]
