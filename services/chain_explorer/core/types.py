"""
Chain Explorer Core Types

Canonical type definitions for ledger entries served by a node.

SERIALIZATION CONTRACT:
    Internal Python code uses descriptive snake_case names.
    The node speaks a terse wire format (data, previous, diff_bits, acc_diff).
    This is achieved via Pydantic field aliases and `populate_by_name`.

    Example:
        Internal: entry.previous_hash
        Wire JSON: {"previous": "00ab..."}
"""

from typing import Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt


# =============================================================================
# Ledger Entry
# =============================================================================

class LedgerEntry(BaseModel):
    """
    One block in the chain, as materialized from a node response.

    Entries are frozen: the backfiller assembles sequences of them but never
    mutates one. Two entries compare equal when every field is equal.

    Integer fields are strict: "7" or 7.0 for an index is a malformed
    payload, not a coercion.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
    )

    index: StrictInt = Field(..., ge=0, description="Height of the block (genesis = 0)")
    timestamp: StrictInt = Field(..., description="Block time (seconds since epoch, UTC)")
    payload: str = Field(..., alias="data", description="Opaque application data")
    previous_hash: str = Field(
        ..., alias="previous", description="Hash of the predecessor, or the sentinel"
    )
    nonce: StrictInt = Field(..., ge=0, description="Proof-of-work nonce")
    hash: str = Field(..., description="Self-identifying block hash")
    difficulty_bits: StrictInt = Field(..., alias="diff_bits", description="Difficulty encoding")
    # u64 on the node; ints stay ints so large values survive unchanged
    accumulated_difficulty: Union[StrictInt, StrictFloat] = Field(
        ..., alias="acc_diff", description="Cumulative work up to this block"
    )

    def is_genesis(self, sentinel: str) -> bool:
        """True if this entry has no predecessor."""
        return self.previous_hash == sentinel

    def to_wire(self) -> dict:
        """Dump using the node's wire field names."""
        return self.model_dump(by_alias=True)
