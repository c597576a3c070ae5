"""
Shared fixtures for Chain Explorer unit tests.

Chains are built in memory with real-looking SHA-256 hashes and served
through an AsyncMock ledger that behaves like NodeClient.
"""

import hashlib
from unittest.mock import AsyncMock, MagicMock

import pytest

from services.chain_explorer.core.constants import GENESIS_SENTINEL
from services.chain_explorer.core.errors import NotFound
from services.chain_explorer.core.types import LedgerEntry


def build_chain(length: int, sentinel: str = GENESIS_SENTINEL) -> list[LedgerEntry]:
    """Build a linked chain, genesis first."""
    chain: list[LedgerEntry] = []
    previous = sentinel
    acc_diff = 0
    for index in range(length):
        block_hash = hashlib.sha256(f"block-{index}".encode()).hexdigest()
        acc_diff += 2 ** 8
        chain.append(
            LedgerEntry(
                index=index,
                timestamp=1700000000 + index * 60,
                payload=f"payload {index}",
                previous_hash=previous,
                nonce=index * 7,
                hash=block_hash,
                difficulty_bits=8,
                accumulated_difficulty=acc_diff,
            )
        )
        previous = block_hash
    return chain


def build_ledger(chain: list[LedgerEntry]) -> MagicMock:
    """Mock LedgerQueryService serving the given chain."""
    by_hash = {entry.hash: entry for entry in chain}

    async def get_by_hash(block_hash: str) -> LedgerEntry:
        if block_hash not in by_hash:
            raise NotFound(block_hash)
        return by_hash[block_hash]

    ledger = MagicMock()
    ledger.get_frontier = AsyncMock(return_value=chain[-1])
    ledger.get_by_hash = AsyncMock(side_effect=get_by_hash)
    return ledger


@pytest.fixture
def chain_factory():
    """Factory for in-memory chains."""
    return build_chain


@pytest.fixture
def ledger_factory():
    """Factory for mock ledgers over a chain."""
    return build_ledger
