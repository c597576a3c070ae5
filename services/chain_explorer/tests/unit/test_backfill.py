"""
Unit tests for ChainBackfiller.

Tests cover:
- Window length, ordering and hash links
- Termination at genesis vs. at the bound
- Error propagation (no partial windows)
- Bound validation
- Strictly sequential fetching
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from services.chain_explorer.backfill import ChainBackfiller
from services.chain_explorer.core.constants import GENESIS_SENTINEL, make_sentinel
from services.chain_explorer.core.errors import InvalidBound, NotFound, QueryFailure


@pytest.fixture
def backfiller():
    """Backfiller using the default 64-character sentinel."""
    return ChainBackfiller()


# =============================================================================
# Window Shape
# =============================================================================


class TestWindowShape:
    """Length, ordering and link invariants of collected windows."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "chain_length,max_count",
        [(1, 1), (1, 10), (3, 10), (5, 5), (10, 3), (20, 10), (20, 1)],
    )
    async def test_length_is_min_of_bound_and_chain(
        self, backfiller, chain_factory, ledger_factory, chain_length, max_count
    ):
        """Window holds min(max_count, chain length) entries."""
        ledger = ledger_factory(chain_factory(chain_length))

        blocks = await backfiller.collect_recent(max_count, ledger)

        assert len(blocks) == min(max_count, chain_length)

    @pytest.mark.asyncio
    async def test_ordered_newest_first_with_step_one(
        self, backfiller, chain_factory, ledger_factory
    ):
        """Indices strictly decrease by one, frontier first."""
        chain = chain_factory(15)
        blocks = await backfiller.collect_recent(10, ledger_factory(chain))

        assert blocks[0] == chain[-1]
        for newer, older in zip(blocks, blocks[1:]):
            assert newer.index - older.index == 1

    @pytest.mark.asyncio
    async def test_adjacent_entries_are_hash_linked(
        self, backfiller, chain_factory, ledger_factory
    ):
        """Each newer entry points at the next (older) entry's hash."""
        blocks = await backfiller.collect_recent(10, ledger_factory(chain_factory(12)))

        for newer, older in zip(blocks, blocks[1:]):
            assert newer.previous_hash == older.hash

    @pytest.mark.asyncio
    async def test_short_chain_ends_at_genesis(
        self, backfiller, chain_factory, ledger_factory
    ):
        """Three-block chain with bound 10 returns [#2, #1, genesis]."""
        chain = chain_factory(3)
        ledger = ledger_factory(chain)

        blocks = await backfiller.collect_recent(10, ledger)

        assert [b.index for b in blocks] == [2, 1, 0]
        assert blocks[-1].previous_hash == GENESIS_SENTINEL
        assert blocks[-1].is_genesis(backfiller.sentinel)
        # Never asks the node for the sentinel
        assert ledger.get_by_hash.await_count == 2

    @pytest.mark.asyncio
    async def test_long_chain_stops_at_bound(
        self, backfiller, chain_factory, ledger_factory
    ):
        """Twenty-block chain with bound 10 returns #19..#10."""
        chain = chain_factory(20)
        ledger = ledger_factory(chain)

        blocks = await backfiller.collect_recent(10, ledger)

        assert [b.index for b in blocks] == list(range(19, 9, -1))
        assert blocks[-1].previous_hash != GENESIS_SENTINEL
        assert blocks[-1].previous_hash == chain[9].hash
        assert ledger.get_frontier.await_count == 1
        assert ledger.get_by_hash.await_count == 9

    @pytest.mark.asyncio
    @pytest.mark.parametrize("chain_length,max_count", [(3, 10), (9, 10), (20, 10), (11, 10)])
    async def test_sentinel_at_end_iff_window_short(
        self, backfiller, chain_factory, ledger_factory, chain_length, max_count
    ):
        """Last entry is genesis exactly when fewer than max_count came back."""
        blocks = await backfiller.collect_recent(
            max_count, ledger_factory(chain_factory(chain_length))
        )

        is_short = len(blocks) < max_count
        assert (blocks[-1].previous_hash == GENESIS_SENTINEL) == is_short

    @pytest.mark.asyncio
    async def test_chain_exactly_bound_long_returns_whole_chain(
        self, backfiller, chain_factory, ledger_factory
    ):
        """Bound equal to chain length returns everything, genesis last."""
        chain = chain_factory(5)

        blocks = await backfiller.collect_recent(5, ledger_factory(chain))

        assert len(blocks) == 5
        assert blocks[-1] == chain[0]

    @pytest.mark.asyncio
    async def test_bound_of_one_only_fetches_frontier(
        self, backfiller, chain_factory, ledger_factory
    ):
        """max_count=1 never follows a link."""
        ledger = ledger_factory(chain_factory(4))

        blocks = await backfiller.collect_recent(1, ledger)

        assert len(blocks) == 1
        ledger.get_by_hash.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_repeated_calls_return_equal_windows(
        self, backfiller, chain_factory, ledger_factory
    ):
        """Two walks over an unchanged chain are value-equal and independent lists."""
        ledger = ledger_factory(chain_factory(8))

        first = await backfiller.collect_recent(5, ledger)
        second = await backfiller.collect_recent(5, ledger)

        assert first == second
        assert first is not second


# =============================================================================
# Custom Sentinel
# =============================================================================


class TestSentinel:
    """Sentinel comes from configuration, not a hardcoded literal."""

    @pytest.mark.asyncio
    async def test_custom_length_sentinel(self, chain_factory, ledger_factory):
        """A 68-character sentinel terminates chains built with it."""
        sentinel = make_sentinel(68)
        chain = chain_factory(3, sentinel=sentinel)
        backfiller = ChainBackfiller(sentinel=sentinel)

        blocks = await backfiller.collect_recent(10, ledger_factory(chain))

        assert len(blocks) == 3
        assert blocks[-1].previous_hash == sentinel

    @pytest.mark.asyncio
    async def test_mismatched_sentinel_surfaces_not_found(
        self, chain_factory, ledger_factory
    ):
        """Wrong sentinel length means genesis is missed and the lookup fails loudly."""
        chain = chain_factory(2, sentinel=make_sentinel(64))
        backfiller = ChainBackfiller(sentinel=make_sentinel(68))

        with pytest.raises(NotFound):
            await backfiller.collect_recent(10, ledger_factory(chain))

    def test_empty_sentinel_rejected(self):
        """Empty sentinel is refused at construction."""
        with pytest.raises(ValueError):
            ChainBackfiller(sentinel="")


# =============================================================================
# Errors
# =============================================================================


class TestErrors:
    """Failures abort the whole traversal."""

    @pytest.mark.asyncio
    async def test_frontier_failure_raises_query_failure(self, backfiller):
        """Unreachable node fails before any lookup."""
        ledger = MagicMock()
        ledger.get_frontier = AsyncMock(side_effect=QueryFailure("connection refused"))
        ledger.get_by_hash = AsyncMock()

        with pytest.raises(QueryFailure, match="connection refused"):
            await backfiller.collect_recent(10, ledger)

        ledger.get_by_hash.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_fifth_lookup_failure_aborts_traversal(
        self, backfiller, chain_factory, ledger_factory
    ):
        """Failure on the 5th needed hash propagates; nothing more is fetched."""
        chain = chain_factory(20)
        ledger = ledger_factory(chain)
        served = {entry.hash: entry for entry in chain}
        calls = []

        async def get_by_hash(block_hash):
            calls.append(block_hash)
            if len(calls) == 5:
                raise QueryFailure("timeout")
            return served[block_hash]

        ledger.get_by_hash = AsyncMock(side_effect=get_by_hash)

        with pytest.raises(QueryFailure, match="timeout"):
            await backfiller.collect_recent(10, ledger)

        assert len(calls) == 5

    @pytest.mark.asyncio
    async def test_missing_predecessor_raises_not_found(
        self, backfiller, chain_factory, ledger_factory
    ):
        """Pruned chain surfaces NotFound, which is a QueryFailure."""
        chain = chain_factory(6)
        ledger = ledger_factory(chain[3:])  # node lost blocks 0-2

        with pytest.raises(QueryFailure) as exc_info:
            await backfiller.collect_recent(10, ledger)

        assert isinstance(exc_info.value, NotFound)
        assert exc_info.value.block_hash == chain[2].hash

    @pytest.mark.asyncio
    @pytest.mark.parametrize("bad_bound", [0, -1, 2.5, "10", None, True])
    async def test_invalid_bound(self, backfiller, chain_factory, ledger_factory, bad_bound):
        """Non-positive or non-integer bounds are rejected before any query."""
        ledger = ledger_factory(chain_factory(3))

        with pytest.raises(InvalidBound):
            await backfiller.collect_recent(bad_bound, ledger)

        ledger.get_frontier.assert_not_awaited()

    def test_invalid_bound_is_value_error(self):
        """InvalidBound can be caught as ValueError."""
        assert issubclass(InvalidBound, ValueError)


# =============================================================================
# Sequencing
# =============================================================================


class TestSequencing:
    """One request in flight at a time; independent walks do not interact."""

    @pytest.mark.asyncio
    async def test_never_more_than_one_request_in_flight(
        self, backfiller, chain_factory
    ):
        """Each lookup completes before the next starts."""
        chain = chain_factory(10)
        served = {entry.hash: entry for entry in chain}
        in_flight = 0
        max_in_flight = 0

        async def track(result):
            nonlocal in_flight, max_in_flight
            in_flight += 1
            max_in_flight = max(max_in_flight, in_flight)
            await asyncio.sleep(0)
            in_flight -= 1
            return result

        async def get_frontier():
            return await track(chain[-1])

        async def get_by_hash(block_hash):
            return await track(served[block_hash])

        ledger = MagicMock()
        ledger.get_frontier = AsyncMock(side_effect=get_frontier)
        ledger.get_by_hash = AsyncMock(side_effect=get_by_hash)

        blocks = await backfiller.collect_recent(10, ledger)

        assert len(blocks) == 10
        assert max_in_flight == 1

    @pytest.mark.asyncio
    async def test_concurrent_walks_are_independent(
        self, backfiller, chain_factory, ledger_factory
    ):
        """Two walks gathered together each get their own window."""
        ledger = ledger_factory(chain_factory(12))

        short, long = await asyncio.gather(
            backfiller.collect_recent(3, ledger),
            backfiller.collect_recent(10, ledger),
        )

        assert [b.index for b in short] == [11, 10, 9]
        assert [b.index for b in long] == list(range(11, 1, -1))
