"""
Ledger Node Client

Read-only access to a ledger node's REST API.

Usage:
    async with NodeClient("http://127.0.0.1:8000") as client:
        frontier = await client.get_frontier()
        parent = await client.get_by_hash(frontier.previous_hash)
"""

import logging
import time
from typing import Optional, Protocol
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from ..core.constants import BLOCK_PATH, DEFAULT_HASH_LENGTH, FRONTIER_PATH
from ..core.errors import NotFound, QueryFailure
from ..core.metrics import record_node_request
from ..core.types import LedgerEntry

logger = logging.getLogger(__name__)


class LedgerQueryService(Protocol):
    """Capability the backfiller walks the chain with."""

    async def get_frontier(self) -> LedgerEntry:
        """Return the current newest entry."""
        ...

    async def get_by_hash(self, block_hash: str) -> LedgerEntry:
        """Return the entry whose hash equals block_hash."""
        ...


class NodeClient:
    """
    httpx implementation of LedgerQueryService.

    Endpoints:
    - GET /frontier_block: newest block
    - GET /block/{hash}: block by hash

    Errors:
    - 404 -> NotFound
    - transport errors, timeouts, other non-2xx statuses -> QueryFailure
    - undecodable or schema-violating payloads -> QueryFailure
    - lookup answered with a different block -> QueryFailure

    No retries are performed here.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        hash_length: int = DEFAULT_HASH_LENGTH,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.hash_length = hash_length
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "NodeClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout)
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def get_frontier(self) -> LedgerEntry:
        """Fetch the current frontier block."""
        return await self._fetch("frontier", FRONTIER_PATH)

    async def get_by_hash(self, block_hash: str) -> LedgerEntry:
        """Fetch the block identified by block_hash."""
        if not block_hash:
            raise NotFound(block_hash)
        # Escape the whole segment so "?", "#" or "/" cannot change the resource
        path = BLOCK_PATH.format(hash=quote(block_hash, safe=""))
        entry = await self._fetch("by_hash", path, block_hash=block_hash)
        if entry.hash != block_hash:
            logger.error(f"[node] Asked for {block_hash}, node returned {entry.hash}")
            raise QueryFailure(
                f"Node returned block {entry.hash!r} for requested hash {block_hash!r}"
            )
        return entry

    async def _fetch(
        self,
        operation: str,
        path: str,
        block_hash: Optional[str] = None,
    ) -> LedgerEntry:
        client = await self._get_client()
        start_time = time.time()

        try:
            response = await client.get(path)
        except httpx.HTTPError as e:
            record_node_request(operation, "error", time.time() - start_time)
            logger.error(f"[node] {operation} request to {self.base_url}{path} failed: {e}")
            raise QueryFailure(f"Request to {path} failed: {e}") from e

        latency = time.time() - start_time

        if response.status_code == 404:
            record_node_request(operation, "not_found", latency)
            logger.warning(f"[node] Block not found: {block_hash or path}")
            raise NotFound(block_hash or path)

        if response.is_error:
            record_node_request(operation, "error", latency)
            logger.error(f"[node] {operation} returned HTTP {response.status_code}")
            raise QueryFailure(
                f"Node returned HTTP {response.status_code} for {path}",
                status_code=response.status_code,
            )

        try:
            entry = self._parse_entry(response.json())
        except (ValueError, ValidationError) as e:
            record_node_request(operation, "error", latency)
            logger.error(f"[node] Malformed {operation} response: {e}")
            raise QueryFailure(f"Malformed response for {path}: {e}") from e

        record_node_request(operation, "success", latency)
        return entry

    def _parse_entry(self, data: object) -> LedgerEntry:
        """
        Validate a decoded response body into a LedgerEntry.

        Raises:
            ValidationError: If fields are missing or of the wrong type
            ValueError: If a hash does not match the configured encoding length
        """
        entry = LedgerEntry.model_validate(data)
        for name, value in (("hash", entry.hash), ("previous", entry.previous_hash)):
            if len(value) != self.hash_length:
                raise ValueError(
                    f"{name} has length {len(value)}, expected {self.hash_length}"
                )
        return entry
