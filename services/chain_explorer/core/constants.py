"""
Chain Explorer Constants

Central configuration for the node protocol and the explorer window.

The "no predecessor" sentinel is an all-zero string whose length must match
the node's hash encoding exactly. It is built from a configured length
rather than spelled out as a literal.
"""


# =============================================================================
# Hash Encoding
# =============================================================================

# Hex characters in a block hash (SHA-256 digest, hex encoded)
DEFAULT_HASH_LENGTH: int = 64

SENTINEL_CHAR: str = "0"


def make_sentinel(length: int = DEFAULT_HASH_LENGTH) -> str:
    """
    Build the "no predecessor" sentinel for a given hash length.

    Raises:
        ValueError: If length is not a positive integer
    """
    if isinstance(length, bool) or not isinstance(length, int) or length <= 0:
        raise ValueError(f"Sentinel length must be a positive integer, got {length!r}")
    return SENTINEL_CHAR * length


GENESIS_SENTINEL: str = make_sentinel(DEFAULT_HASH_LENGTH)


# =============================================================================
# Explorer Window
# =============================================================================

# Number of most recent blocks shown by default
DEFAULT_WINDOW_SIZE: int = 10

# Upper bound accepted by the HTTP API
MAX_WINDOW_SIZE: int = 100


# =============================================================================
# Node REST Endpoints
# =============================================================================

FRONTIER_PATH: str = "/frontier_block"
BLOCK_PATH: str = "/block/{hash}"
