# Chain Explorer Core Modules
"""
Core definitions shared by the node client, backfiller and API.

Modules:
- types: LedgerEntry value type (Pydantic model)
- constants: Hash encoding, sentinel and window settings
- errors: Query and traversal error taxonomy
- render: Human-readable explorer page
"""

from .types import LedgerEntry

from .constants import (
    BLOCK_PATH,
    DEFAULT_HASH_LENGTH,
    DEFAULT_WINDOW_SIZE,
    FRONTIER_PATH,
    GENESIS_SENTINEL,
    MAX_WINDOW_SIZE,
    make_sentinel,
)

from .errors import (
    InvalidBound,
    LedgerError,
    NotFound,
    QueryFailure,
)

from .render import (
    entry_view,
    format_utc,
    render_page,
)

__all__ = [
    # Types
    "LedgerEntry",
    # Constants
    "BLOCK_PATH",
    "DEFAULT_HASH_LENGTH",
    "DEFAULT_WINDOW_SIZE",
    "FRONTIER_PATH",
    "GENESIS_SENTINEL",
    "MAX_WINDOW_SIZE",
    "make_sentinel",
    # Errors
    "InvalidBound",
    "LedgerError",
    "NotFound",
    "QueryFailure",
    # Render
    "entry_view",
    "format_utc",
    "render_page",
]
