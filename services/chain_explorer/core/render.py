"""
Block Explorer Renderer

Turns an ordered window of ledger entries into something a human can read.

Per entry the page shows: index, hash, human-readable time, accumulated
difficulty, difficulty bits, nonce, raw timestamp, payload and the
predecessor hash. On failure the page shows an error state and no chain.
"""

from email.utils import formatdate
from html import escape
from typing import Optional, Sequence

from .types import LedgerEntry


DEFAULT_TITLE = "Block Explorer"


def format_utc(timestamp: int) -> str:
    """Format epoch seconds as an RFC 1123 date, e.g. 'Thu, 01 Jan 1970 00:00:00 GMT'."""
    return formatdate(timestamp, usegmt=True)


def entry_view(entry: LedgerEntry) -> dict:
    """Flatten an entry into the values the explorer displays."""
    return {
        "index": entry.index,
        "hash": entry.hash,
        "time": format_utc(entry.timestamp),
        "accumulated_difficulty": entry.accumulated_difficulty,
        "difficulty_bits": entry.difficulty_bits,
        "nonce": entry.nonce,
        "timestamp": entry.timestamp,
        "payload": entry.payload,
        "previous_hash": entry.previous_hash,
    }


def _render_entry(entry: LedgerEntry) -> str:
    view = entry_view(entry)
    return (
        '<section class="block">\n'
        f'  <h2><b>#{view["index"]}</b> - <u>{escape(view["hash"])}</u></h2>\n'
        f'  <div class="time">{escape(view["time"])}</div>\n'
        "  <table>\n"
        "    <thead><tr>"
        "<th>Accumulated work</th><th>Difficulty (bits)</th><th>Nonce</th><th>Timestamp</th>"
        "</tr></thead>\n"
        "    <tbody><tr>"
        f'<td>{view["accumulated_difficulty"]}</td>'
        f'<td>{view["difficulty_bits"]}</td>'
        f'<td>{view["nonce"]}</td>'
        f'<td>{view["timestamp"]}</td>'
        "</tr></tbody>\n"
        "  </table>\n"
        f'  <div class="data"><b>Data</b><pre>{escape(view["payload"])}</pre></div>\n'
        f'  <div class="previous">Previous block hash: <u>{escape(view["previous_hash"])}</u></div>\n'
        "</section>"
    )


def render_page(
    entries: Sequence[LedgerEntry],
    title: str = DEFAULT_TITLE,
    error: Optional[str] = None,
) -> str:
    """
    Render the explorer page.

    Args:
        entries: Window of entries, newest first
        title: Page heading
        error: If set, render the error state instead of the chain

    Returns:
        Complete HTML document
    """
    if error is not None:
        body = f'<div class="error">Unable to load blocks: {escape(error)}</div>'
    elif not entries:
        body = '<div class="empty">No blocks.</div>'
    else:
        body = "\n".join(_render_entry(entry) for entry in entries)

    return (
        "<!DOCTYPE html>\n"
        "<html>\n"
        "<head>\n"
        '  <meta charset="utf-8">\n'
        f"  <title>{escape(title)}</title>\n"
        "</head>\n"
        "<body>\n"
        f"<h1>{escape(title)}</h1>\n"
        f"{body}\n"
        "</body>\n"
        "</html>\n"
    )
