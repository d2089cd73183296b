"""Managed text blocks inside dotfiles.

A block is everything from a start-marker line through the matching
end-marker line. upsert_block() drops any existing block and appends a
fresh one at the end of the file; every other byte is left alone, so
running it repeatedly with the same body is a no-op.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .utils import atomic_write_text

logger = logging.getLogger(__name__)


def _strip_eol(line: str) -> str:
    return line.rstrip("\r\n")


def _split_blocks(
    text: str, start_marker: str, end_marker: str
) -> tuple[str, int]:
    """Remove all marked spans from ``text``.

    A start marker without a matching end marker swallows the rest of the
    file.

    Returns:
        (remaining text, number of spans removed)
    """
    kept: list[str] = []
    removed = 0
    inside = False
    for line in text.splitlines(keepends=True):
        bare = _strip_eol(line)
        if inside:
            if bare == end_marker:
                inside = False
            continue
        if bare == start_marker:
            inside = True
            removed += 1
            continue
        kept.append(line)
    return "".join(kept), removed


def render_block(start_marker: str, end_marker: str, body: str) -> str:
    if body and not body.endswith("\n"):
        body += "\n"
    return f"{start_marker}\n{body}{end_marker}\n"


def upsert_block(
    file_path: Path, start_marker: str, end_marker: str, body: str
) -> bool:
    """Insert or refresh a marked block at the end of ``file_path``.

    Creates the file (and parent directories) when missing.

    Returns:
        True if an existing block was replaced, False if it was added.
    """
    if start_marker == end_marker:
        raise ValueError("start and end markers must differ")

    try:
        with open(file_path, encoding="utf-8", newline="") as f:
            original = f.read()
    except FileNotFoundError:
        original = ""

    remaining, removed = _split_blocks(original, start_marker, end_marker)
    if remaining and not remaining.endswith("\n"):
        remaining += "\n"
    updated = remaining + render_block(start_marker, end_marker, body)

    if updated != original:
        atomic_write_text(file_path, updated)
    if removed:
        logger.info("Refreshed block %r in %s", start_marker, file_path)
    else:
        logger.info("Added block %r to %s", start_marker, file_path)
    return removed > 0

