"""Containment checks for paths written on behalf of remote content."""

from __future__ import annotations

import logging
from pathlib import Path

from mps_mcp.errors import PathValidationError

logger = logging.getLogger(__name__)


def resolve_within(root: Path, relative: str) -> Path:
    """Join *relative* onto *root* and ensure the result stays inside *root*.

    Used for archive entry names, which come from the server and may contain
    ``..`` segments or absolute paths.
    """
    if "\x00" in relative:
        msg = f"Path contains null byte: {relative!r}"
        raise PathValidationError(msg)

    if any(ord(c) < 32 for c in relative):
        msg = f"Path contains control characters: {relative!r}"
        raise PathValidationError(msg)

    resolved_root = root.resolve()
    candidate = (resolved_root / relative).resolve()
    if candidate == resolved_root or not candidate.is_relative_to(resolved_root):
        logger.warning("Path blocked: %s (outside %s)", candidate, resolved_root)
        msg = f"Path {relative!r} escapes output directory {resolved_root}"
        raise PathValidationError(msg)

    return candidate
