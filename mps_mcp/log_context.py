"""Logging context: ContextVar-based log enrichment for tool calls.

Every log record is automatically enriched with a ``[tool:request]`` prefix
via a `ContextFilter` attached to the root logger handlers.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar

# Propagated through the asyncio task serving one tool call.
ctx_tool: ContextVar[str | None] = ContextVar("ctx_tool", default=None)
ctx_request_id: ContextVar[str | None] = ContextVar("ctx_request_id", default=None)


class ContextFilter(logging.Filter):
    """Inject ContextVar values into every LogRecord as ``record.ctx``."""

    def filter(self, record: logging.LogRecord) -> bool:
        tool = ctx_tool.get(None)
        rid = ctx_request_id.get(None)
        parts: list[str] = []
        if tool:
            parts.append(tool)
        if rid:
            parts.append(rid[:8])
        record.ctx = f"[{':'.join(parts)}] " if parts else ""
        return True


def set_log_context(
    *,
    tool: str | None = None,
    request_id: str | None = None,
) -> None:
    """Set logging context for the current asyncio task."""
    if tool is not None:
        ctx_tool.set(tool)
    if request_id is not None:
        ctx_request_id.set(request_id)
