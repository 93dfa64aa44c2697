"""Security: path containment for extracted archive entries."""

from mps_mcp.security.paths import resolve_within as resolve_within

__all__ = ["resolve_within"]
