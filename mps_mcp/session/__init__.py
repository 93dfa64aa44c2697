"""Session management: token lifecycle, lazy expiry, authenticated clients."""

from mps_mcp.session.manager import Session as Session
from mps_mcp.session.manager import TokenManager as TokenManager

__all__ = ["Session", "TokenManager"]
