"""MCP boundary: tool handlers, workflow prompt, stdio server."""

from mps_mcp.server.app import build_server as build_server
from mps_mcp.server.app import serve as serve

__all__ = ["build_server", "serve"]
