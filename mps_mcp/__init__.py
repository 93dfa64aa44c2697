"""mps-mcp: MCP tools for the MPS low-code platform."""

__version__ = "1.0.0"
