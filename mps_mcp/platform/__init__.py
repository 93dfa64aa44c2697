"""MPS platform REST API: client, request structs, and operations."""

from mps_mcp.platform.client import PlatformClient as PlatformClient
from mps_mcp.platform.models import ExportRequest as ExportRequest
from mps_mcp.platform.models import MenuCreateRequest as MenuCreateRequest
from mps_mcp.platform.models import RouterCreateRequest as RouterCreateRequest

__all__ = ["ExportRequest", "MenuCreateRequest", "PlatformClient", "RouterCreateRequest"]
