"""FastMCP server assembly and stdio lifecycle."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Annotated

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from mps_mcp.config import PlatformConfig
from mps_mcp.platform.client import PlatformClient
from mps_mcp.server.prompts import module_development_steps
from mps_mcp.server.tools import PlatformTools
from mps_mcp.session.manager import TokenManager

logger = logging.getLogger(__name__)

SERVER_NAME = "MPS Platform MCP Server"

_TREE_HINT = (
    "Hierarchy is given by parent, which holds the parent's pk; "
    "an empty parent marks a root node."
)


def _tool_table(tools: PlatformTools) -> list[tuple[str, str, object]]:
    """(name, description, handler) for every registered tool."""
    return [
        (
            "module-development-description",
            "Describe the front-end module development workflow",
            tools.module_development_description,
        ),
        ("getSystemList", "Get the MPS platform system list", tools.get_system_list),
        (
            "listSystemFormTemplate",
            "List the form template definitions of a system",
            tools.list_system_form_template,
        ),
        (
            "getSystemFormTemplate",
            "Get the form definition for a template_id",
            tools.get_system_form_template,
        ),
        (
            "getSystemPermissionTree",
            "Get the functional permission tree of a system",
            tools.get_system_permission_tree,
        ),
        (
            "getSystemProjectRouterTree",
            f"Get the route tree of a project. {_TREE_HINT}",
            tools.get_system_project_router_tree,
        ),
        (
            "createSystemProjectRouter",
            f"Create a route in a project. {_TREE_HINT}",
            tools.create_system_project_router,
        ),
        (
            "deleteSystemProjectRouter",
            "Delete a route of a project",
            tools.delete_system_project_router,
        ),
        (
            "getSystemProjectMenuTree",
            f"Get the menu tree of a project. {_TREE_HINT}",
            tools.get_system_project_menu_tree,
        ),
        (
            "createSystemProjectMenu",
            f"Create a menu in a project. {_TREE_HINT}",
            tools.create_system_project_menu,
        ),
        (
            "deleteSystemProjectMenu",
            "Delete a menu of a project",
            tools.delete_system_project_menu,
        ),
        (
            "getFrontendCodeTemplateList",
            "Get the front-end code template list (deprecated)",
            tools.get_frontend_code_template_list,
        ),
        (
            "exportFrontendCodeTemplate",
            "Export rendered front-end code template content into a directory",
            tools.export_frontend_code_template,
        ),
    ]


def build_server(config: PlatformConfig, tokens: TokenManager) -> FastMCP:
    """Create the FastMCP server with all platform tools and the workflow prompt."""
    server = FastMCP(SERVER_NAME)
    tools = PlatformTools(PlatformClient(config, tokens))

    table = _tool_table(tools)
    for name, description, handler in table:
        server.add_tool(handler, name=name, description=description)  # type: ignore[arg-type]

    @server.prompt(name="module-development", description="MPS front-end module development workflow")
    def module_development(
        sys_id: Annotated[str, Field(description="System ID")],
        project_id: Annotated[str, Field(description="Project ID")],
        module_name: Annotated[str, Field(description="Module name (display name)")],
    ) -> str:
        return module_development_steps(sys_id, project_id, module_name)

    logger.info("Registered %d tools on %s", len(table), SERVER_NAME)
    return server


async def serve(config: PlatformConfig, environ: Mapping[str, str] | None = None) -> None:
    """Authenticate from the environment, then serve over stdio until the client disconnects.

    Raises ``AuthError`` before serving when credentials are missing or rejected.
    """
    tokens = TokenManager(config)
    await tokens.authenticate_from_env(environ)
    server = build_server(config, tokens)
    logger.info("Starting %s on stdio", SERVER_NAME)
    await server.run_stdio_async()
