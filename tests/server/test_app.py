"""Tests for FastMCP server assembly."""

from __future__ import annotations

import json
from importlib.metadata import version
from typing import TYPE_CHECKING, Any

import pytest
from mcp.server.fastmcp.exceptions import ToolError

from mps_mcp.config import PlatformConfig
from mps_mcp.errors import AuthError
from mps_mcp.server.app import SERVER_NAME, build_server, serve
from mps_mcp.server.tools import PlatformTools

if TYPE_CHECKING:
    from mps_mcp.session.manager import TokenManager
    from tests.conftest import FakePlatform

EXPECTED_TOOLS = {
    "module-development-description",
    "getSystemList",
    "listSystemFormTemplate",
    "getSystemFormTemplate",
    "getSystemPermissionTree",
    "getSystemProjectRouterTree",
    "createSystemProjectRouter",
    "deleteSystemProjectRouter",
    "getSystemProjectMenuTree",
    "createSystemProjectMenu",
    "deleteSystemProjectMenu",
    "getFrontendCodeTemplateList",
    "exportFrontendCodeTemplate",
}


def _first_text(result: Any) -> str:
    content = result[0] if isinstance(result, tuple) else result
    return content[0].text


async def test_all_tools_registered(platform_config: PlatformConfig, tokens: TokenManager) -> None:
    server = build_server(platform_config, tokens)

    tools = await server.list_tools()

    assert server.name == SERVER_NAME
    assert {t.name for t in tools} == EXPECTED_TOOLS
    assert all(t.description for t in tools)


async def test_tree_tools_explain_parent(
    platform_config: PlatformConfig, tokens: TokenManager
) -> None:
    tools = {t.name: t for t in await build_server(platform_config, tokens).list_tools()}

    for name in ("getSystemProjectRouterTree", "createSystemProjectMenu"):
        assert "parent" in (tools[name].description or "")


async def test_create_router_schema(platform_config: PlatformConfig, tokens: TokenManager) -> None:
    tools = {t.name: t for t in await build_server(platform_config, tokens).list_tools()}
    schema = tools["createSystemProjectRouter"].inputSchema

    assert sorted(schema["required"]) == sorted(
        ["sys_id", "project_id", "path", "title", "name", "component"]
    )
    assert schema["properties"]["sys_id"]["type"] == "integer"
    assert "self" not in schema["properties"]


async def test_export_schema_restricts_template_type(
    platform_config: PlatformConfig, tokens: TokenManager
) -> None:
    tools = {t.name: t for t in await build_server(platform_config, tokens).list_tools()}
    prop = tools["exportFrontendCodeTemplate"].inputSchema["properties"]["tmpl_type"]

    assert prop["enum"] == ["vue", "uni-app"]


async def test_prompt_registered(platform_config: PlatformConfig, tokens: TokenManager) -> None:
    server = build_server(platform_config, tokens)

    prompts = await server.list_prompts()

    assert [p.name for p in prompts] == ["module-development"]
    assert {a.name for a in prompts[0].arguments or []} == {"sys_id", "project_id", "module_name"}


async def test_prompt_renders(platform_config: PlatformConfig, tokens: TokenManager) -> None:
    server = build_server(platform_config, tokens)

    result = await server.get_prompt(
        "module-development", {"sys_id": "3", "project_id": "proj-1", "module_name": "Orders"}
    )

    text = result.messages[0].content.text
    assert "Orders" in text
    assert "sys_id = 3" in text


async def test_call_tool_round_trip(
    fake_platform: FakePlatform, platform_config: PlatformConfig, tokens: TokenManager
) -> None:
    fake_platform.respond("GET", "systempr/", [{"pk": "r1", "parent": None}])
    server = build_server(platform_config, tokens)

    result = await server.call_tool("getSystemProjectRouterTree", {"project_id": "proj-1"})

    assert json.loads(_first_text(result)) == [{"pk": "r1", "parent": None}]


async def test_call_tool_failure_surfaces_as_error(
    fake_platform: FakePlatform, platform_config: PlatformConfig, tokens: TokenManager
) -> None:
    fake_platform.respond("DELETE", "systempr/r1/", {"detail": "in use"}, status=409)
    server = build_server(platform_config, tokens)

    with pytest.raises(ToolError, match="deleteSystemProjectRouter failed"):
        await server.call_tool("deleteSystemProjectRouter", {"router_id": "r1"})


async def test_serve_requires_credentials() -> None:
    with pytest.raises(AuthError, match="MPS_USERNAME"):
        await serve(PlatformConfig(), environ={})


async def test_serve_rejected_credentials(
    fake_platform: FakePlatform, platform_config: PlatformConfig
) -> None:
    fake_platform.respond("POST", "auth/", {"message": "bad credentials"}, status=401)

    with pytest.raises(AuthError, match="bad credentials"):
        await serve(platform_config, environ={"MPS_USERNAME": "a", "MPS_PASSWORD": "b"})


def test_mcp_major_version_provides_fastmcp() -> None:
    assert version("mcp").split(".")[0] == "1"


async def test_schema_resolved_from_postponed_annotations(
    platform_config: PlatformConfig, tokens: TokenManager
) -> None:
    handler = PlatformTools.get_system_permission_tree
    assert isinstance(handler.__annotations__["sys_id"], str)

    tools = {t.name: t for t in await build_server(platform_config, tokens).list_tools()}
    schema = tools["getSystemPermissionTree"].inputSchema

    assert schema["properties"]["sys_id"]["type"] == "integer"
    assert schema["required"] == ["sys_id"]
