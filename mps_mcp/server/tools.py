"""Tool handlers exposed over MCP.

Each handler maps validated arguments onto one platform operation and returns
its result as a JSON string. Platform failures surface as ``ToolError`` so the
MCP client sees ``isError`` instead of having to inspect result text.
"""

from __future__ import annotations

import json
import logging
import uuid
from collections.abc import Awaitable
from pathlib import Path
from typing import Annotated, Any

from mcp.server.fastmcp.exceptions import ToolError
from pydantic import Field

from mps_mcp.errors import MpsError
from mps_mcp.log_context import set_log_context
from mps_mcp.platform import system, templates
from mps_mcp.platform.client import PlatformClient
from mps_mcp.platform.models import (
    ExportRequest,
    MenuCreateRequest,
    RouterCreateRequest,
    TemplateType,
)
from mps_mcp.server.prompts import module_development_steps

logger = logging.getLogger(__name__)

SysId = Annotated[int, Field(description="System ID (sys_id)")]
ProjectId = Annotated[str, Field(description="Project ID (project_id)")]
TmplType = Annotated[TemplateType, Field(description="Template type (tmpl_type)")]


def to_json(data: Any) -> str:
    return json.dumps(data, ensure_ascii=False)


class PlatformTools:
    """Bound tool handlers sharing one ``PlatformClient``."""

    def __init__(self, client: PlatformClient) -> None:
        self._client = client

    async def _call(self, action: str, operation: Awaitable[Any]) -> str:
        set_log_context(tool=action, request_id=uuid.uuid4().hex)
        logger.info("Tool call %s", action)
        try:
            result = await operation
        except MpsError as exc:
            logger.warning("Tool %s failed: %s", action, exc)
            msg = f"{action} failed: {exc}"
            raise ToolError(msg) from exc
        return to_json(result)

    async def module_development_description(
        self,
        sys_id: SysId,
        project_id: ProjectId,
        module_name: Annotated[str, Field(description="Module name (module_name)")],
    ) -> str:
        action = "module-development-description"
        set_log_context(tool=action, request_id=uuid.uuid4().hex)
        logger.info("Tool call %s", action)
        return module_development_steps(sys_id, project_id, module_name)

    async def get_system_list(self) -> str:
        return await self._call("getSystemList", system.get_system_list(self._client))

    async def list_system_form_template(self, sys_id: SysId) -> str:
        return await self._call(
            "listSystemFormTemplate", system.list_form_templates(self._client, sys_id)
        )

    async def get_system_form_template(
        self,
        template_id: Annotated[str, Field(description="Form template ID (template_id)")],
    ) -> str:
        return await self._call(
            "getSystemFormTemplate", system.get_form_template(self._client, template_id)
        )

    async def get_system_permission_tree(self, sys_id: SysId) -> str:
        return await self._call(
            "getSystemPermissionTree", system.get_permission_tree(self._client, sys_id)
        )

    async def get_system_project_router_tree(self, project_id: ProjectId) -> str:
        return await self._call(
            "getSystemProjectRouterTree", system.get_router_tree(self._client, project_id)
        )

    async def create_system_project_router(  # noqa: PLR0913
        self,
        sys_id: SysId,
        project_id: ProjectId,
        path: Annotated[str, Field(description="Route path (path)")],
        title: Annotated[str, Field(description="Route page title (title)")],
        name: Annotated[str, Field(description="Route name (name)")],
        component: Annotated[str, Field(description="Route component (component)")],
        parent: Annotated[str | None, Field(description="Parent route ID (parent)")] = None,
        redirect: Annotated[str | None, Field(description="Route redirect (redirect)")] = None,
        props: Annotated[bool, Field(description="Pass route params as props (props)")] = False,
        meta: Annotated[
            str | None,
            Field(description="Route meta for vue-router, as a JSON string (meta)"),
        ] = None,
        permission_id: Annotated[
            str | None, Field(description="Permission ID (permission_id)")
        ] = None,
    ) -> str:
        request = RouterCreateRequest(
            sys_id=sys_id,
            project_id=project_id,
            parent_id=parent,
            path=path,
            title=title,
            name=name,
            component=component,
            redirect=redirect,
            props=props,
            meta=meta,
            permission_id=permission_id,
        )
        return await self._call(
            "createSystemProjectRouter", system.create_router(self._client, request)
        )

    async def delete_system_project_router(
        self,
        router_id: Annotated[str, Field(description="Route ID (router_id)")],
    ) -> str:
        return await self._call(
            "deleteSystemProjectRouter", system.delete_router(self._client, router_id)
        )

    async def get_system_project_menu_tree(self, project_id: ProjectId) -> str:
        return await self._call(
            "getSystemProjectMenuTree", system.get_menu_tree(self._client, project_id)
        )

    async def create_system_project_menu(  # noqa: PLR0913
        self,
        sys_id: SysId,
        project_id: ProjectId,
        name: Annotated[str, Field(description="Menu name (name)")],
        router_name: Annotated[str, Field(description="Route name (router_name)")],
        parent: Annotated[str | None, Field(description="Parent menu ID (parent)")] = None,
        icon: Annotated[str | None, Field(description="Icon (icon)")] = None,
        permission_id: Annotated[
            str | None, Field(description="Permission ID (permission_id)")
        ] = None,
    ) -> str:
        request = MenuCreateRequest(
            sys_id=sys_id,
            project_id=project_id,
            parent_id=parent,
            name=name,
            icon=icon,
            router_name=router_name,
            permission_id=permission_id,
        )
        return await self._call("createSystemProjectMenu", system.create_menu(self._client, request))

    async def delete_system_project_menu(
        self,
        menu_id: Annotated[str, Field(description="Menu ID (menu_id)")],
    ) -> str:
        return await self._call(
            "deleteSystemProjectMenu", system.delete_menu(self._client, menu_id)
        )

    async def get_frontend_code_template_list(self, tmpl_type: TmplType) -> str:
        return await self._call(
            "getFrontendCodeTemplateList",
            templates.get_code_template_list(self._client, tmpl_type),
        )

    async def export_frontend_code_template(
        self,
        tmpl_type: TmplType,
        template_id: Annotated[str, Field(description="Template ID (template_id)")],
        module_name: Annotated[str, Field(description="Module name (module_name)")],
        sort_alias: Annotated[str, Field(description="Sort alias (sort_alias)")],
        output_dir: Annotated[str, Field(description="Output directory, absolute path (output_dir)")],
    ) -> str:
        request = ExportRequest(
            tmpl_type=tmpl_type,
            template_id=template_id,
            module_name=module_name,
            sort_alias=sort_alias,
            output_dir=Path(output_dir),
        )

        async def _export() -> dict[str, list[str]]:
            files = await templates.export_code_template(self._client, request)
            return {"output_files": files}

        return await self._call("exportFrontendCodeTemplate", _export())
