"""System, form template, permission, route and menu operations."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from mps_mcp.errors import RemoteCallError
from mps_mcp.platform.models import (
    MenuCreateRequest,
    RouterCreateRequest,
    normalize_form_template,
    summarize_system,
)

if TYPE_CHECKING:
    from mps_mcp.platform.client import PlatformClient

logger = logging.getLogger(__name__)


def _unexpected(path: str, data: Any) -> RemoteCallError:
    logger.warning("GET %s returned an unexpected payload: %r", path, data)
    return RemoteCallError(f"GET {path} returned an unexpected payload", None, data)


def _as_records(data: Any, path: str) -> list[dict[str, Any]]:
    """List endpoints may answer with a bare list or a paginated ``results`` object."""
    items = data.get("results") if isinstance(data, dict) else data
    if not isinstance(items, list) or not all(isinstance(i, dict) for i in items):
        raise _unexpected(path, data)
    return items


async def get_system_list(client: PlatformClient) -> list[dict[str, Any]]:
    path = "system/"
    data = await client.get_json(path)
    return [summarize_system(s) for s in _as_records(data, path)]


async def list_form_templates(client: PlatformClient, sys_id: int) -> list[dict[str, Any]]:
    path = "formtemplate/"
    data = await client.get_json(path, params={"sys_id": sys_id})
    templates = [normalize_form_template(t) for t in _as_records(data, path)]
    logger.info("Fetched %d form templates for sys_id=%s", len(templates), sys_id)
    return templates


async def get_form_template(client: PlatformClient, template_id: str) -> dict[str, Any]:
    path = f"formtemplate/{template_id}/"
    data = await client.get_json(path)
    if not isinstance(data, dict):
        raise _unexpected(path, data)
    return normalize_form_template(data)


async def get_permission_tree(client: PlatformClient, sys_id: int) -> Any:
    return await client.get_json(
        "permissionstree/",
        params={"sys_id": sys_id, "biz_id": 1, "level": 0},
    )


async def get_router_tree(client: PlatformClient, project_id: str) -> Any:
    return await client.get_json("systempr/", params={"is_root": "True", "project": project_id})


async def create_router(client: PlatformClient, request: RouterCreateRequest) -> Any:
    result = await client.post_json("systempr/", request.to_payload())
    logger.info("Created route name=%s path=%s", request.name, request.path)
    return result


async def delete_router(client: PlatformClient, router_id: str) -> dict[str, str]:
    await client.delete(f"systempr/{router_id}/")
    logger.info("Deleted route id=%s", router_id)
    return {"deleted": router_id}


async def get_menu_tree(client: PlatformClient, project_id: str) -> Any:
    return await client.get_json("systempm/", params={"project": project_id, "is_root": "True"})


async def create_menu(client: PlatformClient, request: MenuCreateRequest) -> Any:
    result = await client.post_json("systempm/", request.to_payload())
    logger.info("Created menu name=%s router=%s", request.name, request.router_name)
    return result


async def delete_menu(client: PlatformClient, menu_id: str) -> dict[str, str]:
    await client.delete(f"systempm/{menu_id}/")
    logger.info("Deleted menu id=%s", menu_id)
    return {"deleted": menu_id}
