"""Request structs and response shaping for platform endpoints."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

logger = logging.getLogger(__name__)

TemplateType = Literal["vue", "uni-app"]


@dataclass(frozen=True, slots=True)
class RouterCreateRequest:
    """Body for ``POST /systempr/``.

    ``parent_id``, ``title``, ``component`` and ``permission`` are always sent
    (null allowed); ``redirect`` and ``meta`` are omitted unless set.
    """

    sys_id: int
    project_id: str
    path: str
    name: str
    title: str | None = None
    component: str | None = None
    parent_id: str | None = None
    redirect: str | None = None
    props: bool = False
    meta: str | None = None
    permission_id: str | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "sys_id": self.sys_id,
            "project": self.project_id,
            "parent_id": self.parent_id,
            "path": self.path,
            "title": self.title,
            "name": self.name,
            "component": self.component,
            "props": self.props,
            "permission": self.permission_id,
        }
        if self.redirect:
            payload["redirect"] = self.redirect
        if self.meta:
            payload["meta"] = self.meta
        return payload


@dataclass(frozen=True, slots=True)
class MenuCreateRequest:
    """Body for ``POST /systempm/``.

    ``icon`` and ``router_name`` are always sent (null allowed); ``parent_id``
    and ``permission`` are omitted unless set.
    """

    sys_id: int
    project_id: str
    name: str
    router_name: str | None = None
    parent_id: str | None = None
    icon: str | None = None
    permission_id: str | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "sys_id": self.sys_id,
            "project": self.project_id,
            "name": self.name,
            "icon": self.icon,
            "router_name": self.router_name,
        }
        if self.parent_id:
            payload["parent_id"] = self.parent_id
        if self.permission_id:
            payload["permission"] = self.permission_id
        return payload


@dataclass(frozen=True, slots=True)
class ExportRequest:
    """Coordinates of one code template export."""

    tmpl_type: TemplateType
    template_id: str
    module_name: str
    sort_alias: str
    output_dir: Path

    def to_payload(self) -> dict[str, str]:
        return {
            "tmpl_type": self.tmpl_type,
            "template_id": self.template_id,
            "module_name": self.module_name,
            "sort_alias": self.sort_alias,
        }


def summarize_system(raw: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": raw.get("pk"),
        "name": raw.get("name"),
        "description": raw.get("description"),
    }


def _decode_embedded_json(value: Any, *, field: str, alias: Any) -> Any:
    """Fields like ``widget_attr`` arrive as JSON-encoded strings."""
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        return value
    try:
        return json.loads(value)
    except ValueError:
        logger.warning("Field %s of %s is not valid JSON, keeping raw value", field, alias)
        return value


def normalize_form_field(raw: dict[str, Any]) -> dict[str, Any]:
    alias = raw.get("alias")
    return {
        "alias": alias,
        "col_title": raw.get("col_title"),
        "in_filter": raw.get("in_filter"),
        "local_data_source": _decode_embedded_json(
            raw.get("local_data_source"), field="local_data_source", alias=alias
        ),
        "widget": raw.get("widget"),
        "widget_attr": _decode_embedded_json(
            raw.get("widget_attr"), field="widget_attr", alias=alias
        ),
    }


def normalize_form_template(raw: dict[str, Any]) -> dict[str, Any]:
    """Reduce a form template to the keys needed for code generation."""
    return {
        "id": raw.get("pk"),
        "title": raw.get("title"),
        "api_name": raw.get("api_name"),
        "keyword": raw.get("keyword"),
        "remark": raw.get("remark"),
        "header_conf": raw.get("header_conf"),
        "fields": [normalize_form_field(f) for f in raw.get("field") or []],
    }
