"""Front-end code templates: listing and rendered archive export."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from mps_mcp.archive import extract_archive

if TYPE_CHECKING:
    from mps_mcp.platform.client import PlatformClient
    from mps_mcp.platform.models import ExportRequest, TemplateType

logger = logging.getLogger(__name__)


async def get_code_template_list(client: PlatformClient, tmpl_type: TemplateType) -> Any:
    """Deprecated listing endpoint, kept for existing agents."""
    return await client.get_json("codetemplate/", params={"tmpl_type": tmpl_type})


async def export_code_template(client: PlatformClient, request: ExportRequest) -> list[str]:
    """Render a template server-side and extract the returned zip into ``request.output_dir``.

    Returns the absolute paths of the written files in archive order.
    """
    logger.info(
        "Exporting template=%s type=%s module=%s into %s",
        request.template_id,
        request.tmpl_type,
        request.module_name,
        request.output_dir,
    )
    data = await client.post_for_bytes("codetemplateexport/", request.to_payload())
    logger.debug("Export archive received (%d bytes)", len(data))
    written = await asyncio.to_thread(extract_archive, data, request.output_dir)
    return [str(p) for p in written]
