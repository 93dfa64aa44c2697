"""Authenticated HTTP access to the MPS platform REST API (aiohttp)."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import aiohttp

from mps_mcp.errors import RemoteCallError

if TYPE_CHECKING:
    from mps_mcp.config import PlatformConfig
    from mps_mcp.session.manager import TokenManager

logger = logging.getLogger(__name__)

QueryParams = Mapping[str, str | int]


def _decode_body(raw: bytes) -> Any:
    """Best-effort decode of an error body: JSON if possible, else text."""
    if not raw:
        return None
    text = raw.decode("utf-8", errors="replace")
    try:
        return json.loads(text)
    except ValueError:
        return text


class PlatformClient:
    """One request per call; every call asks the token manager for a live token.

    Raises ``NotAuthenticatedError`` when no session is live and
    ``RemoteCallError`` for non-2xx responses or transport failures.
    """

    def __init__(self, config: PlatformConfig, tokens: TokenManager) -> None:
        self._config = config
        self._tokens = tokens

    @property
    def tokens(self) -> TokenManager:
        return self._tokens

    async def get_json(self, path: str, params: QueryParams | None = None) -> Any:
        return await self._request("GET", path, params=params)

    async def post_json(self, path: str, payload: Mapping[str, Any]) -> Any:
        return await self._request("POST", path, payload=payload)

    async def delete(self, path: str) -> None:
        await self._request("DELETE", path, expect_body=False)

    async def post_for_bytes(self, path: str, payload: Mapping[str, Any]) -> bytes:
        """POST JSON and return the raw response body (e.g. a zip archive)."""
        return await self._request("POST", path, payload=payload, raw=True)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: QueryParams | None = None,
        payload: Mapping[str, Any] | None = None,
        raw: bool = False,
        expect_body: bool = True,
    ) -> Any:
        url = self._config.url_for(path)
        logger.debug("%s %s params=%s", method, url, dict(params) if params else None)
        try:
            async with (
                self._tokens.create_authenticated_client() as http,
                http.request(method, url, params=params, json=payload) as resp,
            ):
                body = await resp.read()
                if resp.status >= 400:
                    detail = _decode_body(body)
                    logger.warning("%s %s -> HTTP %d", method, url, resp.status)
                    msg = f"{method} {path} returned HTTP {resp.status}: {_render_detail(detail)}"
                    raise RemoteCallError(msg, resp.status, detail)
        except (aiohttp.ClientError, TimeoutError) as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            msg = f"{method} {path} failed: {str(exc) or type(exc).__name__}"
            raise RemoteCallError(msg) from exc

        logger.debug("%s %s -> HTTP %d (%d bytes)", method, url, resp.status, len(body))
        if raw:
            return body
        if not expect_body or not body:
            return None
        try:
            return json.loads(body)
        except ValueError as exc:
            msg = f"{method} {path} returned a non-JSON body"
            raise RemoteCallError(msg, resp.status, _decode_body(body)) from exc


def _render_detail(detail: Any) -> str:
    if detail is None:
        return "<empty body>"
    if isinstance(detail, str):
        return detail
    return json.dumps(detail, ensure_ascii=False)
