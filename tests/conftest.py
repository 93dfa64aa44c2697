"""Shared test fixtures."""

from __future__ import annotations

import io
import zipfile
from collections.abc import AsyncIterator, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from mps_mcp.config import PlatformConfig
from mps_mcp.session.manager import TokenManager

TEST_TOKEN = "test-token-abc"  # noqa: S105


@dataclass
class RecordedRequest:
    """One request received by the fake platform."""

    method: str
    path: str
    query: dict[str, str]
    json: Any
    headers: Mapping[str, str]


@dataclass
class FakePlatform:
    """In-process stand-in for the MPS REST API.

    Register canned answers with ``respond(method, path, body, status)``; ``path``
    is relative to ``/api/v1/`` (e.g. ``"systempr/"``). ``bytes`` bodies are
    served as ``application/zip``.
    """

    base_url: str = ""
    requests: list[RecordedRequest] = field(default_factory=list)
    _responses: dict[tuple[str, str], tuple[int, Any]] = field(default_factory=dict)

    def respond(self, method: str, path: str, body: Any = None, status: int = 200) -> None:
        self._responses[(method.upper(), path)] = (status, body)

    def last(self, method: str, path: str) -> RecordedRequest:
        for req in reversed(self.requests):
            if req.method == method and req.path == path:
                return req
        msg = f"No {method} {path} received"
        raise AssertionError(msg)

    async def handle(self, request: web.Request) -> web.StreamResponse:
        path = request.match_info["tail"]
        raw = await request.read()
        payload: Any = None
        if raw:
            payload = await request.json()
        self.requests.append(
            RecordedRequest(
                method=request.method,
                path=path,
                query=dict(request.query),
                json=payload,
                headers=dict(request.headers),
            )
        )
        status, body = self._responses.get((request.method, path), (404, {"detail": "Not found."}))
        if isinstance(body, bytes):
            return web.Response(body=body, status=status, content_type="application/zip")
        if body is None:
            return web.Response(status=status)
        return web.json_response(body, status=status)


@pytest.fixture
async def fake_platform() -> AsyncIterator[FakePlatform]:
    platform = FakePlatform()
    app = web.Application()
    app.router.add_route("*", "/api/v1/{tail:.*}", platform.handle)
    server = TestServer(app)
    await server.start_server()
    platform.base_url = str(server.make_url("/api/v1"))
    yield platform
    await server.close()


@pytest.fixture
def platform_config(fake_platform: FakePlatform) -> PlatformConfig:
    return PlatformConfig(base_url=fake_platform.base_url, request_timeout=5.0)


@pytest.fixture
async def tokens(fake_platform: FakePlatform, platform_config: PlatformConfig) -> TokenManager:
    """Token manager authenticated against the fake platform."""
    fake_platform.respond("POST", "auth/", {"token": TEST_TOKEN, "expires_in": 3600})
    manager = TokenManager(platform_config)
    await manager.authenticate("alice", "secret")
    return manager


@pytest.fixture
def make_zip() -> Callable[[Mapping[str, bytes | None]], bytes]:
    """Build a zip archive in memory; a ``None`` value adds a directory entry."""

    def _build(entries: Mapping[str, bytes | None]) -> bytes:
        buf = io.BytesIO()
        with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            for name, content in entries.items():
                if content is None:
                    archive.writestr(zipfile.ZipInfo(name), b"")
                else:
                    archive.writestr(name, content)
        return buf.getvalue()

    return _build
