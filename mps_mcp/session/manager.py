"""Token session lifecycle: authentication, lazy expiry, authenticated clients."""

from __future__ import annotations

import logging
import math
import os
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import aiohttp

from mps_mcp.config import PlatformConfig
from mps_mcp.errors import AuthError, NotAuthenticatedError

logger = logging.getLogger(__name__)

_NOT_AUTHENTICATED_MSG = "No valid authentication token, authenticate first"


@dataclass(frozen=True, slots=True)
class Session:
    """Authenticated identity: bearer token plus its computed expiry."""

    token: str
    issued_at: datetime
    expires_at: datetime | None = None


def _error_message(payload: Any, fallback: str) -> str:
    if isinstance(payload, dict):
        for key in ("message", "detail", "non_field_errors"):
            value = payload.get(key)
            if value:
                return value if isinstance(value, str) else str(value)
    return fallback


def _declared_lifetime(expires_in: object) -> float | None:
    """Positive lifetime in seconds from a number or numeric string, else None."""
    if isinstance(expires_in, bool):
        return None
    if isinstance(expires_in, str):
        try:
            expires_in = float(expires_in.strip())
        except ValueError:
            return None
    if not isinstance(expires_in, int | float) or not math.isfinite(expires_in):
        return None
    return expires_in if expires_in > 0 else None


class TokenManager:
    """Owns the single platform session for one server process.

    Expiry is evaluated lazily on every ``get_token()``; nothing here renews the
    token on a timer. Callers wanting continuous availability check
    ``should_refresh()`` and call ``authenticate()`` again.
    """

    def __init__(self, config: PlatformConfig) -> None:
        self._config = config
        self._session: Session | None = None

    @property
    def config(self) -> PlatformConfig:
        return self._config

    @property
    def session(self) -> Session | None:
        """Current session as stored, without the expiry check."""
        return self._session

    async def authenticate(self, username: str, password: str) -> str:
        """Exchange credentials for a token and store it with its expiry."""
        payload = {
            "username": username,
            "password": password,
            "sys_id": self._config.tenant_sys_id,
        }
        timeout = aiohttp.ClientTimeout(total=self._config.request_timeout)
        headers = {"Content-Type": "application/json"}
        logger.info("Authenticating user=%s against %s", username, self._config.auth_url)
        try:
            async with (
                aiohttp.ClientSession(timeout=timeout, headers=headers) as http,
                http.post(self._config.auth_url, json=payload) as resp,
            ):
                status = resp.status
                try:
                    data: Any = await resp.json(content_type=None)
                except ValueError:
                    data = None
                if status >= 400:
                    message = _error_message(data, resp.reason or f"HTTP {status}")
                    msg = f"Authentication failed: {message}"
                    raise AuthError(msg, status)
        except AuthError:
            self.clear()
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            self.clear()
            status_code = exc.status if isinstance(exc, aiohttp.ClientResponseError) else None
            msg = f"Authentication failed: {str(exc) or type(exc).__name__}"
            raise AuthError(msg, status_code) from exc

        token = data.get("token") if isinstance(data, dict) else None
        if not token or not isinstance(token, str):
            self.clear()
            msg = "Authentication failed: server response is missing a token"
            raise AuthError(msg, status)

        session = self._store(token, data.get("expires_in"))
        logger.info("Authenticated, token expires at %s", session.expires_at)
        return token

    async def authenticate_from_env(self, environ: Mapping[str, str] | None = None) -> str:
        """Read credentials from the configured environment variables and authenticate."""
        env = os.environ if environ is None else environ
        user_var = self._config.username_env
        pass_var = self._config.password_env
        username = env.get(user_var, "")
        password = env.get(pass_var, "")
        if not username or not password:
            msg = f"Missing required environment variables: {user_var} and {pass_var} must be set"
            raise AuthError(msg)
        return await self.authenticate(username, password)

    def _store(self, token: str, expires_in: object = None) -> Session:
        """Replace the session in one step."""
        now = datetime.now(UTC)
        lifetime = _declared_lifetime(expires_in) or self._config.default_token_lifetime
        self._session = Session(
            token=token,
            issued_at=now,
            expires_at=now + timedelta(seconds=lifetime),
        )
        return self._session

    def get_token(self) -> str | None:
        """Return the live token, or None (clearing the session) once expired."""
        session = self._session
        if session is None:
            return None
        if session.expires_at is not None and datetime.now(UTC) >= session.expires_at:
            logger.info("Token expired at %s, clearing session", session.expires_at)
            self._session = None
            return None
        return session.token

    def should_refresh(self) -> bool:
        """True when no expiry is known or expiry is within the refresh threshold."""
        session = self._session
        if session is None or session.expires_at is None:
            return True
        threshold = timedelta(seconds=self._config.refresh_threshold)
        return datetime.now(UTC) >= session.expires_at - threshold

    def clear(self) -> None:
        """Discard the session unconditionally."""
        if self._session is not None:
            logger.debug("Session cleared")
        self._session = None

    def build_auth_headers(self) -> dict[str, str]:
        """Headers for an authenticated JSON request."""
        token = self.get_token()
        if not token:
            raise NotAuthenticatedError(_NOT_AUTHENTICATED_MSG)
        return {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }

    def create_authenticated_client(self) -> aiohttp.ClientSession:
        """New ``aiohttp.ClientSession`` carrying the auth headers and request timeout.

        The caller owns the session and must close it (``async with``).
        """
        headers = self.build_auth_headers()
        return aiohttp.ClientSession(
            headers=headers,
            timeout=aiohttp.ClientTimeout(total=self._config.request_timeout),
        )
