"""Application configuration: defaults, optional JSON file, environment overrides."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ValidationError

from mps_mcp.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://main.test.nmhuixin.com/api/v1"

# Environment variable -> config field
_ENV_OVERRIDES: dict[str, str] = {
    "MPS_BASE_URL": "base_url",
    "MPS_LOG_LEVEL": "log_level",
    "MPS_LOG_DIR": "log_dir",
}


class PlatformConfig(BaseModel):
    """Settings for talking to the MPS platform REST API."""

    base_url: str = DEFAULT_BASE_URL
    auth_path: str = "auth/"
    request_timeout: float = 10.0
    tenant_sys_id: int = 0
    default_token_lifetime: int = 24 * 60 * 60
    refresh_threshold: int = 5 * 60
    username_env: str = "MPS_USERNAME"
    password_env: str = "MPS_PASSWORD"  # noqa: S105
    log_level: str = "INFO"
    log_dir: str | None = None

    def url_for(self, path: str) -> str:
        """Join *path* (relative endpoint, e.g. ``system/``) onto ``base_url``."""
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    @property
    def auth_url(self) -> str:
        return self.url_for(self.auth_path)


def load_config(
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> PlatformConfig:
    """Build the effective config.

    Resolution order (later wins):
    1. Pydantic defaults
    2. JSON file at *config_path* (skipped when it does not exist)
    3. ``MPS_BASE_URL`` / ``MPS_LOG_LEVEL`` / ``MPS_LOG_DIR`` environment overrides
    """
    env = os.environ if environ is None else environ
    data: dict[str, object] = {}

    if config_path is not None:
        if config_path.is_file():
            try:
                loaded = json.loads(config_path.read_text(encoding="utf-8"))
            except (json.JSONDecodeError, OSError) as exc:
                msg = f"Cannot read config file {config_path}: {exc}"
                raise ConfigError(msg) from exc
            if not isinstance(loaded, dict):
                msg = f"Config file {config_path} must contain a JSON object"
                raise ConfigError(msg)
            data.update(loaded)
            logger.info("Loaded config from %s", config_path)
        else:
            logger.warning("Config file %s not found, using defaults", config_path)

    for var, field_name in _ENV_OVERRIDES.items():
        value = env.get(var, "").strip()
        if value:
            data[field_name] = value
            logger.debug("Config override from %s", var)

    try:
        return PlatformConfig.model_validate(data)
    except ValidationError as exc:
        msg = f"Invalid configuration: {exc}"
        raise ConfigError(msg) from exc
