"""Tests for platform configuration loading."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from mps_mcp.config import DEFAULT_BASE_URL, PlatformConfig, load_config
from mps_mcp.errors import ConfigError

# -- PlatformConfig defaults --


def test_platform_config_defaults() -> None:
    cfg = PlatformConfig()
    assert cfg.base_url == DEFAULT_BASE_URL
    assert cfg.request_timeout == 10.0
    assert cfg.tenant_sys_id == 0
    assert cfg.default_token_lifetime == 86400
    assert cfg.refresh_threshold == 300
    assert cfg.username_env == "MPS_USERNAME"
    assert cfg.password_env == "MPS_PASSWORD"
    assert cfg.log_dir is None


def test_auth_url() -> None:
    cfg = PlatformConfig(base_url="https://example.test/api/v1")
    assert cfg.auth_url == "https://example.test/api/v1/auth/"


@pytest.mark.parametrize("base", ["https://example.test/api/v1", "https://example.test/api/v1/"])
def test_url_for_joins_single_slash(base: str) -> None:
    cfg = PlatformConfig(base_url=base)
    assert cfg.url_for("system/") == "https://example.test/api/v1/system/"
    assert cfg.url_for("/systempr/12/") == "https://example.test/api/v1/systempr/12/"


# -- load_config --


def test_load_config_defaults_without_file() -> None:
    cfg = load_config(None, environ={})
    assert cfg == PlatformConfig()


def test_load_config_missing_file_uses_defaults(tmp_path: Path) -> None:
    cfg = load_config(tmp_path / "nope.json", environ={})
    assert cfg.base_url == DEFAULT_BASE_URL


def test_load_config_reads_json_file(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"base_url": "https://file.test/api", "request_timeout": 3}))
    cfg = load_config(path, environ={})
    assert cfg.base_url == "https://file.test/api"
    assert cfg.request_timeout == 3.0


def test_env_overrides_file(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"base_url": "https://file.test/api", "log_level": "INFO"}))
    env = {"MPS_BASE_URL": "https://env.test/api", "MPS_LOG_LEVEL": "DEBUG", "MPS_LOG_DIR": "/tmp/x"}
    cfg = load_config(path, environ=env)
    assert cfg.base_url == "https://env.test/api"
    assert cfg.log_level == "DEBUG"
    assert cfg.log_dir == "/tmp/x"


def test_blank_env_values_ignored() -> None:
    cfg = load_config(None, environ={"MPS_BASE_URL": "   "})
    assert cfg.base_url == DEFAULT_BASE_URL


def test_invalid_json_raises_config_error(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{not json")
    with pytest.raises(ConfigError, match="Cannot read config file"):
        load_config(path, environ={})


def test_non_object_json_raises_config_error(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text("[1, 2]")
    with pytest.raises(ConfigError, match="JSON object"):
        load_config(path, environ={})


def test_invalid_types_raise_config_error(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"request_timeout": "soon"}))
    with pytest.raises(ConfigError, match="request_timeout"):
        load_config(path, environ={})
