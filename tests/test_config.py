"""Tests for reru.config -- XDG path, env vars, config file, precedence."""

from __future__ import annotations

from pathlib import Path

import pytest

from reru.config import (
    get_config_path,
    load_config_file,
    load_env_config,
    resolve_request_config,
)
from reru.exceptions import ConfigError
from reru.models import RequestConfig


# ---------------------------------------------------------------------------
# Config path
# ---------------------------------------------------------------------------


class TestConfigPath:
    def test_xdg_config_home(self, isolated_config: Path) -> None:
        assert get_config_path() == isolated_config / "reru" / "config.json"

    def test_home_fallback(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
        assert get_config_path() == tmp_path / ".config" / "reru" / "config.json"

    def test_explicit_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        target = tmp_path / "elsewhere.json"
        monkeypatch.setenv("RERU_CONFIG", str(target))
        assert get_config_path() == target

    def test_lookup_does_not_create_directories(self, isolated_config: Path) -> None:
        get_config_path()
        assert not isolated_config.exists()


# ---------------------------------------------------------------------------
# Config file
# ---------------------------------------------------------------------------


class TestConfigFile:
    def test_missing_file_is_empty(self) -> None:
        assert load_config_file() == {}

    def test_loads_object(self, write_config) -> None:
        write_config({"timeout": 12, "verify_ssl": False})
        assert load_config_file() == {"timeout": 12, "verify_ssl": False}

    def test_invalid_json(self, write_config) -> None:
        write_config("{oops")
        with pytest.raises(ConfigError, match="Invalid config file"):
            load_config_file()

    def test_non_object(self, write_config) -> None:
        write_config([1, 2])
        with pytest.raises(ConfigError, match="expected a JSON object"):
            load_config_file()


# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------


class TestEnvConfig:
    def test_empty_environment(self) -> None:
        assert load_env_config() == {}

    def test_reads_variables(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RERU_TIMEOUT", "2.5")
        monkeypatch.setenv("RERU_VERIFY_SSL", "no")
        monkeypatch.setenv("RERU_FOLLOW_REDIRECTS", "TRUE")
        monkeypatch.setenv("RERU_HTTP2", "on")
        assert load_env_config() == {
            "timeout": 2.5,
            "verify_ssl": False,
            "follow_redirects": True,
            "http2": True,
        }

    def test_empty_value_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RERU_TIMEOUT", "")
        assert load_env_config() == {}

    def test_bad_timeout(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RERU_TIMEOUT", "soon")
        with pytest.raises(ConfigError, match="RERU_TIMEOUT"):
            load_env_config()

    def test_bad_bool(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RERU_VERIFY_SSL", "maybe")
        with pytest.raises(ConfigError, match="RERU_VERIFY_SSL"):
            load_env_config()


# ---------------------------------------------------------------------------
# Precedence
# ---------------------------------------------------------------------------


class TestResolve:
    def test_defaults(self) -> None:
        assert resolve_request_config() == RequestConfig()

    def test_file_over_defaults(self, write_config) -> None:
        write_config({"timeout": 10})
        assert resolve_request_config().timeout == 10

    def test_env_over_file(self, write_config, monkeypatch: pytest.MonkeyPatch) -> None:
        write_config({"timeout": 10, "verify_ssl": False})
        monkeypatch.setenv("RERU_TIMEOUT", "3")
        config = resolve_request_config()
        assert config.timeout == 3
        assert config.verify_ssl is False

    def test_env_http2_over_file(self, write_config, monkeypatch: pytest.MonkeyPatch) -> None:
        write_config({"http2": True})
        monkeypatch.setenv("RERU_HTTP2", "0")
        assert resolve_request_config().http2 is False

    def test_overrides_win(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RERU_TIMEOUT", "3")
        config = resolve_request_config(timeout=1, verify_ssl=None)
        assert config.timeout == 1
        assert config.verify_ssl is True

    def test_invalid_value(self, write_config) -> None:
        write_config({"timeout": -1})
        with pytest.raises(ConfigError, match="Invalid request config"):
            resolve_request_config()
