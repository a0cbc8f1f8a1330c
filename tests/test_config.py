"""Tests for configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from pypcloud.native import ConfigError, load_config
from pypcloud.native.config import DEFAULT_API_HOST, _get_default_config_path


class TestGetDefaultConfigPath:
    """Tests for config path resolution."""

    def test_env_variable(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Test that PCLOUD_CONFIG takes precedence."""
        monkeypatch.setenv("PCLOUD_CONFIG", str(tmp_path / "custom.conf"))
        assert _get_default_config_path() == tmp_path / "custom.conf"

    def test_home_config(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.delenv("PCLOUD_CONFIG", raising=False)
        monkeypatch.setattr(Path, "home", lambda: tmp_path)
        (tmp_path / ".pcloud").write_text("access_token: x\n")

        assert _get_default_config_path() == tmp_path / ".pcloud"

    def test_xdg_config(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.delenv("PCLOUD_CONFIG", raising=False)
        monkeypatch.setattr(Path, "home", lambda: tmp_path / "home")
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
        xdg_config = tmp_path / "xdg" / "pcloud" / "pcloud.conf"
        xdg_config.parent.mkdir(parents=True)
        xdg_config.write_text("access_token: x\n")

        assert _get_default_config_path() == xdg_config

    def test_fallback_to_home(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Test the default when no config exists yet."""
        monkeypatch.delenv("PCLOUD_CONFIG", raising=False)
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setattr(Path, "home", lambda: tmp_path)

        assert _get_default_config_path() == tmp_path / ".pcloud"


class TestLoadConfig:
    """Tests for load_config."""

    def test_access_token(self, tmp_path: Path) -> None:
        config_file = tmp_path / ".pcloud"
        config_file.write_text(yaml.safe_dump({"access_token": "abc", "timeout": 5}))

        config = load_config(config_file)

        assert config.access_token == "abc"
        assert config.host == DEFAULT_API_HOST
        assert config.timeout == 5.0

    def test_token_alias(self, tmp_path: Path) -> None:
        config_file = tmp_path / ".pcloud"
        config_file.write_text(yaml.safe_dump({"token": "abc"}))

        assert load_config(config_file).access_token == "abc"

    def test_username_and_password(self, tmp_path: Path) -> None:
        config_file = tmp_path / ".pcloud"
        config_file.write_text(
            yaml.safe_dump({"username": "me@example.com", "password": "secret"})
        )

        config = load_config(config_file)

        assert config.username == "me@example.com"
        assert config.access_token is None

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "missing.conf")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        config_file = tmp_path / ".pcloud"
        config_file.write_text("invalid: yaml: content: [")

        with pytest.raises(ConfigError, match="Failed to parse"):
            load_config(config_file)

    def test_no_credentials(self, tmp_path: Path) -> None:
        """Test that a password alone is not enough."""
        config_file = tmp_path / ".pcloud"
        config_file.write_text(yaml.safe_dump({"password": "secret"}))

        with pytest.raises(ConfigError, match="access token"):
            load_config(config_file)

    def test_invalid_timeout(self, tmp_path: Path) -> None:
        config_file = tmp_path / ".pcloud"
        config_file.write_text(yaml.safe_dump({"access_token": "abc", "timeout": "soon"}))

        with pytest.raises(ConfigError, match="Invalid config"):
            load_config(config_file)
