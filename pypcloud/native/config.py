"""Configuration file for pCloud clients.

The file is YAML and holds either an OAuth access token or account
credentials:

    host: https://eapi.pcloud.com
    username: me@example.com
    password: secret
"""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

DEFAULT_API_HOST = "https://api.pcloud.com"
EU_API_HOST = "https://eapi.pcloud.com"

# Default config locations
DEFAULT_CONFIG_NAME = ".pcloud"
XDG_CONFIG_NAME = "pcloud/pcloud.conf"

# HTTP client settings
DEFAULT_TIMEOUT = 30.0


class ConfigError(Exception):
    """Raised when configuration loading fails."""

    pass


class PCloudConfig(BaseModel):
    """Settings of a pCloud client."""

    model_config = {"populate_by_name": True}

    host: str = Field(default=DEFAULT_API_HOST, description="API host to start from")
    username: str | None = Field(default=None, description="Account email")
    password: str | None = Field(default=None, description="Account password")
    access_token: str | None = Field(
        default=None,
        alias="token",
        description="OAuth access token, preferred over username and password",
    )
    timeout: float = Field(default=DEFAULT_TIMEOUT, description="Request timeout in seconds")

    @property
    def has_credentials(self) -> bool:
        return bool(self.access_token) or bool(self.username and self.password)


def _get_default_config_path() -> Path:
    """Determine the default configuration file path.

    Checks in order:
    1. PCLOUD_CONFIG environment variable
    2. ~/.pcloud (home directory)
    3. ~/.config/pcloud/pcloud.conf (XDG config)

    Returns:
        Path to the configuration file.
    """
    env_config = os.environ.get("PCLOUD_CONFIG")
    if env_config:
        return Path(env_config).expanduser()

    home_config = Path.home() / DEFAULT_CONFIG_NAME
    if home_config.exists():
        return home_config

    xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config_home:
        xdg_config = Path(xdg_config_home) / XDG_CONFIG_NAME
    else:
        xdg_config = Path.home() / ".config" / XDG_CONFIG_NAME

    if xdg_config.exists():
        return xdg_config

    return home_config


def load_config(config_path: str | Path | None = None) -> PCloudConfig:
    """Load and validate the configuration file.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        The validated configuration.

    Raises:
        ConfigError: If the file is missing, cannot be parsed or holds no credentials.
    """
    if config_path is None:
        path = _get_default_config_path()
    else:
        path = Path(config_path).expanduser()

    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse config file: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config file: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file is empty or not a mapping: {path}")

    try:
        config = PCloudConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config file: {e}") from e

    if not config.has_credentials:
        raise ConfigError("Config needs an access token or a username and password")
    return config
