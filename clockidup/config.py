"""Configuration for clockidup.

The token and the selected workspace are kept in ~/.config/clockidup.yml:

    token: your-clockify-auth-token
    workspace: My Workspace

Both can be overridden with the CLOCKIDUP_TOKEN and CLOCKIDUP_WORKSPACE
environment variables, which may also come from a .env file in the current
directory.
"""
import logging
import os
from typing import Optional

import yaml
from dotenv import load_dotenv, find_dotenv

from .errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_PATH = os.path.join("~", ".config", "clockidup.yml")

TOKEN_ENV = "CLOCKIDUP_TOKEN"
WORKSPACE_ENV = "CLOCKIDUP_WORKSPACE"


class Config:
    """Content of the config file."""

    def __init__(self, token: str = "", workspace: str = ""):
        self.token = token
        self.workspace = workspace

    def to_dict(self) -> dict:
        data = {"token": self.token}
        if self.workspace:
            data["workspace"] = self.workspace
        return data

    def __eq__(self, other):
        if not isinstance(other, Config):
            return NotImplemented
        return (self.token, self.workspace) == (other.token, other.workspace)

    def __repr__(self):
        # Never show the token itself.
        return f"Config(token={'***' if self.token else ''!r}, workspace={self.workspace!r})"


def config_path(path: Optional[str] = None) -> str:
    return os.path.expanduser(path or CONFIG_PATH)


def load_config(path: Optional[str] = None) -> Config:
    """Load the config file.

    A missing file is not an error: it just means the user has not logged
    in yet.

    Raises:
        ConfigError: the file cannot be read or is not valid YAML
    """
    path = config_path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        logger.debug("no config file at %s", path)
        return Config()
    except OSError as e:
        raise ConfigError(f"opening config '{path}': {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"decoding '{path}' from YAML: {e}") from e

    if data is None:
        return Config()
    if not isinstance(data, dict):
        raise ConfigError(f"decoding '{path}' from YAML: expected a mapping")
    return Config(
        token=str(data.get("token") or ""),
        workspace=str(data.get("workspace") or ""),
    )


def save_config(config: Config, path: Optional[str] = None):
    """Write the config file, readable by the current user only.

    Raises:
        ConfigError: the file cannot be written
    """
    path = config_path(path)
    try:
        os.makedirs(os.path.dirname(path), exist_ok=True)
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            yaml.safe_dump(config.to_dict(), f, default_flow_style=False)
    except OSError as e:
        raise ConfigError(f"opening config '{path}': {e}") from e
    logger.debug("config saved to %s", path)


def load_environment():
    """Load CLOCKIDUP_* variables from a .env file in the current directory,
    without overriding variables already set."""
    env_file = find_dotenv(usecwd=True)
    if env_file:
        logger.debug("loading environment from %s", env_file)
        load_dotenv(env_file)


def resolve(flag_value: str, env_var: str, config_value: str) -> str:
    """Pick a setting: command-line flag first, then environment, then config file."""
    return flag_value or os.getenv(env_var, "") or config_value
