"""Configuration management for wtstate."""

from __future__ import annotations

import os
import tomllib
from pathlib import Path

from loguru import logger
from pydantic import BaseModel, Field, ValidationError, field_validator

REPO_CONFIG_FILENAME = ".wtstate.toml"


class ConfigError(Exception):
    """Raised when configuration values are invalid."""
    pass


class Config(BaseModel):
    """Application configuration."""

    base_branch: str = Field(default="main", description="Branch new work is compared against")
    remote: str = Field(default="origin", description="Remote that holds the base branch")

    @field_validator("base_branch", "remote")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @classmethod
    def get_config_path(cls) -> Path:
        """Get the path to the user config file."""
        # Check for XDG config directory first (Linux/macOS)
        if xdg_config := os.getenv("XDG_CONFIG_HOME"):
            return Path(xdg_config) / "wtstate" / "config.toml"
        # Fall back to ~/.config on Unix or APPDATA on Windows
        if os.name == "nt":
            base = Path(os.getenv("APPDATA", Path.home()))
        else:
            base = Path.home() / ".config"
        return base / "wtstate" / "config.toml"


def _read_toml_section(path: Path) -> dict[str, str]:
    """Read the [default] table of a TOML file, or nothing if it is unusable."""
    if not path.is_file():
        return {}
    try:
        with open(path, "rb") as f:
            section = tomllib.load(f).get("default", {})
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning(f"Ignoring config file {path}: {e}")
        return {}
    if not isinstance(section, dict):
        logger.warning(f"Ignoring config file {path}: 'default' is not a table")
        return {}
    return dict(section)


def load_config(repo_root: Path | None = None) -> Config:
    """Load configuration from config files and environment variables.

    Priority: Environment variables > repo .wtstate.toml > user config file > Defaults

    Raises:
        ConfigError: If a value fails validation.
    """
    config_data: dict[str, str] = {}

    # 1. User config file
    config_data.update(_read_toml_section(Config.get_config_path()))

    # 2. Repository config file
    if repo_root is not None:
        config_data.update(_read_toml_section(repo_root / REPO_CONFIG_FILENAME))

    # 3. Environment variables override config files
    if base_branch := os.getenv("WTSTATE_BASE_BRANCH"):
        config_data["base_branch"] = base_branch
    if remote := os.getenv("WTSTATE_REMOTE"):
        config_data["remote"] = remote

    try:
        return Config(**config_data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}")
