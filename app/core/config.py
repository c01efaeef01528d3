"""
Configuration loading following kkb_fastapi pattern.

Settings live in TOML files under the repository's ``config/`` directory,
one file per environment (see ConfigFile).
"""
import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import toml

from app.utils.constants import ConfigFile

CONFIG_DIR = Path(
    os.environ.get("GHG_CONFIG_DIR", Path(__file__).resolve().parents[2] / "config")
)


class Config:
    """Parsed configuration file."""

    def __init__(self, data: dict[str, Any], file_name: str):
        self.data = data
        self.file_name = file_name

    def section(self, name: str) -> dict[str, Any]:
        """Return a config section, or an empty dict if it is missing."""
        return self.data.get(name, {})

    def __repr__(self):
        return f"<Config: {self.file_name}>"


@lru_cache(maxsize=None)
def get_config(config_file: str = ConfigFile.DEVELOPMENT) -> Config:
    """
    Load configuration from a TOML file.

    Args:
        config_file: Configuration file name (e.g., "test.toml")

    Returns:
        Config instance

    Raises:
        FileNotFoundError: If the file does not exist in CONFIG_DIR
    """
    config_path = CONFIG_DIR / config_file
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    logging.debug(f"Loading configuration from {config_path}")
    return Config(toml.load(config_path), config_file)


def get_environment_config() -> Config:
    """Load the config file selected by the ENVIRONMENT variable."""
    env = os.getenv("ENVIRONMENT", "development")
    return get_config(f"{env}.toml")


__all__ = ["Config", "ConfigFile", "get_config", "get_environment_config"]
