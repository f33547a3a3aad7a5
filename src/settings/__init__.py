"""Workspace configuration."""

from settings.config import (
    CONFIG_FILENAME,
    BblsConfig,
    ConfigError,
    load_config,
)

__all__ = [
    "CONFIG_FILENAME",
    "BblsConfig",
    "ConfigError",
    "load_config",
]
