"""
Configuration

TOML-backed service configuration.
"""

from .settings import (
    CONFIG_PATH_ENV,
    DEFAULT_CONFIG_PATH,
    ServiceConfig,
    load_config,
    resolve_config_path,
)

__all__ = [
    "CONFIG_PATH_ENV",
    "DEFAULT_CONFIG_PATH",
    "ServiceConfig",
    "load_config",
    "resolve_config_path",
]
