"""
Configuration management for consulkit.

Handles loading and validation of configuration files.
"""

from consulkit.config.settings import (
    ConsulkitConfig,
    ConsulSettings,
    LoggingConfig,
    get_default_config,
    get_default_config_path,
    load_config,
    normalize_address,
    settings_from_env,
)

__all__ = [
    "ConsulkitConfig",
    "ConsulSettings",
    "LoggingConfig",
    "get_default_config",
    "get_default_config_path",
    "load_config",
    "normalize_address",
    "settings_from_env",
]
