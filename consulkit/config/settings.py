"""
Configuration management for consulkit.

Loads YAML configuration from file with sensible defaults and validation.
Supports environment variable substitution using ${ENV_VAR} syntax. When no
file exists, settings are derived from the standard CONSUL_HTTP_* variables.

The environment is always passed in explicitly (or defaults to ``os.environ``
at the call site); nothing in the request path reads it.
"""

import os
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

import yaml

from consulkit.exceptions import InvalidConfigurationError
from consulkit.logging_config import get_logger

logger = get_logger(__name__)


DEFAULT_ADDRESS = "http://127.0.0.1:8500"
DEFAULT_TIMEOUT = 10.0

ENV_HTTP_ADDR = "CONSUL_HTTP_ADDR"
ENV_HTTP_TOKEN = "CONSUL_HTTP_TOKEN"
ENV_HTTP_SSL = "CONSUL_HTTP_SSL"

_TRUTHY = {"1", "true", "yes", "on"}


def _expand_env_vars(value: Any, environ: Mapping[str, str]) -> Any:
    """
    Recursively expand environment variables in configuration values.

    Supports ${ENV_VAR} syntax with optional default values: ${ENV_VAR:default}

    Args:
        value: Configuration value (string, dict, list, or other)
        environ: Environment snapshot to read from

    Returns:
        Value with environment variables expanded

    Examples:
        "${CONSUL_HTTP_ADDR}" -> value of CONSUL_HTTP_ADDR env var
        "${CONSUL_HTTP_ADDR:http://127.0.0.1:8500}" -> value or the default
    """
    if isinstance(value, str):
        pattern = r'\$\{([^}:]+)(?::([^}]*))?\}'

        def replace_env_var(match):
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else ""
            return environ.get(var_name, default_value)

        return re.sub(pattern, replace_env_var, value)
    elif isinstance(value, dict):
        return {k: _expand_env_vars(v, environ) for k, v in value.items()}
    elif isinstance(value, list):
        return [_expand_env_vars(item, environ) for item in value]
    else:
        return value


def normalize_address(address: str, use_ssl: bool = False) -> str:
    """
    Ensure an agent address carries a scheme.

    ``CONSUL_HTTP_ADDR`` is commonly set to a bare ``host:port``.
    """
    address = address.strip()
    if address.startswith("http://") or address.startswith("https://"):
        return address.rstrip("/")
    scheme = "https" if use_ssl else "http"
    return f"{scheme}://{address}".rstrip("/")


@dataclass
class ConsulSettings:
    """Connection settings for a Consul agent."""

    address: str = DEFAULT_ADDRESS
    token: Optional[str] = None
    datacenter: Optional[str] = None
    wait_time: Optional[float] = None  # seconds, default blocking wait
    timeout: float = DEFAULT_TIMEOUT  # seconds, transport timeout for non-blocking calls


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    file: str = ""
    format: str = "console"  # "console" or "json"


@dataclass
class ConsulkitConfig:
    """Main consulkit configuration."""

    consul: ConsulSettings = field(default_factory=ConsulSettings)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def settings_from_env(environ: Optional[Mapping[str, str]] = None) -> ConsulSettings:
    """
    Build connection settings from CONSUL_HTTP_* variables.

    Args:
        environ: Environment snapshot. Defaults to ``os.environ``.

    Returns:
        ConsulSettings: address defaults to the local agent, token to None.
    """
    if environ is None:
        environ = os.environ

    use_ssl = environ.get(ENV_HTTP_SSL, "").strip().lower() in _TRUTHY
    raw_address = environ.get(ENV_HTTP_ADDR)
    if raw_address:
        address = normalize_address(raw_address, use_ssl=use_ssl)
    elif use_ssl:
        address = DEFAULT_ADDRESS.replace("http://", "https://", 1)
    else:
        address = DEFAULT_ADDRESS

    token = environ.get(ENV_HTTP_TOKEN) or None
    return ConsulSettings(address=address, token=token)


def get_default_config_path() -> str:
    """Get the default configuration file path."""
    return os.path.expanduser("~/.consulkit/config.yaml")


def get_default_config(environ: Optional[Mapping[str, str]] = None) -> ConsulkitConfig:
    """
    Get default configuration, with connection settings taken from the environment.

    Returns:
        ConsulkitConfig: Default configuration object
    """
    return ConsulkitConfig(
        consul=settings_from_env(environ),
        logging=LoggingConfig(),
    )


def load_config(
    config_path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ConsulkitConfig:
    """
    Load configuration from YAML file with validation.

    If config file is not found, returns default configuration.
    If config file is malformed or invalid, raises InvalidConfigurationError.

    Args:
        config_path: Path to configuration file. If None, uses default path.
        environ: Environment snapshot used for defaults and ${VAR} expansion.

    Returns:
        ConsulkitConfig: Loaded and validated configuration

    Raises:
        InvalidConfigurationError: If configuration is invalid or malformed
    """
    if environ is None:
        environ = os.environ

    if config_path is None:
        config_path = get_default_config_path()

    config_path = os.path.expanduser(config_path)

    if not os.path.exists(config_path):
        logger.info(f"Configuration file not found at {config_path}, using defaults")
        return get_default_config(environ)

    try:
        with open(config_path, 'r') as f:
            config_data = yaml.safe_load(f)
        logger.debug(f"Loaded configuration from {config_path}")
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse YAML configuration file '{config_path}': {e}")
        raise InvalidConfigurationError(
            f"Failed to parse YAML configuration file '{config_path}': {e}"
        ) from e
    except OSError as e:
        logger.error(f"Failed to read configuration file '{config_path}': {e}")
        raise InvalidConfigurationError(
            f"Failed to read configuration file '{config_path}': {e}"
        ) from e

    if config_data is None:
        logger.info(f"Configuration file {config_path} is empty, using defaults")
        return get_default_config(environ)

    if not isinstance(config_data, dict):
        raise InvalidConfigurationError(
            f"Configuration file '{config_path}' must contain a mapping at the top level"
        )

    config_data = _expand_env_vars(config_data, environ)

    try:
        config = _build_config_from_dict(config_data, environ)
    except (TypeError, ValueError, AttributeError) as e:
        logger.error(f"Invalid configuration in '{config_path}': {e}")
        raise InvalidConfigurationError(
            f"Invalid configuration in '{config_path}': {e}"
        ) from e

    _validate_config(config)
    logger.info(f"Successfully loaded and validated configuration from {config_path}")
    return config


def _optional_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


def _build_config_from_dict(
    config_data: Dict[str, Any],
    environ: Mapping[str, str],
) -> ConsulkitConfig:
    """
    Build ConsulkitConfig from dictionary loaded from YAML.

    Missing keys fall back to the environment-derived defaults.
    """
    default_config = get_default_config(environ)

    consul_data = config_data.get('consul') or {}
    address = consul_data.get('address') or default_config.consul.address
    token = consul_data.get('token', default_config.consul.token) or None
    consul = ConsulSettings(
        address=normalize_address(str(address)),
        token=token,
        datacenter=consul_data.get('datacenter') or None,
        wait_time=_optional_float(consul_data.get('wait_time')),
        timeout=float(consul_data.get('timeout', default_config.consul.timeout)),
    )

    logging_data = config_data.get('logging') or {}
    logging = LoggingConfig(
        level=str(logging_data.get('level', default_config.logging.level)),
        file=os.path.expanduser(
            str(logging_data.get('file', default_config.logging.file) or "")
        ),
        format=str(logging_data.get('format', default_config.logging.format)),
    )

    return ConsulkitConfig(consul=consul, logging=logging)


def _validate_config(config: ConsulkitConfig) -> None:
    """
    Validate configuration values.

    Raises:
        InvalidConfigurationError: If configuration is invalid
    """
    if not config.consul.address:
        raise InvalidConfigurationError("consul address cannot be empty")

    if config.consul.timeout <= 0:
        raise InvalidConfigurationError(
            f"timeout must be positive, got {config.consul.timeout}"
        )

    if config.consul.wait_time is not None and config.consul.wait_time <= 0:
        raise InvalidConfigurationError(
            f"wait_time must be positive, got {config.consul.wait_time}"
        )

    valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    if config.logging.level.upper() not in valid_log_levels:
        raise InvalidConfigurationError(
            f"logging level must be one of {valid_log_levels}, "
            f"got '{config.logging.level}'"
        )

    valid_formats = ["console", "json"]
    if config.logging.format not in valid_formats:
        raise InvalidConfigurationError(
            f"logging format must be one of {valid_formats}, "
            f"got '{config.logging.format}'"
        )
