"""Configuration getter functions."""

import logging
import os
from pathlib import Path
from typing import Any

from .env_loader import load_env_file, load_global_config

logger = logging.getLogger(__name__)

ENV_KEYS = (
    "RESTCLIENT_BASE_URL",
    "RESTCLIENT_USER_AGENT",
    "RESTCLIENT_TIMEOUT",
    "RESTCLIENT_VERIFY_SSL",
    "RESTCLIENT_DEBUG",
)

DEFAULT_TIMEOUT = 30.0

_TRUE_VALUES = {"1", "true", "yes", "on"}


def get_config(key: str, env_file: Path | None = None, default: Any = None) -> Any:
    """
    Get configuration value with priority:
    1. Environment variable
    2. Explicit .env file
    3. Global config file
    4. Default value

    Args:
        key: Configuration key
        env_file: Optional .env file to consult
        default: Default value if not found

    Returns:
        Configuration value or default
    """
    # 1. Check environment variable
    env_value = os.environ.get(key)
    if env_value:
        return env_value

    # 2. Check .env file
    if env_file is not None:
        file_values = load_env_file(env_file)
        if key in file_values:
            return file_values[key]

    # 3. Check global config
    global_config = load_global_config()
    if key in global_config:
        return global_config[key]

    # 4. Return default
    return default


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUE_VALUES


def get_base_url(env_file: Path | None = None) -> str:
    """Get the base URL prepended to request paths (default: none)."""
    return str(get_config("RESTCLIENT_BASE_URL", env_file, default=""))


def get_user_agent(env_file: Path | None = None) -> str | None:
    """Get the User-Agent override, if configured."""
    value = get_config("RESTCLIENT_USER_AGENT", env_file)
    return str(value) if value else None


def get_timeout(env_file: Path | None = None) -> float:
    """Get the transport timeout in seconds (default: 30)."""
    value = get_config("RESTCLIENT_TIMEOUT", env_file, default=DEFAULT_TIMEOUT)
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.warning("Invalid RESTCLIENT_TIMEOUT %r, using %s", value, DEFAULT_TIMEOUT)
        return DEFAULT_TIMEOUT


def get_verify_ssl(env_file: Path | None = None) -> bool:
    """Get whether TLS certificates are verified (default: true)."""
    return _as_bool(get_config("RESTCLIENT_VERIFY_SSL", env_file, default=True))


def get_debug_enabled(env_file: Path | None = None) -> bool:
    """Get whether request/response tracing starts enabled (default: false)."""
    return _as_bool(get_config("RESTCLIENT_DEBUG", env_file, default=False))
