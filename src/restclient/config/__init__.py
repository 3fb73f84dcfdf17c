"""
Configuration for restclient.

Values are resolved in order of priority:
1. Environment variables (highest priority)
2. An explicit .env file passed by the caller
3. Global config file (~/.restclient/config.yml)
4. Default values (lowest priority)
"""

from .env_loader import get_global_config_path, load_env_file, load_global_config
from .getters import (
    DEFAULT_TIMEOUT,
    ENV_KEYS,
    get_base_url,
    get_config,
    get_debug_enabled,
    get_timeout,
    get_user_agent,
    get_verify_ssl,
)

__all__ = [
    # env_loader
    "get_global_config_path",
    "load_env_file",
    "load_global_config",
    # getters
    "DEFAULT_TIMEOUT",
    "ENV_KEYS",
    "get_base_url",
    "get_config",
    "get_debug_enabled",
    "get_timeout",
    "get_user_agent",
    "get_verify_ssl",
]
