"""Environment file and global configuration loading."""

import logging
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)


def get_global_config_path() -> Path:
    """Return the path of the global ~/.restclient/config.yml file."""
    return Path.home() / ".restclient" / "config.yml"


def load_env_file(env_path: Path) -> dict[str, str]:
    """Load KEY=VALUE pairs from a .env file."""
    env_vars = {}
    if env_path.exists():
        with open(env_path) as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#") and "=" in line:
                    key, value = line.split("=", 1)
                    # Remove quotes if present
                    value = value.strip().strip("\"'")
                    env_vars[key.strip()] = value
    return env_vars


def load_global_config() -> dict[str, Any]:
    """Load global configuration from ~/.restclient/config.yml."""
    config_path = get_global_config_path()
    if not config_path.exists():
        return {}
    with open(config_path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        logger.warning("Ignoring %s: expected a mapping, got %s", config_path, type(data).__name__)
        return {}
    return data
