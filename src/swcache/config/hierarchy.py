"""Configuration hierarchy — merges sources in priority order.

Precedence (later overrides earlier):
  1. Package defaults
  2. Global config   (~/.swcache/config.yaml)
  3. Project config   (./swcache.yaml, searched upward)
  4. Environment variables (SWCACHE_*)
  5. Runtime arguments
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from swcache.config.defaults import get_defaults

logger = logging.getLogger(__name__)

_GLOBAL_CONFIG_PATH = Path.home() / ".swcache" / "config.yaml"
_PROJECT_CONFIG_NAME = "swcache.yaml"

# Map of environment variables to config keys
_ENV_MAP: dict[str, str] = {
    "SWCACHE_VERSION": "version",
    "SWCACHE_CACHE_PREFIX": "cache_prefix",
    "SWCACHE_SITE_ORIGIN": "site_origin",
    "SWCACHE_TRUSTED_ASSET_ORIGIN": "trusted_asset_origin",
    "SWCACHE_ASSET_PATH_PREFIX": "asset_path_prefix",
    "SWCACHE_OFFLINE_PATH": "offline_path",
    "SWCACHE_PRECACHE_PATHS": "precache_paths",
    "SWCACHE_STORAGE": "storage",
    "SWCACHE_CACHE_DB_PATH": "cache_db_path",
    "SWCACHE_LOG_LEVEL": "log_level",
}

# Keys holding comma-separated lists in the environment
_LIST_KEYS = frozenset({"precache_paths"})


def load_config_hierarchy(
    config_file: str | Path | None = None,
    **runtime_overrides: Any,
) -> dict[str, Any]:
    """Load and merge configuration from all sources.

    An explicit ``config_file`` replaces the project config search.
    Returns a merged dict with the final resolved values.
    """
    config = get_defaults()

    # Layer 2: Global config
    global_cfg = _load_yaml_config(_GLOBAL_CONFIG_PATH)
    if global_cfg:
        config.update(global_cfg)

    # Layer 3: Project config
    project_path = Path(config_file) if config_file else _find_project_config()
    if project_path:
        project_cfg = _load_yaml_config(project_path)
        if project_cfg:
            config.update(project_cfg)

    # Layer 4: Environment variables
    config.update(_load_env_vars())

    # Layer 5: Runtime arguments, only when explicitly set
    for key, value in runtime_overrides.items():
        if value is not None:
            config[key] = value

    return config


def _load_yaml_config(path: Path) -> dict[str, Any] | None:
    """Load a YAML config file if it exists."""
    if not path.exists() or not path.is_file():
        return None
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
        if isinstance(data, dict):
            return data
        logger.warning("Config file %s is not a mapping, ignoring", path)
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Failed to load config %s: %s", path, e)
    return None


def _find_project_config() -> Path | None:
    """Search for swcache.yaml from cwd upward."""
    cwd = Path.cwd()
    for parent in [cwd, *cwd.parents]:
        candidate = parent / _PROJECT_CONFIG_NAME
        if candidate.exists():
            return candidate
    return None


def _load_env_vars() -> dict[str, Any]:
    """Read SWCACHE_* environment variables."""
    result: dict[str, Any] = {}
    for env_key, config_key in _ENV_MAP.items():
        value = os.environ.get(env_key)
        if value is None:
            continue
        result[config_key] = _coerce_env_value(config_key, value)
    return result


def _coerce_env_value(key: str, value: str) -> Any:
    """Coerce an environment variable string to the appropriate type."""
    if key in _LIST_KEYS:
        return [item.strip() for item in value.split(",") if item.strip()]
    return value
