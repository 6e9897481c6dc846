"""Package-level default configuration values."""

from __future__ import annotations

from pathlib import Path
from typing import Any

# Partition naming: "{prefix}{version}-{suffix}"
DEFAULT_CACHE_PREFIX = "modern-jan-"
DEFAULT_CACHE_VERSION = "v1"
DEFAULT_STATIC_SUFFIX = "static"
DEFAULT_DYNAMIC_SUFFIX = "dynamic"
DEFAULT_IMAGE_SUFFIX = "images"

# Origins
DEFAULT_SITE_ORIGIN = "https://modern-jan.com"
DEFAULT_TRUSTED_ASSET_ORIGIN = "https://r2.modern-jan.com"

# Paths
DEFAULT_ASSET_PATH_PREFIX = "/_astro/"
DEFAULT_OFFLINE_PATH = "/offline.html"
DEFAULT_PRECACHE_PATHS = [
    "/",
    "/blog/",
    "/about/",
    "/member/",
    "/tutorial/",
    DEFAULT_OFFLINE_PATH,
]

# Storage
DEFAULT_STORAGE = "disk"
DEFAULT_CACHE_DB_PATH = str(Path.home() / ".swcache" / "cache.db")

# Log level
DEFAULT_LOG_LEVEL = "WARNING"


def get_defaults() -> dict[str, Any]:
    """Return all defaults as a flat dictionary for merging."""
    return {
        "cache_prefix": DEFAULT_CACHE_PREFIX,
        "version": DEFAULT_CACHE_VERSION,
        "static_suffix": DEFAULT_STATIC_SUFFIX,
        "dynamic_suffix": DEFAULT_DYNAMIC_SUFFIX,
        "image_suffix": DEFAULT_IMAGE_SUFFIX,
        "site_origin": DEFAULT_SITE_ORIGIN,
        "trusted_asset_origin": DEFAULT_TRUSTED_ASSET_ORIGIN,
        "asset_path_prefix": DEFAULT_ASSET_PATH_PREFIX,
        "offline_path": DEFAULT_OFFLINE_PATH,
        "precache_paths": list(DEFAULT_PRECACHE_PATHS),
        "storage": DEFAULT_STORAGE,
        "cache_db_path": DEFAULT_CACHE_DB_PATH,
        "log_level": DEFAULT_LOG_LEVEL,
    }
