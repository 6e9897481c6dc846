"""Configuration — defaults, YAML/env hierarchy and the router model."""

from swcache.config.hierarchy import load_config_hierarchy
from swcache.config.schema import RouterConfig, build_router_config

__all__ = ["RouterConfig", "build_router_config", "load_config_hierarchy"]
