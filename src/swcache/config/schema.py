"""Pydantic model for router configuration."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from swcache.config import defaults
from swcache.errors.exceptions import ConfigError
from swcache.types import CacheKind, origin_of


class RouterConfig(BaseModel):
    """Versioned router configuration, injected at construction.

    Bumping ``version`` renames all three partitions; the next activation
    deletes the old ones.
    """

    cache_prefix: str = defaults.DEFAULT_CACHE_PREFIX
    version: str = defaults.DEFAULT_CACHE_VERSION
    static_suffix: str = defaults.DEFAULT_STATIC_SUFFIX
    dynamic_suffix: str = defaults.DEFAULT_DYNAMIC_SUFFIX
    image_suffix: str = defaults.DEFAULT_IMAGE_SUFFIX
    site_origin: str = defaults.DEFAULT_SITE_ORIGIN
    trusted_asset_origin: str = defaults.DEFAULT_TRUSTED_ASSET_ORIGIN
    asset_path_prefix: str = defaults.DEFAULT_ASSET_PATH_PREFIX
    offline_path: str = defaults.DEFAULT_OFFLINE_PATH
    precache_paths: list[str] = Field(
        default_factory=lambda: list(defaults.DEFAULT_PRECACHE_PATHS)
    )

    @field_validator("site_origin", "trusted_asset_origin")
    @classmethod
    def _normalize_origin(cls, value: str) -> str:
        if "://" not in value:
            raise ValueError(f"origin must include a scheme: {value!r}")
        return origin_of(value)

    @field_validator("asset_path_prefix", "offline_path")
    @classmethod
    def _check_path(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError(f"path must start with '/': {value!r}")
        return value

    @field_validator("precache_paths")
    @classmethod
    def _check_paths(cls, value: list[str]) -> list[str]:
        for path in value:
            if not path.startswith("/"):
                raise ValueError(f"path must start with '/': {path!r}")
        return value

    @property
    def allowed_origins(self) -> frozenset[str]:
        return frozenset({self.site_origin, self.trusted_asset_origin})

    @property
    def offline_url(self) -> str:
        return self.absolute_url(self.offline_path)

    def partition_name(self, kind: CacheKind) -> str:
        suffix = {
            CacheKind.STATIC: self.static_suffix,
            CacheKind.DYNAMIC: self.dynamic_suffix,
            CacheKind.IMAGE: self.image_suffix,
        }[kind]
        return f"{self.cache_prefix}{self.version}-{suffix}"

    def absolute_url(self, path: str) -> str:
        """Resolve a site path against the site origin."""
        return f"{self.site_origin}{path}"


_ROUTER_KEYS = frozenset(RouterConfig.model_fields)


def build_router_config(config: dict[str, Any]) -> RouterConfig:
    """Build a RouterConfig from a merged config dict, ignoring unrelated keys."""
    fields = {k: v for k, v in config.items() if k in _ROUTER_KEYS}
    try:
        return RouterConfig(**fields)
    except ValidationError as e:
        first = e.errors()[0]
        key = str(first["loc"][0]) if first.get("loc") else None
        raise ConfigError(f"Invalid router configuration: {e}", key=key) from e
