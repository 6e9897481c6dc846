"""Request classification — ordered rule table, first match wins."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from swcache.cache.keys import is_cacheable_method
from swcache.config.schema import RouterConfig
from swcache.types import CacheKind, Credentials, Destination, FetchRequest, Strategy

Predicate = Callable[[FetchRequest], bool]


@dataclass(frozen=True)
class Route:
    strategy: Strategy
    kind: CacheKind | None = None


BYPASS = Route(Strategy.BYPASS)


@dataclass(frozen=True)
class RouteRule:
    name: str
    predicate: Predicate
    route: Route


@dataclass(frozen=True)
class Classification:
    """Outcome of classifying one request."""

    rule: str
    route: Route

    @property
    def intercepted(self) -> bool:
        return self.route.strategy != Strategy.BYPASS


_NO_MATCH = Classification(rule="no_match", route=BYPASS)


def build_rules(config: RouterConfig) -> list[RouteRule]:
    """Build the rule table for a configuration, in evaluation order."""
    allowed = config.allowed_origins
    asset_origin = config.trusted_asset_origin
    asset_prefix = config.asset_path_prefix

    return [
        RouteRule(
            "foreign_origin",
            lambda r: r.origin not in allowed,
            BYPASS,
        ),
        RouteRule(
            "credentialed",
            lambda r: r.credentials == Credentials.INCLUDE,
            BYPASS,
        ),
        RouteRule(
            "uncacheable_method",
            lambda r: not is_cacheable_method(r.method),
            BYPASS,
        ),
        RouteRule(
            "image",
            lambda r: r.destination == Destination.IMAGE or r.origin == asset_origin,
            Route(Strategy.CACHE_FIRST, CacheKind.IMAGE),
        ),
        RouteRule(
            "static_asset",
            lambda r: r.destination in (Destination.STYLE, Destination.SCRIPT)
            or r.path.startswith(asset_prefix),
            Route(Strategy.CACHE_FIRST, CacheKind.STATIC),
        ),
        RouteRule(
            "page",
            lambda r: r.is_navigation or r.destination == Destination.DOCUMENT,
            Route(Strategy.NETWORK_FIRST, CacheKind.DYNAMIC),
        ),
    ]


def classify(request: FetchRequest, rules: list[RouteRule]) -> Classification:
    """Return the first matching rule's route; bypass when none matches."""
    for rule in rules:
        if rule.predicate(request):
            return Classification(rule=rule.name, route=rule.route)
    return _NO_MATCH
