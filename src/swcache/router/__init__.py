"""Cache router — request classification, strategies and lifecycle."""

from swcache.router.events import WorkerHost
from swcache.router.rules import Classification, Route, RouteRule, build_rules, classify
from swcache.router.worker import FetchOutcome, ServiceWorker, WorkerState

__all__ = [
    "Classification",
    "FetchOutcome",
    "Route",
    "RouteRule",
    "ServiceWorker",
    "WorkerHost",
    "WorkerState",
    "build_rules",
    "classify",
]
