"""swcache — versioned, partitioned response cache with a rule-based router."""

from swcache.config.schema import RouterConfig
from swcache.router.worker import ServiceWorker
from swcache.types import CacheKind, Credentials, Destination, FetchRequest, RequestMode

__version__ = "0.1.0"

__all__ = [
    "CacheKind",
    "Credentials",
    "Destination",
    "FetchRequest",
    "RequestMode",
    "RouterConfig",
    "ServiceWorker",
]
