"""Network access — the router's only path to the origin servers."""

from swcache.network.fetcher import Fetcher, offline_transport

__all__ = ["Fetcher", "offline_transport"]
