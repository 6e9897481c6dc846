"""Cache statistics model."""

from __future__ import annotations

from pydantic import BaseModel, Field


class CacheStats(BaseModel):
    """Aggregate router and cache statistics."""

    partitions: list[str] = Field(default_factory=list)
    entries: int = 0
    size_mb: float = 0.0
    hits: int = 0
    misses: int = 0
    network_fetches: int = 0
    stores: int = 0
    offline_fallbacks: int = 0
    partitions_deleted: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0
