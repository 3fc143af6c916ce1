from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class Way:
    valid: bool = False
    tag: Optional[int] = None
    recency: int = 0  # LRU rank, 0 = most recently used

    def install(self, tag: int) -> Optional[int]:
        """Store `tag`; return the tag it replaced, if the way was valid."""
        evicted = self.tag if self.valid else None
        self.valid = True
        self.tag = tag
        return evicted


@dataclass(frozen=True)
class CacheLookup:
    hit: bool
    set_index: int
    way: int
    tag: int
    evicted_tag: Optional[int] = None


@dataclass(frozen=True)
class CacheStatistics:
    hits: int
    misses: int

    @property
    def total(self) -> int:
        return self.hits + self.misses

    @property
    def has_data(self) -> bool:
        return self.total > 0

    @property
    def hit_rate(self) -> float:
        # Empty traces report 0.0; callers check has_data to tell the two apart.
        return self.hits / self.total if self.total else 0.0


class Cache(ABC):
    @abstractmethod
    def access(self, address: int) -> CacheLookup:
        """Look up one byte address; update replacement state and counters."""

    @abstractmethod
    def statistics(self) -> CacheStatistics:
        """Return a hit/miss snapshot."""

    @abstractmethod
    def stats(self) -> dict:
        """Return cache-level stats snapshot."""
