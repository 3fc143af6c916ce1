from __future__ import annotations

from abc import abstractmethod
from typing import List, Tuple

from setassoc_sim.cache.interfaces import Cache, CacheLookup, CacheStatistics, Way
from setassoc_sim.config import CacheConfig


class SetAssociativeCache(Cache):
    """Sets of ways addressed by block number; subclasses pick the victim.

    block_number = address // block_size
    set_index = block_number % num_sets
    tag = block_number // num_sets
    """

    def __init__(self, config: CacheConfig) -> None:
        config.validate()
        self.config = config
        self.block_size = config.block_size_bytes
        self.associativity = config.associativity
        self.num_sets = config.num_sets
        self.sets: List[List[Way]] = [
            [Way() for _ in range(self.associativity)] for _ in range(self.num_sets)
        ]
        self._hits = 0
        self._misses = 0

    def split_address(self, address: int) -> Tuple[int, int]:
        """Return (set_index, tag) for a byte address."""
        if address < 0:
            raise ValueError(f"Address must be non-negative, got {address}")
        block_number = address // self.block_size
        return block_number % self.num_sets, block_number // self.num_sets

    def access(self, address: int) -> CacheLookup:
        set_index, tag = self.split_address(address)
        ways = self.sets[set_index]

        for idx, way in enumerate(ways):
            if way.valid and way.tag == tag:
                self._hits += 1
                self._on_hit(ways, idx)
                return CacheLookup(hit=True, set_index=set_index, way=idx, tag=tag)

        self._misses += 1
        victim = self._choose_victim(ways)
        evicted = ways[victim].install(tag)
        self._on_fill(ways, victim)
        return CacheLookup(
            hit=False,
            set_index=set_index,
            way=victim,
            tag=tag,
            evicted_tag=evicted,
        )

    @abstractmethod
    def _choose_victim(self, ways: List[Way]) -> int:
        """Return the index of the way to fill on a miss."""

    def _on_hit(self, ways: List[Way], idx: int) -> None:
        pass

    def _on_fill(self, ways: List[Way], idx: int) -> None:
        pass

    def resident_tags(self, set_index: int) -> List[int]:
        return [way.tag for way in self.sets[set_index] if way.valid]

    def occupancy(self) -> int:
        return sum(1 for ways in self.sets for way in ways if way.valid)

    def statistics(self) -> CacheStatistics:
        return CacheStatistics(hits=self._hits, misses=self._misses)

    def stats(self) -> dict:
        snapshot = self.statistics()
        return {
            "hits": snapshot.hits,
            "misses": snapshot.misses,
            "total": snapshot.total,
            "hit_rate": snapshot.hit_rate,
            "total_size_bytes": self.config.total_size_bytes,
            "block_size_bytes": self.block_size,
            "associativity": self.associativity,
            "num_sets": self.num_sets,
            "policy": self.config.replacement_policy.value,
            "valid_ways": self.occupancy(),
        }
