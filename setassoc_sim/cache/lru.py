from __future__ import annotations

from typing import List

from setassoc_sim.cache.interfaces import Way
from setassoc_sim.cache.set_associative import SetAssociativeCache


class LRUCache(SetAssociativeCache):
    """Per-way recency ranks; the touched way drops to 0 and the rest age by one.

    Ways that were never filled age with every access to their set, so they
    always outrank resident ways and get filled before anything is evicted.
    """

    def _choose_victim(self, ways: List[Way]) -> int:
        victim = 0
        for idx in range(1, len(ways)):
            if ways[idx].recency > ways[victim].recency:
                victim = idx
        return victim

    def _on_hit(self, ways: List[Way], idx: int) -> None:
        self._touch(ways, idx)

    def _on_fill(self, ways: List[Way], idx: int) -> None:
        self._touch(ways, idx)

    @staticmethod
    def _touch(ways: List[Way], idx: int) -> None:
        for other, way in enumerate(ways):
            if other == idx:
                way.recency = 0
            else:
                way.recency += 1
