from __future__ import annotations

from typing import List, Optional

import numpy as np

from setassoc_sim.cache.interfaces import Way
from setassoc_sim.cache.set_associative import SetAssociativeCache
from setassoc_sim.config import CacheConfig


class RandomCache(SetAssociativeCache):
    """Victim drawn uniformly from all ways of the set, valid or not."""

    def __init__(self, config: CacheConfig, rng: Optional[np.random.Generator] = None) -> None:
        super().__init__(config)
        self.rng = rng if rng is not None else np.random.default_rng()

    def _choose_victim(self, ways: List[Way]) -> int:
        return int(self.rng.integers(0, len(ways)))
