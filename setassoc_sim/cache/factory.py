from __future__ import annotations

from typing import Dict, Optional, Sequence

import numpy as np

from setassoc_sim.config import CacheConfig, ReplacementPolicy
from setassoc_sim.cache.lru import LRUCache
from setassoc_sim.cache.random_policy import RandomCache
from setassoc_sim.cache.set_associative import SetAssociativeCache
from setassoc_sim.errors import InvalidConfiguration


def build_cache(cfg: CacheConfig, rng: Optional[np.random.Generator] = None) -> SetAssociativeCache:
    if cfg.replacement_policy == ReplacementPolicy.LRU:
        return LRUCache(cfg)
    if cfg.replacement_policy == ReplacementPolicy.RANDOM:
        return RandomCache(cfg, rng)
    raise InvalidConfiguration(f"Unknown replacement policy: {cfg.replacement_policy}")


def build_caches(
    configs: Sequence[CacheConfig],
    seed: Optional[int] = None,
) -> Dict[str, SetAssociativeCache]:
    """Build one cache per config, keyed by label, each with its own generator stream."""
    streams = np.random.SeedSequence(seed).spawn(len(configs))
    caches: Dict[str, SetAssociativeCache] = {}
    for cfg, stream in zip(configs, streams):
        cfg.validate()
        label = cfg.label
        if label in caches:
            raise InvalidConfiguration(f"Duplicate cache label: {label}")
        caches[label] = build_cache(cfg, np.random.default_rng(stream))
    return caches
