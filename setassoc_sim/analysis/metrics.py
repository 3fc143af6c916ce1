from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from setassoc_sim.cache.interfaces import CacheStatistics
from setassoc_sim.config import CacheConfig


def format_hit_rate(stats: CacheStatistics) -> str:
    if not stats.has_data:
        return "n/a (no accesses)"
    return f"{100.0 * stats.hit_rate:.2f}%"


@dataclass(frozen=True)
class ConfigResult:
    label: str
    config: CacheConfig
    statistics: CacheStatistics

    def to_text(self) -> str:
        stats = self.statistics
        return (
            f"{self.label}:\n"
            f"Hits: {stats.hits}\n"
            f"Misses: {stats.misses}\n"
            f"Total accesses: {stats.total}\n"
            f"Hit rate: {format_hit_rate(stats)}\n"
        )

    def to_row(self) -> Dict[str, object]:
        stats = self.statistics
        return {
            "label": self.label,
            "total_size_bytes": self.config.total_size_bytes,
            "block_size_bytes": self.config.block_size_bytes,
            "associativity": self.config.associativity,
            "num_sets": self.config.num_sets,
            "policy": self.config.replacement_policy.value,
            "hits": stats.hits,
            "misses": stats.misses,
            "total": stats.total,
            "hit_rate": stats.hit_rate,
        }


@dataclass
class SimulationReport:
    results: List[ConfigResult] = field(default_factory=list)
    accesses: int = 0

    def to_text(self) -> str:
        return "".join(result.to_text() + "\n" for result in self.results)

    def to_rows(self) -> List[Dict[str, object]]:
        return [result.to_row() for result in self.results]

    def get(self, label: str) -> ConfigResult:
        for result in self.results:
            if result.label == label:
                return result
        raise KeyError(label)
