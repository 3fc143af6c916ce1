from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable

from setassoc_sim.analysis.metrics import ConfigResult, SimulationReport
from setassoc_sim.cache.factory import build_caches
from setassoc_sim.cache.set_associative import SetAssociativeCache
from setassoc_sim.config import SimulatorConfig
from setassoc_sim.trace.reader import iter_addresses


@dataclass
class Simulator:
    caches: Dict[str, SetAssociativeCache]
    accesses: int = 0

    def handle_address(self, address: int) -> None:
        for cache in self.caches.values():
            cache.access(address)
        self.accesses += 1

    def run(self, addresses: Iterable[int]) -> SimulationReport:
        for address in addresses:
            self.handle_address(address)
        return self.report()

    def report(self) -> SimulationReport:
        results = [
            ConfigResult(label=label, config=cache.config, statistics=cache.statistics())
            for label, cache in self.caches.items()
        ]
        return SimulationReport(results=results, accesses=self.accesses)


def run_trace(cfg: SimulatorConfig) -> SimulationReport:
    sim = Simulator(build_caches(cfg.caches, cfg.seed))
    return sim.run(iter_addresses(cfg.trace_path))
