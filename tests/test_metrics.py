from __future__ import annotations

import pytest

from setassoc_sim.analysis.metrics import ConfigResult, SimulationReport, format_hit_rate
from setassoc_sim.cache.interfaces import CacheStatistics
from setassoc_sim.config import CacheConfig


def test_statistics_totals():
    stats = CacheStatistics(hits=3, misses=1)
    assert stats.total == 4
    assert stats.hit_rate == 0.75
    assert stats.has_data


def test_empty_statistics_report_no_data():
    stats = CacheStatistics(hits=0, misses=0)
    assert stats.hit_rate == 0.0
    assert not stats.has_data
    assert format_hit_rate(stats) == "n/a (no accesses)"


def test_config_result_text():
    cfg = CacheConfig(32, 4, 2)
    result = ConfigResult(cfg.label, cfg, CacheStatistics(hits=1, misses=2))
    assert result.to_text() == (
        "2-way associative (LRU):\n"
        "Hits: 1\n"
        "Misses: 2\n"
        "Total accesses: 3\n"
        "Hit rate: 33.33%\n"
    )


def test_report_rows_and_lookup():
    cfg = CacheConfig(32, 4, 1)
    result = ConfigResult(cfg.label, cfg, CacheStatistics(hits=1, misses=1))
    report = SimulationReport(results=[result], accesses=2)
    rows = report.to_rows()
    assert rows[0]["label"] == "Direct-mapped (LRU)"
    assert rows[0]["num_sets"] == 8
    assert rows[0]["hit_rate"] == 0.5
    assert report.get("Direct-mapped (LRU)") is result
    assert report.to_text().endswith("Hit rate: 50.00%\n\n")
    with pytest.raises(KeyError):
        report.get("missing")
