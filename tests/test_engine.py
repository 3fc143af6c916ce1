from __future__ import annotations

from pathlib import Path

from setassoc_sim.cache.factory import build_caches
from setassoc_sim.config import CacheConfig, ReplacementPolicy, SimulatorConfig, default_caches
from setassoc_sim.main import main
from setassoc_sim.simulator.engine import Simulator, run_trace


def test_simulator_feeds_every_cache_independently():
    sim = Simulator(build_caches(default_caches()))
    report = sim.run([0, 32, 0])
    assert report.accesses == 3
    by_label = {r.label: r.statistics for r in report.results}
    # blocks 0 and 8 collide only in the direct-mapped cache
    assert by_label["Direct-mapped (LRU)"].hits == 0
    assert by_label["2-way associative (LRU)"].hits == 1
    assert by_label["4-way associative (LRU)"].hits == 1
    assert by_label["Fully associative (LRU)"].hits == 1
    for stats in by_label.values():
        assert stats.total == 3


def test_run_trace_with_random_policy_is_reproducible(tmp_path: Path):
    trace = tmp_path / "trace.txt"
    trace.write_text("\n".join(hex(block * 4) for block in [0, 1, 9, 17, 0, 25, 1, 9, 33, 0] * 5), encoding="utf-8")
    caches = [CacheConfig(32, 4, 2, ReplacementPolicy.RANDOM), CacheConfig(32, 4, 4, ReplacementPolicy.RANDOM)]
    cfg = SimulatorConfig(trace_path=trace, caches=caches, seed=3)
    first = run_trace(cfg)
    second = run_trace(cfg)
    assert first.to_rows() == second.to_rows()
    assert first.accesses == 50


def test_main_prints_report(tmp_path: Path, capsys):
    trace = tmp_path / "trace.txt"
    trace.write_text("0\n4\n0\n", encoding="utf-8")
    assert main(["--trace", str(trace)]) == 0
    out = capsys.readouterr().out
    assert out.startswith("Direct-mapped (LRU):\nHits: 1\nMisses: 2\nTotal accesses: 3\nHit rate: 33.33%\n\n")
    assert "Fully associative (LRU):" in out
    assert out.count("Hit rate: 33.33%") == 4


def test_main_custom_geometry(tmp_path: Path, capsys):
    trace = tmp_path / "trace.txt"
    trace.write_text("0 40 0 40\n", encoding="utf-8")
    code = main(
        ["--trace", str(trace), "--cache-size", "64", "--block-size", "8", "--associativity", "1", "full",
         "--policy", "random", "--seed", "1"]
    )
    assert code == 0
    out = capsys.readouterr().out
    assert "Direct-mapped (RANDOM):" in out
    assert "Fully associative (RANDOM):" in out


def test_main_missing_trace_exits_1(tmp_path: Path, capsys):
    assert main(["--trace", str(tmp_path / "missing.txt")]) == 1
    assert "missing.txt" in capsys.readouterr().err


def test_main_invalid_geometry_exits_2(tmp_path: Path, capsys):
    trace = tmp_path / "trace.txt"
    trace.write_text("0\n", encoding="utf-8")
    assert main(["--trace", str(trace), "--associativity", "3"]) == 2
    assert "Invalid configuration" in capsys.readouterr().err


def test_main_empty_trace_reports_no_data(tmp_path: Path, capsys):
    trace = tmp_path / "trace.txt"
    trace.write_text("", encoding="utf-8")
    assert main(["--trace", str(trace)]) == 0
    out = capsys.readouterr().out
    assert out.count("Hit rate: n/a (no accesses)") == 4


def test_main_with_config_file(tmp_path: Path, capsys):
    (tmp_path / "trace.txt").write_text("0 4 0 4\n", encoding="utf-8")
    config = tmp_path / "sim.yaml"
    config.write_text(
        "trace_path: trace.txt\n"
        "seed: 2\n"
        "caches:\n"
        "  - associativity: 1\n"
        "  - name: rand\n"
        "    associativity: 2\n"
        "    policy: random\n",
        encoding="utf-8",
    )
    assert main(["--config", str(config)]) == 0
    out = capsys.readouterr().out
    assert "Direct-mapped (LRU):\nHits: 2\n" in out
    assert "rand:\n" in out


def test_main_undecodable_trace_exits_1(tmp_path: Path, capsys):
    trace = tmp_path / "trace.txt"
    trace.write_bytes(b"10\n\xff\xfe\n20\n")
    assert main(["--trace", str(trace)]) == 1
    assert "trace.txt" in capsys.readouterr().err


def test_main_missing_config_exits_2(tmp_path: Path, capsys):
    assert main(["--config", str(tmp_path / "nope.yaml")]) == 2
    assert "Invalid configuration" in capsys.readouterr().err


def test_main_config_with_bad_integer_exits_2(tmp_path: Path, capsys):
    config = tmp_path / "sim.yaml"
    config.write_text("cache_size_bytes: big\n", encoding="utf-8")
    assert main(["--config", str(config)]) == 2
    assert "cache_size_bytes" in capsys.readouterr().err


def test_main_rejects_config_with_geometry_flags(tmp_path: Path, capsys):
    (tmp_path / "trace.txt").write_text("0\n", encoding="utf-8")
    config = tmp_path / "sim.yaml"
    config.write_text("trace_path: trace.txt\n", encoding="utf-8")
    assert main(["--config", str(config), "--cache-size", "64", "--policy", "random"]) == 2
    err = capsys.readouterr().err
    assert "--cache-size" in err
    assert "--policy" in err
