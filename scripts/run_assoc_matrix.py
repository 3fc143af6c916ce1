from __future__ import annotations

import argparse
import csv
from pathlib import Path
from typing import Optional, Sequence

from setassoc_sim.cache.factory import build_caches
from setassoc_sim.config import CacheConfig, ReplacementPolicy, parse_associativity
from setassoc_sim.errors import InvalidConfiguration
from setassoc_sim.simulator.engine import Simulator
from setassoc_sim.trace.reader import read_addresses
from setassoc_sim.trace.trace_utils import unique_blocks


DEFAULT_SIZES = [32, 256, 4096]
DEFAULT_ASSOCIATIVITIES = ["1", "2", "4", "8", "full"]
DEFAULT_POLICIES = [p.value for p in ReplacementPolicy]


def _configs(size: int, block_size: int, associativities: list[str], policies: list[str]) -> list[CacheConfig]:
    configs = []
    seen: set[tuple[int, ReplacementPolicy]] = set()
    for policy in policies:
        for value in associativities:
            cfg = CacheConfig(
                size,
                block_size,
                parse_associativity(value, size, block_size),
                ReplacementPolicy.parse(policy),
            )
            key = (cfg.associativity, cfg.replacement_policy)
            if key in seen:
                # "full" and an explicit way count can name the same geometry
                continue
            try:
                cfg.validate()
            except InvalidConfiguration:
                # e.g. 8 ways do not fit a 16-byte cache of 4-byte blocks
                continue
            seen.add(key)
            configs.append(cfg)
    return configs


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Run trace matrix for cache sizes/associativities/policies.")
    parser.add_argument("--traces", nargs="+", required=True)
    parser.add_argument("--output", default="outputs/assoc_matrix.csv")
    parser.add_argument("--block-size", type=int, default=4)
    parser.add_argument("--sizes", nargs="*", type=int, default=None)
    parser.add_argument("--associativities", nargs="*", default=None)
    parser.add_argument("--policies", nargs="*", default=None)
    parser.add_argument("--seed", type=int, default=1)
    args = parser.parse_args(argv)

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    sizes = args.sizes if args.sizes else DEFAULT_SIZES
    associativities = args.associativities if args.associativities else DEFAULT_ASSOCIATIVITIES
    policies = args.policies if args.policies else DEFAULT_POLICIES

    rows = []
    for trace_rel in args.traces:
        trace_path = Path(trace_rel)
        addresses = read_addresses(trace_path)
        unique = unique_blocks(addresses, args.block_size)
        for size in sizes:
            configs = _configs(size, args.block_size, associativities, policies)
            sim = Simulator(build_caches(configs, args.seed))
            report = sim.run(addresses)
            for row in report.to_rows():
                rows.append(
                    {
                        "trace": str(trace_path),
                        "accesses": report.accesses,
                        "unique_blocks": unique,
                        **row,
                    }
                )

    fieldnames = list(rows[0].keys()) if rows else []
    with open(output_path, "w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        writer.writerows(rows)

    print(f"Wrote {len(rows)} rows to {output_path}")


if __name__ == "__main__":
    main()
