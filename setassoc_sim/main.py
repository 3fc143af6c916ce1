from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional, Sequence

from setassoc_sim.config import (
    DEFAULT_BLOCK_SIZE,
    DEFAULT_CACHE_SIZE,
    DEFAULT_TRACE_PATH,
    CacheConfig,
    ReplacementPolicy,
    SimulatorConfig,
    default_caches,
    load_config,
    parse_associativity,
)
from setassoc_sim.errors import InvalidConfiguration, TraceUnreadable
from setassoc_sim.simulator.engine import run_trace


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Set-associative cache simulator")
    parser.add_argument(
        "--config",
        default=None,
        help="Path to YAML config listing caches to simulate; cannot be combined with "
        "--cache-size, --block-size, --associativity or --policy",
    )
    parser.add_argument("--trace", default=None, help=f"Trace of hex addresses (default: {DEFAULT_TRACE_PATH})")
    parser.add_argument("--cache-size", type=int, default=None, help=f"Cache size in bytes (default: {DEFAULT_CACHE_SIZE})")
    parser.add_argument("--block-size", type=int, default=None, help=f"Block size in bytes (default: {DEFAULT_BLOCK_SIZE})")
    parser.add_argument(
        "--associativity",
        nargs="+",
        default=None,
        help="Ways per set, one cache per value; 'full' for fully associative "
        "(default: 1 2 4 full)",
    )
    parser.add_argument(
        "--policy",
        choices=[p.value for p in ReplacementPolicy],
        default=None,
        help=f"Replacement policy (default: {ReplacementPolicy.LRU.value})",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for random replacement")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> SimulatorConfig:
    geometry_flags = {
        "--cache-size": args.cache_size,
        "--block-size": args.block_size,
        "--associativity": args.associativity,
        "--policy": args.policy,
    }
    if args.config:
        given = [flag for flag, value in geometry_flags.items() if value is not None]
        if given:
            raise InvalidConfiguration(f"--config cannot be combined with {', '.join(given)}")
        cfg = load_config(args.config)
        if args.trace:
            cfg = replace(cfg, trace_path=Path(args.trace))
        if args.seed is not None:
            cfg = replace(cfg, seed=args.seed)
        return cfg

    cache_size = args.cache_size if args.cache_size is not None else DEFAULT_CACHE_SIZE
    block_size = args.block_size if args.block_size is not None else DEFAULT_BLOCK_SIZE
    policy = ReplacementPolicy.parse(args.policy or ReplacementPolicy.LRU)
    if args.associativity:
        caches: List[CacheConfig] = [
            CacheConfig(
                cache_size,
                block_size,
                parse_associativity(value, cache_size, block_size),
                policy,
            )
            for value in args.associativity
        ]
    else:
        caches = default_caches(cache_size, block_size, policy)
    for cache in caches:
        cache.validate()
    return SimulatorConfig(
        trace_path=Path(args.trace) if args.trace else DEFAULT_TRACE_PATH,
        caches=caches,
        seed=args.seed,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    try:
        cfg = build_config(args)
        report = run_trace(cfg)
    except TraceUnreadable as exc:
        print(exc, file=sys.stderr)
        return 1
    except InvalidConfiguration as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    print(report.to_text(), end="")
    return 0


if __name__ == "__main__":
    sys.exit(main())
