from __future__ import annotations

from pathlib import Path
from typing import Iterable

from setassoc_sim.trace.reader import iter_addresses


def unique_blocks(addresses: Iterable[int], block_size_bytes: int) -> int:
    """Distinct block numbers among addresses; no cache can miss fewer times."""
    if block_size_bytes <= 0:
        raise ValueError("block_size_bytes must be positive")
    return len({address // block_size_bytes for address in addresses})


def count_unique_blocks(trace_path: str | Path, block_size_bytes: int) -> int:
    return unique_blocks(iter_addresses(trace_path), block_size_bytes)
