from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from setassoc_sim.errors import InvalidConfiguration

DEFAULT_TRACE_PATH = Path("traces.txt")
DEFAULT_CACHE_SIZE = 32
DEFAULT_BLOCK_SIZE = 4
FULL_ASSOCIATIVITY = "full"


class ReplacementPolicy(str, Enum):
    LRU = "lru"
    RANDOM = "random"

    @classmethod
    def parse(cls, value: Union[str, "ReplacementPolicy"]) -> "ReplacementPolicy":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidConfiguration(f"Unknown replacement policy: {value}") from None


@dataclass(frozen=True)
class CacheConfig:
    total_size_bytes: int
    block_size_bytes: int
    associativity: int
    replacement_policy: ReplacementPolicy = ReplacementPolicy.LRU
    name: Optional[str] = None

    @classmethod
    def fully_associative(
        cls,
        total_size_bytes: int,
        block_size_bytes: int,
        replacement_policy: ReplacementPolicy = ReplacementPolicy.LRU,
        name: Optional[str] = None,
    ) -> "CacheConfig":
        if block_size_bytes <= 0:
            raise InvalidConfiguration("block_size_bytes must be positive")
        return cls(
            total_size_bytes=total_size_bytes,
            block_size_bytes=block_size_bytes,
            associativity=total_size_bytes // block_size_bytes,
            replacement_policy=replacement_policy,
            name=name,
        )

    def validate(self) -> None:
        for field_name in ("total_size_bytes", "block_size_bytes", "associativity"):
            value = getattr(self, field_name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidConfiguration(f"{field_name} must be an integer, got {value!r}")
            if value <= 0:
                raise InvalidConfiguration(f"{field_name} must be positive, got {value}")
        set_bytes = self.block_size_bytes * self.associativity
        if self.total_size_bytes % set_bytes != 0:
            raise InvalidConfiguration(
                f"total_size_bytes={self.total_size_bytes} is not a multiple of "
                f"block_size_bytes*associativity={set_bytes}"
            )
        if not isinstance(self.replacement_policy, ReplacementPolicy):
            raise InvalidConfiguration(f"Unknown replacement policy: {self.replacement_policy}")

    @property
    def num_sets(self) -> int:
        return self.total_size_bytes // (self.block_size_bytes * self.associativity)

    @property
    def num_blocks(self) -> int:
        return self.total_size_bytes // self.block_size_bytes

    @property
    def label(self) -> str:
        if self.name:
            return self.name
        policy = self.replacement_policy.name
        if self.associativity == 1:
            kind = "Direct-mapped"
        elif self.num_sets == 1:
            kind = "Fully associative"
        else:
            kind = f"{self.associativity}-way associative"
        return f"{kind} ({policy})"


@dataclass
class SimulatorConfig:
    trace_path: Path
    caches: List[CacheConfig] = field(default_factory=list)
    seed: Optional[int] = None


def default_caches(
    total_size_bytes: int = DEFAULT_CACHE_SIZE,
    block_size_bytes: int = DEFAULT_BLOCK_SIZE,
    policy: ReplacementPolicy = ReplacementPolicy.LRU,
) -> List[CacheConfig]:
    """Direct-mapped, 2-way, 4-way and fully associative caches of one size."""
    caches = [
        CacheConfig(total_size_bytes, block_size_bytes, ways, policy)
        for ways in (1, 2, 4)
    ]
    caches.append(CacheConfig.fully_associative(total_size_bytes, block_size_bytes, policy))
    return caches


def parse_associativity(value: Any, total_size_bytes: int, block_size_bytes: int) -> int:
    if isinstance(value, str):
        text = value.strip().lower()
        if text == FULL_ASSOCIATIVITY:
            if block_size_bytes <= 0:
                raise InvalidConfiguration("block_size_bytes must be positive")
            return total_size_bytes // block_size_bytes
        try:
            return int(text)
        except ValueError:
            raise InvalidConfiguration(f"Invalid associativity: {value!r}") from None
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidConfiguration(f"Invalid associativity: {value!r}")
    return value


def load_config(path: str | Path) -> SimulatorConfig:
    data = _read_yaml(path)
    base_dir = Path(path).resolve().parent

    trace_path = Path(str(data.get("trace_path", DEFAULT_TRACE_PATH)))
    if not trace_path.is_absolute():
        trace_path = base_dir / trace_path

    default_size = _int_field(data, "cache_size_bytes", DEFAULT_CACHE_SIZE)
    default_block = _int_field(data, "block_size_bytes", DEFAULT_BLOCK_SIZE)
    default_policy = ReplacementPolicy.parse(data.get("policy", ReplacementPolicy.LRU))

    caches_data = data.get("caches")
    if caches_data is None:
        caches = default_caches(default_size, default_block, default_policy)
    elif isinstance(caches_data, list):
        caches = [
            _cache_from_dict(entry, default_size, default_block, default_policy)
            for entry in caches_data
        ]
    else:
        raise InvalidConfiguration("caches must be a list of cache entries")

    for cache in caches:
        cache.validate()

    seed = _int_field(data, "seed", None)
    return SimulatorConfig(
        trace_path=trace_path,
        caches=caches,
        seed=seed,
    )


def _cache_from_dict(
    entry: Any,
    default_size: int,
    default_block: int,
    default_policy: ReplacementPolicy,
) -> CacheConfig:
    if not isinstance(entry, dict):
        raise InvalidConfiguration(f"Cache entry must be a mapping, got {entry!r}")
    total = _int_field(entry, "total_size_bytes", default_size)
    block = _int_field(entry, "block_size_bytes", default_block)
    if "associativity" not in entry:
        raise InvalidConfiguration(f"Cache entry is missing associativity: {entry!r}")
    return CacheConfig(
        total_size_bytes=total,
        block_size_bytes=block,
        associativity=parse_associativity(entry["associativity"], total, block),
        replacement_policy=ReplacementPolicy.parse(entry.get("policy", default_policy)),
        name=entry.get("name"),
    )


def _int_field(data: Dict[str, Any], key: str, default: Optional[int]) -> Optional[int]:
    value = data.get(key, default)
    if value is None and default is None:
        return None
    if isinstance(value, bool):
        raise InvalidConfiguration(f"{key} must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise InvalidConfiguration(f"{key} must be an integer, got {value!r}")


def _read_yaml(path: str | Path) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as exc:
        raise InvalidConfiguration(f"Cannot read config {path}: {exc.strerror or exc}") from exc
    except (yaml.YAMLError, UnicodeDecodeError) as exc:
        raise InvalidConfiguration(f"Malformed config {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidConfiguration(f"Config root must be a mapping: {path}")
    return data
