from __future__ import annotations

from pathlib import Path
from typing import Iterator, List, Optional
import sys

from setassoc_sim.errors import TraceUnreadable


def iter_addresses(trace_path: str | Path) -> Iterator[int]:
    """Yield byte addresses from whitespace-separated hexadecimal tokens."""
    trace_path = Path(trace_path)
    try:
        f = open(trace_path, "r", encoding="utf-8")
    except OSError as exc:
        raise TraceUnreadable(f"Error opening {trace_path}: {exc.strerror or exc}") from exc

    malformed = 0
    with f:
        try:
            for line in f:
                for token in line.split():
                    address = parse_hex_address(token)
                    if address is None:
                        malformed += 1
                        continue
                    yield address
        except UnicodeDecodeError as exc:
            raise TraceUnreadable(f"Error reading {trace_path}: not a text trace ({exc.reason})") from exc
    if malformed:
        print(f"Warning: skipped {malformed} malformed address tokens in {trace_path}", file=sys.stderr)


def read_addresses(trace_path: str | Path) -> List[int]:
    return list(iter_addresses(trace_path))


def parse_hex_address(token: str) -> Optional[int]:
    text = token.strip()
    if text.lower().startswith("0x"):
        text = text[2:]
    if not text:
        return None
    try:
        value = int(text, 16)
    except ValueError:
        return None
    # int() also accepts signs and underscores, neither belongs in a trace
    if not all(ch in "0123456789abcdefABCDEF" for ch in text):
        return None
    return value
