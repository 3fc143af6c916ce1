from __future__ import annotations


class InvalidConfiguration(ValueError):
    """Cache geometry or policy that cannot be simulated."""


class TraceUnreadable(OSError):
    """Trace file is missing or cannot be opened."""
