"""Counter snapshot data models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CpuCounterSnapshot:
    """Cumulative CPU tick totals from the first record of /proc/stat"""
    idle_ticks: int
    total_ticks: int


@dataclass(frozen=True)
class MemorySnapshot:
    """
    Instantaneous memory counters, in bytes.

    Only the fields the sampler needs are kept; everything else in
    /proc/meminfo is ignored.
    """
    total: int
    free: int = 0
    available: int = 0
    buffers: int = 0
    cached: int = 0
