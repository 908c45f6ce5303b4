"""Models for sampled counters and aggregate results."""

from .aggregate_summary import AggregateSummary
from .counter_snapshot import CpuCounterSnapshot, MemorySnapshot
from .gpu_reading import GpuReading
from .sample import Sample

__all__ = ["AggregateSummary", "CpuCounterSnapshot", "MemorySnapshot", "GpuReading", "Sample"]
