from typing import Tuple

from cmdprofile.exceptions import SampleError, ZeroDeltaError
from cmdprofile.models.counter_snapshot import CpuCounterSnapshot, MemorySnapshot


def cpu_utilization(prev: CpuCounterSnapshot, curr: CpuCounterSnapshot) -> float:
    """
    Fraction of CPU time spent non-idle between two cumulative snapshots.

    Callers must replace their retained snapshot with `curr` afterwards;
    a pair is never evaluated twice.

    Raises:
        ZeroDeltaError: If no tick elapsed between the snapshots
    """
    delta_total = curr.total_ticks - prev.total_ticks
    delta_idle = curr.idle_ticks - prev.idle_ticks
    if delta_total <= 0:
        raise ZeroDeltaError(f"No CPU ticks elapsed (total delta {delta_total})")
    return 1.0 - delta_idle / delta_total


def memory_usage(memory: MemorySnapshot) -> Tuple[int, float]:
    """
    Used bytes and used percentage, where used = total - available.

    Raises:
        SampleError: If the snapshot reports zero total memory
    """
    if memory.total <= 0:
        raise SampleError("Memory total is zero")
    used = memory.total - memory.available
    return used, used / memory.total * 100.0
