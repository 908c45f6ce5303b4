"""
Counter Reader Module

Reads cumulative CPU tick totals and current memory counters from the Linux
/proc accounting files.

References:
- https://colby.id.au/calculating-cpu-usage-from-proc-stat/
- https://www.kernel.org/doc/Documentation/filesystems/proc.txt
"""
import os
from pathlib import Path

import psutil

from cmdprofile.exceptions import SampleError
from cmdprofile.models.counter_snapshot import CpuCounterSnapshot, MemorySnapshot

PROC_STAT = Path("/proc/stat")
PROC_MEMINFO = Path("/proc/meminfo")

# 0-based, counting the "cpu" label: cpu user nice system idle ...
IDLE_FIELD = 4
KIB = 1024

MEMINFO_FIELDS = {
    "MemTotal": "total",
    "MemFree": "free",
    "MemAvailable": "available",
    "Buffers": "buffers",
    "Cached": "cached",
}
REQUIRED_MEMINFO_FIELDS = ("total", "available")


def counters_available(stat_path: Path = PROC_STAT, meminfo_path: Path = PROC_MEMINFO) -> bool:
    """True when running on Linux and both accounting files are readable."""
    if not psutil.LINUX:
        return False
    return all(os.access(p, os.R_OK) for p in (stat_path, meminfo_path))


def parse_cpu_stat(text: str) -> CpuCounterSnapshot:
    """
    Parse the aggregate CPU record (the first line) of /proc/stat.

    Raises:
        SampleError: If the record is missing, mislabelled or has non-numeric fields
    """
    lines = text.splitlines()
    if not lines:
        raise SampleError("CPU accounting source is empty")

    fields = lines[0].split()
    if not fields or fields[0] != "cpu":
        raise SampleError(f"Unexpected CPU record: {lines[0]!r}")
    if len(fields) <= IDLE_FIELD:
        raise SampleError(f"CPU record has {len(fields)} fields, idle field {IDLE_FIELD} is missing")

    values = []
    for field in fields[1:]:
        if not field.isdigit():
            raise SampleError(f"Non-numeric CPU field {field!r} in {lines[0]!r}")
        values.append(int(field))

    return CpuCounterSnapshot(idle_ticks=values[IDLE_FIELD - 1], total_ticks=sum(values))


def parse_meminfo(text: str) -> MemorySnapshot:
    """
    Parse /proc/meminfo into a MemorySnapshot (kibibytes converted to bytes).

    Labels we don't track are ignored.

    Raises:
        SampleError: If a tracked field is malformed or a required field is missing
    """
    values = {}
    for line in text.splitlines():
        parts = line.split()
        if len(parts) < 2:
            continue
        key = MEMINFO_FIELDS.get(parts[0].rstrip(":"))
        if key is None:
            continue
        if not parts[1].isdigit():
            raise SampleError(f"Non-numeric memory field: {line!r}")
        values[key] = int(parts[1]) * KIB

    missing = [f for f in REQUIRED_MEMINFO_FIELDS if f not in values]
    if missing:
        raise SampleError(f"Memory accounting source is missing {', '.join(missing)}")

    return MemorySnapshot(**values)


def _read(path: Path) -> str:
    try:
        return path.read_text()
    except OSError as e:
        raise SampleError(f"Failed to read {path}: {e}") from e


def read_cpu_counters(path: Path = PROC_STAT) -> CpuCounterSnapshot:
    return parse_cpu_stat(_read(path))


def read_memory_counters(path: Path = PROC_MEMINFO) -> MemorySnapshot:
    return parse_meminfo(_read(path))
