import io
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List

import pytest

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from cmdprofile.models.counter_snapshot import CpuCounterSnapshot, MemorySnapshot
from cmdprofile.models.gpu_reading import GpuReading
from cmdprofile.util.log_config import LogSink, setup_run_logger, teardown_run_logger

GIB = 1024 * 1024 * 1024


class FakeCpuReader:
    """Cumulative CPU counters advancing by a fixed busy/idle split per call"""

    def __init__(self, busy_per_call: int = 25, idle_per_call: int = 75):
        self.busy_per_call = busy_per_call
        self.idle_per_call = idle_per_call
        self.idle = 1000
        self.total = 4000
        self.calls = 0

    def __call__(self) -> CpuCounterSnapshot:
        snapshot = CpuCounterSnapshot(idle_ticks=self.idle, total_ticks=self.total)
        self.idle += self.idle_per_call
        self.total += self.idle_per_call + self.busy_per_call
        self.calls += 1
        return snapshot


class FakeMemoryReader:

    def __init__(self, total: int = 16 * GIB, available: int = 12 * GIB):
        self.snapshot = MemorySnapshot(total=total, free=available, available=available)

    def __call__(self) -> MemorySnapshot:
        return self.snapshot


class FakeGpuProbe:
    """GPU probe returning scripted readings; exceptions in the script are raised"""

    def __init__(self, readings: List, available: bool = True):
        self.readings = list(readings)
        self.available = available
        self.calls = 0

    def is_available(self) -> bool:
        return self.available

    def probe(self) -> GpuReading:
        item = self.readings[min(self.calls, len(self.readings) - 1)]
        self.calls += 1
        if isinstance(item, Exception):
            raise item
        return item


@dataclass
class RunLog:
    sink: LogSink
    logger: object
    stdout_logger: object
    stderr_logger: object
    stdout: io.StringIO
    stderr: io.StringIO

    def text(self) -> str:
        self.sink.flush()
        return self.sink.path.read_text(encoding="utf-8")

    def lines(self) -> List[str]:
        return self.text().splitlines()


@pytest.fixture
def run_log(tmp_path):
    sink = LogSink(tmp_path / "run.log")
    stdout, stderr = io.StringIO(), io.StringIO()
    loggers = [
        setup_run_logger("cmdprofile", sink, stderr),
        setup_run_logger("cmd-stdout", sink, stdout),
        setup_run_logger("cmd-stderr", sink, stderr),
    ]
    yield RunLog(sink, *loggers, stdout=stdout, stderr=stderr)
    for logger in loggers:
        teardown_run_logger(logger)
    sink.close()


@pytest.fixture
def fake_cpu():
    return FakeCpuReader()


@pytest.fixture
def fake_memory():
    return FakeMemoryReader()
