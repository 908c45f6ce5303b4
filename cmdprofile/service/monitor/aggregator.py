"""
Aggregator Module

Running min/max/sum/count accumulators for the sampled metrics, finalized
into the summary printed at the end of a run.
"""
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from tabulate import tabulate

from cmdprofile.models.aggregate_summary import AggregateSummary
from cmdprofile.models.sample import Sample
from cmdprofile.util.format_utils import format_percent, ibytes

NO_DATA = "no data"
REPORT_HEADERS = ["Metric", "Min", "Max", "Range", "Avg"]


@dataclass
class RunningAggregate:
    name: str
    min: float = float("inf")
    max: float = float("-inf")
    sum: float = 0.0
    count: int = 0

    def update(self, value: float) -> None:
        self.min = min(self.min, value)
        self.max = max(self.max, value)
        self.sum += value
        self.count += 1

    def finalize(self) -> Optional[AggregateSummary]:
        """Summary of all updates, or None if there were none."""
        if self.count == 0:
            return None
        return AggregateSummary(
            min=self.min,
            max=self.max,
            range=self.max - self.min,
            avg=self.sum / self.count,
            count=self.count,
        )


@dataclass
class Aggregator:
    """
    Aggregates for CPU %, memory used (bytes) and GPU %.

    Only the sampler thread calls update(); reading happens after it stopped.
    """
    gpu_enabled: bool = False
    cpu: RunningAggregate = field(default_factory=lambda: RunningAggregate("CPU"))
    memory: RunningAggregate = field(default_factory=lambda: RunningAggregate("Memory"))
    gpu: RunningAggregate = field(default_factory=lambda: RunningAggregate("GPU"))

    @property
    def ticks(self) -> int:
        return self.cpu.count

    def update(self, sample: Sample) -> None:
        self.cpu.update(sample.cpu_percent)
        self.memory.update(sample.mem_used_bytes)
        if self.gpu_enabled and sample.gpu_available:
            self.gpu.update(sample.gpu_percent)

    def report_rows(self) -> List[List[str]]:
        rows = [
            _row(self.cpu, format_percent),
            _row(self.memory, lambda v: ibytes(int(v))),
        ]
        if self.gpu_enabled:
            rows.append(_row(self.gpu, format_percent))
        return rows

    def render_report(self) -> str:
        return tabulate(self.report_rows(), headers=REPORT_HEADERS, tablefmt="github",
                        stralign="left", numalign="left")


def _row(aggregate: RunningAggregate, fmt: Callable[[float], str]) -> List[str]:
    summary = aggregate.finalize()
    if summary is None:
        return [aggregate.name, NO_DATA, NO_DATA, NO_DATA, NO_DATA]
    return [aggregate.name, fmt(summary.min), fmt(summary.max), fmt(summary.range), fmt(summary.avg)]
