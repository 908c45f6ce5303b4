from dataclasses import dataclass


@dataclass(frozen=True)
class AggregateSummary:
    """Finalized min/max/range/avg for one metric"""
    min: float
    max: float
    range: float
    avg: float
    count: int
