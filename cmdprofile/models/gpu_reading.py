from dataclasses import dataclass


@dataclass(frozen=True)
class GpuReading:
    """Mean GPU utilization across all detected devices for one tick"""
    percent: float
    available: bool
    device_count: int = 0

    @classmethod
    def unavailable(cls) -> 'GpuReading':
        return cls(percent=0.0, available=False, device_count=0)
