from dataclasses import dataclass

from cmdprofile.util.format_utils import ibytes


@dataclass
class Sample:
    """Resource usage observed during a single tick"""
    cpu_percent: float = 0.0
    mem_percent: float = 0.0
    mem_used_bytes: int = 0
    mem_total_bytes: int = 0
    gpu_percent: float = 0.0
    gpu_available: bool = False

    def to_log_line(self) -> str:
        """Format the sample as a run-log line; GPU is left out when unavailable."""
        line = (f"CPU:{self.cpu_percent:.2f}% | "
                f"Memory:{self.mem_percent:.2f}% "
                f"({ibytes(self.mem_used_bytes)}/{ibytes(self.mem_total_bytes)})")
        if self.gpu_available:
            line += f" | GPU:{self.gpu_percent:.2f}%"
        return line
