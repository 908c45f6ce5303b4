"""
GPU Probe Module

Queries GPU utilization through nvidia-smi. The utility is optional: when it
is not installed the probe reports itself unavailable and callers leave the
GPU metric out entirely.
"""
import shutil
import subprocess
from typing import List, Optional, Sequence

from cmdprofile.exceptions import ProbeError
from cmdprofile.models.gpu_reading import GpuReading
from cmdprofile.util.log_config import setup_logger

NVIDIA_SMI = "nvidia-smi"
QUERY_ARGS = ["--query-gpu=utilization.gpu", "--format=csv,noheader,nounits"]

logger = setup_logger(__name__)


def parse_gpu_utilization(output: str) -> List[str]:
    """Split nvidia-smi CSV output into one raw value per device."""
    return [line.strip() for line in output.splitlines() if line.strip()]


def device_utilization(raw: str) -> float:
    """
    Parse one device's utilization ("37", "37 %").

    Unparseable values such as "[N/A]" or undecodable bytes count as 0%
    instead of failing the probe.
    """
    try:
        return float(raw.split()[0].rstrip("%"))
    except (ValueError, IndexError):
        logger.debug(f"Unparseable GPU utilization {raw!r}, counting as 0%")
        return 0.0


def aggregate_gpu_utilization(values: Sequence[str]) -> GpuReading:
    """Mean utilization across devices; no devices means no reading."""
    if not values:
        return GpuReading.unavailable()
    utils = [device_utilization(v) for v in values]
    return GpuReading(percent=sum(utils) / len(utils), available=True, device_count=len(utils))


class GpuProbe:
    """Capability-checked wrapper around nvidia-smi"""

    def __init__(self, enabled: bool = True, timeout: float = 2.0, cmd: str = NVIDIA_SMI):
        """
        Initialize the probe.

        Args:
            enabled: When False the probe is unavailable regardless of PATH
            timeout: Per-query timeout in seconds
            cmd: Name or path of the nvidia-smi executable
        """
        self.timeout = timeout
        self.cmd_path: Optional[str] = shutil.which(cmd) if enabled else None

    def is_available(self) -> bool:
        return self.cmd_path is not None

    def probe(self) -> GpuReading:
        """
        Query all devices once.

        Returns:
            GpuReading; unavailable when the utility is not installed

        Raises:
            ProbeError: If the query fails or reports no devices
        """
        if self.cmd_path is None:
            return GpuReading.unavailable()

        try:
            result = subprocess.run(
                [self.cmd_path, *QUERY_ARGS],
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout,
                check=True,
            )
        except subprocess.TimeoutExpired as e:
            raise ProbeError(f"{NVIDIA_SMI} timed out after {e.timeout}s") from e
        except subprocess.CalledProcessError as e:
            raise ProbeError(f"{NVIDIA_SMI} exited with status {e.returncode}") from e
        except OSError as e:
            raise ProbeError(f"Failed to run {NVIDIA_SMI}: {e}") from e

        reading = aggregate_gpu_utilization(parse_gpu_utilization(result.stdout))
        if not reading.available:
            raise ProbeError(f"{NVIDIA_SMI} reported no devices")
        return reading
