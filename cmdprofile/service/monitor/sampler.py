"""
Sampler Module

Periodically samples system-wide CPU, memory and GPU usage in a background
thread while the profiled command runs.
"""
import logging
import threading
import time
from typing import Callable, Optional

from cmdprofile.consts.SamplerState import SamplerState
from cmdprofile.exceptions import ProbeError, SampleError, SetupError, ZeroDeltaError
from cmdprofile.models.counter_snapshot import CpuCounterSnapshot, MemorySnapshot
from cmdprofile.models.gpu_reading import GpuReading
from cmdprofile.models.sample import Sample
from cmdprofile.service.monitor.aggregator import Aggregator
from cmdprofile.service.monitor.counter_reader import read_cpu_counters, read_memory_counters
from cmdprofile.service.monitor.delta_calculator import cpu_utilization, memory_usage
from cmdprofile.service.monitor.gpu_probe import GpuProbe
from cmdprofile.util.log_config import setup_logger

SAMPLE_ERROR = "[sample-error]"
PROBE_ERROR = "[probe-error]"

logger = setup_logger(__name__)


class Sampler:
    """
    Samples system resource usage at a fixed interval.

    State goes IDLE -> BASELINE -> RUNNING -> STOPPED. A tick that has begun
    when stop() is called runs to completion and is counted; no tick starts
    once the stop event has been observed.
    """

    def __init__(
        self,
        run_logger: logging.Logger,
        interval: float = 0.25,
        guard: float = 0.001,
        gpu_probe: Optional[GpuProbe] = None,
        cpu_reader: Callable[[], CpuCounterSnapshot] = read_cpu_counters,
        memory_reader: Callable[[], MemorySnapshot] = read_memory_counters,
    ):
        """
        Initialize the sampler.

        Args:
            run_logger: Logger writing sample lines into the run log
            interval: Sampling interval in seconds (default: 0.25s)
            guard: Extra delay before the first tick so it spans a full interval
            gpu_probe: Optional GPU probe; None or unavailable omits GPU entirely
            cpu_reader: Returns the cumulative CPU counter snapshot
            memory_reader: Returns the current memory snapshot
        """
        self.run_logger = run_logger
        self.interval = interval
        self.guard = guard
        self.gpu_probe = gpu_probe if gpu_probe is not None and gpu_probe.is_available() else None
        self.cpu_reader = cpu_reader
        self.memory_reader = memory_reader

        self.aggregator = Aggregator(gpu_enabled=self.gpu_probe is not None)
        self.state = SamplerState.IDLE
        self.thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._prev_cpu: Optional[CpuCounterSnapshot] = None
        # Degraded metrics fall back to these
        self._last = Sample()
        # Device count of the last available GPU reading
        self.gpu_devices = 0

    @property
    def gpu_enabled(self) -> bool:
        return self.gpu_probe is not None

    def start(self) -> None:
        """
        Take the reference CPU snapshot and start the background thread.

        Raises:
            SetupError: If the reference snapshot cannot be read
        """
        if self.state is not SamplerState.IDLE:
            return

        self.take_reference()
        self.state = SamplerState.BASELINE
        self.thread = threading.Thread(target=self._sample_loop, name="cmdprofile-sampler", daemon=True)
        self.thread.start()

    def take_reference(self) -> CpuCounterSnapshot:
        """Read the CPU snapshot the first tick is measured against."""
        try:
            self._prev_cpu = self.cpu_reader()
        except SampleError as e:
            raise SetupError(f"Failed to get CPU time: {e}") from e
        return self._prev_cpu

    def stop(self) -> Aggregator:
        """
        Signal the loop to stop and wait for it to exit.

        Safe to call more than once or before start().

        Returns:
            The aggregator holding every completed tick
        """
        if self.thread is not None and self.state is not SamplerState.STOPPED:
            self._stop_event.set()
            self.thread.join()
        self.state = SamplerState.STOPPED
        return self.aggregator

    def _sample_loop(self) -> None:
        """Main sampling loop (runs in background thread)"""
        deadline = time.monotonic() + self.interval + self.guard
        # The wait is the only place the stop event is observed
        while not self._stop_event.wait(max(0.0, deadline - time.monotonic())):
            if self.state is SamplerState.BASELINE:
                self.state = SamplerState.RUNNING
            self.tick()

            # Skip ticks missed while a slow tick was running
            deadline += self.interval
            now = time.monotonic()
            while deadline <= now:
                deadline += self.interval

    def tick(self) -> Sample:
        """
        Take one sample, fold it into the aggregates and log it.

        A metric that cannot be read falls back to its last-known value; the
        tick is still counted.
        """
        sample = Sample(cpu_percent=self._sample_cpu())
        self._sample_memory(sample)
        self._sample_gpu(sample)

        self.aggregator.update(sample)
        self._last = sample
        self.run_logger.info(sample.to_log_line())
        return sample

    def _sample_cpu(self) -> float:
        try:
            curr = self.cpu_reader()
            prev, self._prev_cpu = self._prev_cpu, curr
            return cpu_utilization(prev, curr) * 100.0
        except SampleError as e:
            self.run_logger.warning(f"{SAMPLE_ERROR} CPU: {e}")
        except Exception as e:
            self.run_logger.warning(f"{SAMPLE_ERROR} CPU: unexpected {type(e).__name__}: {e}")
        return self._last.cpu_percent

    def _sample_memory(self, sample: Sample) -> None:
        try:
            memory = self.memory_reader()
            used, percent = memory_usage(memory)
        except SampleError as e:
            self.run_logger.warning(f"{SAMPLE_ERROR} Memory: {e}")
        except Exception as e:
            self.run_logger.warning(f"{SAMPLE_ERROR} Memory: unexpected {type(e).__name__}: {e}")
        else:
            sample.mem_used_bytes = used
            sample.mem_total_bytes = memory.total
            sample.mem_percent = percent
            return
        sample.mem_used_bytes = self._last.mem_used_bytes
        sample.mem_total_bytes = self._last.mem_total_bytes
        sample.mem_percent = self._last.mem_percent

    def _sample_gpu(self, sample: Sample) -> None:
        if self.gpu_probe is None:
            return
        try:
            reading = self.gpu_probe.probe()
        except ProbeError as e:
            self.run_logger.warning(f"{PROBE_ERROR} GPU: {e}")
            reading = GpuReading.unavailable()
        except Exception as e:
            self.run_logger.warning(f"{PROBE_ERROR} GPU: unexpected {type(e).__name__}: {e}")
            reading = GpuReading.unavailable()

        if reading.available and reading.device_count != self.gpu_devices:
            logger.debug(f"GPU devices: {self.gpu_devices} -> {reading.device_count}")
            self.gpu_devices = reading.device_count
        sample.gpu_available = reading.available
        sample.gpu_percent = reading.percent
