"""
Profile Session Module

Runs one command under the sampler: baseline collection, child start,
output draining, sampler shutdown, the aggregate report and exit-code
propagation, strictly in that order.
"""
import logging
import sys
import time
from pathlib import Path
from typing import Callable, Optional, Sequence, TextIO

import psutil

from cmdprofile.config.profiler_config import ProfilerConfig
from cmdprofile.consts.ExitCode import ExitCode
from cmdprofile.consts.StreamName import StreamName
from cmdprofile.exceptions import ChildExecutionError, SetupError
from cmdprofile.models.counter_snapshot import CpuCounterSnapshot, MemorySnapshot
from cmdprofile.service.monitor import counter_reader
from cmdprofile.service.monitor.gpu_probe import GpuProbe
from cmdprofile.service.monitor.sampler import Sampler
from cmdprofile.service.runner.command_runner import CommandRunner
from cmdprofile.service.runner.output_multiplexer import OutputMultiplexer
from cmdprofile.util.file_utils import ensure_parent_dir
from cmdprofile.util.log_config import LogSink, setup_logger, setup_run_logger, teardown_run_logger

RUN_LOGGER_NAME = "cmdprofile"
BANNER = "========================================="
RULE = "-----------------------------------------"
FINISHED_BANNER = "=============== FINISHED ================"

logger = setup_logger(__name__)


class ProfileSession:
    """Profiles a single command invocation"""

    def __init__(
        self,
        command: Sequence[str],
        config: Optional[ProfilerConfig] = None,
        gpu_probe: Optional[GpuProbe] = None,
        cpu_reader: Callable[[], CpuCounterSnapshot] = counter_reader.read_cpu_counters,
        memory_reader: Callable[[], MemorySnapshot] = counter_reader.read_memory_counters,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
        cwd: Optional[Path] = None,
    ):
        """
        Args:
            command: Command and arguments to run
            config: Profiler configuration (default: ProfilerConfig())
            gpu_probe: GPU probe (default: built from config)
            cpu_reader: CPU counter reader, overridable for tests
            memory_reader: Memory counter reader, overridable for tests
            stdout: Mirror for the command's stdout (default: sys.stdout)
            stderr: Mirror for tool lines and the command's stderr (default: sys.stderr)
            cwd: Working directory of the command
        """
        self.config = config or ProfilerConfig()
        self.runner = CommandRunner(command, cwd=cwd)
        self.gpu_probe = gpu_probe
        self.cpu_reader = cpu_reader
        self.memory_reader = memory_reader
        self.stdout = stdout
        self.stderr = stderr

        self.sink: Optional[LogSink] = None
        self.run_logger: Optional[logging.Logger] = None
        self.stdout_logger: Optional[logging.Logger] = None
        self.stderr_logger: Optional[logging.Logger] = None
        self.sampler: Optional[Sampler] = None
        self.returncode: Optional[int] = None
        self.elapsed: Optional[float] = None

    def run(self) -> int:
        """
        Profile the command and return the exit code to use.

        Returns:
            The command's exit code (128 + N if it was killed by signal N)

        Raises:
            SetupError: Unsupported platform, log file or baseline failure
            ChildExecutionError: The command could not be started
        """
        if not counter_reader.counters_available():
            raise SetupError(f"Unsupported operating system: {sys.platform} (requires Linux /proc)")

        stdout = self.stdout or sys.stdout
        stderr = self.stderr or sys.stderr
        self._open_log(stdout, stderr)
        try:
            return self._profile()
        finally:
            self._close()

    def _open_log(self, stdout: TextIO, stderr: TextIO) -> None:
        log_path = Path(self.config.log_file)
        try:
            self.sink = LogSink(ensure_parent_dir(log_path))
        except OSError as e:
            raise SetupError(f"Failed to open log file {log_path}: {e}") from e

        self.run_logger = setup_run_logger(RUN_LOGGER_NAME, self.sink, stderr)
        self.stdout_logger = setup_run_logger(StreamName.STDOUT.tag, self.sink, stdout)
        self.stderr_logger = setup_run_logger(StreamName.STDERR.tag, self.sink, stderr)

    def _profile(self) -> int:
        run_logger = self.run_logger

        self.sink.write_raw("\n")
        run_logger.info(BANNER)
        run_logger.info(f"Starting command: {self.runner.display_command}")
        run_logger.info(f"Host: {psutil.cpu_count()} logical CPUs")

        if self.gpu_probe is None:
            self.gpu_probe = GpuProbe(enabled=self.config.gpu_enabled, timeout=self.config.gpu_timeout)
        self.sampler = Sampler(
            run_logger,
            interval=self.config.interval,
            guard=self.config.guard,
            gpu_probe=self.gpu_probe,
            cpu_reader=self.cpu_reader,
            memory_reader=self.memory_reader,
        )
        try:
            self.sampler.start()
        except SetupError as e:
            run_logger.error(str(e))
            raise

        run_logger.info("Collecting baseline...")
        time.sleep(self.config.baseline_window)

        try:
            process = self.runner.run_subprocess()
        except ChildExecutionError as e:
            run_logger.error(str(e))
            raise
        start = time.perf_counter()
        run_logger.info("Started command!")

        multiplexer = OutputMultiplexer(
            process.stdout, process.stderr,
            self.stdout_logger, self.stderr_logger, run_logger,
        )
        multiplexer.start()
        # Pipes may still hold output after the child exits
        multiplexer.join()

        self.returncode = process.wait()
        self.elapsed = time.perf_counter() - start

        aggregator = self.sampler.stop()

        run_logger.info(RULE)
        for line in aggregator.render_report().splitlines():
            run_logger.info(line)
        run_logger.info(f"Samples: {aggregator.ticks}")
        run_logger.info(f"Total Execution Time: {self.elapsed:.3f}s")
        run_logger.info(FINISHED_BANNER)

        if self.returncode != 0:
            run_logger.error(f"Command execution failed: {describe_returncode(self.returncode)}")

        return ExitCode.from_returncode(self.returncode)

    def _close(self) -> None:
        if self.sampler is not None:
            self.sampler.stop()
        for run_logger in (self.run_logger, self.stdout_logger, self.stderr_logger):
            teardown_run_logger(run_logger)
        self.sink.close()
        logger.debug(f"Closed run log {self.sink.path}")


def describe_returncode(returncode: int) -> str:
    if returncode < 0:
        return f"terminated by signal {-returncode}"
    return f"exit status {returncode}"
