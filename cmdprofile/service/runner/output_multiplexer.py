"""
Output Multiplexer Module

Drains the child's stdout and stderr concurrently. Every line is tagged with
its stream, timestamped once and written to both the console mirror and the
shared run log before the next line is read.
"""
import logging
import threading
from typing import BinaryIO, List, Optional

from cmdprofile.consts.StreamName import StreamName
from cmdprofile.exceptions import StreamError

STREAM_ERROR = "[stream-error]"


class OutputReader:
    """Reads one child stream line by line in a background thread"""

    def __init__(
        self,
        stream: BinaryIO,
        stream_name: StreamName,
        line_logger: logging.Logger,
        run_logger: logging.Logger,
    ):
        """
        Args:
            stream: Binary pipe connected to the child
            stream_name: Which child stream this is
            line_logger: Logger writing to the run log and to the matching mirror
            run_logger: Logger used to report read failures
        """
        self.stream = stream
        self.stream_name = stream_name
        self.line_logger = line_logger
        self.run_logger = run_logger
        self.lines_read = 0
        self.error: Optional[StreamError] = None
        self.thread: Optional[threading.Thread] = None

    def start(self) -> None:
        self.thread = threading.Thread(
            target=self._drain,
            name=f"cmdprofile-{self.stream_name.value}",
            daemon=True,
        )
        self.thread.start()

    def join(self) -> None:
        if self.thread is not None:
            self.thread.join()

    def _drain(self) -> None:
        try:
            for raw in iter(self.stream.readline, b""):
                line = raw.decode("utf-8", errors="replace").rstrip("\r\n")
                self.line_logger.info("%s", line)
                self.lines_read += 1
        except (OSError, ValueError) as e:
            self.error = StreamError(f"Error reading {self.stream_name.value}: {e}")
            self.run_logger.warning(f"{STREAM_ERROR} {self.error}")
        finally:
            self.stream.close()


class OutputMultiplexer:
    """Runs one OutputReader per child stream and joins them together"""

    def __init__(
        self,
        stdout: BinaryIO,
        stderr: BinaryIO,
        stdout_logger: logging.Logger,
        stderr_logger: logging.Logger,
        run_logger: logging.Logger,
    ):
        self.readers: List[OutputReader] = [
            OutputReader(stdout, StreamName.STDOUT, stdout_logger, run_logger),
            OutputReader(stderr, StreamName.STDERR, stderr_logger, run_logger),
        ]

    def start(self) -> None:
        for reader in self.readers:
            reader.start()

    def join(self) -> None:
        """Block until both streams reached end of input or failed."""
        for reader in self.readers:
            reader.join()
