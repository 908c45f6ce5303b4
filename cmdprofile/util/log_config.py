"""
Logging configuration for cmdprofile.

Two kinds of loggers are configured here:
- diagnostic loggers (setup_logger) for module-level debugging output on the console
- run loggers (setup_run_logger) which write the profiling run itself: every
  record goes to the shared LogSink and is mirrored to a console stream
"""
import logging
import sys
from pathlib import Path
from typing import Optional, TextIO

RUN_LOG_FORMAT = '[%(asctime)s.%(msecs)03d][%(name)s] %(message)s'
RUN_LOG_DATEFMT = '%b %d %H:%M:%S'

_diagnostic_level = logging.WARNING


def setup_logger(
    name: str,
    level: Optional[int] = None,
    log_file: Optional[Path] = None
) -> logging.Logger:
    """
    Configure and return a diagnostic logger with consistent formatting.

    Args:
        name: Logger name (typically __name__)
        level: Logging level (default: the level chosen by set_diagnostic_level)
        log_file: Optional file path for log output

    Returns:
        Configured logger instance
    """
    level = _diagnostic_level if level is None else level
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    # Console handler with clean formatting
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(fmt='[%(levelname)s] %(message)s'))
    logger.addHandler(console_handler)

    # Optional file handler with more detailed format
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            fmt='%(asctime)s [%(levelname)s] %(name)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        logger.addHandler(file_handler)

    # Keep diagnostics out of the "cmdprofile" run logger
    logger.propagate = False

    return logger


def set_diagnostic_level(level: int) -> None:
    """Change the level of every diagnostic logger created by setup_logger."""
    global _diagnostic_level
    _diagnostic_level = level
    for name, logger in logging.Logger.manager.loggerDict.items():
        if not isinstance(logger, logging.Logger) or not name.startswith("cmdprofile."):
            continue
        logger.setLevel(level)
        for handler in logger.handlers:
            if not isinstance(handler, logging.FileHandler):
                handler.setLevel(level)


def run_log_formatter() -> logging.Formatter:
    return logging.Formatter(fmt=RUN_LOG_FORMAT, datefmt=RUN_LOG_DATEFMT)


class LogSink(logging.FileHandler):
    """
    Append-only run log shared by the sampler and both output readers.

    The handler lock serializes writers, so lines from different threads may
    interleave but are never split.
    """

    def __init__(self, path: Path):
        super().__init__(path, mode='a', encoding='utf-8')
        self.path = Path(path)
        self.setLevel(logging.DEBUG)
        self.setFormatter(run_log_formatter())

    def write_raw(self, text: str) -> None:
        """Write unformatted text (e.g. the blank line separating runs)."""
        self.acquire()
        try:
            if self.stream is not None:
                self.stream.write(text)
                self.flush()
        finally:
            self.release()


def setup_run_logger(name: str, sink: LogSink, mirror: TextIO) -> logging.Logger:
    """
    Configure a run logger whose records go to the sink and to a mirror stream.

    Both handlers format the same record, so the sink and the mirror carry an
    identical timestamp for each line.

    Args:
        name: Tag printed in every line ("cmdprofile", "cmd-stdout", "cmd-stderr")
        sink: Shared run log
        mirror: Console stream that receives the same lines

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(logging.INFO)
    logger.handlers.clear()

    logger.addHandler(sink)

    mirror_handler = logging.StreamHandler(mirror)
    mirror_handler.setLevel(logging.INFO)
    mirror_handler.setFormatter(run_log_formatter())
    logger.addHandler(mirror_handler)

    logger.propagate = False
    return logger


def teardown_run_logger(logger: logging.Logger) -> None:
    """Detach all handlers from a run logger without closing the mirror stream."""
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        if not isinstance(handler, LogSink):
            handler.flush()
