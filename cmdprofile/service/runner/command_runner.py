import subprocess
from pathlib import Path
from typing import List, Optional, Sequence

from cmdprofile.exceptions import ChildExecutionError
from cmdprofile.util.file_utils import resolve_cmd
from cmdprofile.util.log_config import setup_logger

logger = setup_logger(__name__)


class CommandRunner:
    """
    Starts the profiled command with stdout and stderr piped.

    stdin is inherited so interactive commands keep working.
    """

    def __init__(self, command: Sequence[str], cwd: Optional[Path] = None) -> None:
        if not command:
            raise ValueError("command must not be empty")
        self.command: List[str] = list(command)
        self.cwd = cwd

    @property
    def display_command(self) -> str:
        return " ".join(self.command)

    def run_subprocess(self) -> subprocess.Popen:
        """
        Start the command and return the Popen instance without waiting.

        Raises:
            ChildExecutionError: If the executable is missing or cannot be started
        """
        try:
            cmd_args = [resolve_cmd(self.command[0], self.cwd), *self.command[1:]]
            logger.debug(f"Running: {cmd_args}")
            return subprocess.Popen(
                cmd_args,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                cwd=self.cwd,
            )
        except OSError as e:
            raise ChildExecutionError(f"Failed to start command: {e}") from e
