from enum import IntEnum


class ExitCode(IntEnum):
    SUCCESS = 0
    USAGE = 2
    SETUP_ERROR = 125
    INTERRUPTED = 130

    @staticmethod
    def from_returncode(returncode: int) -> int:
        """Map a Popen returncode to a shell-style exit code (128 + N for signal N)."""
        if returncode < 0:
            return 128 - returncode
        return returncode
