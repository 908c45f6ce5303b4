from enum import Enum


class StreamName(Enum):
    STDOUT = "stdout"
    STDERR = "stderr"

    @property
    def tag(self) -> str:
        return f"cmd-{self.value}"
