"""
Profiler configuration data class.

Defaults match a plain `cmdprofile <command>` invocation without a config file.
"""
from dataclasses import dataclass, fields
from pathlib import Path
from typing import List

from cmdprofile.exceptions import ConfigError

MIN_INTERVAL = 0.1
DEFAULT_LOG_FILE = "cmdprofile.log"


@dataclass
class ProfilerConfig:

    interval: float = 0.25
    baseline: float = 1.0
    guard: float = 0.001
    log_file: Path = Path(DEFAULT_LOG_FILE)
    gpu_enabled: bool = True
    gpu_timeout: float = 2.0

    @classmethod
    def field_names(cls) -> List[str]:
        return [f.name for f in fields(cls)]

    @property
    def baseline_window(self) -> float:
        """Time to sample the idle system before the command starts."""
        return self.baseline + self.interval + self.guard

    def validate(self) -> None:
        # Faster polling risks intervals in which no CPU tick elapses
        if self.interval < MIN_INTERVAL:
            raise ConfigError(f"interval must be at least {MIN_INTERVAL}s, got {self.interval}")
        if self.baseline < 0:
            raise ConfigError(f"baseline must not be negative, got {self.baseline}")
        if self.guard < 0:
            raise ConfigError(f"guard must not be negative, got {self.guard}")
        if self.gpu_timeout <= 0:
            raise ConfigError(f"gpu_timeout must be positive, got {self.gpu_timeout}")
