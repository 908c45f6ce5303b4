"""Configuration module for profiling runs."""

from .config_loader import ConfigLoader
from .profiler_config import ProfilerConfig

__all__ = ["ConfigLoader", "ProfilerConfig"]
