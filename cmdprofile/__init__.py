"""cmdprofile: run a command and profile system resource usage while it runs."""

__version__ = "0.1.0"
