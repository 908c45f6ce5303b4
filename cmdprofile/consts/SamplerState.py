from enum import Enum


class SamplerState(Enum):
    IDLE = "idle"
    BASELINE = "baseline"
    RUNNING = "running"
    STOPPED = "stopped"
