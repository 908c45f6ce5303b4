# cmdprofile/exceptions.py

class CmdProfileError(Exception):
    """Base exception for all cmdprofile errors"""
    pass

class UsageError(CmdProfileError):
    """Invalid or missing command-line arguments"""
    pass

class SetupError(CmdProfileError):
    """Fatal error raised before the child command runs"""
    pass

class ConfigError(SetupError):
    """Invalid configuration file or option value"""
    pass

class ChildExecutionError(CmdProfileError):
    """The child command could not be started"""
    pass

class SampleError(CmdProfileError):
    """A single counter read or parse failed"""
    pass

class ZeroDeltaError(SampleError):
    """No CPU tick elapsed between two counter snapshots"""
    pass

class ProbeError(CmdProfileError):
    """The GPU query utility failed or reported no devices"""
    pass

class StreamError(CmdProfileError):
    """Reading one of the child's output streams failed"""
    pass
