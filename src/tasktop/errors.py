"""Exception hierarchy for tasktop."""


class TasktopError(Exception):
    """Base class for all tasktop errors."""


class SnapshotError(TasktopError):
    """The OS process enumeration failed as a whole."""


class KillError(TasktopError):
    """The OS refused or failed to deliver a signal."""

    def __init__(self, pid: int, message: str) -> None:
        super().__init__(message)
        self.pid = pid


class UnsupportedSignal(KillError):
    """The requested signal name is not in the allow-list."""

    def __init__(self, pid: int, signal_name: str) -> None:
        super().__init__(pid, f"Unsupported signal: {signal_name}")
        self.signal_name = signal_name


class InvalidSortField(TasktopError, ValueError):
    """An unrecognized sort key was requested."""

    def __init__(self, field: str) -> None:
        super().__init__(f"Invalid sort field: {field}")
        self.field = field
