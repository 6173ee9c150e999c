"""Data models for tasktop."""

from dataclasses import dataclass
from enum import Enum

UNKNOWN_OWNER = "Unknown"


@dataclass(slots=True, frozen=True)
class ProcessSample:
    """Immutable sample of one process taken during a refresh."""

    pid: int
    owner: str
    cpu_percent: float  # 0.0 - 100.0 * core_count, unclamped
    memory_bytes: int  # RSS
    command: str  # Display name, not the full command line


class SortField(Enum):
    """Fields the process list can be sorted by."""

    PID = "pid"
    CPU = "cpu"
    MEMORY = "memory"
    COMMAND = "command"


class SortOrder(Enum):
    """Sort direction for the process list."""

    ASC = "asc"
    DESC = "desc"

    def flipped(self) -> "SortOrder":
        """Return the opposite direction."""
        return SortOrder.DESC if self is SortOrder.ASC else SortOrder.ASC
