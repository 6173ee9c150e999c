"""Bounded metric history for sparkline rendering."""

from collections import deque

HISTORY_CAPACITY = 100


class HistoryBuffer:
    """
    Fixed-capacity rolling sequence of metric samples, oldest first.

    Pushing past capacity evicts the oldest sample. The buffer is not
    thread-safe on its own; SnapshotSource serializes access to it.
    """

    def __init__(self, capacity: int = HISTORY_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._values: deque[float] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        """Maximum number of samples retained."""
        return self._values.maxlen or 0

    def push(self, value: float) -> None:
        """Append a sample, evicting the oldest one when full."""
        self._values.append(value)

    def values(self) -> tuple[float, ...]:
        """Return a snapshot of the samples, oldest first."""
        return tuple(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"HistoryBuffer(capacity={self.capacity}, len={len(self)})"
