"""System monitoring engine for tasktop."""

import logging
import threading
from dataclasses import dataclass
from queue import Queue

import psutil

from tasktop.errors import SnapshotError
from tasktop.history import HISTORY_CAPACITY, HistoryBuffer
from tasktop.models import UNKNOWN_OWNER, ProcessSample

logger = logging.getLogger(__name__)

MIN_POLL_RATE = 0.1


@dataclass(slots=True, frozen=True)
class SystemSnapshot:
    """Process list and metric histories taken in one refresh cycle."""

    processes: list[ProcessSample]
    cpu_history: tuple[float, ...]
    memory_history: tuple[float, ...]


def _resolve_owner(proc: psutil.Process) -> str:
    """Return the process owner, or the placeholder when it can't be resolved."""
    try:
        return proc.username() or UNKNOWN_OWNER
    except (psutil.AccessDenied, psutil.ZombieProcess, KeyError) as e:
        # KeyError: uid has no passwd entry
        logger.debug("Owner lookup failed for PID %d: %r", proc.pid, e)
        return UNKNOWN_OWNER


class SnapshotSource:
    """
    Bridge to psutil that owns the rolling CPU and memory history.

    All refreshes and history reads are serialized on one lock, so the CPU
    and memory pushes of a cycle are always observed together.
    """

    def __init__(self, capacity: int = HISTORY_CAPACITY) -> None:
        self._lock = threading.Lock()
        self._cpu_history = HistoryBuffer(capacity)
        self._memory_history = HistoryBuffer(capacity)
        self._latest: list[ProcessSample] = []
        # Initialize CPU percent (first call returns 0.0)
        psutil.cpu_percent()

    @property
    def latest_processes(self) -> list[ProcessSample]:
        """The last successfully collected process list."""
        with self._lock:
            return list(self._latest)

    def refresh_metrics(self) -> None:
        """Push the current aggregate CPU and memory utilization."""
        with self._lock:
            self._refresh_metrics()

    def refresh_processes(self) -> list[ProcessSample]:
        """
        Collect samples of all visible processes.

        Raises:
            SnapshotError: The enumeration itself failed. The previous
                process list is kept.
        """
        with self._lock:
            return self._refresh_processes()

    def refresh(self, blocking: bool = True) -> list[ProcessSample] | None:
        """
        Refresh metrics and processes as one cycle.

        Args:
            blocking: When False, return None instead of waiting if another
                refresh is in progress.
        """
        if not self._lock.acquire(blocking=blocking):
            logger.debug("Refresh already in progress, skipping")
            return None
        try:
            self._refresh_metrics()
            return self._refresh_processes()
        finally:
            self._lock.release()

    def take_snapshot(self, blocking: bool = True) -> SystemSnapshot | None:
        """Refresh and capture processes plus both histories under one lock."""
        if not self._lock.acquire(blocking=blocking):
            logger.debug("Refresh already in progress, skipping")
            return None
        try:
            self._refresh_metrics()
            processes = self._refresh_processes()
            return SystemSnapshot(
                processes=processes,
                cpu_history=self._cpu_history.values(),
                memory_history=self._memory_history.values(),
            )
        finally:
            self._lock.release()

    def cpu_history(self) -> tuple[float, ...]:
        """Aggregate CPU% samples, oldest first."""
        with self._lock:
            return self._cpu_history.values()

    def memory_history(self) -> tuple[float, ...]:
        """Aggregate memory% samples, oldest first."""
        with self._lock:
            return self._memory_history.values()

    def histories(self) -> tuple[tuple[float, ...], tuple[float, ...]]:
        """Both series read together."""
        with self._lock:
            return self._cpu_history.values(), self._memory_history.values()

    def _refresh_metrics(self) -> None:
        # Non-blocking, uses previous call's data
        cpu_percent = psutil.cpu_percent()
        mem = psutil.virtual_memory()
        if mem.total == 0:
            logger.warning("Total memory reported as 0, skipping metrics for this cycle")
            return
        self._cpu_history.push(float(cpu_percent))
        self._memory_history.push(mem.used / mem.total * 100.0)

    def _refresh_processes(self) -> list[ProcessSample]:
        processes: list[ProcessSample] = []

        try:
            for proc in psutil.process_iter(attrs=["pid", "name", "cpu_percent", "memory_info"]):
                try:
                    info = proc.info

                    # Get memory RSS, defaulting to 0 if unavailable
                    mem_info = info.get("memory_info")
                    memory_bytes = mem_info.rss if mem_info else 0

                    processes.append(
                        ProcessSample(
                            pid=info.get("pid", proc.pid),
                            owner=_resolve_owner(proc),
                            cpu_percent=info.get("cpu_percent") or 0.0,
                            memory_bytes=memory_bytes,
                            command=info.get("name") or "",
                        )
                    )
                except (psutil.NoSuchProcess, psutil.AccessDenied):
                    # Process died mid-poll
                    continue
        except (psutil.Error, OSError) as e:
            raise SnapshotError(f"Process enumeration failed: {e}") from e

        self._latest = processes
        return list(processes)


class SystemMonitor:
    """
    Periodic refresh driver for a SnapshotSource.

    Runs in a separate daemon thread and pushes a SystemSnapshot per cycle
    to a thread-safe Queue. A failed cycle is logged and skipped; the
    consumer keeps its previous snapshot.
    """

    def __init__(
        self,
        update_queue: Queue[SystemSnapshot],
        source: SnapshotSource | None = None,
        poll_rate: float = 1.0,
    ) -> None:
        """
        Initialize the SystemMonitor.

        Args:
            update_queue: Thread-safe queue to push updates to.
            source: Snapshot source to refresh. A new one is created if omitted.
            poll_rate: How often to poll the system (in seconds). Default 1.0s.
        """
        self._queue = update_queue
        self._source = source if source is not None else SnapshotSource()
        self._poll_rate = max(MIN_POLL_RATE, poll_rate)
        self._stop_event = threading.Event()
        self._wake_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def source(self) -> SnapshotSource:
        """The snapshot source being refreshed."""
        return self._source

    @property
    def poll_rate(self) -> float:
        """Get the current poll rate."""
        return self._poll_rate

    @poll_rate.setter
    def poll_rate(self, value: float) -> None:
        """Set the poll rate."""
        self._poll_rate = max(MIN_POLL_RATE, value)

    @property
    def is_running(self) -> bool:
        """Check if the monitor thread is running."""
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the monitoring thread."""
        if self.is_running:
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._poll_loop,
            daemon=True,
            name="SystemMonitor",
        )
        self._thread.start()
        logger.debug("Monitor started with poll rate %.2fs", self._poll_rate)

    def stop(self, timeout: float | None = 5.0) -> None:
        """
        Stop the monitoring thread.

        Args:
            timeout: How long to wait for thread to stop (seconds).
        """
        self._stop_event.set()
        self._wake_event.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None

    def request_refresh(self) -> None:
        """Run the next cycle now instead of waiting for the timer."""
        self._wake_event.set()

    def _poll_loop(self) -> None:
        """Main polling loop running in the background thread."""
        while not self._stop_event.is_set():
            self._run_cycle()

            # Wait for poll_rate seconds or until woken by stop/refresh
            self._wake_event.wait(timeout=self._poll_rate)
            self._wake_event.clear()

    def _run_cycle(self) -> None:
        """Refresh once and publish the result."""
        try:
            snapshot = self._source.take_snapshot(blocking=False)
        except SnapshotError as e:
            logger.warning("%s; keeping previous snapshot", e)
            return
        except Exception:
            logger.exception("Unexpected error during refresh")
            return

        if snapshot is not None:
            self._queue.put(snapshot)
