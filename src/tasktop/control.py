"""Signal delivery to processes."""

import logging
import os
import signal
import threading
from collections.abc import Callable

from tasktop.errors import KillError, UnsupportedSignal

logger = logging.getLogger(__name__)

DEFAULT_SIGNAL = "SIGTERM"

SIGNALS: dict[str, signal.Signals] = {
    "sigterm": signal.SIGTERM,
    "terminate": signal.SIGTERM,
    "sigkill": signal.SIGKILL,
    "force-kill": signal.SIGKILL,
    "sighup": signal.SIGHUP,
    "hang-up": signal.SIGHUP,
}


def resolve_signal(name: str) -> signal.Signals | None:
    """Look up a signal name in the allow-list."""
    return SIGNALS.get(name.strip().lower())


class ProcessControl:
    """
    Validates termination requests and forwards them to the OS.

    Each accepted request results in exactly one call to ``send_signal``;
    rejected names never reach it. Kills are serialized with each other.
    """

    def __init__(self, send_signal: Callable[[int, int], None] = os.kill) -> None:
        """
        Initialize the ProcessControl.

        Args:
            send_signal: Signal delivery primitive, ``os.kill`` by default.
        """
        self._send_signal = send_signal
        self._lock = threading.Lock()

    def kill(self, pid: int, signal_name: str = DEFAULT_SIGNAL) -> None:
        """
        Send a named signal to a process.

        Raises:
            UnsupportedSignal: The name is not in the allow-list.
            KillError: The OS refused or failed the request.
        """
        sig = resolve_signal(signal_name)
        if sig is None:
            raise UnsupportedSignal(pid, signal_name)
        # os.kill treats 0 and negative pids as process groups.
        if pid <= 0:
            raise KillError(pid, f"Invalid PID: {pid}")

        with self._lock:
            try:
                self._send_signal(pid, sig)
            except OSError as e:
                logger.info("Sending %s to PID %d failed: %s", sig.name, pid, e)
                raise KillError(pid, f"Failed to kill process {pid}: {e.strerror or e}") from e

        logger.info("Sent %s to PID %d", sig.name, pid)
