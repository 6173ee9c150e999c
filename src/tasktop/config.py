"""Runtime configuration for tasktop."""

import os
from collections.abc import Mapping
from dataclasses import dataclass

from tasktop.spikes import DEFAULT_SPIKE_THRESHOLD

ENV_PREFIX = "TASKTOP_"

DEFAULT_POLL_RATE = 1.0
DEFAULT_LOG_LEVEL = "WARNING"


def _float_from_env(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{ENV_PREFIX}{name} must be a number, got {raw!r}") from None


@dataclass(slots=True)
class MonitorConfig:
    """Settings shared by the CLI and the interactive display."""

    poll_rate: float = DEFAULT_POLL_RATE  # Seconds between refreshes
    spike_threshold: float = DEFAULT_SPIKE_THRESHOLD  # Percent
    log_level: str = DEFAULT_LOG_LEVEL
    log_file: str | None = None

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "MonitorConfig":
        """
        Build a config from ``TASKTOP_*`` environment variables.

        Args:
            env: Mapping to read instead of ``os.environ``.

        Raises:
            ValueError: A numeric variable could not be parsed.
        """
        if env is None:
            env = os.environ
        return cls(
            poll_rate=_float_from_env(env, "POLL_RATE", DEFAULT_POLL_RATE),
            spike_threshold=_float_from_env(env, "SPIKE_THRESHOLD", DEFAULT_SPIKE_THRESHOLD),
            log_level=env.get(ENV_PREFIX + "LOG_LEVEL") or DEFAULT_LOG_LEVEL,
            log_file=env.get(ENV_PREFIX + "LOG_FILE") or None,
        )
