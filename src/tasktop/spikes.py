"""Spike classification for metric series."""

from collections.abc import Sequence

DEFAULT_SPIKE_THRESHOLD = 20.0

# Relative change from (near) zero is undefined and never counts as a spike.
EPSILON = 1.1920929e-07


def percent_change(previous: float, current: float) -> float:
    """Relative change from previous to current, in percent."""
    if abs(previous) <= EPSILON:
        return 0.0
    return (current - previous) / abs(previous) * 100.0


def is_spike(previous: float, current: float, threshold_percent: float = DEFAULT_SPIKE_THRESHOLD) -> bool:
    """
    Classify one step of a series.

    A change exactly at the threshold is not a spike.
    """
    return abs(percent_change(previous, current)) > threshold_percent


def spike_flags(series: Sequence[float], threshold_percent: float = DEFAULT_SPIKE_THRESHOLD) -> list[bool]:
    """
    Flag every consecutive pair in a series.

    Returns one flag fewer than there are samples; flag ``i`` describes the
    step from ``series[i]`` to ``series[i + 1]``.
    """
    return [
        is_spike(previous, current, threshold_percent)
        for previous, current in zip(series, series[1:])
    ]
