"""Filtering and sorting of process snapshots."""

import math
from collections.abc import Callable, Sequence
from typing import Any

from tasktop.errors import InvalidSortField
from tasktop.models import ProcessSample, SortField, SortOrder


def _cpu_key(sample: ProcessSample) -> tuple[bool, float]:
    # NaN sorts after every other value, +inf included.
    value = sample.cpu_percent
    if math.isnan(value):
        return (True, 0.0)
    return (False, value)


_SORT_KEYS: dict[SortField, Callable[[ProcessSample], Any]] = {
    SortField.PID: lambda p: p.pid,
    SortField.CPU: _cpu_key,
    SortField.MEMORY: lambda p: p.memory_bytes,
    SortField.COMMAND: lambda p: p.command,
}


def parse_sort_field(name: str) -> SortField:
    """Map a user-supplied field name to a SortField."""
    try:
        return SortField(name.strip().lower())
    except ValueError:
        raise InvalidSortField(name) from None


def parse_sort_order(name: str) -> SortOrder:
    """Map a user-supplied order name to a SortOrder."""
    try:
        return SortOrder(name.strip().lower())
    except ValueError:
        raise ValueError(f"Invalid sort order: {name}") from None


def matches(sample: ProcessSample, filter_text: str) -> bool:
    """Check whether a sample matches filter text by pid or command."""
    needle = filter_text.lower()
    return needle in str(sample.pid) or needle in sample.command.lower()


def filter_processes(processes: Sequence[ProcessSample], filter_text: str | None) -> list[ProcessSample]:
    """Keep samples whose pid or command contains the filter text."""
    if not filter_text:
        return list(processes)
    return [p for p in processes if matches(p, filter_text)]


def sort_processes(
    processes: Sequence[ProcessSample],
    sort_field: SortField = SortField.PID,
    sort_order: SortOrder = SortOrder.ASC,
) -> list[ProcessSample]:
    """
    Stable sort of samples by one field.

    Descending is the reverse of the ascending key order; equal keys keep
    their input order in both directions.
    """
    key_func = _SORT_KEYS[sort_field]
    return sorted(processes, key=key_func, reverse=sort_order is SortOrder.DESC)


def apply(
    processes: Sequence[ProcessSample],
    filter_text: str | None = None,
    sort_field: SortField = SortField.PID,
    sort_order: SortOrder = SortOrder.ASC,
) -> list[ProcessSample]:
    """Filter then sort a snapshot into a presentable view."""
    return sort_processes(filter_processes(processes, filter_text), sort_field, sort_order)
