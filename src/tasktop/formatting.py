"""Text rendering helpers shared by the CLI and the interactive display."""

import math
from collections.abc import Sequence

from tasktop.models import ProcessSample

SPARK_CHARS = "▁▂▃▄▅▆▇█"

TABLE_HEADER = f"{'PID':<10} {'User':<15} {'CPU%':<10} {'Memory':<10} Command"


def format_bytes(size: int | float) -> str:
    """Format bytes as human-readable string."""
    for unit in ["B", "K", "M", "G", "T"]:
        if size < 1024:
            return f"{size:5.1f}{unit}" if unit != "B" else f"{int(size):5d}{unit}"
        size = size / 1024
    return f"{size:.1f}P"


def format_row(sample: ProcessSample) -> str:
    """One fixed-width line of the process table."""
    return (
        f"{sample.pid:<10} {sample.owner:<15} {sample.cpu_percent:<10.2f} "
        f"{format_bytes(sample.memory_bytes).strip():<10} {sample.command}"
    )


def render_sparkline(series: Sequence[float], flags: Sequence[bool], width: int = 50) -> str:
    """
    Render a 0-100 series as Rich markup, coloring spike steps red.

    ``flags`` is aligned to the steps of ``series`` (one fewer entry).
    Fewer than two samples render as a placeholder.
    """
    if len(series) < 2:
        return "[dim]collecting...[/dim]"

    start = max(0, len(series) - width)
    top = len(SPARK_CHARS) - 1
    parts = []
    for i in range(start, len(series)):
        value = series[i] if math.isfinite(series[i]) else 0.0
        level = min(max(int(value / 100.0 * len(SPARK_CHARS)), 0), top)
        char = SPARK_CHARS[level]
        if i > 0 and flags[i - 1]:
            parts.append(f"[red]{char}[/red]")
        else:
            parts.append(char)
    return "".join(parts)
