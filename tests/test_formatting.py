"""Tests for text rendering helpers."""

from tasktop.formatting import TABLE_HEADER, format_bytes, format_row, render_sparkline
from tasktop.models import ProcessSample


def test_format_bytes_bytes():
    """Test format_bytes with byte values."""
    assert "B" in format_bytes(500)


def test_format_bytes_kilobytes():
    """Test format_bytes with kilobyte values."""
    assert "K" in format_bytes(2048)


def test_format_bytes_megabytes():
    """Test format_bytes with megabyte values."""
    assert "M" in format_bytes(5242880)


def test_format_bytes_gigabytes():
    """Test format_bytes with gigabyte values."""
    assert "G" in format_bytes(1073741824)


class TestTable:
    """Tests for the fixed-width process table."""

    def test_header_columns(self):
        """Test the header names the five columns in order."""
        assert TABLE_HEADER.split() == ["PID", "User", "CPU%", "Memory", "Command"]
        assert TABLE_HEADER.index("User") == 11
        assert TABLE_HEADER.index("CPU%") == 27

    def test_row_alignment(self):
        """Test rows line up under the header."""
        sample = ProcessSample(pid=42, owner="alice", cpu_percent=3.14159, memory_bytes=2048, command="sshd")
        row = format_row(sample)

        assert row.startswith("42         alice           3.14       ")
        assert row.index("alice") == TABLE_HEADER.index("User")
        assert row.index("3.14") == TABLE_HEADER.index("CPU%")
        assert row.endswith(" sshd")

    def test_row_keeps_full_command(self):
        """Test long commands are not truncated."""
        sample = ProcessSample(pid=1, owner="root", cpu_percent=0.0, memory_bytes=0, command="x" * 80)
        assert format_row(sample).endswith("x" * 80)


class TestSparkline:
    """Tests for render_sparkline."""

    def test_short_series_placeholder(self):
        """Test fewer than two samples renders nothing to draw."""
        assert "collecting" in render_sparkline([], [])
        assert "collecting" in render_sparkline([50.0], [])

    def test_levels(self):
        """Test 0 and 100 map to the lowest and highest blocks."""
        assert render_sparkline([0.0, 100.0], [False]) == "▁█"

    def test_spike_segments_are_red(self):
        """Test a flagged step colors the sample it leads into."""
        line = render_sparkline([10.0, 50.0, 50.0], [True, False])
        assert line.startswith("▁[red]")
        assert line.count("[red]") == 1

    def test_width_limits_output(self):
        """Test only the newest samples are drawn."""
        series = [0.0] * 10 + [100.0] * 5
        flags = [False] * 14
        assert render_sparkline(series, flags, width=5) == "█" * 5

    def test_out_of_range_values(self):
        """Test values outside 0-100 and NaN are clamped."""
        assert render_sparkline([-5.0, 250.0, float("nan")], [False, False]) == "▁█▁"
