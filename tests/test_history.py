"""Tests for HistoryBuffer."""

import pytest

from tasktop.history import HISTORY_CAPACITY, HistoryBuffer


class TestHistoryBuffer:
    """Tests for HistoryBuffer class."""

    def test_default_capacity(self):
        """Test the default capacity is 100 samples."""
        buffer = HistoryBuffer()
        assert buffer.capacity == HISTORY_CAPACITY == 100
        assert len(buffer) == 0
        assert buffer.values() == ()

    def test_push_keeps_order(self):
        """Test samples come back oldest first."""
        buffer = HistoryBuffer()
        for value in (1.0, 2.0, 3.0):
            buffer.push(value)
        assert buffer.values() == (1.0, 2.0, 3.0)

    def test_evicts_oldest_past_capacity(self):
        """Test pushing 1..120 keeps 21..120."""
        buffer = HistoryBuffer()
        for value in range(1, 121):
            buffer.push(float(value))

        values = buffer.values()
        assert len(values) == 100
        assert values[0] == 21.0
        assert values[-1] == 120.0
        assert list(values) == [float(v) for v in range(21, 121)]

    def test_exactly_full(self):
        """Test a buffer filled to capacity evicts nothing."""
        buffer = HistoryBuffer(capacity=5)
        for value in range(5):
            buffer.push(float(value))
        assert buffer.values() == (0.0, 1.0, 2.0, 3.0, 4.0)

    def test_values_is_a_copy(self):
        """Test reading values does not expose or change internal state."""
        buffer = HistoryBuffer(capacity=3)
        buffer.push(1.0)
        first = buffer.values()
        buffer.push(2.0)

        assert first == (1.0,)
        assert isinstance(first, tuple)
        assert buffer.values() == buffer.values()
        assert len(buffer) == 2

    def test_single_sample_is_valid(self):
        """Test a one-sample buffer is a normal state."""
        buffer = HistoryBuffer()
        buffer.push(42.0)
        assert buffer.values() == (42.0,)

    def test_invalid_capacity(self):
        """Test capacity must be positive."""
        with pytest.raises(ValueError):
            HistoryBuffer(capacity=0)
