"""Tests for MonitorConfig."""

import pytest

from tasktop.config import MonitorConfig


class TestMonitorConfig:
    """Tests for MonitorConfig defaults and environment loading."""

    def test_defaults(self):
        """Test the default configuration."""
        config = MonitorConfig()
        assert config.poll_rate == 1.0
        assert config.spike_threshold == 20.0
        assert config.log_level == "WARNING"
        assert config.log_file is None

    def test_from_empty_env(self):
        """Test an empty environment yields the defaults."""
        assert MonitorConfig.from_env({}) == MonitorConfig()

    def test_from_env(self):
        """Test every TASKTOP_ variable is read."""
        config = MonitorConfig.from_env(
            {
                "TASKTOP_POLL_RATE": "2.5",
                "TASKTOP_SPIKE_THRESHOLD": "35",
                "TASKTOP_LOG_LEVEL": "debug",
                "TASKTOP_LOG_FILE": "/tmp/tasktop.log",
            }
        )
        assert config.poll_rate == 2.5
        assert config.spike_threshold == 35.0
        assert config.log_level == "debug"
        assert config.log_file == "/tmp/tasktop.log"

    def test_blank_values_use_defaults(self):
        """Test blank variables are treated as unset."""
        config = MonitorConfig.from_env({"TASKTOP_POLL_RATE": " ", "TASKTOP_LOG_FILE": ""})
        assert config.poll_rate == 1.0
        assert config.log_file is None

    def test_invalid_number(self):
        """Test a non-numeric value names the variable."""
        with pytest.raises(ValueError, match="TASKTOP_POLL_RATE"):
            MonitorConfig.from_env({"TASKTOP_POLL_RATE": "fast"})

    def test_reads_os_environ(self, monkeypatch):
        """Test os.environ is used when no mapping is given."""
        monkeypatch.setenv("TASKTOP_SPIKE_THRESHOLD", "5")
        assert MonitorConfig.from_env().spike_threshold == 5.0
