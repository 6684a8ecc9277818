"""Tests for configuration loading."""

import json
import logging

import pytest

from security_monitor.config import CONFIG_ENV_VAR, MonitorConfig, load_config, resolve_log_level
from security_monitor.errors import InvalidConfiguration
from security_monitor.file_walker import DEFAULT_IGNORE_DIRS
from security_monitor.models import Severity


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.delenv("SECURITY_MONITOR_LOG_LEVEL", raising=False)


class TestLoadConfig:
    """Test load_config()."""

    def test_defaults(self):
        """Test defaults when no file or overrides are given."""
        config = load_config()
        assert config.target_root == "."
        assert config.interval_seconds == 60
        assert config.dedup_window == 50
        assert config.history_limit == 1000
        assert set(config.ignore_dirs) == set(DEFAULT_IGNORE_DIRS)

    def test_reads_json_file(self, tmp_path):
        """Test loading values from a JSON file."""
        path = tmp_path / "monitor.json"
        path.write_text(json.dumps({
            "interval_seconds": 15,
            "ignore_dirs": ["third_party"],
            "keyword_severity": {"aws": "critical"},
        }))

        config = load_config(str(path))

        assert config.interval_seconds == 15
        assert config.ignore_dirs == ["third_party"]
        assert config.keyword_severity == {"aws": Severity.CRITICAL}

    def test_overrides_win_and_none_is_ignored(self, tmp_path):
        """Test that explicit overrides beat the file and None is skipped."""
        path = tmp_path / "monitor.json"
        path.write_text(json.dumps({"target_root": "/srv/app", "interval_seconds": 15}))

        config = load_config(str(path), target_root=None, interval_seconds=90)

        assert config.target_root == "/srv/app"
        assert config.interval_seconds == 90

    def test_path_from_environment(self, tmp_path, monkeypatch):
        """Test reading the config path from the environment."""
        path = tmp_path / "env.json"
        path.write_text(json.dumps({"dedup_window": 5}))
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))

        assert load_config().dedup_window == 5

    def test_missing_file(self, tmp_path):
        """Test missing config file."""
        with pytest.raises(InvalidConfiguration, match="not found"):
            load_config(str(tmp_path / "missing.json"))

    def test_malformed_json(self, tmp_path):
        """Test malformed JSON."""
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(InvalidConfiguration, match="Malformed JSON"):
            load_config(str(path))

    def test_non_object_json(self, tmp_path):
        """Test a JSON document that is not an object."""
        path = tmp_path / "list.json"
        path.write_text("[1, 2]")
        with pytest.raises(InvalidConfiguration, match="JSON object"):
            load_config(str(path))

    @pytest.mark.parametrize("values", [
        {"interval_seconds": 0},
        {"dedup_window": 0},
        {"keyword_severity": {"aws": "apocalyptic"}},
    ])
    def test_invalid_values(self, values):
        """Test that validation errors become InvalidConfiguration."""
        with pytest.raises(InvalidConfiguration):
            load_config(**values)


class TestMonitorConfig:
    def test_lists_are_independent(self):
        """Test that list defaults are not shared between instances."""
        a, b = MonitorConfig(), MonitorConfig()
        a.keywords.append("extra")
        assert "extra" not in b.keywords


class TestResolveLogLevel:
    def test_explicit_name(self):
        """Test an explicit level name."""
        assert resolve_log_level("debug") == logging.DEBUG

    def test_from_environment(self, monkeypatch):
        """Test the level from the environment."""
        monkeypatch.setenv("SECURITY_MONITOR_LOG_LEVEL", "WARNING")
        assert resolve_log_level() == logging.WARNING

    def test_unknown_name_falls_back_to_info(self):
        """Test fallback to INFO for unknown names."""
        assert resolve_log_level("chatty") == logging.INFO
        assert resolve_log_level("basicConfig") == logging.INFO
