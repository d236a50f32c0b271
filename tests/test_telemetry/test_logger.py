"""Tests for structured logging configuration."""

import json
import logging
import pathlib

import pytest
import structlog

import sre_monitor.telemetry.events as events
import sre_monitor.telemetry.logger as logger_module
from sre_monitor.telemetry.logger import configure_logging, get_logger


@pytest.fixture
def log_dir(tmp_path: pathlib.Path, monkeypatch: pytest.MonkeyPatch) -> pathlib.Path:
    """Point logging at a temporary directory at DEBUG level."""
    directory = tmp_path / "logs"
    monkeypatch.setattr(logger_module, "_get_log_dir", lambda: directory)
    monkeypatch.setattr(logger_module, "_get_log_level", lambda: "DEBUG")
    structlog.reset_defaults()
    logging.root.handlers.clear()
    configure_logging()
    return directory


def _last_entry(log_dir: pathlib.Path) -> dict:
    with open(log_dir / "current.jsonl", encoding="utf-8") as f:
        lines = f.readlines()
    assert lines
    return json.loads(lines[-1])


class TestLoggerConfiguration:
    """Test logger configuration and setup."""

    def test_get_logger_returns_bound_logger(self) -> None:
        """Test that get_logger returns a logger that can be used."""
        log = get_logger(__name__)
        assert hasattr(log, "info")
        assert hasattr(log, "error")
        assert hasattr(log, "warning")

    def test_get_logger_configures_on_first_call(self, log_dir: pathlib.Path) -> None:
        """Test that get_logger configures logging on first call."""
        structlog.reset_defaults()
        assert not structlog.is_configured()

        get_logger("test.module1")
        assert structlog.is_configured()

    def test_configure_creates_log_directory(self, log_dir: pathlib.Path) -> None:
        """Test that configure_logging creates the log directory."""
        assert log_dir.exists()
        assert (log_dir / "current.jsonl").exists()

    def test_logger_emits_structured_json(self, log_dir: pathlib.Path) -> None:
        """Test that logger emits structured JSON logs to file."""
        log = get_logger("sre_monitor.pipeline.analyzer")
        log.info("analysis_completed", overall_status="WARN", warnings=1)

        entry = _last_entry(log_dir)
        assert entry["event"] == "analysis_completed"
        assert entry["overall_status"] == "WARN"
        assert entry["warnings"] == 1
        assert entry["level"] == "info"
        assert entry["component"] == "analyzer"
        assert "+00:00" in entry["timestamp"] or entry["timestamp"].endswith("Z")

    def test_explicit_component_wins(self, log_dir: pathlib.Path) -> None:
        """Test an explicit component keyword is not overwritten."""
        log = get_logger("sre_monitor.sensors.host")
        log.info("sensor_poll", component="disk_probe")

        assert _last_entry(log_dir)["component"] == "disk_probe"

    def test_exc_info_rendered(self, log_dir: pathlib.Path) -> None:
        """Test exceptions are rendered into the JSON entry."""
        log = get_logger("sre_monitor.pipeline.aggregator")
        try:
            raise OSError("disk unreadable")
        except OSError:
            log.warning("sensor_poll_failed", domain="disk", exc_info=True)

        entry = _last_entry(log_dir)
        assert entry["domain"] == "disk"
        assert "disk unreadable" in entry["exception"]

    def test_stdlib_records_share_processors(self, log_dir: pathlib.Path) -> None:
        """Test plain stdlib log records get the same level, component and timestamp."""
        logging.getLogger("sre_monitor.vendor.webhook").warning("webhook slow")

        entry = _last_entry(log_dir)
        assert entry["event"] == "webhook slow"
        assert entry["level"] == "warning"
        assert entry["logger"] == "sre_monitor.vendor.webhook"
        assert entry["component"] == "webhook"
        assert "+00:00" in entry["timestamp"] or entry["timestamp"].endswith("Z")


class TestEvents:
    """Test event name constants."""

    def test_event_names_unique(self) -> None:
        """Test every event constant has a distinct snake_case value."""
        names = [value for key, value in vars(events).items() if key.isupper()]
        assert len(names) == len(set(names))
        assert all(name == name.lower() and " " not in name for name in names)
