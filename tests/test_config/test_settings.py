"""Tests for configuration settings."""

import os
from pathlib import Path

import pytest
from pydantic import ValidationError

import sre_monitor.config.settings as settings_module
from sre_monitor.config import (
    AppConfig,
    Environment,
    get_environment,
    get_settings,
    load_app_config,
)
from sre_monitor.config.bootstrap import get_bootstrap_log_dir, get_bootstrap_log_level
from sre_monitor.config.env_loader import env_file_chain, load_env_files
from sre_monitor.config.validators import PROJECT_ROOT, resolve_path, validate_log_format
from sre_monitor.pipeline.types import Threshold


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove configuration variables that would leak into AppConfig."""
    for key in list(os.environ):
        if key.startswith("MONITOR_") and key != "MONITOR_LOG_DIR":
            monkeypatch.delenv(key)
    for key in ("APP_ENV", "APP_DEBUG", "APP_LOG_LEVEL", "APP_LOG_FORMAT"):
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


class TestEnvironmentDetection:
    """Test environment detection."""

    def test_get_environment_default(self, clean_env: pytest.MonkeyPatch) -> None:
        """Test default environment is development."""
        assert get_environment() == Environment.DEVELOPMENT

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("production", Environment.PRODUCTION),
            ("prod", Environment.PRODUCTION),
            ("staging", Environment.STAGING),
            ("stage", Environment.STAGING),
            ("test", Environment.TEST),
            ("TEST", Environment.TEST),
            ("something-else", Environment.DEVELOPMENT),
        ],
    )
    def test_get_environment_aliases(
        self, clean_env: pytest.MonkeyPatch, value: str, expected: Environment
    ) -> None:
        """Test APP_ENV values and their aliases."""
        clean_env.setenv("APP_ENV", value)
        assert get_environment() == expected


class TestAppConfig:
    """Test AppConfig class."""

    def test_app_config_defaults(self, clean_env: pytest.MonkeyPatch) -> None:
        """Test AppConfig has correct code defaults (isolated from .env)."""
        config = AppConfig()
        assert config.environment == Environment.DEVELOPMENT
        assert config.debug is False
        assert config.project_name == "SRE System Monitor"
        assert config.log_level == "INFO"
        assert config.log_format == "json"
        assert str(config.latency_target_url) == "https://httpbin.org/delay/1"
        assert config.latency_attempts == 5
        assert config.latency_timeout_ms == 10000
        assert config.latency_pause_ms == 100
        assert config.check_interval_min_seconds == 30
        assert config.check_interval_max_seconds == 3600
        assert config.notifications_enabled is True
        assert config.slack_webhook_url is None
        assert config.notification_recipients == ["sre-team", "oncall"]

    def test_app_config_from_env_vars(self, clean_env: pytest.MonkeyPatch) -> None:
        """Test AppConfig reads from environment variables with MONITOR_ prefix."""
        clean_env.setenv("APP_DEBUG", "1")
        clean_env.setenv("APP_LOG_LEVEL", "debug")
        clean_env.setenv("MONITOR_LATENCY_TARGET_URL", "http://status.internal:8080/health")
        clean_env.setenv("MONITOR_LATENCY_ATTEMPTS", "3")
        clean_env.setenv("MONITOR_DISK_WARN_PERCENT", "70")

        config = AppConfig()
        assert config.debug is True
        assert config.log_level == "DEBUG"
        assert str(config.latency_target_url) == "http://status.internal:8080/health"
        assert config.latency_attempts == 3
        assert config.disk_warn_percent == 70.0

    @pytest.mark.parametrize(
        "key,value",
        [
            ("MONITOR_LATENCY_ATTEMPTS", "0"),
            ("MONITOR_LATENCY_ATTEMPTS", "21"),
            ("MONITOR_LATENCY_TIMEOUT_MS", "99"),
            ("MONITOR_LATENCY_TIMEOUT_MS", "60001"),
            ("MONITOR_CHECK_INTERVAL_MIN_SECONDS", "10"),
            ("MONITOR_CHECK_INTERVAL_MAX_SECONDS", "7200"),
            ("MONITOR_LATENCY_TARGET_URL", "not a url"),
            ("MONITOR_LATENCY_TARGET_URL", "ftp://example.com/file"),
            ("MONITOR_DISK_CRIT_PERCENT", "101"),
        ],
    )
    def test_out_of_range_values_rejected(
        self, clean_env: pytest.MonkeyPatch, key: str, value: str
    ) -> None:
        """Test out-of-range configuration fails at load time."""
        clean_env.setenv(key, value)
        with pytest.raises(ValidationError):
            AppConfig()

    def test_warn_above_crit_rejected(self, clean_env: pytest.MonkeyPatch) -> None:
        """Test a WARN threshold above its CRIT threshold is rejected."""
        clean_env.setenv("MONITOR_MEMORY_WARN_PERCENT", "96")
        with pytest.raises(ValidationError, match="memory"):
            AppConfig()

    def test_interval_min_above_max_rejected(self, clean_env: pytest.MonkeyPatch) -> None:
        """Test check interval bounds must be ordered."""
        clean_env.setenv("MONITOR_CHECK_INTERVAL_MIN_SECONDS", "600")
        clean_env.setenv("MONITOR_CHECK_INTERVAL_MAX_SECONDS", "300")
        with pytest.raises(ValidationError, match="check_interval_min_seconds"):
            AppConfig()

    def test_app_config_log_level_validation(self, clean_env: pytest.MonkeyPatch) -> None:
        """Test log level validation."""
        clean_env.setenv("APP_LOG_LEVEL", "INVALID")
        with pytest.raises(ValidationError):
            AppConfig()

    def test_app_config_log_format_validation(self, clean_env: pytest.MonkeyPatch) -> None:
        """Test log format validation."""
        clean_env.setenv("APP_LOG_FORMAT", "invalid")
        with pytest.raises(ValidationError):
            AppConfig()

    def test_app_config_path_resolution(self, clean_env: pytest.MonkeyPatch) -> None:
        """Test that relative paths are resolved to absolute."""
        clean_env.setenv("MONITOR_LOG_DIR", "telemetry/logs")
        config = AppConfig()
        assert config.log_dir.is_absolute()
        assert config.log_dir.parts[-2:] == ("telemetry", "logs")

    def test_threshold_config_mapping(self, clean_env: pytest.MonkeyPatch) -> None:
        """Test configured thresholds flow into the classifier threshold set."""
        clean_env.setenv("MONITOR_CPU_WARN_PERCENT", "60")
        clean_env.setenv("MONITOR_LATENCY_P95_CRIT_MS", "8000")

        thresholds = AppConfig().threshold_config()
        assert thresholds.cpu == Threshold(warn=60, crit=95)
        assert thresholds.disk == Threshold(warn=80, crit=90)
        assert thresholds.processes == Threshold(warn=200, crit=500)
        assert thresholds.network == Threshold(warn=10, crit=100)
        assert thresholds.latency.avg == Threshold(warn=1000, crit=5000)
        assert thresholds.latency.p95 == Threshold(warn=5000, crit=8000)


class TestBootstrap:
    """Test pre-settings bootstrap helpers."""

    def test_bootstrap_log_level_invalid_falls_back(self, clean_env: pytest.MonkeyPatch) -> None:
        """Test an invalid APP_LOG_LEVEL falls back to the default."""
        clean_env.setenv("APP_LOG_LEVEL", "LOUD")
        assert get_bootstrap_log_level() == "INFO"

    def test_bootstrap_log_level_from_env(self, clean_env: pytest.MonkeyPatch) -> None:
        """Test APP_LOG_LEVEL is normalized to upper case."""
        clean_env.setenv("APP_LOG_LEVEL", "warning")
        assert get_bootstrap_log_level() == "WARNING"

    def test_bootstrap_log_dir_relative_to_project_root(
        self, clean_env: pytest.MonkeyPatch
    ) -> None:
        """Test a relative MONITOR_LOG_DIR is anchored at the project root."""
        clean_env.setenv("MONITOR_LOG_DIR", "var/logs")
        assert get_bootstrap_log_dir() == (PROJECT_ROOT / "var" / "logs").resolve()


class TestValidators:
    """Test shared validation helpers."""

    def test_log_format_normalized(self) -> None:
        """Test log formats are matched case-insensitively."""
        assert validate_log_format("CONSOLE") == "console"

    def test_log_format_rejects_unknown(self) -> None:
        """Test an unknown log format names the allowed values."""
        with pytest.raises(ValueError, match="json, console"):
            validate_log_format("xml")

    def test_resolve_path_keeps_absolute(self, tmp_path: Path) -> None:
        """Test absolute paths are only normalized."""
        assert resolve_path(tmp_path / "a" / ".." / "b") == (tmp_path / "b").resolve()


class TestSingleton:
    """Test singleton pattern."""

    def test_get_settings_returns_singleton(self, clean_env: pytest.MonkeyPatch) -> None:
        """Test that get_settings returns the same instance."""
        clean_env.setattr(settings_module, "_settings", None)
        clean_env.setattr(settings_module, "load_env_files", lambda: None)

        settings1 = get_settings()
        settings2 = get_settings()
        assert settings1 is settings2
        assert isinstance(settings1, AppConfig)


class TestEnvFileLoading:
    """Test .env file loading."""

    def test_load_env_files_priority(
        self, clean_env: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        """Test .env file loading priority order."""
        (tmp_path / ".env").write_text("SRE_TEST_VAR=base\nSRE_BASE_ONLY=base\n")
        (tmp_path / ".env.local").write_text("SRE_TEST_VAR=local\n")
        (tmp_path / ".env.development").write_text("SRE_TEST_VAR=development\n")
        (tmp_path / ".env.development.local").write_text("SRE_TEST_VAR=development_local\n")
        clean_env.setenv("APP_ENV", "development")
        clean_env.delenv("SRE_TEST_VAR", raising=False)
        clean_env.delenv("SRE_BASE_ONLY", raising=False)

        try:
            load_env_files(tmp_path)

            # Highest priority file should win
            assert os.getenv("SRE_TEST_VAR") == "development_local"
            assert os.getenv("SRE_BASE_ONLY") == "base"
        finally:
            os.environ.pop("SRE_TEST_VAR", None)
            os.environ.pop("SRE_BASE_ONLY", None)

    def test_explicit_env_var_beats_env_files(
        self, clean_env: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        """Test variables already set in the environment are not overridden."""
        (tmp_path / ".env").write_text("SRE_TEST_VAR=from_file\n")
        clean_env.setenv("SRE_TEST_VAR", "explicit")

        load_env_files(tmp_path)
        assert os.getenv("SRE_TEST_VAR") == "explicit"

    def test_env_file_chain_order(self, clean_env: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Test the most specific file comes first."""
        names = [path.name for path in env_file_chain(tmp_path, Environment.STAGING)]
        assert names == [".env.staging.local", ".env.staging", ".env.local", ".env"]


class TestLoadAppConfig:
    """Test load_app_config function."""

    def test_load_app_config_creates_config(self, clean_env: pytest.MonkeyPatch) -> None:
        """Test that load_app_config creates a valid config."""
        clean_env.setattr(settings_module, "load_env_files", lambda: None)
        config = load_app_config()
        assert isinstance(config, AppConfig)
        assert config.log_level in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

    def test_load_app_config_raises_on_invalid(self, clean_env: pytest.MonkeyPatch) -> None:
        """Test invalid configuration propagates as ValidationError."""
        clean_env.setattr(settings_module, "load_env_files", lambda: None)
        clean_env.setenv("MONITOR_LATENCY_ATTEMPTS", "50")
        with pytest.raises(ValidationError):
            load_app_config()
