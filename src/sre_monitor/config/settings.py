"""Application configuration settings.

This module provides the AppConfig class and settings singleton.
"""

from pathlib import Path

import structlog
from pydantic import AnyHttpUrl, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sre_monitor.config.env_loader import Environment, get_environment, load_env_files
from sre_monitor.config.validators import (
    resolve_path,
    validate_log_format,
    validate_log_level,
    validate_threshold_pair,
)
from sre_monitor.pipeline.types import LatencyThresholds, Threshold, ThresholdConfig
from sre_monitor.telemetry.events import CONFIG_LOAD_FAILED, CONFIG_LOADED, CONFIG_LOADING

log = structlog.get_logger(__name__)


class AppConfig(BaseSettings):
    """Unified application configuration.

    Loads configuration from environment variables, .env files, and defaults.
    Every numeric setting is range-checked, so an out-of-range value is
    rejected when the config is built, before the first monitoring cycle.
    """

    model_config = SettingsConfigDict(
        # .env files are loaded manually via env_loader (priority order)
        env_prefix="MONITOR_",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Environment
    environment: Environment = Field(
        default_factory=get_environment, description="Current environment"
    )
    debug: bool = Field(default=False, alias="APP_DEBUG", description="Debug mode flag")

    # Application
    project_name: str = Field(default="SRE System Monitor", description="Project name")
    version: str = Field(default="0.1.0", description="Application version")

    # Telemetry
    log_dir: Path = Field(default=Path("telemetry/logs"), description="Log directory path")
    log_level: str = Field(
        default="INFO",
        alias="APP_LOG_LEVEL",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_format: str = Field(
        default="json", alias="APP_LOG_FORMAT", description="Log format (json or console)"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        return validate_log_level(v)

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        return validate_log_format(v)

    @field_validator("log_dir", mode="before")
    @classmethod
    def resolve_paths(cls, v: Path | str) -> Path:
        """Resolve relative paths to absolute."""
        return resolve_path(v)

    # Latency probe
    latency_target_url: AnyHttpUrl = Field(
        default="https://httpbin.org/delay/1",
        validate_default=True,
        description="URL probed with HEAD requests for synthetic latency",
    )
    latency_attempts: int = Field(default=5, ge=1, le=20, description="Attempts per probe")
    latency_timeout_ms: int = Field(
        default=10000, ge=100, le=60000, description="Per-attempt timeout (ms)"
    )
    latency_pause_ms: int = Field(
        default=100, ge=0, le=5000, description="Pause between latency attempts (ms)"
    )

    # Host probes
    probe_timeout_seconds: float = Field(
        default=15.0, gt=0, le=300, description="Upper bound for one host metrics probe"
    )

    # Thresholds
    disk_warn_percent: float = Field(default=80.0, ge=0, le=100)
    disk_crit_percent: float = Field(default=90.0, ge=0, le=100)
    memory_warn_percent: float = Field(default=85.0, ge=0, le=100)
    memory_crit_percent: float = Field(default=95.0, ge=0, le=100)
    cpu_warn_percent: float = Field(default=80.0, ge=0, le=100)
    cpu_crit_percent: float = Field(default=95.0, ge=0, le=100)
    processes_warn_count: int = Field(default=200, ge=0)
    processes_crit_count: int = Field(default=500, ge=0)
    network_errors_warn_count: int = Field(default=10, ge=0)
    network_errors_crit_count: int = Field(default=100, ge=0)
    latency_avg_warn_ms: float = Field(default=1000.0, ge=0, le=60000)
    latency_avg_crit_ms: float = Field(default=5000.0, ge=0, le=60000)
    latency_p95_warn_ms: float = Field(default=5000.0, ge=0, le=60000)
    latency_p95_crit_ms: float = Field(default=10000.0, ge=0, le=60000)

    # Scheduling
    check_interval_min_seconds: int = Field(
        default=30, ge=30, le=3600, description="Shortest allowed delay between cycles"
    )
    check_interval_max_seconds: int = Field(
        default=3600, ge=30, le=3600, description="Longest allowed delay between cycles"
    )

    # Notifications
    notifications_enabled: bool = Field(default=True, description="Dispatch notifications")
    slack_webhook_url: str | None = Field(
        default=None, description="Slack incoming webhook; messages are only logged if unset"
    )
    notification_recipients: list[str] = Field(
        default_factory=lambda: ["sre-team", "oncall"],
        description="Recipients attached to every notification",
    )
    notification_timeout_seconds: float = Field(default=10.0, gt=0, le=120)

    @model_validator(mode="after")
    def check_ranges(self) -> "AppConfig":
        """Validate cross-field threshold and interval constraints."""
        validate_threshold_pair("disk", self.disk_warn_percent, self.disk_crit_percent)
        validate_threshold_pair("memory", self.memory_warn_percent, self.memory_crit_percent)
        validate_threshold_pair("cpu", self.cpu_warn_percent, self.cpu_crit_percent)
        validate_threshold_pair(
            "processes", self.processes_warn_count, self.processes_crit_count
        )
        validate_threshold_pair(
            "network", self.network_errors_warn_count, self.network_errors_crit_count
        )
        validate_threshold_pair("latency avg", self.latency_avg_warn_ms, self.latency_avg_crit_ms)
        validate_threshold_pair("latency p95", self.latency_p95_warn_ms, self.latency_p95_crit_ms)
        if self.check_interval_min_seconds > self.check_interval_max_seconds:
            raise ValueError(
                "check_interval_min_seconds must not exceed check_interval_max_seconds"
            )
        return self

    def threshold_config(self) -> ThresholdConfig:
        """Build the classifier threshold set from configured values."""
        return ThresholdConfig(
            disk=Threshold(warn=self.disk_warn_percent, crit=self.disk_crit_percent),
            memory=Threshold(warn=self.memory_warn_percent, crit=self.memory_crit_percent),
            cpu=Threshold(warn=self.cpu_warn_percent, crit=self.cpu_crit_percent),
            processes=Threshold(warn=self.processes_warn_count, crit=self.processes_crit_count),
            network=Threshold(
                warn=self.network_errors_warn_count, crit=self.network_errors_crit_count
            ),
            latency=LatencyThresholds(
                avg=Threshold(warn=self.latency_avg_warn_ms, crit=self.latency_avg_crit_ms),
                p95=Threshold(warn=self.latency_p95_warn_ms, crit=self.latency_p95_crit_ms),
            ),
        )


_settings: AppConfig | None = None


def load_app_config() -> AppConfig:
    """Load and validate application configuration.

    This function:
    1. Loads .env files in priority order (via env_loader)
    2. Creates AppConfig instance (reads from environment variables)
    3. Validates all values using Pydantic
    4. Logs configuration loading using structlog

    Returns:
        Validated AppConfig instance.

    Raises:
        ValidationError: If configuration validation fails.
    """
    log.info(CONFIG_LOADING, environment=get_environment().value)

    load_env_files()

    try:
        config = AppConfig()
        log.info(
            CONFIG_LOADED,
            environment=config.environment.value,
            debug=config.debug,
            log_level=config.log_level,
            latency_target_url=str(config.latency_target_url),
        )
        return config
    except Exception as e:
        log.error(CONFIG_LOAD_FAILED, error=str(e), error_type=type(e).__name__)
        raise


def get_settings() -> AppConfig:
    """Get the application settings singleton.

    Returns:
        AppConfig instance (singleton pattern).
    """
    global _settings
    if _settings is None:
        _settings = load_app_config()
    return _settings
