"""Telemetry module for structured logging.

This module provides:
- Structured logging via structlog
- Semantic event constants
"""

from sre_monitor.telemetry.events import (
    ANALYSIS_COMPLETED,
    ANALYSIS_FAILED,
    ANALYSIS_STATUS_MISMATCH,
    CONFIG_LOAD_FAILED,
    CONFIG_LOADED,
    CONFIG_LOADING,
    CYCLE_COMPLETED,
    CYCLE_STARTED,
    DISK_USAGE_UNAVAILABLE,
    ENV_FILES_LOADED,
    ENV_FILES_NOT_FOUND,
    LATENCY_ATTEMPT_FAILED,
    LATENCY_PROBE_COMPLETED,
    LATENCY_PROBE_STARTED,
    METRIC_CLASSIFIED,
    METRICS_COLLECTION_COMPLETED,
    METRICS_COLLECTION_STARTED,
    NEXT_CHECK_SCHEDULED,
    NOTIFICATION_FAILED,
    NOTIFICATION_SENT,
    NOTIFICATION_SKIPPED,
    SCHEDULER_ALREADY_RUNNING,
    SCHEDULER_CYCLE_ERROR,
    SCHEDULER_STARTED,
    SCHEDULER_STATE_TRANSITION,
    SCHEDULER_STOPPED,
    SENSOR_POLL,
    SENSOR_POLL_FAILED,
)
from sre_monitor.telemetry.logger import configure_logging, get_logger

__all__ = [
    "get_logger",
    "configure_logging",
    "SENSOR_POLL",
    "SENSOR_POLL_FAILED",
    "DISK_USAGE_UNAVAILABLE",
    "LATENCY_PROBE_STARTED",
    "LATENCY_ATTEMPT_FAILED",
    "LATENCY_PROBE_COMPLETED",
    "METRICS_COLLECTION_STARTED",
    "METRICS_COLLECTION_COMPLETED",
    "METRIC_CLASSIFIED",
    "ANALYSIS_COMPLETED",
    "ANALYSIS_FAILED",
    "ANALYSIS_STATUS_MISMATCH",
    "CYCLE_STARTED",
    "CYCLE_COMPLETED",
    "NOTIFICATION_SENT",
    "NOTIFICATION_FAILED",
    "NOTIFICATION_SKIPPED",
    "SCHEDULER_STARTED",
    "SCHEDULER_STOPPED",
    "SCHEDULER_ALREADY_RUNNING",
    "SCHEDULER_CYCLE_ERROR",
    "SCHEDULER_STATE_TRANSITION",
    "NEXT_CHECK_SCHEDULED",
    "CONFIG_LOADING",
    "CONFIG_LOADED",
    "CONFIG_LOAD_FAILED",
    "ENV_FILES_LOADED",
    "ENV_FILES_NOT_FOUND",
]
