"""Logging settings read before AppConfig exists.

The telemetry package configures itself on first use, which can happen while
``sre_monitor.config.settings`` is still importing. These helpers read the two
values logging needs straight from the environment, using the same variable
names AppConfig uses. No telemetry imports here.
"""

from __future__ import annotations

import os
from pathlib import Path

from sre_monitor.config.validators import resolve_path, validate_log_level

DEFAULT_LOG_DIR = "telemetry/logs"


def get_bootstrap_log_level(default: str = "INFO") -> str:
    """Return ``APP_LOG_LEVEL`` normalized, or ``default`` when unset or unknown."""
    try:
        return validate_log_level(os.getenv("APP_LOG_LEVEL", default))
    except ValueError:
        return validate_log_level(default)


def get_bootstrap_log_dir() -> Path:
    """Return the absolute log directory (``MONITOR_LOG_DIR`` or ``telemetry/logs``)."""
    return resolve_path(os.getenv("MONITOR_LOG_DIR", DEFAULT_LOG_DIR))
