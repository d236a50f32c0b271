"""Unified configuration management for the monitor.

This module provides a single source of truth for all configuration,
integrating environment variables, .env files, and defaults.
"""

from sre_monitor.config.env_loader import Environment, get_environment
from sre_monitor.config.settings import AppConfig, get_settings, load_app_config

__all__ = [
    "AppConfig",
    "get_settings",
    "load_app_config",
    "Environment",
    "get_environment",
]
