"""Structured logging configuration using structlog.

This module configures structlog for structured JSON logging with:
- JSON formatter for file output
- Pretty-printed console output for debugging
- UTC timestamps
- File rotation for log management
- Component and event tracking
"""

import logging
import logging.handlers
import pathlib
import sys
from typing import Any

import structlog


def _get_log_level() -> str:
    """Get log level from configuration.

    Returns:
        Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """
    # Bootstrap from environment to avoid circular imports during startup.
    from sre_monitor.config.bootstrap import get_bootstrap_log_level  # noqa: PLC0415

    return get_bootstrap_log_level()


def _get_log_dir() -> pathlib.Path:
    """Get log directory path.

    Returns:
        Path to the log directory.
    """
    from sre_monitor.config.bootstrap import get_bootstrap_log_dir  # noqa: PLC0415

    return get_bootstrap_log_dir()


def _add_component(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Add the last segment of the logger name as the component.

    Runs after add_logger_name. An explicit ``component=`` keyword on the log call wins.
    """
    logger_name = event_dict.get("logger", "")
    component = logger_name.split(".")[-1] if logger_name else "unknown"
    event_dict.setdefault("component", component)
    return event_dict


# Shared by structlog calls and by records from plain stdlib loggers
_SHARED_PROCESSORS: list[Any] = [
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    _add_component,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
]


def _formatter(renderer: Any) -> structlog.stdlib.ProcessorFormatter:
    return structlog.stdlib.ProcessorFormatter(
        processor=renderer, foreign_pre_chain=_SHARED_PROCESSORS
    )


def _configure_file_handler(log_dir: pathlib.Path) -> logging.handlers.RotatingFileHandler:
    """Configure rotating file handler for JSON logs.

    Args:
        log_dir: Directory for log files.

    Returns:
        Configured RotatingFileHandler.
    """
    log_dir.mkdir(parents=True, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        filename=str(log_dir / "current.jsonl"),
        maxBytes=50 * 1024 * 1024,  # 50 MB
        backupCount=5,
        encoding="utf-8",
    )
    handler.setFormatter(_formatter(structlog.processors.JSONRenderer()))
    return handler


def _configure_console_handler() -> logging.StreamHandler[Any]:
    """Configure console handler for pretty-printed logs.

    Returns:
        Configured StreamHandler.
    """
    handler = logging.StreamHandler(sys.stderr)
    renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    handler.setFormatter(_formatter(renderer))
    return handler


def configure_logging() -> None:
    """Configure structlog for structured logging.

    This function should be called once at application startup to set up
    structured logging with JSON file output and pretty-printed console output.
    """
    log_level = _get_log_level()
    log_dir = _get_log_dir()

    # Root logger accepts all levels; individual handlers gate output.
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    # Silence noisy third-party loggers.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    configured_level = getattr(logging, log_level, logging.INFO)

    # File handler captures INFO+ (pipeline events) regardless of user config
    file_handler = _configure_file_handler(log_dir)
    file_handler.setLevel(min(logging.INFO, configured_level))
    root_logger.addHandler(file_handler)

    console_handler = _configure_console_handler()
    console_handler.setLevel(configured_level)
    root_logger.addHandler(console_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_SHARED_PROCESSORS,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:  # Returns structlog.stdlib.BoundLogger
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__ of the calling module).

    Returns:
        Configured structlog logger instance.

    Example:
        >>> from sre_monitor.telemetry import get_logger
        >>> log = get_logger(__name__)
        >>> log.info("cycle_started", target_url="https://example.com")
    """
    if not structlog.is_configured():
        configure_logging()

    return structlog.get_logger(name)
