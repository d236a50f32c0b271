"""Validation helpers shared by AppConfig and the pre-settings bootstrap."""

from pathlib import Path

# src/sre_monitor/config -> project root
PROJECT_ROOT = Path(__file__).resolve().parents[3]

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("json", "console")


def _one_of(field: str, value: str, allowed: tuple[str, ...]) -> str:
    for choice in allowed:
        if value.lower() == choice.lower():
            return choice
    raise ValueError(f"{field} must be one of {', '.join(allowed)}, got {value!r}")


def validate_log_level(value: str) -> str:
    """Return the upper-case log level, rejecting unknown names."""
    return _one_of("log_level", value, LOG_LEVELS)


def validate_log_format(value: str) -> str:
    """Return the lower-case log format (``json`` or ``console``)."""
    return _one_of("log_format", value, LOG_FORMATS)


def validate_threshold_pair(name: str, warn: float, crit: float) -> None:
    """Validate that a WARN threshold does not exceed its CRIT threshold.

    Equal values are allowed; the CRIT check runs first, so such a metric
    never reports WARN.

    Raises:
        ValueError: If warn > crit.
    """
    if warn > crit:
        raise ValueError(f"{name}: warn threshold ({warn}) must not exceed crit threshold ({crit})")


def resolve_path(value: Path | str) -> Path:
    """Resolve a path, anchoring relative paths at the project root."""
    path = Path(value)
    if not path.is_absolute():
        path = PROJECT_ROOT / path
    return path.resolve()
