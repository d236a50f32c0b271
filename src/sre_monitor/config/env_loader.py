"""Environment detection and layered .env loading."""

import os
from enum import Enum
from pathlib import Path

from dotenv import load_dotenv

from sre_monitor.config.validators import PROJECT_ROOT
from sre_monitor.telemetry import ENV_FILES_LOADED, ENV_FILES_NOT_FOUND, get_logger

log = get_logger(__name__)


class Environment(str, Enum):
    """Deployment environment of the monitor, selected by ``APP_ENV``."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TEST = "test"


_ENVIRONMENT_ALIASES = {
    "production": Environment.PRODUCTION,
    "prod": Environment.PRODUCTION,
    "staging": Environment.STAGING,
    "stage": Environment.STAGING,
    "test": Environment.TEST,
}


def get_environment() -> Environment:
    """Map ``APP_ENV`` (case-insensitive) to an Environment.

    Unset or unrecognized values select DEVELOPMENT. Read from os.environ
    because it runs before AppConfig is built.
    """
    return _ENVIRONMENT_ALIASES.get(os.getenv("APP_ENV", "").lower(), Environment.DEVELOPMENT)


def env_file_chain(project_root: Path, environment: Environment) -> list[Path]:
    """Return the candidate .env files, highest priority first."""
    name = environment.value
    return [
        project_root / f".env.{name}.local",
        project_root / f".env.{name}",
        project_root / ".env.local",
        project_root / ".env",
    ]


def load_env_files(project_root: Path | None = None) -> None:
    """Load the existing files of ``env_file_chain`` into os.environ.

    Files are loaded highest priority first with ``override=False``, so a
    variable already in the environment beats every file and a more specific
    file beats a more general one.
    """
    root = project_root or PROJECT_ROOT
    environment = get_environment()

    loaded_files = []
    for env_file in env_file_chain(root, environment):
        if env_file.exists():
            load_dotenv(env_file, override=False)
            loaded_files.append(env_file.name)

    if loaded_files:
        log.info(ENV_FILES_LOADED, environment=environment.value, files=loaded_files)
    else:
        log.debug(ENV_FILES_NOT_FOUND, environment=environment.value, project_root=str(root))
