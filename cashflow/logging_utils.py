"""Mini README: Application-wide logging helpers for the cash flow tracker.

Structure:
    * get_logger - factory returning module loggers with baseline configuration.
    * configure_root_logger - install the stream handler once, adjust the level on demand.
    * level_for_environment - map the ``environment`` setting to a log level.

Usage:
    Modules import ``get_logger`` at import time, which installs the handler
    at INFO. Entry points (the CLI and ``open_ledger``) call
    ``configure_root_logger(level_for_environment(settings.environment))`` so
    a development session logs ledger loads and view changes at DEBUG.
"""

from __future__ import annotations

import logging
from typing import Optional

_LOGGER_INITIALISED = False

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s"

_ENVIRONMENT_LEVELS = {
    "development": logging.DEBUG,
    "dev": logging.DEBUG,
    "test": logging.WARNING,
    "testing": logging.WARNING,
    "production": logging.INFO,
}


def level_for_environment(environment: str) -> int:
    """Return the root level for an environment label; unknown labels get INFO."""

    return _ENVIRONMENT_LEVELS.get(environment.strip().lower(), logging.INFO)


def configure_root_logger(level: Optional[int] = None) -> None:
    """Install the timestamped handler once and apply ``level`` when given."""

    global _LOGGER_INITIALISED
    root_logger = logging.getLogger()
    if not _LOGGER_INITIALISED:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        root_logger.addHandler(handler)
        root_logger.setLevel(logging.INFO if level is None else level)
        _LOGGER_INITIALISED = True
    elif level is not None:
        root_logger.setLevel(level)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module-specific logger ensuring baseline configuration."""

    configure_root_logger()
    return logging.getLogger(name)
