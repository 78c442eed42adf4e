"""
Logging Configuration

All package loggers hang off the "concordance" logger; the CLI attaches
one stderr handler to it so stdout carries only headers, counts and records.

Level precedence: --verbose / --quiet, then CONCORDANCE_LOG_LEVEL
(environment or .env), then INFO.
"""

import logging
import os
import sys
from typing import Mapping, Optional, TextIO

PACKAGE_LOGGER = "concordance"
LOG_LEVEL_ENV = "CONCORDANCE_LOG_LEVEL"
LOG_FORMAT = "%(levelname)-8s %(name)s: %(message)s"


def resolve_level(
    verbose: bool = False,
    quiet: bool = False,
    env: Optional[Mapping[str, str]] = None,
) -> int:
    """
    Pick the log level for a run.

    Raises:
        ValueError: If CONCORDANCE_LOG_LEVEL is not a logging level name
    """
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING

    env = os.environ if env is None else env
    name = env.get(LOG_LEVEL_ENV, "").strip().upper()
    if not name:
        return logging.INFO

    level = logging.getLevelName(name)
    if not isinstance(level, int):
        raise ValueError(f"Invalid {LOG_LEVEL_ENV} '{name}'. Expected DEBUG, INFO, WARNING or ERROR")
    return level


def setup_logging(
    verbose: bool = False,
    quiet: bool = False,
    env: Optional[Mapping[str, str]] = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Attach a single handler to the package logger.

    Args:
        verbose: DEBUG, overrides the environment
        quiet: WARNING, overrides the environment
        env: Environment mapping (default: os.environ)
        stream: Handler stream (default: sys.stderr)

    Returns:
        The configured "concordance" logger
    """
    level = resolve_level(verbose, quiet, env)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    logger.handlers.clear()
    logger.addHandler(handler)
    return logger
