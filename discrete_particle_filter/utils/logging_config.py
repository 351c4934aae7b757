"""
Logging configuration for the particle filter package.

Usage:
    from discrete_particle_filter.utils.logging_config import get_logger

    logger = get_logger(__name__)
    logger.debug("KL to uniform: %.3f", kl)

The package logger only carries a NullHandler, so records go wherever the
host application's logging sends them. Call setup_logging() to attach the
package's own console/file handlers:
    - LOG_LEVEL environment variable controls verbosity (DEBUG, INFO, WARNING, ERROR)
    - LOG_FILE environment variable adds a file handler
"""

import logging
import os
import sys
from typing import List, Optional


DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

PACKAGE_LOGGER = "discrete_particle_filter"

logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())

# Handlers attached by setup_logging(), replaced on the next call.
_installed_handlers: List[logging.Handler] = []


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    format_string: Optional[str] = None,
) -> None:
    """
    Attach console (and optionally file) handlers to the package logger.

    Only handlers installed by a previous call are replaced; the root logger
    and handlers added by the host application are left alone.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL.
               Defaults to the LOG_LEVEL environment variable or WARNING.
        log_file: Optional log file path. Defaults to LOG_FILE if set.
        format_string: Custom format string. Defaults to DEFAULT_FORMAT.
    """
    if level is None:
        level = os.environ.get("LOG_LEVEL", "WARNING")
    numeric_level = getattr(logging, level.upper(), logging.WARNING)

    formatter = logging.Formatter(
        format_string or DEFAULT_FORMAT, datefmt=DEFAULT_DATE_FORMAT
    )

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(numeric_level)
    for handler in _installed_handlers:
        logger.removeHandler(handler)
        handler.close()
    _installed_handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    _installed_handlers.append(console_handler)

    if log_file is None:
        log_file = os.environ.get("LOG_FILE")

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        _installed_handlers.append(file_handler)

    for handler in _installed_handlers:
        logger.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given module name (typically __name__)."""
    return logging.getLogger(name)


def set_level(level: str) -> None:
    """Change the package logging level at runtime."""
    numeric_level = getattr(logging, level.upper(), logging.WARNING)
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(numeric_level)
    for handler in _installed_handlers:
        handler.setLevel(numeric_level)
