"""
Logging setup for dogent, backed by loguru.

Usage:
    from dogent.logger import get_logger, setup_logging

    setup_logging(level="DEBUG", log_file="dogent.log")
    logger = get_logger(__name__)
"""

import sys

from loguru import logger as _logger

DEFAULT_FORMAT = (
    "<green>{time:HH:mm:ss}</green> "
    "[<level>{level}</level>] "
    "<cyan>{extra[name]}</cyan>: {message}"
)

_logger.configure(extra={"name": "dogent"})


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Replace the default loguru sinks with stderr and an optional rotating file."""
    _logger.remove()
    _logger.add(sys.stderr, level=level.upper(), format=DEFAULT_FORMAT)

    if log_file:
        _logger.add(
            log_file,
            level=level.upper(),
            format=DEFAULT_FORMAT,
            rotation="10 MB",
            retention=5,
            encoding="utf-8",
        )


def get_logger(name: str | None = None):
    """Return a logger bound to the given module name."""
    return _logger.bind(name=name or "dogent")
