"""Process-wide logging setup for honkit-tester.

Two sinks hang off the ``honkit_tester`` package logger: a console handler
that shows warnings and errors (or everything when the ``DEBUG`` environment
variable is set) and an optional file handler that always records the full
debug trace, including HonKit's and npm's streamed output.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from ._constants import DEBUG_ENV_VAR

PACKAGE_LOGGER = "honkit_tester"
FILE_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
FILE_DATE_FORMAT = "%Y/%m/%d %H:%M:%S"
CONSOLE_FORMAT = "%(levelname)s: %(message)s"

_console_handler: logging.Handler | None = None
_file_handler: logging.Handler | None = None


def console_level() -> int:
    """Return the console log level implied by the ``DEBUG`` variable."""
    return logging.DEBUG if os.getenv(DEBUG_ENV_VAR) else logging.WARNING


def configure_logging(*, log_file: Path | None = None, silent: bool = False) -> logging.Logger:
    """Attach the console and file sinks to the package logger once.

    Parameters
    ----------
    log_file : Path or None, optional
        Destination of the persistent debug log. Only honoured on the first
        call that provides one.
    silent : bool, optional
        Mute the console sink entirely (the file sink keeps recording).

    Returns
    -------
    logging.Logger
        The configured ``honkit_tester`` logger.

    Notes
    -----
    Repeated calls only refresh the console level, so toggling ``DEBUG``
    between builds in one test run takes effect.
    """
    global _console_handler, _file_handler

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(logging.DEBUG)

    if _console_handler is None:
        _console_handler = logging.StreamHandler()
        _console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        logger.addHandler(_console_handler)
    _console_handler.setLevel(logging.CRITICAL + 1 if silent else console_level())

    if _file_handler is None and log_file is not None:
        _file_handler = logging.FileHandler(log_file, encoding="utf-8")
        _file_handler.setLevel(logging.DEBUG)
        _file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=FILE_DATE_FORMAT))
        logger.addHandler(_file_handler)

    return logger


def reset_logging() -> None:
    """Detach and close the sinks installed by :func:`configure_logging`."""
    global _console_handler, _file_handler

    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in (_console_handler, _file_handler):
        if handler is not None:
            logger.removeHandler(handler)
            handler.close()
    _console_handler = None
    _file_handler = None


__all__ = ["PACKAGE_LOGGER", "configure_logging", "console_level", "reset_logging"]
