"""
Logging for ts-profitability.

All records go through the ``ts_profitability`` logger. ``setup_logging``
attaches a RichHandler on stderr to that logger only, leaving the root logger
of an embedding application alone; stdout stays reserved for the JSON index.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "ts_profitability"

FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def level_for(verbose: bool = False, quiet: bool = False) -> int:
    """Quiet wins over verbose; the default shows warnings (skipped files, empty matches)."""
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.DEBUG
    return logging.WARNING


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Route package log records to stderr and, optionally, to a file.

    Handlers installed by an earlier call are closed and replaced, so a
    process that runs several commands never prints a record twice.

    Args:
        verbose: DEBUG level, with source paths and locals in tracebacks
        quiet: ERROR level only
        log_file: Append plain-text records to this file as well

    Returns:
        The ``ts_profitability`` logger
    """
    level = level_for(verbose, quiet)
    logger = logging.getLogger(LOGGER_NAME)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    # markup off: file paths and glob patterns contain square brackets
    console_handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        markup=False,
        show_time=verbose,
        show_path=verbose,
    )
    console_handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=FILE_DATE_FORMAT))
        logger.addHandler(file_handler)

    logger.setLevel(level)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger under the ``ts_profitability`` namespace; pass ``__name__``."""
    if name is None or name == LOGGER_NAME:
        return logging.getLogger(LOGGER_NAME)
    if not name.startswith(f"{LOGGER_NAME}."):
        name = f"{LOGGER_NAME}.{name}"
    return logging.getLogger(name)
