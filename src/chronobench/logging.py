"""Logging setup for chronobench.

Log records always go to stderr so that tables and Markdown written to
stdout can be piped or redirected untouched. With ``--verbose`` each
console line carries the milliseconds since start-up, which makes slow
calibrations easy to spot. An optional file handler always records
DEBUG.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

_LOGGER_NAME = "chronobench"
_FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
_CONSOLE_FORMAT = "%(levelname)-8s %(message)s"
_VERBOSE_FORMAT = "%(relativeCreated)9.0fms %(levelname)-8s %(message)s"


def _console_level(verbose: bool, quiet: bool) -> int:
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO


def setup_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Path | None = None,
) -> logging.Logger:
    """Configure and return the ``chronobench`` logger.

    Calling it again replaces the handlers from the previous call.

    Args:
        verbose: Console shows DEBUG, including per-phase benchmark progress.
        quiet: Console shows warnings and errors only. Ignored if *verbose*.
        log_file: Also append a DEBUG log here; parent directories are created.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(_console_level(verbose, quiet))
    console.setFormatter(logging.Formatter(_VERBOSE_FORMAT if verbose else _CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(fh)

    return logger
