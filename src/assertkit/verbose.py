"""Logger setup for assertkit's auxiliary diagnostics."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s [%(handler)s/%(area)s]: %(message)s"


class AssertRecordFilter(logging.Filter):
    """Fill in the ``handler`` and ``area`` fields assertkit tags records with.

    Handlers pass both through ``extra``; records from elsewhere get ``-``
    so the shared format never fails.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        for field in ("handler", "area"):
            if not hasattr(record, field):
                setattr(record, field, "-")
        return True


def setup_logger(
    debug_file: Path, verbose: bool = False, logger_name: str = "assertkit"
) -> logging.Logger:
    """
    Route assertkit's own diagnostics to ``debug_file``.

    Assertion reports never go through this logger; they are written to the
    handler's output sink. What lands here is the side channel: nil checks,
    skipped (cancelled) assertions, deferred drains and sink write errors,
    each tagged with the reporting handler's name and assertion area.

    Args:
        debug_file: Path to debug log file (always created)
        verbose: If True, also log to stderr. If False, only log to file.
        logger_name: Name of the logger instance. Child loggers such as
            ``assertkit.handler`` propagate into it.

    Returns:
        Configured logger instance.
    """
    logger = logging.getLogger(logger_name)

    for existing in list(logger.handlers):
        existing.close()
        logger.removeHandler(existing)

    logger.disabled = False
    logger.setLevel(logging.DEBUG)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S")
    record_filter = AssertRecordFilter()

    debug_file.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(debug_file, mode="a")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    file_handler.addFilter(record_filter)
    logger.addHandler(file_handler)

    if verbose:
        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setLevel(logging.INFO)
        stderr_handler.setFormatter(formatter)
        stderr_handler.addFilter(record_filter)
        logger.addHandler(stderr_handler)

    return logger
