"""Logging utilities for ctxscan commands."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "ctxscan"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the ctxscan hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def _level(verbose: bool, quiet: bool) -> int:
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO


def configure_logging(
    *, verbose: bool = False, quiet: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Attach a stderr handler and an optional file sink to the ctxscan logger.

    ``verbose`` wins over ``quiet``. Skipped files and traversal errors are
    only visible at DEBUG.
    """
    level = _level(verbose, quiet)
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(logging.DEBUG if log_file is not None else level)
    logger.propagate = False

    # Repeated CLI invocations in one process must not stack handlers.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(logging.Formatter("[ctxscan] %(levelname)s %(message)s"))
    logger.addHandler(console)

    if log_file is not None:
        # The file sink records everything, whatever the console level.
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


__all__ = ["configure_logging", "get_logger"]
