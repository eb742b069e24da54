"""Logging utilities for spacecompiler commands and services."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, MutableMapping

_LOGGER_NAME = "spacecompiler"
_CONSOLE_FORMAT = "[spacecompiler] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class UnitLoggerAdapter(logging.LoggerAdapter):
    """Prefix records with the compilation unit they belong to."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        return f"[{self.extra['unit']}] {msg}", kwargs


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the spacecompiler hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def unit_logger(logger: logging.Logger, unit: str) -> UnitLoggerAdapter:
    return UnitLoggerAdapter(logger, {"unit": unit})


def configure_logging(
    *, verbose: bool = False, quiet: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Route spacecompiler logs to stderr (and optionally a file).

    Stdout is left untouched because the CLI writes compilation results there.
    ``quiet`` wins over ``verbose`` when both are set.
    """
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Drop handlers from an earlier call so repeated CLI runs do not double up.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(file_handler)
        logger.setLevel(logging.DEBUG)

    return logger


__all__ = ["UnitLoggerAdapter", "configure_logging", "get_logger", "unit_logger"]
