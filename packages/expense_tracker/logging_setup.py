"""One place to attach handlers for the ``expense_tracker`` logger tree.

Entry points call :func:`configure_logging` once; every other module only
asks for a named logger via :func:`get_logger`. The level and target file
come from :mod:`expense_tracker.config` (or CLI options), not from here.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import IO

_PKG_LOGGER_NAME = "expense_tracker"
_DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
_CONFIGURED = False


def _parse_level(level: int | str | None) -> int:
    if isinstance(level, int):
        return level
    if level:
        name = level.strip().upper()
        if name.isdigit():
            return int(name)
        numeric = logging.getLevelName(name)
        if isinstance(numeric, int):
            return numeric
    return logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] | None = None,
    log_file: str | Path | None = None,
) -> None:
    """Attach the single package handler; later calls are ignored.

    ``level`` accepts a number or a level name and defaults to INFO. With
    ``log_file`` records are appended to that file (the full-screen UI owns
    the terminal); otherwise they go to ``stream``, stderr by default.
    """

    global _CONFIGURED
    if _CONFIGURED:
        return

    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    for h in list(pkg_logger.handlers):
        if isinstance(h, logging.NullHandler):
            pkg_logger.removeHandler(h)

    handler: logging.Handler
    if log_file is not None:
        handler = logging.FileHandler(os.fspath(log_file), encoding="utf-8")
    else:
        handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    numeric = _parse_level(level)
    handler.setLevel(numeric)
    handler.setFormatter(logging.Formatter(fmt or _DEFAULT_FORMAT))

    pkg_logger.setLevel(numeric)
    pkg_logger.addHandler(handler)
    pkg_logger.propagate = False

    _CONFIGURED = True


def reset_logging() -> None:
    """Detach configured handlers so ``configure_logging`` can run again."""

    global _CONFIGURED
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    for h in list(pkg_logger.handlers):
        pkg_logger.removeHandler(h)
        h.close()
    pkg_logger.propagate = True
    _CONFIGURED = False


def get_logger(name: str) -> logging.Logger:
    # Silent until configured: a NullHandler on the package logger.
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
