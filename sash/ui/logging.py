#!/usr/bin/env python3
# sash/ui/logging.py
from __future__ import annotations

"""
Logger setup for the shell.

Console output goes to stderr, coloured by level on terminals and plain
elsewhere. An optional log file rotates and never contains escape codes.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from os import PathLike
from typing import Optional, Union

from sash.ui.ansi import colorize, enable_windows_vt, strip_ansi

CONSOLE_FORMAT = "[%(levelname)s] %(message)s"
FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
FILE_MAX_BYTES = 2_000_000
FILE_BACKUPS = 3


class ColorizingStreamHandler(logging.StreamHandler):
    """Writes records in a per-level colour when the stream is a terminal."""

    level_styles = {
        logging.DEBUG: ("bright_black",),
        logging.WARNING: ("yellow",),
        logging.ERROR: ("red",),
        logging.CRITICAL: ("bold", "magenta"),
    }

    def __init__(self, stream=None) -> None:
        super().__init__(stream)
        isatty = getattr(self.stream, "isatty", None)
        self.use_color = bool(isatty and isatty()) and enable_windows_vt()

    def format(self, record: logging.LogRecord) -> str:
        text = strip_ansi(super().format(record))
        if self.use_color:
            text = colorize(text, *self.level_styles.get(record.levelno, ()))
        return text


class PlainFormatter(logging.Formatter):
    """Formatter for log files: escape codes removed from the rendered line."""

    def format(self, record: logging.LogRecord) -> str:
        return strip_ansi(super().format(record))


def _has_handler(logger: logging.Logger, kind: type) -> bool:
    return any(isinstance(handler, kind) for handler in logger.handlers)


def init_logger(
    name: str = "sash",
    level: Union[int, str] = logging.INFO,
    logfile: Optional[Union[str, PathLike]] = None,
) -> logging.Logger:
    """
    Configure and return the logger called `name`.

    Safe to call repeatedly: the console handler and the file handler are
    each installed at most once, only the levels are updated.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False

    if not _has_handler(logger, ColorizingStreamHandler):
        console = ColorizingStreamHandler(sys.stderr)
        console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        logger.addHandler(console)
    for handler in logger.handlers:
        if isinstance(handler, ColorizingStreamHandler):
            handler.setLevel(level)

    if logfile and not _has_handler(logger, RotatingFileHandler):
        log_file = RotatingFileHandler(
            logfile, maxBytes=FILE_MAX_BYTES, backupCount=FILE_BACKUPS, encoding="utf-8")
        log_file.setLevel(logging.DEBUG)
        log_file.setFormatter(PlainFormatter(FILE_FORMAT, datefmt=FILE_DATE_FORMAT))
        logger.addHandler(log_file)

    return logger
