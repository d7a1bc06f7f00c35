#!/usr/bin/env python3
"""Techem wM-Bus - a decoder for Techem wireless meter frames.

This module configures logging for applications (e.g. the CLI) that use the library;
the library itself only ever uses logging.getLogger(__name__).
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime as dt
from typing import TextIO

import colorlog

from .version import VERSION

DEFAULT_FMT = "%(asctime)s.%(msecs)03d %(message)s"
DEFAULT_DATEFMT = "%H:%M:%S"

CONSOLE_FMT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

LOG_COLOURS = {
    "DEBUG": "white",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "bold_red",
    "CRITICAL": "bold_red",
}  # default_log_colors


class _Formatter:  # format asctime with configurable precision
    """Formatter instances convert a LogRecord to text."""

    converter = None  # was: time.localtime
    default_time_format = "%Y-%m-%dT%H:%M:%S.%f"
    precision = 3

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        """Return the creation time (asctime) of the LogRecord as formatted text.

        Allows for sub-millisecond precision, using datetime instead of time objects.
        """
        result = dt.fromtimestamp(record.created).strftime(
            datefmt or self.default_time_format
        )
        if "f" not in self.default_time_format:
            return result
        precision = self.precision or -1
        return result[: precision - 6] if -1 <= precision < 6 else result


class ColoredFormatter(_Formatter, colorlog.ColoredFormatter):  # type: ignore[misc]
    pass


class Formatter(_Formatter, logging.Formatter):  # type: ignore[misc]
    pass


def set_logging(
    level: int | str = logging.WARNING,
    *,
    color: bool = True,
    stream: TextIO | None = None,
    logger: logging.Logger | None = None,
) -> logging.Logger:
    """Create/configure a console handler for the library's logger.

    May be called several times: any handler added by a previous call is replaced.
    """

    logger = logger or logging.getLogger(__package__)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        if getattr(handler, "_techem_wmbus", False):
            logger.removeHandler(handler)

    console_fmt: ColoredFormatter | Formatter
    if color:
        console_fmt = ColoredFormatter(
            fmt=f"%(log_color)s{CONSOLE_FMT}", reset=True, log_colors=LOG_COLOURS
        )
    else:
        console_fmt = Formatter(fmt=CONSOLE_FMT)

    handler = logging.StreamHandler(stream=stream or sys.stderr)
    handler.setFormatter(console_fmt)
    handler._techem_wmbus = True  # type: ignore[attr-defined]
    logger.addHandler(handler)

    logger.debug("techem_wmbus %s: logging configured", VERSION)
    return logger
