# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause
#
# Author: Artem Bityutskiy <artem.bityutskiy@linux.intel.com>

"""
The project logger. Compared to the standard logger, it adds:
  * the NOTICE level - an INFO message with a prefix,
  * the ERRINFO level - an ERROR message without a prefix,
  * "<tool>: <level>: " message prefixes, colored when the output is a terminal,
  * timestamps and source line numbers in debug messages,
  * the log level and coloring detected from the '-q', '-d' and '--force-color' options,
  * 'error_out()' for printing an error message and exiting.

INFO messages go to standard output, messages of all other levels go to standard error.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import sys
import logging
import traceback
from typing import NoReturn, Any, IO, cast
import colorama

INFO = logging.INFO
NOTICE = logging.INFO + 1
DEBUG = logging.DEBUG
WARNING = logging.WARNING
ERROR = logging.ERROR
ERRINFO = logging.ERROR + 1
CRITICAL = logging.CRITICAL

# Name of the main logger instance. Other project loggers are supposed to be children of this one.
MAIN_LOGGER_NAME = "main"

# Names used in message prefixes, per log level.
_PREFIX_NAMES = {NOTICE: "notice", WARNING: "warning", ERROR: "error", CRITICAL: "critical error"}

_COLORS = {
    DEBUG: colorama.Fore.GREEN,
    NOTICE: colorama.Fore.CYAN + colorama.Style.BRIGHT,
    WARNING: colorama.Fore.YELLOW + colorama.Style.BRIGHT,
    ERROR: colorama.Fore.RED + colorama.Style.BRIGHT,
    CRITICAL: colorama.Fore.RED + colorama.Style.BRIGHT,
}

def _build_formats(prefix: str, colored: bool) -> dict[int, str]:
    """
    Build the message format strings.

    Args:
        prefix: The tool name to start the prefixes with, or an empty string.
        colored: Whether to color the prefixes.

    Returns:
        A dictionary of format strings indexed by the log level.
    """

    def _paint(level: int, text: str) -> str:
        """Color 'text' if colors are enabled."""

        if not colored:
            return text
        return f"{_COLORS[level]}{text}{colorama.Style.RESET_ALL}"

    fmts = {INFO: "%(message)s", ERRINFO: "%(message)s"}

    for level, name in _PREFIX_NAMES.items():
        if prefix:
            name = f"{prefix}: {name}"
        else:
            name = name.title()
        fmts[level] = _paint(level, name) + ": %(message)s"

    stamp = _paint(DEBUG, "%(created)f") + "] [" + _paint(DEBUG, "%(asctime)s")
    location = _paint(DEBUG, "%(module)s,%(lineno)d")
    fmts[DEBUG] = f"[{stamp}] [{location}]: %(message)s"

    return fmts

class _Formatter(logging.Formatter):
    """A formatter with a separate message format for every log level."""

    def __init__(self, fmts: dict[int, str]):
        """
        Initialize the formatter.

        Args:
            fmts: Format strings indexed by the log level.
        """

        super().__init__(fmts[INFO], "%H:%M:%S")
        self._fmts = fmts

    def format(self, record: logging.LogRecord) -> str:
        """Format 'record' using the format string of its log level."""

        # pylint: disable=protected-access
        self._style._fmt = self._fmts[record.levelno]
        return super().format(record)

def _detect_level() -> int:
    """Return the log level requested with the '-q' or '-d' command line option."""

    if "-q" in sys.argv or "--quiet" in sys.argv:
        return WARNING
    if "-d" in sys.argv or "--debug" in sys.argv:
        return DEBUG
    return INFO

class Logger(logging.Logger):
    """The project logger class, see the module docstring for details."""

    def __init__(self, name: str | None = None):
        """
        Initialize the logger.

        Args:
            name: The name of the logger (same as in 'logging.Logger()').
        """

        self.colored = False
        super().__init__(name or "default")

    def configure(self,
                  prefix: str = "",
                  level: int | None = None,
                  colored: bool | None = None,
                  info_stream: IO[str] = sys.stdout,
                  error_stream: IO[str] = sys.stderr) -> Logger:
        """
        Configure the logger and attach the output stream handlers to it.

        Args:
            prefix: The tool name to prefix NOTICE, WARNING, ERROR and CRITICAL messages with.
            level: The log level, detected from the command line options by default.
            colored: Whether to color the prefixes. By default, colors are used if both streams are
                     terminals, or if the '--force-color' command line option is present.
            info_stream: The stream for INFO messages.
            error_stream: The stream for messages of all other levels.

        Returns:
            The logger instance.
        """

        self.setLevel(level or _detect_level())

        if colored is None:
            colored = "--force-color" in sys.argv or \
                      (info_stream.isatty() and error_stream.isatty())
        self.colored = colored

        formatter = _Formatter(_build_formats(prefix, colored))

        self.handlers = []
        for stream, to_info in ((info_stream, True), (error_stream, False)):
            handler = logging.StreamHandler(stream)
            handler.setFormatter(formatter)
            handler.addFilter(lambda record, to_info=to_info: (record.levelno == INFO) == to_info)
            self.addHandler(handler)

        return self

    def _print_traceback(self, level: int):
        """Log the traceback of the exception being handled, or the current stack."""

        if sys.exc_info()[0]:
            trace = traceback.format_exc().rstrip()
        else:
            trace = "\n".join(line.strip() for line in traceback.format_stack())

        if self.colored:
            trace = f"{colorama.Style.DIM}{trace}{colorama.Style.RESET_ALL}"

        self.log(level, "--- Debug trace starts here ---")
        self.log(level, "An error occurred, here is the traceback:\n%s", trace)
        self.log(level, "--- Debug trace ends here ---\n")

    def error_out(self, fmt: str | Exception, *args: Any, print_tb: bool = False) -> NoReturn:
        """
        Log an error message and exit with exit code 1.

        Args:
            fmt: The error message format string, or an exception object.
            *args: The format string arguments.
            print_tb: Whether to log the traceback. The traceback is always logged in debug mode.
        """

        if print_tb or self.isEnabledFor(DEBUG):
            self._print_traceback(ERRINFO)

        self.error(str(fmt) % args if args else str(fmt))
        raise SystemExit(1)

    def debug_print_stacktrace(self):
        """Log the current stack if debugging is enabled."""

        if self.isEnabledFor(DEBUG):
            self._print_traceback(DEBUG)

    def notice(self, fmt: str, *args: Any):
        """Log a message with the NOTICE level."""
        self.log(NOTICE, fmt, *args)

logging.setLoggerClass(Logger)

def getLogger(name: str | None = None) -> Logger:
    """
    Return the logger by name, same as 'logging.getLogger()', but typed as the project logger class.
    """

    return cast(Logger, logging.getLogger(name=name))
