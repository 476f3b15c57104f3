# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2022 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause
#
# Author: Artem Bityutskiy <artem.bityutskiy@linux.intel.com>

"""
This module contains helper functions related to logging.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import sys
import logging
import traceback
from typing import Any, IO, cast
from pathlib import Path
try:
    # It is OK if 'colorama' is not available, we only lose message coloring.
    import colorama
    colorama_imported = True
except ImportError:
    colorama_imported = False
from cpufreqlibs.helperlibs.Exceptions import Error

# Log levels.
#   * INFO: No prefixes, just the message.
#   * NOTICE: An INFO message, but with a prefix.
#   * DEBUG, WARNING, ERROR, CRITICAL: Also have the prefix.
#   * ERRINFO: An ERROR message, but without a prefix.
INFO = logging.INFO
NOTICE = logging.INFO + 1
DEBUG = logging.DEBUG
WARNING = logging.WARNING
ERROR = logging.ERROR
ERRINFO = logging.ERROR + 1
CRITICAL = logging.CRITICAL

# Name of the main logger instance. Other project loggers are supposed to be children of this one.
MAIN_LOGGER_NAME = "main"

# The default prefix for debug messages.
_DEFAULT_DBG_PREFIX = "[%(created)f] [%(asctime)s] [%(module)s,%(lineno)d]"

class _MyFormatter(logging.Formatter):
    """
    A custom formatter for logging messages. Provides different message formats for different log
    levels.
    """

    def __init__(self,
                 prefix: str | None = None,
                 prefix_debug: str | None = None,
                 colors: dict[int, str] | None = None):
        """
        Initialize the custom logging formatter.

        Args:
            prefix: Prefix for non-info and non-debug messages. Info messages go without any
                    formatting. By default, the prefix is just the log level name.
            prefix_debug: Prefix for debug messages. The default value is '_DEFAULT_DBG_PREFIX'.
            colors: A dictionary containing colorama color codes to use for 'prefix' and
                    'prefix_debug'.
        """

        logging.Formatter.__init__(self, "%(levelname)s: %(message)s", "%H:%M:%S")

        self._myfmt: dict[int, str] = {}

        if not colors or not colorama_imported:
            colors = {}

        self._colors = colors

        self._set_prefix(prefix=prefix, prefix_debug=prefix_debug)

    def _set_prefix(self, prefix: str | None = None, prefix_debug: str | None = None):
        """
        Build per-level message formats.

        Args:
            prefix: Prefix for non-info and non-debug messages.
            prefix_debug: Prefix for debug messages.
        """

        def _start(level):
            """Return the "start color output" code for the given log level."""
            return str(self._colors.get(level, ""))

        def _end(level):
            """Return the "end color output" code for the given log level."""

            if level in self._colors:
                return str(colorama.Style.RESET_ALL)
            return ""

        if not prefix:
            prefix = ""
        if prefix:
            prefix += ": "

        for lvl, pfx in ((WARNING, "warning"), (ERROR, "error"), (CRITICAL, "critical error"),
                         (NOTICE, "notice")):
            if not prefix:
                pfx = pfx.title()
            self._myfmt[lvl] = _start(lvl) + prefix + pfx + _end(lvl) + ": %(message)s"

        # Debug messages formatting.
        lvl = DEBUG
        if prefix_debug is None:
            prefix_debug = _DEFAULT_DBG_PREFIX
        if prefix_debug:
            prefix_debug += ": "

        self._myfmt[lvl] = prefix_debug + "%(message)s"
        self._myfmt[lvl] = self._myfmt[lvl].replace("[", "[" + _start(lvl))
        self._myfmt[lvl] = self._myfmt[lvl].replace("]", _end(lvl) + "]")

        # Leave the info messages without any formatting.
        self._myfmt[ERRINFO] = self._myfmt[INFO] = "%(message)s"

    def format(self, record: logging.LogRecord) -> str:
        """
        Format the log record. Prefix debugging messages with a timestamp and keep info messages
        unchanged.

        Args:
            record: The log record to format.

        Returns:
            str: The formatted log record.
        """

        # pylint: disable=protected-access
        self._style._fmt = self._myfmt.get(record.levelno, "%(levelname)s: %(message)s")
        return logging.Formatter.format(self, record)

class _MyFilter(logging.Filter):
    """A custom filter which allows only certain log levels to go through."""

    def __init__(self, let_go):
        """
        Initialize the logging filter.

        Args:
            let_go: A list of logging levels to let go through the filter.
        """

        logging.Filter.__init__(self)
        self._let_go = let_go

    def filter(self, record):
        """Filter out all log levels except the ones specified by the user."""

        return record.levelno in self._let_go

class Logger(logging.Logger):
    """
    A custom logger class that provides the following functionality on top of the standard logger:
      * Message coloring.
      * Different prefixes for different log levels.
      * Debug messages with timestamps and file line numbers.
      * The NOTICE and ERRINFO log levels.
      * The 'debug_print_stacktrace()' method.
    """

    def __init__(self, name: str | None = None):
        """
        Setup and return a configured logger.

        Args:
            name: The name of the logger (same as in 'logging.Logger()').
        """

        self.prefix = ""
        self.colored = True

        self._colors: dict[int, str] = {}

        if not name:
            name = "default"

        super().__init__(name)

    def _init_colors(self):
        """Initialize the per-level colors."""

        self._colors[DEBUG] = colorama.Fore.GREEN
        self._colors[WARNING] = colorama.Fore.YELLOW + colorama.Style.BRIGHT
        self._colors[NOTICE] = colorama.Fore.CYAN + colorama.Style.BRIGHT
        self._colors[ERROR] = self._colors[CRITICAL] = colorama.Fore.RED + colorama.Style.BRIGHT

    def configure(self,
                  prefix: str | None = None,
                  level: int | None = None,
                  colored: bool | None = None,
                  info_stream: IO[str] = sys.stdout,
                  error_stream: IO[str] = sys.stderr) -> Logger:
        """
        Configure the logger.

        Args:
            prefix: The prefix for log messages, used for all levels except 'INFO' and 'ERRINFO'.
            level: The log level. Default is 'INFO'.
            colored: Whether to use colored output. By default, colored output is used for TTYs and
                     uncolored output for non-TTYs.
            info_stream: The stream for 'INFO' level messages. Default is 'sys.stdout'.
            error_stream: The stream for messages of all levels except 'INFO'. Default is
                          'sys.stderr'.

        Returns:
            Logger: The configured logger instance.
        """

        if not prefix:
            prefix = ""

        self.prefix = prefix

        if not level:
            level = INFO

        self.setLevel(level)

        if not colorama_imported:
            colored = False

        if colored is None:
            colored = info_stream.isatty() and error_stream.isatty()

        self.colored = colored

        if colored:
            self._init_colors()

        # Remove existing handlers.
        self.handlers = []

        formatter = _MyFormatter(prefix=self.prefix, colors=self._colors)

        stream_handler = logging.StreamHandler(info_stream)
        stream_handler.setFormatter(formatter)
        stream_handler.addFilter(_MyFilter([INFO]))
        self.addHandler(stream_handler)

        stream_handler = logging.StreamHandler(error_stream)
        stream_handler.setFormatter(formatter)
        stream_handler.addFilter(_MyFilter([DEBUG, WARNING, NOTICE, ERROR, ERRINFO, CRITICAL]))
        self.addHandler(stream_handler)

        return self

    def configure_log_file(self, fpath: Path, contents: str | None = None) -> Path:
        """
        Configure the logger to mirror all messages to the specified log file.

        Args:
            fpath: The file path to mirror the output to.
            contents: The initial contents to write to the log file.

        Returns:
            The log file path.
        """

        if contents:
            try:
                with fpath.open("w+", encoding="utf-8") as fobj:
                    fobj.write(contents)
            except OSError as err:
                msg = Error(str(err)).indent(2)
                raise Error(f"Failed to write to '{fpath}':\n{msg}") from None

        # Log files are never colored.
        formatter = _MyFormatter(prefix=self.prefix)

        file_handler = logging.FileHandler(str(fpath))
        file_handler.setFormatter(formatter)
        file_handler.addFilter(_MyFilter([INFO, DEBUG, WARNING, NOTICE, ERROR, ERRINFO, CRITICAL]))
        self.addHandler(file_handler)

        return fpath

    def _print_traceback(self, level: int = ERROR):
        """
        Print an exception or stack traceback.

        Args:
            level: The logging level at which to log the traceback. Defaults to ERROR.
        """

        if sys.exc_info()[0]:
            lines = traceback.format_exc().splitlines()
        else:
            lines = [line.strip() for line in traceback.format_stack()]

        if lines:
            if colorama_imported and self.colored:
                dim = colorama.Style.RESET_ALL + colorama.Style.DIM
                undim = colorama.Style.RESET_ALL
            else:
                dim = undim = ""
            self.log(level, "--- Debug trace starts here ---")
            tb = "\n".join(lines)
            self.log(level, "%sAn error occurred, here is the traceback:\n%s%s", dim, tb, undim)
            self.log(level, "--- Debug trace ends here ---\n")

    def debug_print_stacktrace(self):
        """Print the stack trace if debugging is enabled."""

        if self.getEffectiveLevel() == DEBUG:
            self._print_traceback(level=DEBUG)

    def notice(self, fmt: str, *args: Any):
        """
        Log a message with level 'NOTICE'.

        Args:
            fmt: The format string for the log message.
            *args: The arguments to format the log message.
        """

        self.log(NOTICE, fmt, *args)

logging.setLoggerClass(Logger)

def getLogger(name: str | None = None) -> Logger:
    """
    Get a logger by name (similar to 'logging.getLogger()').

    Args:
        name: The name of the logger.

    Returns:
        Logger: The logger instance.
    """

    # Note, because of 'setLoggerClass()', this will return a 'Logger' instance (except for the root
    # logger case).
    return cast(Logger, logging.getLogger(name=name))
