# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause
#
# Author: Artem Bityutskiy <artem.bityutskiy@linux.intel.com>

"""
Provide the file tree abstraction: an object bound to a root directory, which opens files by paths
relative to the root. The local file tree operates on the real file-system, for example the
'/sys/devices/system/cpu' sysfs directory.
"""

from  __future__ import annotations # Remove when switching to Python 3.10+.

import os
import typing
from pathlib import Path
from cpufreqlibs.helperlibs import Logging, ClassHelpers
from cpufreqlibs.helperlibs.Exceptions import Error, ErrorIO, ErrorNotFound, ErrorPermissionDenied

if typing.TYPE_CHECKING:
    from typing import IO, Final

# The default root of the CPU sysfs tree.
DEFAULT_SYSFS_BASE: Final[str] = "/sys/devices/system/cpu"

# Users can define this environment variable to use a different root directory by default.
SYSFS_BASE_ENVVAR: Final[str] = "CPUFREQCTL_SYSFS_BASE"

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.cpufreqctl.{__name__}")

def get_default_base() -> Path:
    """
    Return the default file tree root directory path. Use the path in the 'CPUFREQCTL_SYSFS_BASE'
    environment variable if it is defined and it is a directory, otherwise use
    '/sys/devices/system/cpu'.

    Returns:
        The default root directory path.
    """

    val = os.getenv(SYSFS_BASE_ENVVAR)
    if val:
        base = Path(val)
        if base.is_dir():
            _LOG.debug("Using root directory '%s' from the '%s' environment variable",
                       base, SYSFS_BASE_ENVVAR)
            return base

        _LOG.warning("Root directory '%s' specified in the '%s' environment variable does not "
                     "exist or it is not a directory, ignoring it", base, SYSFS_BASE_ENVVAR)

    return Path(DEFAULT_SYSFS_BASE)

def get_err_prefix(fobj: IO, method: str) -> str:
    """
    Return the exception message prefix for a failed file object method.

    Args:
        fobj: The file object.
        method: Name of the failed method.

    Returns:
        The exception message prefix.
    """

    return f"Method '{method}()' failed for '{fobj.name}'"

class LocalFileTree(ClassHelpers.SimpleCloseContext):
    """
    A file tree on the local file-system.

    Public methods overview.
        * 'open()' - open a file.
        * 'exists()' - check if a path exists.
        * 'is_file()' - check if a path exists and it is a regular file.
        * 'is_dir()' - check if a path exists and it is a directory.
        * 'abspath()' - return the absolute path for a path relative to the root.

    All paths are relative to the root directory. Absolute paths are rebased to the root directory,
    e.g., '/online' refers to the 'online' file in the root directory.
    """

    def __init__(self, base: str | Path | None = None):
        """
        Initialize a class instance.

        Args:
            base: Path to the root directory of the file tree. The default is provided by
                  'get_default_base()'.
        """

        if base is None:
            self.base = get_default_base()
        else:
            self.base = Path(base)

        # A string to use in messages, describes where the files are.
        self.basemsg = f" in '{self.base}'"

    def abspath(self, path: str | Path) -> Path:
        """
        Return the absolute path for a file tree path.

        Args:
            path: The path relative to the root directory.

        Returns:
            The absolute path on the local file-system.
        """

        # Note about lstrip(): joining an absolute path with the root directory would ignore the
        # root directory. For example, Path("/tmp") / "/online" results in "/online".
        return self.base / str(path).lstrip("/")

    def open(self, path: str | Path, mode: str) -> IO:
        """
        Open a file in the file tree.

        Args:
            path: The path to the file, relative to the root directory.
            mode: The mode to open the file with, same as in the built-in 'open()' function.

        Returns:
            A file object. All file object methods raise only exceptions derived from 'Error'.

        Raises:
            ErrorNotFound: If the file does not exist.
            ErrorPermissionDenied: If the file cannot be opened because of the permissions.
            ErrorIO: If the file cannot be opened for other reasons.
        """

        fullpath = self.abspath(path)

        errmsg = f"Failed to open file '{fullpath}' with mode '{mode}':"

        # pylint: disable=consider-using-with,unspecified-encoding
        try:
            # Binary mode doesn't take an encoding argument.
            if "b" in mode:
                fobj = open(fullpath, mode)
            else:
                fobj = open(fullpath, mode, encoding="utf-8")
        except PermissionError as err:
            msg = Error(str(err)).indent(2)
            raise ErrorPermissionDenied(f"{errmsg}\n{msg}", path=fullpath,
                                        errno=err.errno) from None
        except FileNotFoundError as err:
            msg = Error(str(err)).indent(2)
            raise ErrorNotFound(f"{errmsg}\n{msg}", path=fullpath, errno=err.errno) from None
        except OSError as err:
            msg = Error(str(err)).indent(2)
            raise ErrorIO(f"{errmsg}\n{msg}", path=fullpath, errno=err.errno) from None

        # Make sure all file methods raise only exceptions derived from 'Error'.
        return typing.cast("IO", ClassHelpers.WrapExceptions(fobj, get_err_prefix=get_err_prefix))

    def exists(self, path: str | Path) -> bool:
        """Return 'True' if path 'path' exists in the file tree."""

        try:
            return self.abspath(path).exists()
        except OSError as err:
            msg = Error(str(err)).indent(2)
            raise ErrorIO(f"Failed to check if '{path}' exists{self.basemsg}:\n{msg}") from None

    def is_file(self, path: str | Path) -> bool:
        """Return 'True' if path 'path' exists and it is a regular file."""

        try:
            return self.abspath(path).is_file()
        except OSError as err:
            msg = Error(str(err)).indent(2)
            raise ErrorIO(f"Failed to check if '{path}' is a file{self.basemsg}:\n{msg}") from None

    def is_dir(self, path: str | Path) -> bool:
        """Return 'True' if path 'path' exists and it is a directory."""

        try:
            return self.abspath(path).is_dir()
        except OSError as err:
            msg = Error(str(err)).indent(2)
            raise ErrorIO(f"Failed to check if '{path}' is a directory{self.basemsg}:\n"
                          f"{msg}") from None
