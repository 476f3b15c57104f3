# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2023-2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause
#
# Authors: Artem Bityutskiy <artem.bityutskiy@linux.intel.com>
#          Antti Laakso <antti.laakso@linux.intel.com>
#          Niklas Neronin <niklas.neronin@intel.com>

"""
Provide API for reading and writing sysfs files.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import typing
from pathlib import Path
from cpufreqlibs.helperlibs import Logging, ClassHelpers, FileTree
from cpufreqlibs.helperlibs.Exceptions import ErrorIO, ErrorBadEncoding

if typing.TYPE_CHECKING:
    from cpufreqlibs.helperlibs.FileTree import LocalFileTree

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.cpufreqctl.{__name__}")

def _snip(val: str) -> str:
    """Shorten a long value for an error message."""

    if len(val) > 24:
        return f"{val[:23]}...snip..."
    return val

class SysfsIO(ClassHelpers.SimpleCloseContext):
    """
    Provide API for reading and writing sysfs files.

    Public methods overview.
        * 'read()' - read a string.
        * 'write()' - write a string.

    Paths are relative to the file tree root directory. Every access opens the file, reads or writes
    it, and closes it, no file descriptors are kept between calls. Nothing is cached, every read
    goes to the file.
    """

    def __init__(self, ftree: LocalFileTree | None = None):
        """
        Initialize a class instance.

        Args:
            ftree: The file tree object to access the files through. Use a local file tree with the
                   default root directory if not provided.
        """

        self._close_ftree = ftree is None

        self._ftree: LocalFileTree
        if not ftree:
            self._ftree = FileTree.LocalFileTree()
        else:
            self._ftree = ftree

    def close(self):
        """Uninitialize the class object."""

        ClassHelpers.close(self, close_attrs=("_ftree",))

    @property
    def ftree(self) -> LocalFileTree:
        """The file tree object this object accesses the files through."""
        return self._ftree

    def read(self,
             path: str | Path,
             what: str = "",
             cpu: int | None = None,
             attr: str | None = None) -> str:
        """
        Read the contents of a sysfs file.

        Args:
            path: Path to the sysfs file to read, relative to the file tree root directory.
            what: Optional short description of what is being read, included in exception messages.
            cpu: Optional CPU number the file belongs to, included in exceptions.
            attr: Optional attribute name the file represents, included in exceptions.

        Returns:
            The contents of the file as a string, without any modifications.

        Raises:
            ErrorIO: If the file cannot be read. The 'ErrorNotFound' and 'ErrorPermissionDenied'
                     sub-classes are raised if the file does not exist or the permission is denied.
            ErrorBadEncoding: If the file contents is not valid text.
        """

        if what:
            what = f" {what}"

        try:
            with self._ftree.open(path, "r") as fobj:
                val = fobj.read()
        except (ErrorIO, ErrorBadEncoding) as err:
            raise type(err)(f"Failed to read{what} from '{path}'{self._ftree.basemsg}:\n"
                            f"{err.indent(2)}", cpu=cpu, attr=attr, path=Path(path),
                            errno=getattr(err, "errno", None)) from err

        _LOG.debug("Read%s from '%s'%s: '%s'", what, path, self._ftree.basemsg, val.strip())
        return val

    def write(self,
              path: str | Path,
              val: str,
              what: str = "",
              cpu: int | None = None,
              attr: str | None = None):
        """
        Write a value to a sysfs file. Write exactly 'val', no newline is added.

        Note, writes to sysfs have side effects in the kernel, e.g., a CPU goes offline. A failed
        write is never retried.

        Args:
            path: Path to the sysfs file to write to, relative to the file tree root directory.
            val: Value to write to the file.
            what: Optional short description of what is being written, included in exception
                  messages.
            cpu: Optional CPU number the file belongs to, included in exceptions.
            attr: Optional attribute name the file represents, included in exceptions.

        Raises:
            ErrorIO: If the file cannot be written. The 'ErrorNotFound' and 'ErrorPermissionDenied'
                     sub-classes are raised if the file does not exist or the permission is denied.
        """

        if what:
            what = f" {what}"

        _LOG.debug("Writing value '%s' to%s sysfs file '%s'%s",
                   val, what, path, self._ftree.basemsg)

        try:
            with self._ftree.open(path, "r+") as fobj:
                fobj.write(val)
        except ErrorIO as err:
            raise type(err)(f"Failed to write value '{_snip(val)}' to{what} sysfs file '{path}'"
                            f"{self._ftree.basemsg}:\n{err.indent(2)}",
                            cpu=cpu, attr=attr, path=Path(path),
                            errno=getattr(err, "errno", None)) from err
