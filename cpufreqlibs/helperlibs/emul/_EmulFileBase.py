# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2022-2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause
#
# Authors: Artem Bityutskiy <artem.bityutskiy@linux.intel.com>
#          Antti Laakso <antti.laakso@linux.intel.com>
#          Niklas Neronin <niklas.neronin@intel.com>

"""
Provide base class for emulated file classes.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import errno
from typing import IO
from pathlib import Path
from cpufreqlibs.helperlibs.Exceptions import Error, ErrorIO, ErrorPermissionDenied, ErrorNotFound

class EmulFileBase:
    """
    Base class for emulated file classes. The emulated file is a real file in the base directory,
    which is usually a temporary directory.
    """

    def __init__(self,
                 path: Path,
                 basepath: Path,
                 readonly: bool = False,
                 data: str | bytes | None = None):
        """
        Initialize a class instance.

        Args:
            path: Path to the file to emulate, relative to the emulated file tree root.
            basepath: Path to the base directory (where the emulated files are stored).
            readonly: Whether the emulated file is read-only. Opening a read-only file for writing
                      fails with 'ErrorPermissionDenied', regardless of the user privileges.
            data: The initial data to populate the emulated file with. Create an empty file if empty
                  string, do not create the file if None.
        """

        self.path = path
        self.basepath = basepath
        self.readonly = readonly

        # Note about lstrip(): 'self.path' may start with '/', and joining it directly with
        # 'self.basepath' would ignore the base path.
        self.fullpath = self.basepath / str(self.path).lstrip("/")

        if data is not None:
            self._create(data)

    def _create(self, data: str | bytes):
        """
        Create the emulated file in the base directory.

        Args:
            data: The initial data to populate the emulated file with.
        """

        try:
            self.fullpath.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(data, bytes):
                self.fullpath.write_bytes(data)
            else:
                self.fullpath.write_text(data, encoding="utf-8")
        except OSError as err:
            errmsg = Error(str(err)).indent(2)
            raise Error(f"Failed to create emulated file '{self.fullpath}':\n{errmsg}") from err

    def open(self, mode: str) -> IO:
        """
        Open the emulated file.

        Args:
            mode: The mode in which to open the file, similar to 'mode' argument the built-in Python
                  'open()' function.

        Returns:
            The file object.
        """

        errmsg_prefix = f"Cannot open file '{self.path}' with mode '{mode}':"

        if self.readonly and any(char in mode for char in "wa+x"):
            raise ErrorPermissionDenied(f"{errmsg_prefix}\n  Permission denied: the file is "
                                        f"read-only", path=self.path, errno=errno.EACCES)

        encoding: str | None
        if "b" in mode:
            encoding = None
        else:
            encoding = "utf-8"

        try:
            # pylint: disable-next=consider-using-with
            fobj = open(self.fullpath, mode, encoding=encoding)
        except PermissionError as err:
            errmsg = Error(str(err)).indent(2)
            raise ErrorPermissionDenied(f"{errmsg_prefix}\n{errmsg}", path=self.path,
                                        errno=err.errno) from None
        except FileNotFoundError as err:
            errmsg = Error(str(err)).indent(2)
            raise ErrorNotFound(f"{errmsg_prefix}\n{errmsg}", path=self.path,
                                errno=err.errno) from None
        except OSError as err:
            errmsg = Error(str(err)).indent(2)
            raise ErrorIO(f"{errmsg_prefix}\n{errmsg}", path=self.path, errno=err.errno) from None

        return fobj
