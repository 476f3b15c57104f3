# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause
#
# Author: Artem Bityutskiy <artem.bityutskiy@linux.intel.com>

"""
Exception types used in this project.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

from pathlib import Path
from typing import Any, Match
import re

class Error(Exception):
    """The base class for all exceptions raised by this project."""

    def __init__(self, msg: str, *args: Any, **kwargs: Any):
        """
        Initialize the exception object.

        Args:
            msg: The exception message.
            *args: Positional arguments for the message.
            **kwargs: Additional keyword arguments, stored as exception object attributes.
        """

        msg = str(msg)
        super().__init__(msg)

        for key, val in kwargs.items():
            setattr(self, key, val)

        if args:
            self.msg = msg % tuple(args)
        else:
            self.msg = msg

    def indent(self, indent: int | str, capitalize: bool = True) -> str:
        """
        Indent/prefix each line in the error message.

        Args:
            indent: Can be an integer or a string. If an integer, each line of the error message is
                    prefixed with the specified number of white spaces. If a string, each line is
                    prefixed with the specified string.
            capitalize: If True, ensures the message starts with a capital letter.

        Returns:
            str: The modified error message.
        """

        def capitalize_mobj(mobj: Match[str]):
            """Capitalize the intended/prefixed message."""

            return mobj.group(1) + mobj.group(2).capitalize()

        if isinstance(indent, int):
            pfx = " " * indent
        else:
            pfx = indent

        msg = pfx + self.msg.replace("\n", f"\n{pfx}")
        if capitalize:
            msg = re.sub(r"^(\s*)(\S)", capitalize_mobj, msg)

        return msg

    def __str__(self):
        """The string representation of the exception."""
        return self.msg

class ErrorNotSupported(Error):
    """Feature/option/etc is not supported."""

class ErrorUnsupportedPlatform(ErrorNotSupported):
    """The operating system is not supported."""

class ErrorUnsupportedDriver(ErrorNotSupported):
    """The CPU frequency scaling driver is not supported."""

class _ErrorCPUAttr(Error):
    """
    The base class for exceptions related to a sysfs attribute of a CPU. The 'cpu', 'attr' and
    'path' attributes are always available, and are 'None' when not applicable.
    """

    def __init__(self,
                 msg: str,
                 *args: Any,
                 cpu: int | None = None,
                 attr: str | None = None,
                 path: Path | None = None,
                 **kwargs: Any):
        """
        Initialize the exception object.

        Args:
            msg: The exception message.
            *args: Positional arguments for the message.
            cpu: CPU number associated with the failed operation.
            attr: Name of the sysfs attribute (file name) associated with the failed operation.
            path: The sysfs file path associated with the failed operation.
            **kwargs: Additional keyword arguments.
        """

        self.cpu = cpu
        self.attr = attr
        self.path = path

        super().__init__(msg, *args, **kwargs)

class ErrorIO(_ErrorCPUAttr):
    """Failed to read or write a file."""

class ErrorNotFound(ErrorIO):
    """Something was not found."""

class ErrorPermissionDenied(ErrorIO):
    """Permission denied."""

class ErrorBadFormat(_ErrorCPUAttr):
    """Bad format of something, e.g., file contents."""

class ErrorBadEncoding(_ErrorCPUAttr):
    """File contents is not valid text."""
