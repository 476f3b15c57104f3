# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2023-2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause
#
# Authors: Artem Bityutskiy <artem.bityutskiy@linux.intel.com>
#          Antti Laakso <antti.laakso@linux.intel.com>

"""
Provide the base class for reading and writing per-CPU sysfs attributes, such as
'cpu0/cpufreq/scaling_governor'.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import re
import typing
from pathlib import Path
from cpufreqlibs import CPURange, CPUFreqVars, _SysfsIO
from cpufreqlibs.helperlibs import Logging, ClassHelpers, Trivial
from cpufreqlibs.helperlibs.Exceptions import Error, ErrorBadFormat, ErrorPermissionDenied

if typing.TYPE_CHECKING:
    from typing import Any
    from cpufreqlibs.helperlibs.FileTree import LocalFileTree
    from cpufreqlibs.CPUFreqVars import VarTypeType

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.cpufreqctl.{__name__}")

# Integer attributes, such as frequencies, are unsigned decimal integers.
_UINT_REGEX = re.compile(r"^[0-9]+$")

def _parse_uint(val: str, what: str) -> int:
    """
    Parse an unsigned decimal integer attribute value.

    Args:
        val: The value to parse.
        what: A string describing the value, for the possible error message.

    Returns:
        The parsed integer.

    Raises:
        ErrorBadFormat: If 'val' is not an unsigned decimal integer.
    """

    if not _UINT_REGEX.match(val):
        raise ErrorBadFormat(f"Bad {what} '{val}': should be an unsigned decimal integer")
    return Trivial.str_to_int(val, what=what)

class CPUFreqBase(ClassHelpers.SimpleCloseContext):
    """
    The base class for reading and writing per-CPU sysfs attributes.

    Public methods overview.

    1. Per-CPU attributes.
        * 'get_variable()' - read and parse an attribute of a CPU.
        * 'set_variable()' - write an attribute of a CPU.
    2. Fan-out over online CPUs.
        * 'get_variable_all()' - read and parse an attribute of every online CPU.
        * 'set_variable_all()' - write an attribute of every online CPU.
    3. CPU lists.
        * 'get_cpus()' - read a CPU list file, such as 'online'.

    Fan-out methods take a snapshot of the online CPUs once, at the beginning, and process CPUs in
    the snapshot order. The first error is propagated to the caller: CPUs processed before the
    failure are not reverted, CPUs after the failure are not processed.
    """

    def __init__(self,
                 ftree: LocalFileTree | None = None,
                 sysfs_io: _SysfsIO.SysfsIO | None = None,
                 loglevel: int | None = None):
        """
        Initialize a class instance.

        Args:
            ftree: The file tree object for the CPU sysfs tree. Use the local file tree with the
                   default root directory if not provided. Ignored if 'sysfs_io' is provided.
            sysfs_io: A '_SysfsIO.SysfsIO' object for sysfs access. Will be created if not provided.
            loglevel: Logging level for progress messages. Defaults to 'DEBUG'.
        """

        if loglevel is None:
            self._loglevel = Logging.DEBUG
        else:
            self._loglevel = loglevel

        self._close_sysfs_io = sysfs_io is None

        self._sysfs_io: _SysfsIO.SysfsIO
        if not sysfs_io:
            self._sysfs_io = _SysfsIO.SysfsIO(ftree=ftree)
        else:
            self._sysfs_io = sysfs_io

    def close(self):
        """Uninitialize the class object."""

        ClassHelpers.close(self, close_attrs=("_sysfs_io",))

    @staticmethod
    def _get_var_info(name: str) -> CPUFreqVars.VarTypedDict:
        """
        Return the description dictionary for attribute 'name'.

        Args:
            name: The attribute (file) name.

        Returns:
            The attribute description dictionary.
        """

        if name in CPUFreqVars.VARS:
            return CPUFreqVars.VARS[name]

        return {"name": name, "subdir": "cpufreq", "type": "str", "writable": True}

    def _get_path(self, cpu: int, name: str) -> Path:
        """
        Construct and return the sysfs path of an attribute of a CPU.

        Args:
            cpu: The CPU number.
            name: The attribute (file) name.

        Returns:
            The attribute file path, relative to the file tree root directory.
        """

        subdir = self._get_var_info(name)["subdir"]
        if subdir:
            return Path(f"cpu{cpu}") / subdir / name
        return Path(f"cpu{cpu}") / name

    @staticmethod
    def _parse(val: str, vtype: VarTypeType, what: str) -> Any:
        """
        Parse an attribute value.

        Args:
            val: The attribute value to parse, white-spaces already stripped.
            vtype: The type to parse the value to.
            what: A string describing the value, for the possible error message.

        Returns:
            The parsed value.

        Raises:
            ErrorBadFormat: If 'val' does not match the 'vtype' type.
        """

        if vtype == "str":
            return val
        if vtype == "int":
            return _parse_uint(val, what)
        if vtype == "list[int]":
            return [_parse_uint(item, what) for item in val.split()]
        if vtype == "list[str]":
            return val.split()
        if vtype == "cpus":
            return CPURange.parse_range(val, what=what)

        raise Error(f"BUG: unsupported attribute type '{vtype}'")

    def get_variable(self, cpu: int, name: str, vtype: VarTypeType | None = None) -> Any:
        """
        Read and parse an attribute of a CPU.

        Args:
            cpu: The CPU number.
            name: The attribute (file) name, e.g., 'scaling_governor'.
            vtype: The type to parse the value to. The default is the type from
                   'CPUFreqVars.VARS', or "str" for attributes not in 'CPUFreqVars.VARS'.

        Returns:
            The parsed attribute value.

        Raises:
            ErrorIO: If the attribute file cannot be read.
            ErrorBadEncoding: If the attribute file contents is not valid text.
            ErrorBadFormat: If the attribute value does not match the type.
        """

        info = self._get_var_info(name)
        if not vtype:
            vtype = info["type"]

        path = self._get_path(cpu, name)
        what = f"{info['name']} of CPU {cpu}"
        val = self._sysfs_io.read(path, what=what, cpu=cpu, attr=name).strip()

        try:
            return self._parse(val, vtype, what)
        except ErrorBadFormat as err:
            raise ErrorBadFormat(f"Bad contents of sysfs file '{path}'{self._sysfs_io.ftree.basemsg}:"
                                 f"\n{err.indent(2)}", cpu=cpu, attr=name, path=path) from err

    def set_variable(self, cpu: int, name: str, value: Any):
        """
        Write an attribute of a CPU. The value is not read back and not verified: the kernel may
        reject the value with an I/O error, or silently adjust it, e.g., clamp a frequency.

        Args:
            cpu: The CPU number.
            name: The attribute (file) name, e.g., 'scaling_governor'.
            value: The value to write, converted to a string with 'str()'.

        Raises:
            ErrorPermissionDenied: If the attribute is read-only according to 'CPUFreqVars.VARS'.
            ErrorIO: If the attribute file cannot be written.
        """

        info = self._get_var_info(name)
        path = self._get_path(cpu, name)

        if not info["writable"]:
            raise ErrorPermissionDenied(f"Cannot write {info['name']} of CPU {cpu}: sysfs file "
                                        f"'{path}'{self._sysfs_io.ftree.basemsg} is read-only",
                                        cpu=cpu, attr=name, path=path)

        what = f"{info['name']} of CPU {cpu}"
        self._sysfs_io.write(path, str(value), what=what, cpu=cpu, attr=name)

    def get_cpus(self, fname: str) -> list[int]:
        """
        Read a CPU list file in the file tree root directory, such as 'online' or 'present'.

        Args:
            fname: Name of the CPU list file.

        Returns:
            List of CPU numbers, in the order they appear in the file. Duplicates are not removed.

        Raises:
            ErrorIO: If the file cannot be read.
            ErrorBadFormat: If the file contents is not a valid CPU list.
        """

        what = f"{fname} CPUs list"
        val = self._sysfs_io.read(fname, what=what, attr=fname)

        try:
            return CPURange.parse_range(val, what=what)
        except ErrorBadFormat as err:
            raise ErrorBadFormat(f"Bad contents of sysfs file '{fname}'"
                                 f"{self._sysfs_io.ftree.basemsg}:\n{err.indent(2)}",
                                 attr=fname, path=Path(fname)) from err

    def get_variable_all(self, name: str, vtype: VarTypeType | None = None) -> dict[int, Any]:
        """
        Read and parse an attribute of every online CPU.

        Args:
            name: The attribute (file) name, e.g., 'scaling_governor'.
            vtype: The type to parse the values to, same as in 'get_variable()'.

        Returns:
            A dictionary with CPU numbers as keys and parsed attribute values as values. The keys
            are the online CPUs at the time of the call.

        Raises:
            ErrorIO: If an attribute file cannot be read.
            ErrorBadEncoding: If an attribute file contents is not valid text.
            ErrorBadFormat: If an attribute value does not match the type, or the online CPUs list
                            is malformed.
        """

        result: dict[int, Any] = {}
        for cpu in self.get_cpus("online"):
            result[cpu] = self.get_variable(cpu, name, vtype=vtype)

        return result

    def set_variable_all(self, name: str, value: Any):
        """
        Write an attribute of every online CPU. Stop at the first failure: the attribute of CPUs
        processed before the failure stays modified.

        Args:
            name: The attribute (file) name, e.g., 'scaling_governor'.
            value: The value to write, converted to a string with 'str()'.

        Raises:
            ErrorIO: If an attribute file cannot be written.
            ErrorBadFormat: If the online CPUs list is malformed.
        """

        cpus = self.get_cpus("online")

        _LOG.log(self._loglevel, "Setting %s to '%s' for CPUs %s",
                 self._get_var_info(name)["name"], value, CPURange.rangify(cpus))

        for cpu in cpus:
            self.set_variable(cpu, name, value)
