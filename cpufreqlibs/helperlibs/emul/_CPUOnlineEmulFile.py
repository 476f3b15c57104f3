# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2022-2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause
#
# Authors: Artem Bityutskiy <artem.bityutskiy@linux.intel.com>
#          Antti Laakso <antti.laakso@linux.intel.com>

"""
Provide 'CPUOnlineEmulFile' class to emulate the global CPU online state file ('online' in the root
of the CPU sysfs tree).
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import typing
import types
from pathlib import Path

from cpufreqlibs.helperlibs import Trivial
from cpufreqlibs.helperlibs.emul import _EmulFileBase

if typing.TYPE_CHECKING:
    from typing import IO

def _get_online_cpus(cpus_dir: Path) -> list[int]:
    """
    Scan per-CPU online files and return a list of online CPU numbers.

    Args:
        cpus_dir: The directory containing the per-CPU 'cpu<N>' sub-directories.

    Returns:
        A list of online CPU numbers.
    """

    online_cpus: list[int] = []
    for dirpath in cpus_dir.iterdir():
        # Only process directories matching the "cpu\d+" pattern.
        if not dirpath.name.startswith("cpu") or not dirpath.is_dir():
            continue
        if not Trivial.is_int(dirpath.name[3:]):
            continue

        cpu = int(dirpath.name[3:])

        try:
            with open(dirpath / "online", "r", encoding="utf-8") as fobj:
                data = fobj.read().strip()
        except FileNotFoundError:
            # CPU 0 usually does not have the "online" file, because Linux does not support
            # offlining it. Any CPU with a directory but without the "online" file is online.
            online_cpus.append(cpu)
            continue

        if data == "1":
            online_cpus.append(cpu)

    return online_cpus

def _cpu_online_emul_file_read(self: IO[str]) -> str:
    """
    Implement the 'read()' method of a file object representing the global CPU online file.

    Scan per-CPU online files and format the resulting string as a range of online CPU numbers.

    For example, if there are 4 CPUs and CPU2 is offline, read the following files:
      - 'cpu0/online': "1"
      - 'cpu1/online': "1"
      - 'cpu2/online': "0"
      - 'cpu3/online': "1"

    Return the result as "0-1,3\\n".

    Args:
        self: The file object of the global CPU online file.

    Returns:
        The contents of the global CPU online file.
    """

    cpus_dir = Path(getattr(self, "__emul_cpus_dir"))
    return Trivial.rangify(_get_online_cpus(cpus_dir)) + "\n"

class CPUOnlineEmulFile(_EmulFileBase.EmulFileBase):
    """
    Emulate the global CPU online file. The problem with this file is that when a CPU goes online or
    offline, the contents of the file changes.
    """

    def __init__(self,
                 path: Path,
                 basepath: Path,
                 readonly: bool = True,
                 data: str | bytes | None = None):
        """
        Initialize a class instance.

        Args:
            path: Path to the file to emulate.
            basepath: Path to the base directory (where the emulated files are stored).
            readonly: Whether the emulated file is read-only.
            data: The initial data, not used for reading, the contents are generated from the
                  per-CPU online files.
        """

        super().__init__(path, basepath, readonly=readonly, data=data)

    def open(self, mode: str) -> IO[str]:
        """
        Open the emulated global CPU online file.

        Args:
            mode: The mode in which to open the file, similar to 'mode' argument the built-in Python
                  'open()' function.

        Returns:
            An emulated file object with a patched 'read()' method.
        """

        fobj = super().open(mode)

        # Save the directory with per-CPU sub-directories in the file object.
        setattr(fobj, "__emul_cpus_dir", self.fullpath.parent)
        setattr(fobj, "read", types.MethodType(_cpu_online_emul_file_read, fobj))

        return fobj
