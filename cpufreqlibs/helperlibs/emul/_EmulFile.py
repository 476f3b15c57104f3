# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2024-2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause
#
# Authors: Artem Bityutskiy <artem.bityutskiy@linux.intel.com>
#          Adam Hawley <adam.james.hawley@intel.com>

"""Provide the factory function to create emulated file objects."""

from __future__ import annotations # Remove when switching to Python 3.10+.

import typing
from pathlib import Path

from cpufreqlibs.helperlibs.emul import _EmulFileBase, _RWSysfsEmulFile, _CPUOnlineEmulFile

if typing.TYPE_CHECKING:
    from typing import Union

    EmulFileType = Union[_EmulFileBase.EmulFileBase,
                         _RWSysfsEmulFile.RWSysfsEmulFile,
                         _CPUOnlineEmulFile.CPUOnlineEmulFile]

def get_emul_file(path: str,
                  basepath: Path,
                  data: str | bytes | None = None,
                  readonly: bool = False) -> EmulFileType:
    """
    Create and return an emulated file object for the specified path.

    Args:
        path: Path to the file to emulate, relative to the emulated file tree root.
        basepath: Directory where emulated files should be created.
        data: Optional data to populate the emulated file with. Create an empty file if "", do not
              create the file if None.
        readonly: Whether the emulated file should be read-only.

    Returns:
        An emulated file object representing the specified file.
    """

    if data is None:
        # A pre-created file in the base directory, or a non-existing file.
        return _EmulFileBase.EmulFileBase(Path(path), basepath, readonly=readonly)

    if path.strip("/") == "online":
        return _CPUOnlineEmulFile.CPUOnlineEmulFile(Path(path), basepath, data=data)

    if readonly:
        return _EmulFileBase.EmulFileBase(Path(path), basepath, readonly=True, data=data)

    return _RWSysfsEmulFile.RWSysfsEmulFile(Path(path), basepath, data=data)
