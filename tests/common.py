#!/usr/bin/env python3
#
# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause
#
# Author: Antti Laakso <antti.laakso@linux.intel.com>
#         Artem Bityutskiy <artem.bityutskiy@linux.intel.com>

"""Common functions for cpufreqctl tests."""

from  __future__ import annotations # Remove when switching to Python 3.10+.

from pathlib import Path
import typing
from cpufreqlibs import CPURange
from cpufreqlibs.helperlibs import EmulFileTree
from cpufreqlibs.helperlibs.Exceptions import Error

if typing.TYPE_CHECKING:
    from typing import Mapping

    # The sysfs files of a generated system: read-write files and read-only files.
    SysfsFilesType = tuple[dict[str, str], dict[str, str]]

# Attribute values of generated systems.
MAX_FREQ = 3000000
MIN_FREQ = 1000000
CUR_FREQ = 2000000
AVAIL_FREQS = (3000000, 2000000, 1000000)
GOVERNOR = "performance"

def get_emul_data_path(dataset: str = "") -> Path:
    """
    Get the path to the emulation data for the specified dataset.

    Args:
        dataset: Name of the dataset for which to retrieve the path. Return the datasets directory
                 path if empty.

    Returns:
        Path to the emulation data directory for the specified dataset.
    """

    return Path(__file__).parent.resolve() / "emul-data" / dataset

def get_ftree(dataset: str) -> EmulFileTree.EmulFileTree:
    """
    Create and return an emulated file tree initialized with a dataset.

    Args:
        dataset: Name of the dataset to load.

    Returns:
        An 'EmulFileTree' object.
    """

    ftree = EmulFileTree.EmulFileTree(name=f"emulation:{dataset}")
    try:
        ftree.init_emul_data(get_emul_data_path(dataset))
    except Error:
        ftree.close()
        raise

    return ftree

def gen_sysfs_files(ncpus: int,
                    smt: int = 1,
                    driver: str = "acpi-cpufreq",
                    offline: tuple[int, ...] = ()) -> SysfsFilesType:
    """
    Generate CPU sysfs files of a system.

    Args:
        ncpus: Count of CPUs in the system.
        smt: Count of hyperthreads per core, core siblings are numbered consecutively.
        driver: Name of the CPU frequency driver.
        offline: CPU numbers to mark offline.

    Returns:
        A tuple of two dictionaries, with the read-write and the read-only files. The keys are file
        paths, the values are file contents.
    """

    rw: dict[str, str] = {}
    ro: dict[str, str] = {}

    ro["present"] = f"{CPURange.rangify(range(ncpus))}\n"
    # The contents is ignored, the emulated 'online' file is generated from 'cpu<N>/online'.
    ro["online"] = ""

    freqs = " ".join(str(freq) for freq in AVAIL_FREQS)
    for cpu in range(ncpus):
        path = f"cpu{cpu}/cpufreq"
        rw[f"{path}/scaling_governor"] = f"{GOVERNOR}\n"
        rw[f"{path}/scaling_max_freq"] = f"{MAX_FREQ}\n"
        rw[f"{path}/scaling_min_freq"] = f"{MIN_FREQ}\n"
        rw[f"{path}/scaling_setspeed"] = "<unsupported>\n"
        ro[f"{path}/scaling_cur_freq"] = f"{CUR_FREQ}\n"
        ro[f"{path}/scaling_driver"] = f"{driver}\n"
        ro[f"{path}/scaling_available_frequencies"] = f"{freqs} \n"
        ro[f"{path}/scaling_available_governors"] = "performance powersave schedutil\n"

        first = cpu - cpu % smt
        siblings = CPURange.rangify(range(first, min(first + smt, ncpus)))
        ro[f"cpu{cpu}/topology/thread_siblings_list"] = f"{siblings}\n"

        if cpu != 0:
            rw[f"cpu{cpu}/online"] = "0\n" if cpu in offline else "1\n"

    return rw, ro

def build_ftree(rw: Mapping[str, str | bytes],
                ro: Mapping[str, str | bytes] | None = None) -> EmulFileTree.EmulFileTree:
    """
    Create and return an emulated file tree with the specified files.

    Args:
        rw: The read-write files, a dictionary with file paths as keys and file contents as values.
        ro: The read-only files, same format as 'rw'.

    Returns:
        An 'EmulFileTree' object.
    """

    ftree = EmulFileTree.EmulFileTree(name="emulation:generated")
    try:
        ftree.add_files(rw)
        if ro:
            ftree.add_files(ro, readonly=True)
    except Error:
        ftree.close()
        raise

    return ftree

def make_readonly(files: SysfsFilesType, path: str):
    """
    Move a file from the read-write files to the read-only files, so that writing to it fails.

    Args:
        files: The generated sysfs files, as returned by 'gen_sysfs_files()'.
        path: Path of the file to move.
    """

    rw, ro = files
    ro[path] = rw.pop(path)
