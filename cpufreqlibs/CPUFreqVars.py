# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause
#
# Author: Artem Bityutskiy <artem.bityutskiy@linux.intel.com>

"""
Global variables for the 'CPUFreq' module. This file is separated to allow importing constants
without loading the entire module.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import typing

if typing.TYPE_CHECKING:
    from typing import Final, Literal, TypedDict

    # The per-CPU attribute value types:
    #   - "str": a string, e.g., a governor name.
    #   - "int": a decimal integer, e.g., a frequency in kHz.
    #   - "list[int]": white-space separated decimal integers, e.g., available frequencies.
    #   - "list[str]": white-space separated strings, e.g., available governors.
    #   - "cpus": a CPU list in the Linux kernel range syntax, e.g., thread siblings.
    VarTypeType = Literal["str", "int", "list[int]", "list[str]", "cpus"]

    class VarTypedDict(TypedDict):
        """
        A per-CPU attribute description.

        Attributes:
            name: Human-readable name of the attribute.
            subdir: The sub-directory of the 'cpu<N>' directory containing the attribute file.
            type: The attribute value type.
            writable: Whether the attribute is writable.
        """

        name: str
        subdir: str
        type: VarTypeType
        writable: bool

# The default CPU frequency governor, used when resetting CPU frequency settings.
DEFAULT_GOVERNOR: Final[str] = "schedutil"

# The CPU frequency scaling drivers supported by default.
SUPPORTED_DRIVERS: Final[tuple[str, ...]] = ("acpi-cpufreq", "cpufreq-dt")

# The per-CPU attributes dictionary, indexed by the attribute file name. Attributes which are not in
# this dictionary are assumed to be string attributes in the 'cpufreq' sub-directory.
VARS: Final[dict[str, VarTypedDict]] = {
    "scaling_governor": {
        "name": "CPU frequency governor",
        "subdir": "cpufreq",
        "type": "str",
        "writable": True,
    },
    "scaling_available_governors": {
        "name": "Available CPU frequency governors",
        "subdir": "cpufreq",
        "type": "list[str]",
        "writable": False,
    },
    "scaling_cur_freq": {
        "name": "Current CPU frequency",
        "subdir": "cpufreq",
        "type": "int",
        "writable": False,
    },
    "scaling_max_freq": {
        "name": "Max. CPU frequency",
        "subdir": "cpufreq",
        "type": "int",
        "writable": True,
    },
    "scaling_min_freq": {
        "name": "Min. CPU frequency",
        "subdir": "cpufreq",
        "type": "int",
        "writable": True,
    },
    "scaling_setspeed": {
        "name": "Requested CPU frequency",
        "subdir": "cpufreq",
        "type": "str",
        "writable": True,
    },
    "scaling_available_frequencies": {
        "name": "Available CPU frequencies",
        "subdir": "cpufreq",
        "type": "list[int]",
        "writable": False,
    },
    "scaling_driver": {
        "name": "CPU frequency driver",
        "subdir": "cpufreq",
        "type": "str",
        "writable": False,
    },
    "online": {
        "name": "CPU online state",
        "subdir": "",
        "type": "int",
        "writable": True,
    },
    "thread_siblings_list": {
        "name": "Hyperthread siblings",
        "subdir": "topology",
        "type": "cpus",
        "writable": False,
    },
}
