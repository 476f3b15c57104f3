# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause
#
# Author: Artem Bityutskiy <artem.bityutskiy@linux.intel.com>

"""
Provide API for controlling CPU frequency scaling and CPU hotplug via the Linux cpufreq sysfs
interface.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import sys
import typing
from pathlib import Path
from cpufreqlibs import CPURange, CPUFreqVars, _CPUFreqBase
from cpufreqlibs.helperlibs import Logging, Trivial
from cpufreqlibs.helperlibs.Exceptions import ErrorNotFound, ErrorBadFormat
from cpufreqlibs.helperlibs.Exceptions import ErrorUnsupportedPlatform, ErrorUnsupportedDriver

if typing.TYPE_CHECKING:
    from typing import Iterable
    from cpufreqlibs._SysfsIO import SysfsIO
    from cpufreqlibs.helperlibs.FileTree import LocalFileTree

_VERSION = "0.3.0"

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.cpufreqctl.{__name__}")

class CPUFreq(_CPUFreqBase.CPUFreqBase):
    """
    Provide API for controlling CPU frequency scaling and CPU hotplug.

    Public methods overview.

    1. CPU lists.
        * 'online()' - online CPUs.
        * 'present()' - present CPUs.
        * 'is_online()' - check if a CPU is online.
    2. Per-CPU queries, all return a dictionary indexed by online CPU numbers.
        * 'governors()' - current CPU frequency governors.
        * 'available_governors()' - available CPU frequency governors.
        * 'frequencies()' - current CPU frequencies.
        * 'max_frequencies()', 'min_frequencies()' - CPU frequency limits.
        * 'available_frequencies()' - available CPU frequencies.
        * 'drivers()' - CPU frequency drivers.
    3. Bulk settings, applied to all online CPUs.
        * 'set_frequencies()' - pin CPU frequency.
        * 'set_max_frequencies()', 'set_min_frequencies()' - set CPU frequency limits.
        * 'set_governors()' - set CPU frequency governor.
    4. CPU hotplug.
        * 'enable()', 'disable()' - online or offline a CPU.
        * 'enable_all()', 'disable_all()' - online or offline all present CPUs except for CPU 0.
        * 'disable_hyperthread()' - offline hyperthread siblings.
    5. 'reset()' - reset CPU frequency settings to the defaults.

    Frequencies are in kHz. Values are not validated: they are written to sysfs as is, and it is up
    to the kernel to accept, reject, or adjust them. Bulk operations are not atomic, they stop at the
    first failure and do not revert the already applied changes.
    """

    def __init__(self,
                 ftree: LocalFileTree | None = None,
                 sysfs_io: SysfsIO | None = None,
                 drivers: Iterable[str] | None = None,
                 platname: str | None = None,
                 loglevel: int | None = None):
        """
        Initialize a class instance.

        Args:
            ftree: The file tree object for the CPU sysfs tree. Use the local file tree with the
                   default root directory if not provided. Ignored if 'sysfs_io' is provided.
            sysfs_io: A '_SysfsIO.SysfsIO' object for sysfs access. Will be created if not provided.
            drivers: Names of the supported CPU frequency drivers. Defaults to
                     'CPUFreqVars.SUPPORTED_DRIVERS'.
            platname: The operating system name, in the 'sys.platform' format. Defaults to
                      'sys.platform'.
            loglevel: Logging level for progress messages. Defaults to 'DEBUG'.

        Raises:
            ErrorUnsupportedPlatform: If the operating system is not Linux.
            ErrorUnsupportedDriver: If the CPU frequency driver of CPU 0 is not supported.
            ErrorIO: If the CPU frequency driver of CPU 0 cannot be read.
        """

        if platname is None:
            platname = sys.platform

        if not platname.startswith("linux"):
            raise ErrorUnsupportedPlatform(f"Unsupported platform '{platname}': only Linux is "
                                           f"supported")

        super().__init__(ftree=ftree, sysfs_io=sysfs_io, loglevel=loglevel)

        if drivers is None:
            self._drivers = CPUFreqVars.SUPPORTED_DRIVERS
        else:
            self._drivers = tuple(drivers)

        self._check_driver()

    def _check_driver(self):
        """Verify that the CPU frequency driver of CPU 0 is supported."""

        driver = self.get_variable(0, "scaling_driver")
        if driver not in self._drivers:
            drivers = ", ".join(self._drivers)
            raise ErrorUnsupportedDriver(f"Unsupported CPU frequency driver '{driver}'"
                                         f"{self._sysfs_io.ftree.basemsg}, supported drivers are: "
                                         f"{drivers}")

        _LOG.debug("CPU frequency driver%s: %s", self._sysfs_io.ftree.basemsg, driver)

    def online(self) -> list[int]:
        """
        Return the list of online CPUs.

        Returns:
            List of online CPU numbers, in the order of the 'online' sysfs file.
        """

        return self.get_cpus("online")

    def present(self) -> list[int]:
        """
        Return the list of present CPUs, including offline CPUs.

        Returns:
            List of present CPU numbers, in the order of the 'present' sysfs file.
        """

        return self.get_cpus("present")

    def is_online(self, cpu: int) -> bool:
        """
        Check if a CPU is online.

        Args:
            cpu: CPU number to check.

        Returns:
            True if the CPU is online, False otherwise.

        Raises:
            ErrorNotFound: If the CPU does not exist.
            ErrorBadFormat: If the CPU online state is not "0" or "1".

        Note:
            CPUs that do not support hotplug, usually CPU 0, have no 'online' file. They are always
            online.
        """

        try:
            state = self.get_variable(cpu, "online")
        except ErrorNotFound:
            if not self._sysfs_io.ftree.is_dir(Path(f"cpu{cpu}")):
                raise
            return True

        if state not in (0, 1):
            path = self._get_path(cpu, "online")
            raise ErrorBadFormat(f"Unexpected value '{state}' in '{path}'"
                                 f"{self._sysfs_io.ftree.basemsg}", cpu=cpu, attr="online",
                                 path=path)
        return state == 1

    def governors(self) -> dict[int, str]:
        """Return a dictionary of current CPU frequency governors indexed by online CPU numbers."""

        return self.get_variable_all("scaling_governor")

    def available_governors(self) -> dict[int, list[str]]:
        """Return a dictionary of available CPU frequency governors lists indexed by online CPUs."""

        return self.get_variable_all("scaling_available_governors")

    def frequencies(self) -> dict[int, int]:
        """Return a dictionary of current CPU frequencies (kHz) indexed by online CPU numbers."""

        return self.get_variable_all("scaling_cur_freq")

    def max_frequencies(self) -> dict[int, int]:
        """Return a dictionary of max. CPU frequency limits (kHz) indexed by online CPU numbers."""

        return self.get_variable_all("scaling_max_freq")

    def min_frequencies(self) -> dict[int, int]:
        """Return a dictionary of min. CPU frequency limits (kHz) indexed by online CPU numbers."""

        return self.get_variable_all("scaling_min_freq")

    def available_frequencies(self) -> dict[int, list[int]]:
        """
        Return available CPU frequencies.

        Returns:
            A dictionary indexed by online CPU numbers, values are lists of available CPU
            frequencies in kHz, in the sysfs file order.

        Raises:
            ErrorBadFormat: If an available frequency is not a decimal integer.
        """

        return self.get_variable_all("scaling_available_frequencies")

    def drivers(self) -> dict[int, str]:
        """Return a dictionary of CPU frequency driver names indexed by online CPU numbers."""

        return self.get_variable_all("scaling_driver")

    def set_frequencies(self, freq: int):
        """
        Pin the frequency of all online CPUs by setting the requested frequency, the max. and the
        min. frequency limits to 'freq'.

        Args:
            freq: The frequency to set, kHz.

        Note:
            The requested frequency ('scaling_setspeed') is honored only by the 'userspace'
            governor, and the kernel rejects writing it with other governors.
        """

        _LOG.log(self._loglevel, "Pinning frequency of online CPUs to %s kHz", freq)

        self.set_variable_all("scaling_setspeed", freq)
        self.set_variable_all("scaling_max_freq", freq)
        self.set_variable_all("scaling_min_freq", freq)

    def set_max_frequencies(self, freq: int):
        """
        Set the max. frequency limit of all online CPUs.

        Args:
            freq: The frequency to set, kHz.
        """

        self.set_variable_all("scaling_max_freq", freq)

    def set_min_frequencies(self, freq: int):
        """
        Set the min. frequency limit of all online CPUs.

        Args:
            freq: The frequency to set, kHz.
        """

        self.set_variable_all("scaling_min_freq", freq)

    def set_governors(self, governor: str):
        """
        Set the CPU frequency governor of all online CPUs.

        Args:
            governor: Name of the governor to set.

        Raises:
            ErrorIO: If the kernel rejects the governor, e.g., because it is not available.
        """

        self.set_variable_all("scaling_governor", governor)

    def enable(self, cpu: int):
        """
        Bring a CPU online.

        Args:
            cpu: CPU number to online.
        """

        _LOG.log(self._loglevel, "Onlining CPU%d", cpu)
        self.set_variable(cpu, "online", "1")

    def disable(self, cpu: int):
        """
        Take a CPU offline.

        Args:
            cpu: CPU number to offline.
        """

        _LOG.log(self._loglevel, "Offlining CPU%d", cpu)
        self.set_variable(cpu, "online", "0")

    def _get_hotplug_cpus(self) -> list[int]:
        """Return the list of present CPUs except for CPU 0, which is never taken offline."""

        return [cpu for cpu in self.present() if cpu != 0]

    def enable_all(self):
        """
        Bring all present CPUs online, except for CPU 0. Stop at the first failure, the CPUs onlined
        before the failure stay online.
        """

        cpus = self._get_hotplug_cpus()
        _LOG.debug("CPUs to online: %s", CPURange.rangify(cpus))

        for cpu in cpus:
            self.enable(cpu)

    def disable_all(self):
        """
        Take all present CPUs offline, except for CPU 0. Stop at the first failure, the CPUs
        offlined before the failure stay offline.
        """

        cpus = self._get_hotplug_cpus()
        _LOG.debug("CPUs to offline: %s", CPURange.rangify(cpus))

        for cpu in cpus:
            self.disable(cpu)

    def disable_hyperthread(self) -> list[int]:
        """
        Take hyperthread siblings offline, leaving one online CPU per core.

        For every online CPU, read its thread siblings list. The first CPU in the list stays online,
        the other CPUs in the list are hyperthread siblings and are taken offline.

        Returns:
            List of CPU numbers that were taken offline.
        """

        siblings: list[int] = []
        for cpu, cpus in self.get_variable_all("thread_siblings_list").items():
            _LOG.debug("CPU%d hyperthread siblings: %s", cpu, CPURange.rangify(cpus))
            siblings += cpus[1:]

        siblings = Trivial.list_dedup(siblings)
        if not siblings:
            _LOG.log(self._loglevel, "No hyperthread siblings to offline%s",
                     self._sysfs_io.ftree.basemsg)
            return siblings

        _LOG.log(self._loglevel, "Offlining hyperthread siblings: %s", CPURange.rangify(siblings))

        for cpu in siblings:
            self.disable(cpu)

        return siblings

    def reset(self):
        """
        Reset CPU frequency settings to the defaults.
            1. Bring all present CPUs online.
            2. Set the default governor ('schedutil') on all online CPUs.
            3. Set the max. and min. frequency limits of all online CPUs to the highest and the
               lowest available frequency of CPU 0.

        Raises:
            ErrorBadFormat: If CPU 0 has an empty available frequencies list.
        """

        _LOG.log(self._loglevel, "Resetting CPU frequency settings%s",
                 self._sysfs_io.ftree.basemsg)

        self.enable_all()
        self.set_governors(CPUFreqVars.DEFAULT_GOVERNOR)

        freqs = self.get_variable(0, "scaling_available_frequencies")
        if not freqs:
            path = self._get_path(0, "scaling_available_frequencies")
            raise ErrorBadFormat(f"No available frequencies in '{path}'"
                                 f"{self._sysfs_io.ftree.basemsg}", cpu=0,
                                 attr="scaling_available_frequencies", path=path)

        # Setting max. first: the new min. may be above the current max.
        self.set_max_frequencies(max(freqs))
        self.set_min_frequencies(min(freqs))
