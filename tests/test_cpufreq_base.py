# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause
#
# Author: Artem Bityutskiy <artem.bityutskiy@linux.intel.com>

"""
Test the per-CPU sysfs attributes access in the '_CPUFreqBase' module.
"""

from  __future__ import annotations # Remove when switching to Python 3.10+.

import typing
from pathlib import Path
import pytest
import common
from cpufreqlibs import _CPUFreqBase, _SysfsIO
from cpufreqlibs.helperlibs.Exceptions import ErrorIO, ErrorBadFormat, ErrorNotFound
from cpufreqlibs.helperlibs.Exceptions import ErrorPermissionDenied

if typing.TYPE_CHECKING:
    from typing import Generator

class _RecordingSysfsIO(_SysfsIO.SysfsIO):
    """A 'SysfsIO' class which records the paths of all write attempts."""

    def __init__(self, *args, **kwargs):
        """Initialize a class instance."""

        super().__init__(*args, **kwargs)
        self.writes: list[str] = []

    def write(self, path, val, what="", cpu=None, attr=None):
        """Record the write attempt and write."""

        self.writes.append(str(path))
        super().write(path, val, what=what, cpu=cpu, attr=attr)

@pytest.fixture(name="base")
def get_base(dataset: str) -> Generator[_CPUFreqBase.CPUFreqBase, None, None]:
    """
    Yield a 'CPUFreqBase' object for an emulated system.

    Args:
        dataset: Name of the dataset to emulate.

    Yields:
        A 'CPUFreqBase' object.
    """

    with common.get_ftree(dataset) as ftree, _CPUFreqBase.CPUFreqBase(ftree=ftree) as base:
        yield base

def test_get_variable_all(base: _CPUFreqBase.CPUFreqBase):
    """
    Test that reading an attribute of all CPUs covers exactly the online CPUs.

    Args:
        base: The 'CPUFreqBase' object to test.
    """

    online = base.get_cpus("online")

    for name in ("scaling_governor", "scaling_cur_freq", "scaling_max_freq", "scaling_driver"):
        result = base.get_variable_all(name)
        assert list(result) == online

    for cpu, freq in base.get_variable_all("scaling_max_freq").items():
        assert isinstance(freq, int)
        assert freq == base.get_variable(cpu, "scaling_max_freq")

    # The type can be overridden.
    for freq in base.get_variable_all("scaling_max_freq", vtype="str").values():
        assert isinstance(freq, str)
        assert freq.isdigit()

def test_set_variable_all(base: _CPUFreqBase.CPUFreqBase):
    """
    Test that writing an attribute of all CPUs can be read back.

    Args:
        base: The 'CPUFreqBase' object to test.
    """

    online = base.get_cpus("online")

    base.set_variable_all("scaling_governor", "performance")
    for cpu in online:
        assert base.get_variable(cpu, "scaling_governor") == "performance"

    base.set_variable_all("scaling_max_freq", 1000000)
    assert base.get_variable_all("scaling_max_freq") == {cpu: 1000000 for cpu in online}

def test_get_variable_types():
    """Test parsing attribute values of different types."""

    rw = {"cpu0/cpufreq/scaling_governor": " powersave \n",
          "cpu0/cpufreq/energy_performance_preference": "balance_power\n"}
    ro = {"cpu0/cpufreq/scaling_cur_freq": "1200000\n",
          "cpu0/cpufreq/scaling_available_frequencies": "3000000 2000000 1000000 \n",
          "cpu0/cpufreq/scaling_available_governors": "performance powersave\n",
          "cpu0/topology/thread_siblings_list": "0,4\n",
          "cpu1/online": "1\n",
          "cpu1/cpufreq/scaling_cur_freq": "1.2GHz\n"}

    with common.build_ftree(rw, ro) as ftree, _CPUFreqBase.CPUFreqBase(ftree=ftree) as base:
        assert base.get_variable(0, "scaling_governor") == "powersave"
        assert base.get_variable(0, "scaling_cur_freq") == 1200000
        assert base.get_variable(0, "scaling_available_frequencies") == [3000000, 2000000, 1000000]
        assert base.get_variable(0, "scaling_available_governors") == ["performance", "powersave"]
        assert base.get_variable(0, "thread_siblings_list") == [0, 4]
        assert base.get_variable(1, "online") == 1

        # Attributes missing in the attributes table are strings in the 'cpufreq' sub-directory.
        assert base.get_variable(0, "energy_performance_preference") == "balance_power"
        base.set_variable(0, "energy_performance_preference", "performance")
        assert ftree.read_emul_file("cpu0/cpufreq/energy_performance_preference") == "performance"

        with pytest.raises(ErrorBadFormat) as excinfo:
            base.get_variable(1, "scaling_cur_freq")

        assert excinfo.value.cpu == 1
        assert excinfo.value.attr == "scaling_cur_freq"
        assert excinfo.value.path == Path("cpu1/cpufreq/scaling_cur_freq")

        with pytest.raises(ErrorNotFound) as notfound:
            base.get_variable(2, "scaling_cur_freq")

        assert notfound.value.cpu == 2
        assert notfound.value.attr == "scaling_cur_freq"

def test_set_variable_no_newline():
    """Test that values are written as is, converted to strings."""

    rw = {"cpu0/cpufreq/scaling_min_freq": "800000\n"}

    with common.build_ftree(rw) as ftree, _CPUFreqBase.CPUFreqBase(ftree=ftree) as base:
        base.set_variable(0, "scaling_min_freq", 1600000)
        assert ftree.read_emul_file("cpu0/cpufreq/scaling_min_freq") == "1600000"
        assert base.get_variable(0, "scaling_min_freq") == 1600000

def test_set_variable_all_partial_failure():
    """
    Test that a failure to write an attribute of the third out of five online CPUs stops the
    operation: the first two CPUs are modified, the last two CPUs are not attempted.
    """

    files = common.gen_sysfs_files(5)
    common.make_readonly(files, "cpu2/cpufreq/scaling_governor")

    with common.build_ftree(*files) as ftree, \
         _RecordingSysfsIO(ftree=ftree) as sysfs_io, \
         _CPUFreqBase.CPUFreqBase(sysfs_io=sysfs_io) as base:
        assert base.get_cpus("online") == [0, 1, 2, 3, 4]

        with pytest.raises(ErrorIO) as excinfo:
            base.set_variable_all("scaling_governor", "powersave")

        assert excinfo.value.cpu == 2
        assert excinfo.value.attr == "scaling_governor"
        assert sysfs_io.writes == [f"cpu{cpu}/cpufreq/scaling_governor" for cpu in (0, 1, 2)]

        governors = base.get_variable_all("scaling_governor")
        assert governors == {0: "powersave", 1: "powersave", 2: common.GOVERNOR,
                             3: common.GOVERNOR, 4: common.GOVERNOR}

def test_get_variable_all_failure():
    """Test that a failure to read an attribute of one CPU fails the entire operation."""

    rw, ro = common.gen_sysfs_files(4)
    ro["cpu3/cpufreq/scaling_cur_freq"] = "\n"

    with common.build_ftree(rw, ro) as ftree, _CPUFreqBase.CPUFreqBase(ftree=ftree) as base:
        with pytest.raises(ErrorBadFormat) as excinfo:
            base.get_variable_all("scaling_cur_freq")

        assert excinfo.value.cpu == 3

def test_get_cpus():
    """Test reading CPU list files."""

    ro = {"present": "0-3,8\n", "possible": "0-\n", "isolated": "\n"}

    with common.build_ftree({}, ro) as ftree, _CPUFreqBase.CPUFreqBase(ftree=ftree) as base:
        assert base.get_cpus("present") == [0, 1, 2, 3, 8]

        for fname in ("possible", "isolated"):
            with pytest.raises(ErrorBadFormat) as excinfo:
                base.get_cpus(fname)

            assert excinfo.value.attr == fname
            assert excinfo.value.path == Path(fname)

        with pytest.raises(ErrorNotFound):
            base.get_cpus("offline")

def test_get_variable_bad_integers():
    """
    Test that integer attributes accept only unsigned decimal integers: signs, underscores, and
    non-ASCII digits are rejected, even though the Python 'int()' function accepts them.
    """

    badvals = ("-1000", "1_000", "+5", "١٢")

    for badval in badvals:
        rw = {"cpu0/cpufreq/scaling_max_freq": f"{badval}\n"}
        ro = {"cpu0/cpufreq/scaling_available_frequencies": f"3000000 {badval} 1000000\n"}

        with common.build_ftree(rw, ro) as ftree, _CPUFreqBase.CPUFreqBase(ftree=ftree) as base:
            for name in ("scaling_max_freq", "scaling_available_frequencies"):
                with pytest.raises(ErrorBadFormat) as excinfo:
                    base.get_variable(0, name)

                assert excinfo.value.cpu == 0
                assert excinfo.value.attr == name
                assert excinfo.value.path == Path(f"cpu0/cpufreq/{name}")
                assert badval in str(excinfo.value)

            # The string type is not validated.
            assert base.get_variable(0, "scaling_max_freq", vtype="str") == badval

def test_set_variable_read_only():
    """Test that writing a read-only attribute fails without writing the attribute file."""

    files = common.gen_sysfs_files(2)

    # Make the files writable to verify that the attribute is rejected before writing.
    rw = {**files[0], **files[1]}

    with common.build_ftree(rw) as ftree, \
         _RecordingSysfsIO(ftree=ftree) as sysfs_io, \
         _CPUFreqBase.CPUFreqBase(sysfs_io=sysfs_io) as base:
        for name in ("scaling_cur_freq", "scaling_driver", "scaling_available_frequencies"):
            orig = ftree.read_emul_file(f"cpu1/cpufreq/{name}")

            with pytest.raises(ErrorPermissionDenied) as excinfo:
                base.set_variable(1, name, "1000000")

            assert excinfo.value.cpu == 1
            assert excinfo.value.attr == name
            assert excinfo.value.path == Path(f"cpu1/cpufreq/{name}")
            assert ftree.read_emul_file(f"cpu1/cpufreq/{name}") == orig

        with pytest.raises(ErrorPermissionDenied) as excinfo:
            base.set_variable_all("scaling_cur_freq", common.MIN_FREQ)

        assert excinfo.value.cpu == 0
        assert sysfs_io.writes == []
