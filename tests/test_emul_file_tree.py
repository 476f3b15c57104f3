# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause
#
# Author: Artem Bityutskiy <artem.bityutskiy@linux.intel.com>

"""
Test the emulated CPU sysfs file tree.
"""

from  __future__ import annotations # Remove when switching to Python 3.10+.

from pathlib import Path
import pytest
import common
from cpufreqlibs import CPURange
from cpufreqlibs.helperlibs import EmulFileTree
from cpufreqlibs.helperlibs.Exceptions import Error, ErrorNotFound, ErrorPermissionDenied

def _read(ftree: EmulFileTree.EmulFileTree, path: str) -> str:
    """Read an emulated file via the emulation layer."""

    with ftree.open(path, "r") as fobj:
        return fobj.read()

def test_dataset(dataset: str):
    """
    Test loading a dataset.

    Args:
        dataset: Name of the dataset to test with.
    """

    with common.get_ftree(dataset) as ftree:
        assert ftree.is_dir("cpu0/cpufreq")
        assert ftree.name == f"emulation:{dataset}"
        assert f"emulation:{dataset}" in ftree.basemsg

        present = CPURange.parse_range(_read(ftree, "present"))
        online = CPURange.parse_range(_read(ftree, "online"))
        assert set(online) <= set(present)
        assert 0 in online

        # Inline files values get a newline, like real sysfs files.
        assert _read(ftree, "cpu0/cpufreq/scaling_driver").endswith("\n")

        base = ftree.base

    assert not base.exists(), "The emulation data directory was not removed"

def test_rw_file():
    """Test that writes to read-write emulated files replace the file contents."""

    with common.build_ftree({"cpu0/cpufreq/scaling_governor": "performance\n"}) as ftree:
        with ftree.open("cpu0/cpufreq/scaling_governor", "r+") as fobj:
            fobj.write("ondemand")
            fobj.write("schedutil")

        assert _read(ftree, "cpu0/cpufreq/scaling_governor") == "schedutil"

        with pytest.raises(Error):
            ftree.open("cpu0/cpufreq/scaling_governor", "w")

def test_ro_file():
    """Test that read-only emulated files cannot be opened for writing."""

    with common.build_ftree({}, {"present": "0-1\n"}) as ftree:
        for mode in ("r+", "w", "a"):
            with pytest.raises(ErrorPermissionDenied):
                ftree.open("present", mode)

        assert _read(ftree, "present") == "0-1\n"

        with pytest.raises(ErrorNotFound):
            ftree.open("possible", "r")

def test_online_file():
    """Test that the global 'online' file reflects the per-CPU 'online' files."""

    rw, ro = common.gen_sysfs_files(4)
    with common.build_ftree(rw, ro) as ftree:
        assert _read(ftree, "online") == "0-3\n"

        with ftree.open("cpu2/online", "r+") as fobj:
            fobj.write("0")
        assert _read(ftree, "online") == "0,1,3\n"

        with ftree.open("cpu1/online", "r+") as fobj:
            fobj.write("0")
        assert _read(ftree, "online") == "0,3\n"

        with pytest.raises(ErrorPermissionDenied):
            ftree.open("online", "r+")

def test_add_dir_and_raw_read():
    """Test adding directories and reading emulated files bypassing the emulation."""

    with EmulFileTree.EmulFileTree() as ftree:
        assert ftree.name == "emulated system"

        ftree.add_dir("/cpufreq/policy0")
        assert ftree.is_dir("cpufreq/policy0")

        ftree.add_file("/cpu0/topology/thread_siblings_list", "0\n", readonly=True)
        assert ftree.read_emul_file("cpu0/topology/thread_siblings_list") == "0\n"

        with pytest.raises(Error):
            ftree.read_emul_file("cpu0/topology/core_id")

def _write_dataset(dspath: Path, yaml_text: str, inline_text: str):
    """Create a dataset with one category and one inline files text file."""

    dspath.mkdir()
    (dspath / "cpus.yaml").write_text(yaml_text, encoding="utf-8")
    (dspath / "cpus.txt").write_text(inline_text, encoding="utf-8")

def test_init_emul_data(tmp_path: Path):
    """
    Test loading custom datasets.

    Args:
        tmp_path: A temporary directory path for testing (provided by the pytest framework).
    """

    yaml_text = """
directories:
  - cpu5/topology
inlinefiles:
  - filename: cpus.txt
    separator: ":"
    readonly: true
"""
    inline_text = "# Comment\n\npresent:0-5\ncpu5/topology/core_cpus_list:5\n"

    dspath = tmp_path / "good"
    _write_dataset(dspath, yaml_text, inline_text)

    with EmulFileTree.EmulFileTree() as ftree:
        ftree.init_emul_data(dspath)
        assert ftree.is_dir("cpu5/topology")
        assert _read(ftree, "present") == "0-5\n"
        assert _read(ftree, "cpu5/topology/core_cpus_list") == "5\n"

        with pytest.raises(ErrorPermissionDenied):
            ftree.open("present", "r+")

    dspath = tmp_path / "bad-line"
    _write_dataset(dspath, yaml_text, "present|0-5\n")

    with EmulFileTree.EmulFileTree() as ftree:
        with pytest.raises(Error):
            ftree.init_emul_data(dspath)

        with pytest.raises(Error):
            ftree.init_emul_data(tmp_path / "nonexisting")

        empty = tmp_path / "empty"
        empty.mkdir()
        with pytest.raises(Error):
            ftree.init_emul_data(empty)
