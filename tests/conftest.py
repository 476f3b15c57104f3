#!/usr/bin/env python
#
# Copyright (C) 2022-2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause
#
# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Author: Antti Laakso <antti.laakso@linux.intel.com>
#         Artem Bityutskiy <artem.bityutskiy@linux.intel.com>

"""This configuration file adds the custom '--dataset' option for the tests."""

from pathlib import Path
import pytest
import common

def pytest_addoption(parser):
    """Add custom pytest options."""

    text = """This option specifies the dataset to use for emulation. By default, all datasets are
              used. Please, find the available datasets in the "emul-data" subdirectory."""
    parser.addoption("-D", "--dataset", dest="dataset", default="all", help=text)

def get_datasets():
    """Find all directories in 'tests/emul-data' directory and yield the directory name."""

    basepath = common.get_emul_data_path()
    for datapath in sorted(basepath.iterdir()):
        if datapath.is_dir():
            yield datapath.name

def pytest_generate_tests(metafunc):
    """Run the tests that use the 'dataset' argument once for every requested dataset."""

    if "dataset" not in metafunc.fixturenames:
        return

    dataset = metafunc.config.getoption("dataset")
    if dataset == "all":
        params = list(get_datasets())
    else:
        params = [dataset]

    metafunc.parametrize("dataset", params, scope="module")

def pytest_configure(config):
    """Verify the existence of requested dataset."""

    dataset = config.getoption("dataset")

    if dataset != "all":
        path = Path(common.get_emul_data_path(dataset))

        if not path.exists():
            raise pytest.exit(f"Did not find dataset '{dataset}'.")

    print(f"Test parameters: dataset: '{dataset}'")
