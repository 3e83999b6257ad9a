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

"""This configuration file provides the fake cpufreq sysfs fixtures for the tests."""

from pathlib import Path
import pytest
import common

@pytest.fixture(name="sysfs_root")
def get_sysfs_root(tmp_path: Path) -> Path:
    """
    Create a fake cpufreq policies directory with 4 policies ('policy0' to 'policy3') and all
    attribute files in default state (refer to 'common.DEFAULT_ATTRS').

    Args:
        tmp_path: A temporary directory path for testing (provided by the pytest framework).

    Returns:
        Path to the fake cpufreq policies directory.
    """

    return common.build_sysfs(tmp_path / "cpufreq")
