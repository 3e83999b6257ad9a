# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause
#
# Authors: Antti Laakso <antti.laakso@linux.intel.com>
#          Artem Bityutskiy <artem.bityutskiy@linux.intel.com>

"""Test the 'cpupol' command-line tool."""

from  __future__ import annotations # Remove when switching to Python 3.10+.

from pathlib import Path
import pytest
import common
from cpupollibs import PolicyVars
from cpupollibs.Frequency import KHz
from cpupollibs.helperlibs.Exceptions import Error, ErrorBadFormat, ErrorConstruction
from cpupollibs.helperlibs.Exceptions import ErrorValidation, ErrorBadOrder
from cpupoltool import _Cpupol

def test_get(sysfs_root: Path):
    """Test the 'get' command."""

    results = common.run_cpupol(f"--sysfs-root {sysfs_root} get all gov avail")
    assert [res.pnum for res in results] == [0, 1, 2, 3]
    assert results[0].values == {"scaling_available_governors": ["performance", "powersave"]}

    results = common.run_cpupol(f"--sysfs-root {sysfs_root} get 1:2 freq max --unit MHz")
    assert [res.values for res in results] == [{"scaling_max_freq": KHz(4000000)}] * 2

    results = common.run_cpupol(f"--sysfs-root {sysfs_root} get 0 perf --yaml")
    assert results[0].values == {"energy_performance_preference": "balance_performance"}

    # Global options may follow the command.
    results = common.run_cpupol(f"get 3 freq rmin --sysfs-root {sysfs_root}")
    assert results[0].values == {"cpuinfo_min_freq": KHz(800000)}

def test_case_insensitive(sysfs_root: Path):
    """Test that command verbs and attribute kinds are case-insensitive."""

    results = common.run_cpupol(f"--sysfs-root {sysfs_root} GET all GOV")
    assert [res.values["scaling_governor"] for res in results] == ["powersave"] * 4

    common.run_cpupol(f"--sysfs-root {sysfs_root} Set ALL Gov PERFORMANCE")
    for pnum in range(4):
        assert common.read_attr(sysfs_root, pnum, "scaling_governor") == "performance"

def test_get_unknown(sysfs_root: Path):
    """Test that unknown selectors and policies produce no output and no error."""

    assert common.run_cpupol(f"--sysfs-root {sysfs_root} get all freq bogus") == []
    assert common.run_cpupol(f"--sysfs-root {sysfs_root} get all volt") == []
    assert common.run_cpupol(f"--sysfs-root {sysfs_root} get 8 gov") == []

def test_set_freq(sysfs_root: Path):
    """Test the 'set' command for frequency limits."""

    results = common.run_cpupol(f"--sysfs-root {sysfs_root} set 0,1 freq 1.0:2.0")
    assert [res.pnum for res in results] == [0, 1]

    for pnum in (0, 1):
        assert common.read_attr(sysfs_root, pnum, "scaling_min_freq") == "1000000"
        assert common.read_attr(sysfs_root, pnum, "scaling_max_freq") == "2000000"
    assert common.read_attr(sysfs_root, 2, "scaling_max_freq") == "4000000"

    # The min. frequency is set first, and it exceeds the current max. frequency.
    common.run_cpupol(f"--sysfs-root {sysfs_root} set 0 freq 2.5:3.0", exp_exc=ErrorBadOrder)
    assert common.read_attr(sysfs_root, 0, "scaling_max_freq") == "2000000"

    common.run_cpupol(f"--sysfs-root {sysfs_root} set 0 freq :3.0")
    common.run_cpupol(f"--sysfs-root {sysfs_root} set 0 freq 2.5:3.0")
    assert common.read_attr(sysfs_root, 0, "scaling_min_freq") == "2500000"

def test_set_bad(sysfs_root: Path):
    """Test bad 'set' command arguments."""

    common.run_cpupol(f"--sysfs-root {sysfs_root} set all volt 1", exp_exc=ErrorBadFormat)
    common.run_cpupol(f"--sysfs-root {sysfs_root} set all freq 2.5", exp_exc=ErrorBadFormat)
    common.run_cpupol(f"--sysfs-root {sysfs_root} set 3:1 gov powersave", exp_exc=ErrorBadFormat)
    common.run_cpupol(f"--sysfs-root {sysfs_root} set all gov ondemand", exp_exc=ErrorValidation)
    common.run_cpupol(f"--sysfs-root {sysfs_root} set all speed 1.5", exp_exc=ErrorValidation)

    # Unknown options.
    common.run_cpupol(f"--sysfs-root {sysfs_root} get all gov --bogus", exp_exc=Error)

    # Unknown commands.
    common.run_cpupol(f"--sysfs-root {sysfs_root} gte all gov", exp_exc=Error)
    common.run_cpupol(f"--sysfs-root {sysfs_root}", exp_exc=Error)

def test_list(sysfs_root: Path):
    """Test the 'list' command."""

    results = common.run_cpupol(f"--sysfs-root {sysfs_root} list")
    assert [res.pnum for res in results] == [0, 1, 2, 3]
    assert list(results[0].values) == list(PolicyVars.ATTRS)

    results = common.run_cpupol(f"--sysfs-root {sysfs_root} list 2 --yaml --unit KHz")
    assert len(results) == 1
    assert results[0].values["scaling_setspeed"] is None

def test_skip_attr_check(tmp_path: Path):
    """Test policy directories without EPP attribute files."""

    skip = ("energy_performance_preference", "energy_performance_available_preferences")
    root = common.build_sysfs(tmp_path / "cpufreq", pnums=(0, 1), skip=skip)

    common.run_cpupol(f"--sysfs-root {root} list", exp_exc=ErrorConstruction)

    results = common.run_cpupol(f"--sysfs-root {root} --skip-attr-check list")
    assert results[1].values["energy_performance_preference"] is None
    assert results[1].values["scaling_governor"] == "powersave"

def test_sysfs_root_envvar(sysfs_root: Path, monkeypatch: pytest.MonkeyPatch):
    """Test specifying the cpufreq policies directory with the environment variable."""

    monkeypatch.setenv(_Cpupol.SYSFS_ROOT_ENVVAR, str(sysfs_root))

    results = common.run_cpupol("get 0 freq min")
    assert results[0].values == {"scaling_min_freq": KHz(1000000)}

    # The option has priority over the environment variable.
    common.run_cpupol(f"--sysfs-root {sysfs_root}/nonexistent get 0 freq min",
                      exp_exc=ErrorConstruction)

def test_no_policies(tmp_path: Path):
    """Test a cpufreq policies directory without policies."""

    root = tmp_path / "cpufreq"
    root.mkdir()

    common.run_cpupol(f"--sysfs-root {root} list", exp_exc=ErrorConstruction)
    common.run_cpupol(f"--sysfs-root {tmp_path}/nonexistent list", exp_exc=ErrorConstruction)
