# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause
#
# Author: Artem Bityutskiy <artem.bityutskiy@linux.intel.com>

"""
Test the 'Policy' module.
"""

from  __future__ import annotations # Remove when switching to Python 3.10+.

from pathlib import Path
import pytest
import common
from cpupollibs import Policy
from cpupollibs.Frequency import KHz, MHz, GHz
from cpupollibs.helperlibs.Exceptions import Error, ErrorBadFormat, ErrorConstruction
from cpupollibs.helperlibs.Exceptions import ErrorAttributeIO, ErrorValidation
from cpupollibs.helperlibs.Exceptions import ErrorOutOfRange, ErrorBadOrder

def _close(policies: list[Policy.PolicyDirectory]):
    """Close all policy objects in 'policies'."""

    for policy in policies:
        policy.close()

def test_get_policies(tmp_path: Path):
    """Test that policies are enumerated in policy number order and other entries are skipped."""

    root = common.build_sysfs(tmp_path / "cpufreq", pnums=(0, 1, 2, 10))
    (root / "boost").write_text("1\n", encoding="utf-8")
    (root / "ondemand").mkdir()

    policies = Policy.get_policies(root)
    try:
        assert [policy.policy_number for policy in policies] == [0, 1, 2, 10]
        assert policies[3].path == root / "policy10"
    finally:
        _close(policies)

def test_get_policies_empty(tmp_path: Path):
    """Test a cpufreq directory without policies."""

    root = tmp_path / "cpufreq"
    root.mkdir()
    assert not Policy.get_policies(root)

def test_get_policies_bad_root(tmp_path: Path):
    """Test a bad cpufreq directory path."""

    with pytest.raises(ErrorConstruction):
        Policy.get_policies(tmp_path / "nonexistent")

    path = tmp_path / "file"
    path.write_text("", encoding="utf-8")
    with pytest.raises(ErrorConstruction):
        Policy.get_policies(path)

def test_get_policies_missing_attr(tmp_path: Path):
    """Test policy directories which do not include all attribute files."""

    root = common.build_sysfs(tmp_path / "cpufreq", skip=("energy_performance_preference",))

    with pytest.raises(ErrorConstruction):
        Policy.get_policies(root)

    policies = Policy.get_policies(root, check_attrs=False)
    try:
        assert len(policies) == 4
        assert not policies[0].is_supported("energy_performance_preference")
        assert policies[0].is_supported("energy_performance_available_preferences")
        with pytest.raises(ErrorAttributeIO):
            policies[0].get_perf_profile()
    finally:
        _close(policies)

def test_bad_policy_directory(tmp_path: Path):
    """Test constructing policy objects for bad paths."""

    with pytest.raises(ErrorConstruction):
        Policy.PolicyDirectory(tmp_path / "policy0")

    path = tmp_path / "cpu0"
    path.mkdir()
    with pytest.raises(ErrorConstruction):
        Policy.PolicyDirectory(path)

    path = tmp_path / "policy1"
    path.write_text("", encoding="utf-8")
    with pytest.raises(ErrorConstruction):
        Policy.PolicyDirectory(path)

def test_get_attr(sysfs_root: Path):
    """Test reading attributes of all types."""

    with Policy.PolicyDirectory(sysfs_root / "policy2") as policy:
        assert policy.policy_number == 2
        assert policy.get_attr("affected_cpus") == [2]
        assert policy.get_attr("cpuinfo_min_freq") == KHz(800000)
        assert policy.get_attr("scaling_max_freq") == KHz(4000000)
        assert policy.get_attr("cpuinfo_transition_latency") == 0
        assert policy.get_attr("scaling_driver") == "intel_pstate"
        assert policy.get_attr("scaling_available_governors") == ["performance", "powersave"]
        assert policy.get_attr("scaling_setspeed") is None
        assert not policy.is_supported("scaling_setspeed")
        assert policy.get_governor() == "powersave"
        assert policy.get_perf_profile() == "balance_performance"
        assert "power" in policy.read_available_perf_profiles()

        with pytest.raises(Error):
            policy.get_attr("scaling_voltage")

def test_bad_attr_contents(tmp_path: Path):
    """Test reading attribute files with bad contents."""

    overrides = {0: {"scaling_min_freq": "abc",
                     "cpuinfo_max_freq": "-1",
                     "scaling_available_governors": "",
                     "related_cpus": "0 x"},
                 1: {"affected_cpus": "1 \N{SUPERSCRIPT TWO}"}}
    root = common.build_sysfs(tmp_path / "cpufreq", pnums=(0, 1), overrides=overrides)

    with Policy.PolicyDirectory(root / "policy0") as policy:
        with pytest.raises(ErrorBadFormat):
            policy.get_attr("scaling_min_freq")
        with pytest.raises(ErrorBadFormat):
            policy.get_attr("cpuinfo_max_freq")
        with pytest.raises(ErrorBadFormat):
            policy.read_available_governors()
        with pytest.raises(ErrorBadFormat):
            policy.get_attr("related_cpus")

    with Policy.PolicyDirectory(root / "policy1") as policy:
        with pytest.raises(ErrorBadFormat):
            policy.get_attr("affected_cpus")

def test_set_governor(sysfs_root: Path):
    """Test changing the governor and the EPP."""

    with Policy.PolicyDirectory(sysfs_root / "policy0") as policy:
        policy.set_governor("PERFORMANCE")
        assert common.read_attr(sysfs_root, 0, "scaling_governor") == "performance"
        assert policy.get_governor() == "performance"

        with pytest.raises(ErrorValidation):
            policy.set_governor("ondemand")
        assert policy.get_governor() == "performance"

        policy.set_perf_profile("Power")
        assert common.read_attr(sysfs_root, 0, "energy_performance_preference") == "power"

        with pytest.raises(ErrorValidation):
            policy.set_perf_profile("turbo")
        assert policy.get_perf_profile() == "power"

def test_set_scaling_max_freq(sysfs_root: Path):
    """Test changing the max. scaling frequency."""

    with Policy.PolicyDirectory(sysfs_root / "policy0") as policy:
        policy.set_scaling_max_freq(GHz(3.0))
        assert common.read_attr(sysfs_root, 0, "scaling_max_freq") == "3000000"

        policy.set_scaling_max_freq(MHz(1000))
        assert policy.get_freq("scaling_max_freq") == KHz(1000000)

        # Below the current min. frequency (1 GHz).
        with pytest.raises(ErrorBadOrder):
            policy.set_scaling_max_freq(KHz(900000))
        # Exceeds the rated max. frequency (4 GHz).
        with pytest.raises(ErrorOutOfRange):
            policy.set_scaling_max_freq(GHz(4.1))

        assert common.read_attr(sysfs_root, 0, "scaling_max_freq") == "1000000"

def test_set_scaling_min_freq(sysfs_root: Path):
    """Test changing the min. scaling frequency."""

    with Policy.PolicyDirectory(sysfs_root / "policy1") as policy:
        policy.set_scaling_min_freq(KHz(800000))
        assert common.read_attr(sysfs_root, 1, "scaling_min_freq") == "800000"

        policy.set_scaling_min_freq(GHz(4.0))
        assert common.read_attr(sysfs_root, 1, "scaling_min_freq") == "4000000"

        # Below the rated min. frequency (800 MHz).
        with pytest.raises(ErrorOutOfRange):
            policy.set_scaling_min_freq(MHz(700))

        policy.set_scaling_max_freq(GHz(4.0))
        policy.set_scaling_min_freq(GHz(1.0))
        policy.set_scaling_max_freq(GHz(2.0))

        # Exceeds the current max. frequency (2 GHz).
        with pytest.raises(ErrorBadOrder):
            policy.set_scaling_min_freq(GHz(2.5))

        assert common.read_attr(sysfs_root, 1, "scaling_min_freq") == "1000000"

def test_set_freq_rated_limits(tmp_path: Path):
    """
    Test the rated frequency limit checks which the current scaling limits normally shadow, and
    the order of the frequency checks.
    """

    overrides = {0: {"scaling_min_freq": "700000"},
                 1: {"scaling_max_freq": "5000000"}}
    root = common.build_sysfs(tmp_path / "cpufreq", pnums=(0, 1), overrides=overrides)

    with Policy.PolicyDirectory(root / "policy0") as policy:
        with pytest.raises(ErrorOutOfRange) as excinfo:
            policy.set_scaling_max_freq(KHz(750000))
        assert "below rated min" in str(excinfo.value)

        # The current min. frequency is checked before the rated limits.
        with pytest.raises(ErrorBadOrder):
            policy.set_scaling_max_freq(KHz(650000))

        assert common.read_attr(root, 0, "scaling_max_freq") == "4000000"

    with Policy.PolicyDirectory(root / "policy1") as policy:
        with pytest.raises(ErrorOutOfRange) as excinfo:
            policy.set_scaling_min_freq(KHz(4500000))
        assert "exceeds rated max" in str(excinfo.value)

        with pytest.raises(ErrorBadOrder):
            policy.set_scaling_min_freq(KHz(5500000))

        assert common.read_attr(root, 1, "scaling_min_freq") == "1000000"

def test_set_freq_order(sysfs_root: Path):
    """Test that changing both frequency limits depends on the order of the changes."""

    with Policy.PolicyDirectory(sysfs_root / "policy0") as policy:
        policy.set_scaling_max_freq(GHz(2.0))

        # Moving the [1 GHz, 2 GHz] window to [2.5 GHz, 3 GHz] fails if min. goes first.
        with pytest.raises(ErrorBadOrder):
            policy.set_scaling_min_freq(GHz(2.5))

        policy.set_scaling_max_freq(GHz(3.0))
        policy.set_scaling_min_freq(GHz(2.5))

        assert policy.get_freq("scaling_min_freq") == KHz(2500000)
        assert policy.get_freq("scaling_max_freq") == KHz(3000000)

def test_set_scaling_setspeed(tmp_path: Path):
    """Test changing the 'userspace' governor frequency."""

    overrides = {1: common.USERSPACE_ATTRS}
    root = common.build_sysfs(tmp_path / "cpufreq", pnums=(0, 1), overrides=overrides)

    with Policy.PolicyDirectory(root / "policy0") as policy:
        with pytest.raises(ErrorValidation):
            policy.set_scaling_setspeed(GHz(1.5))

    with Policy.PolicyDirectory(root / "policy1") as policy:
        assert policy.is_supported("scaling_setspeed")
        assert policy.get_freq("scaling_setspeed") == KHz(1200000)

        policy.set_scaling_setspeed(GHz(1.5))
        assert common.read_attr(root, 1, "scaling_setspeed") == "1500000"

        with pytest.raises(ErrorOutOfRange):
            policy.set_scaling_setspeed(MHz(900))
        with pytest.raises(ErrorOutOfRange):
            policy.set_scaling_setspeed(GHz(4.5))

        assert common.read_attr(root, 1, "scaling_setspeed") == "1500000"
