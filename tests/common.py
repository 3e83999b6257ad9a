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

"""Common functions for cpupol tests."""

from  __future__ import annotations # Remove when switching to Python 3.10+.

import typing
from pathlib import Path
from cpupollibs.helperlibs import LocalProcessManager, TestRunner
from cpupoltool import _Cpupol

if typing.TYPE_CHECKING:
    from typing import Any, Iterable, Mapping

# The contents of the attribute files of a fake cpufreq policy directory. The '{pnum}' pattern is
# replaced with the policy number.
DEFAULT_ATTRS: dict[str, str] = {
    "affected_cpus": "{pnum}",
    "related_cpus": "{pnum}",
    "cpuinfo_min_freq": "800000",
    "cpuinfo_max_freq": "4000000",
    "base_frequency": "2000000",
    "cpuinfo_transition_latency": "0",
    "scaling_cur_freq": "1200000",
    "scaling_min_freq": "1000000",
    "scaling_max_freq": "4000000",
    "scaling_setspeed": "<unsupported>",
    "scaling_driver": "intel_pstate",
    "scaling_governor": "powersave",
    "scaling_available_governors": "performance powersave",
    "energy_performance_preference": "balance_performance",
    "energy_performance_available_preferences": "default performance balance_performance "
                                                "balance_power power",
}

# Attribute overrides for a policy managed by the 'userspace' governor.
USERSPACE_ATTRS: dict[str, str] = {
    "scaling_driver": "acpi-cpufreq",
    "scaling_governor": "userspace",
    "scaling_available_governors": "userspace performance powersave",
    "scaling_setspeed": "1200000",
}

def build_sysfs(root: Path,
                pnums: Iterable[int] = (0, 1, 2, 3),
                overrides: Mapping[int, Mapping[str, str]] | None = None,
                skip: Iterable[str] = ()) -> Path:
    """
    Create a fake cpufreq policies directory.

    Args:
        root: Path to the directory to create the policy directories in. Created if it does not
              exist.
        pnums: Numbers of the policies to create.
        overrides: Per-policy attribute file contents overriding 'DEFAULT_ATTRS'.
        skip: Names of the attribute files to not create.

    Returns:
        The 'root' path.
    """

    if overrides is None:
        overrides = {}

    root.mkdir(parents=True, exist_ok=True)
    for pnum in pnums:
        path = root / f"policy{pnum}"
        path.mkdir()

        attrs = dict(DEFAULT_ATTRS)
        attrs.update(overrides.get(pnum, {}))
        for attr, val in attrs.items():
            if attr in skip:
                continue
            (path / attr).write_text(val.format(pnum=pnum) + "\n", encoding="utf-8")

    return root

def read_attr(root: Path, pnum: int, attr: str) -> str:
    """Return the stripped contents of attribute file 'attr' of policy 'pnum'."""
    return (root / f"policy{pnum}" / attr).read_text(encoding="utf-8").strip()

def run_cpupol(arguments: str, exp_exc: type[Exception] | None = None) -> Any:
    """
    Run the 'cpupol' command with the specified arguments on the local host.

    Args:
        arguments: The command-line arguments to pass to 'cpupol', e.g., 'get all gov avail'.
        exp_exc: The expected exception type. If None, the command is expected to succeed.

    Returns:
        The value returned by the command, or None if the expected exception was raised.
    """

    with LocalProcessManager.LocalProcessManager() as pman:
        return TestRunner.run_tool(_Cpupol, _Cpupol.TOOLNAME, arguments, pman=pman,
                                   exp_exc=exp_exc)
