# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause
#
# Author: Artem Bityutskiy <artem.bityutskiy@linux.intel.com>

"""
Test the '_CpupolPrinter' module.
"""

from  __future__ import annotations # Remove when switching to Python 3.10+.

import io
import pytest
from cpupollibs.Dispatcher import PolicyResult
from cpupollibs.Frequency import KHz
from cpupollibs.helperlibs.Exceptions import Error
from cpupoltool import _CpupolPrinter

def _print(results: list[PolicyResult], action: str = "get", **kwargs) -> str:
    """
    Print 'results' to a string.

    Args:
        results: The results to print.
        action: The command the results are for.
        kwargs: Additional 'PolicyPrinter' arguments.

    Returns:
        The printed text.
    """

    fobj = io.StringIO()
    with _CpupolPrinter.PolicyPrinter(fobj=fobj, **kwargs) as printer:
        printer.print_results(results, action=action)
    return fobj.getvalue()

def test_print_human():
    """Test the "human" format."""

    results = [PolicyResult(0, {"scaling_governor": "powersave"}),
               PolicyResult(1, {"scaling_governor": "performance"})]

    expected = "policy0:\n" \
               "  Governor: powersave\n" \
               f"{_CpupolPrinter.SEPARATOR}\n" \
               "policy1:\n" \
               "  Governor: performance\n"
    assert _print(results) == expected

def test_print_human_freq():
    """Test printing frequencies in different units."""

    results = [PolicyResult(3, {"scaling_min_freq": KHz(1000000)})]

    assert _print(results) == "policy3:\n  Min. frequency: 1.00 GHz\n"
    assert _print(results, unit="MHz") == "policy3:\n  Min. frequency: 1000 MHz\n"
    assert _print(results, unit="KHz") == "policy3:\n  Min. frequency: 1000000 KHz\n"

    assert _print(results, action="set") == "policy3:\n  Min. frequency set to 1.00 GHz\n"

def test_print_human_list():
    """Test printing lists, CPU numbers, units, and unsupported attributes."""

    values = {
        "scaling_available_governors": ["performance", "powersave"],
        "affected_cpus": [0, 1, 2, 3, 6],
        "cpuinfo_transition_latency": 20000,
        "scaling_setspeed": None,
        "energy_performance_available_preferences": [],
    }

    expected = "policy0:\n" \
               "  Available governors:\n" \
               "    0: performance\n" \
               "    1: powersave\n" \
               "  Affected CPUs: 0-3,6\n" \
               "  Transition latency: 20000 ns\n" \
               "  Userspace frequency: not supported\n" \
               "  Available EPPs: empty\n"
    assert _print([PolicyResult(0, values)], action="list") == expected

def test_print_yaml():
    """Test the YAML format."""

    results = [PolicyResult(0, {"scaling_min_freq": KHz(1000000)}),
               PolicyResult(2, {"scaling_available_governors": ["performance", "powersave"],
                                "scaling_setspeed": None})]

    expected = "policy0:\n" \
               "  scaling_min_freq: 1000000\n" \
               "policy2:\n" \
               "  scaling_available_governors:\n" \
               "  - performance\n" \
               "  - powersave\n" \
               "  scaling_setspeed:\n"
    assert _print(results, fmt="yaml") == expected

def test_print_nothing():
    """Test that empty results print nothing."""

    fobj = io.StringIO()
    with _CpupolPrinter.PolicyPrinter(fobj=fobj) as printer:
        assert printer.print_results([]) == 0
        assert printer.print_results([PolicyResult(0, {"scaling_driver": "intel_pstate"})]) == 1

    assert fobj.getvalue() == "policy0:\n  Scaling driver: intel_pstate\n"

def test_bad_arguments():
    """Test bad printer arguments."""

    with pytest.raises(Error):
        _CpupolPrinter.PolicyPrinter(fmt="json")
    with pytest.raises(Error):
        _CpupolPrinter.PolicyPrinter(unit="THz")
