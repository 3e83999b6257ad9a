# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause
#
# Author: Niklas Neronin <niklas.neronin@intel.com>

"""
Test for the 'PolicyTarget' module.
"""

from  __future__ import annotations # Remove when switching to Python 3.10+.

import pytest
from cpupollibs import PolicyTarget
from cpupollibs.helperlibs.Exceptions import ErrorBadFormat

_KNOWN = [0, 1, 2, 3]

def test_resolve_all():
    """Test the "all" target-set."""

    for token in ("all", "ALL", "All", "*", " all "):
        assert PolicyTarget.resolve(token, _KNOWN) == _KNOWN

    # The known policies order is kept.
    assert PolicyTarget.resolve("all", [3, 0, 2]) == [3, 0, 2]
    assert PolicyTarget.resolve("all", []) == []

def test_resolve():
    """Test resolving single numbers, ranges, and lists."""

    good = {
        "2": [2],
        " 2 ": [2],
        "7": [],
        "1:2": [1, 2],
        "2:2": [2],
        "0:10": [0, 1, 2, 3],
        "5:10": [],
        "1,3": [1, 3],
        "3,1,3": [3, 1, 3],
        "1, 7, 0": [1, 0],
    }

    for token, pnums in good.items():
        assert PolicyTarget.resolve(token, _KNOWN) == pnums, f"Bad result for '{token}'"

def test_parse_target():
    """Test the parsed target-set kind and numbers."""

    expr = PolicyTarget.parse_target("*")
    assert expr.kind == "all"
    assert expr.nums == []

    expr = PolicyTarget.parse_target("1:3")
    assert expr.kind == "range"
    assert list(expr.nums) == [1, 2, 3]

    expr = PolicyTarget.parse_target("4,2")
    assert expr.kind == "list"
    assert expr.nums == [4, 2]

    expr = PolicyTarget.parse_target("5")
    assert expr.kind == "single"
    assert expr.nums == [5]

def test_bad_targets():
    """Test bad target-set tokens."""

    bad = ("", "a", "-1", "1:", ":1", "1:2:3", "1,x", "1,", "1.5", "none")

    for token in bad:
        with pytest.raises(ErrorBadFormat):
            PolicyTarget.parse_target(token)

def test_reversed_range():
    """Test that a reversed range is rejected and the error names both ends."""

    with pytest.raises(ErrorBadFormat) as excinfo:
        PolicyTarget.parse_target("3:1")

    msg = str(excinfo.value)
    assert "3" in msg
    assert "1" in msg

def test_huge_range():
    """Test that a range much larger than the known policies resolves without expanding it."""

    assert PolicyTarget.resolve("0:4294967295", [3, 0, 2, 1]) == [0, 1, 2, 3]
    assert PolicyTarget.resolve("2:18446744073709551615", [0, 1, 2, 3]) == [2, 3]
    assert PolicyTarget.resolve("1000000000:2000000000", [0, 1, 2, 3]) == []
