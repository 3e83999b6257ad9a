# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause
#
# Author: Artem Bityutskiy <artem.bityutskiy@linux.intel.com>

"""
Global variables for the 'Policy' module. This file is separated to allow importing constants
without loading the entire module, improving import efficiency.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import typing

if typing.TYPE_CHECKING:
    from typing import Final, TypedDict, Literal

    AttrValueType = Literal["freq", "int", "str", "list", "cpus"]
    KindType = Literal["freq", "gov", "perf"]

    class AttrTypedDict(TypedDict, total=False):
        """
        The description of a cpufreq policy attribute file.

        Attributes:
            name: A short human-readable name of the attribute.
            type: The type of the attribute value: "freq" (a frequency in KHz), "int", "str",
                  "list" (whitespace-separated tokens), or "cpus" (whitespace-separated CPU
                  numbers).
            unit: The unit of the attribute value, if any.
            writable: Whether the attribute is writable.
            special_vals: Placeholder values meaning that the attribute is not supported.
        """

        name: str
        type: AttrValueType
        unit: str
        writable: bool
        special_vals: set[str]

# The prefix of cpufreq policy directory names ("policy0", "policy1", etc).
POLICY_PREFIX: Final = "policy"

# The default cpufreq policies directory.
SYSFS_ROOT: Final = "/sys/devices/system/cpu/cpufreq"

# The cpufreq policy attribute files. Every policy directory is expected to include all of them.
ATTRS: Final[dict[str, AttrTypedDict]] = {
    "affected_cpus": {
        "name": "Affected CPUs",
        "type": "cpus",
        "writable": False,
    },
    "related_cpus": {
        "name": "Related CPUs",
        "type": "cpus",
        "writable": False,
    },
    "cpuinfo_min_freq": {
        "name": "Min. rated frequency",
        "type": "freq",
        "unit": "KHz",
        "writable": False,
    },
    "cpuinfo_max_freq": {
        "name": "Max. rated frequency",
        "type": "freq",
        "unit": "KHz",
        "writable": False,
    },
    "base_frequency": {
        "name": "Base frequency",
        "type": "freq",
        "unit": "KHz",
        "writable": False,
    },
    "cpuinfo_transition_latency": {
        "name": "Transition latency",
        "type": "int",
        "unit": "ns",
        "writable": False,
    },
    "scaling_cur_freq": {
        "name": "Current frequency",
        "type": "freq",
        "unit": "KHz",
        "writable": False,
    },
    "scaling_min_freq": {
        "name": "Min. frequency",
        "type": "freq",
        "unit": "KHz",
        "writable": True,
    },
    "scaling_max_freq": {
        "name": "Max. frequency",
        "type": "freq",
        "unit": "KHz",
        "writable": True,
    },
    "scaling_setspeed": {
        "name": "Userspace frequency",
        "type": "freq",
        "unit": "KHz",
        "writable": True,
        "special_vals": {"<unsupported>"},
    },
    "scaling_driver": {
        "name": "Scaling driver",
        "type": "str",
        "writable": False,
    },
    "scaling_governor": {
        "name": "Governor",
        "type": "str",
        "writable": True,
    },
    "scaling_available_governors": {
        "name": "Available governors",
        "type": "list",
        "writable": False,
    },
    "energy_performance_preference": {
        "name": "EPP",
        "type": "str",
        "writable": True,
    },
    "energy_performance_available_preferences": {
        "name": "Available EPPs",
        "type": "list",
        "writable": False,
    },
}

# The attribute kinds accepted by the 'get' and 'set' commands, and the attribute each 'get'
# selector maps to. The first selector is the default one.
SELECTORS: Final[dict[KindType, dict[str, str]]] = {
    "freq": {
        "current": "scaling_cur_freq",
        "curr": "scaling_cur_freq",
        "min": "scaling_min_freq",
        "max": "scaling_max_freq",
        "rmin": "cpuinfo_min_freq",
        "rmax": "cpuinfo_max_freq",
        "base": "base_frequency",
        "speed": "scaling_setspeed",
    },
    "gov": {
        "current": "scaling_governor",
        "curr": "scaling_governor",
        "available": "scaling_available_governors",
        "avail": "scaling_available_governors",
    },
    "perf": {
        "current": "energy_performance_preference",
        "curr": "energy_performance_preference",
        "available": "energy_performance_available_preferences",
        "avail": "energy_performance_available_preferences",
    },
}

# The governor that has to be active for 'scaling_setspeed' to be writable.
USERSPACE_GOVERNOR: Final = "userspace"
