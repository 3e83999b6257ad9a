# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause
#
# Authors: Artem Bityutskiy <artem.bityutskiy@linux.intel.com>
#          Antti Laakso <antti.laakso@intel.com>

"""
This module provides API for printing cpufreq policy command results.
"""

import sys
from cpupollibs import PolicyVars
from cpupollibs.Frequency import Frequency, UNITS
from cpupollibs.helperlibs import Logging, ClassHelpers, YAML, Trivial
from cpupollibs.helperlibs.Exceptions import Error

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.cpupol.{__name__}")

# The line printed between policy blocks in the "human" format.
SEPARATOR = "-" * 40

class PolicyPrinter(ClassHelpers.SimpleCloseContext):
    """This class provides API for printing cpufreq policy command results."""

    def __init__(self, fobj=None, fmt="human", unit="GHz"):
        """
        Initialize a class instance. The arguments are as follows.
          * fobj - a file object to print the output to (standard output by default).
          * fmt - the printing format.
          * unit - the unit to print frequencies in, in the "human" format.

        The following formats are supported.
          * human - a human-friendly, human-readable print format.
          * yaml - print in YAML format. Frequencies are printed as integer numbers of KHz.
        """

        self._fobj = fobj
        self._fmt = fmt
        self._unit = unit

        formats = ("human", "yaml")
        if self._fmt not in formats:
            formats = ", ".join(formats)
            raise Error(f"unsupported format '{self._fmt}', supported formats are: {formats}")

        if self._unit not in UNITS:
            units = ", ".join(UNITS)
            raise Error(f"unsupported frequency unit '{self._unit}', supported units are: {units}")

    def close(self):
        """Uninitialize the class object."""
        ClassHelpers.close(self, unref_attrs=("_fobj",))

    def _print(self, msg):
        """Print message 'msg'."""

        if self._fobj:
            self._fobj.write(f"{msg}\n")
        else:
            _LOG.info(msg)

    def _format_value_human(self, attr, val):
        """Format value 'val' of attribute 'attr' into the "human" format."""

        if val is None:
            return "not supported"

        if val == []:
            return "empty"

        if isinstance(val, Frequency):
            return str(val.to_unit(self._unit))

        atype = PolicyVars.ATTRS[attr]["type"]
        if atype == "cpus":
            return Trivial.rangify(val)

        unit = PolicyVars.ATTRS[attr].get("unit")
        if unit:
            return f"{val} {unit}"

        return str(val)

    def _print_policy_human(self, res, action):
        """Print the 'res' policy result block in the "human" format."""

        self._print(f"{PolicyVars.POLICY_PREFIX}{res.pnum}:")

        for attr, val in res.values.items():
            name = PolicyVars.ATTRS[attr]["name"]

            if action == "set":
                self._print(f"  {name} set to {self._format_value_human(attr, val)}")
            elif val and isinstance(val, list) and PolicyVars.ATTRS[attr]["type"] == "list":
                self._print(f"  {name}:")
                for idx, item in enumerate(val):
                    self._print(f"    {idx}: {item}")
            else:
                self._print(f"  {name}: {self._format_value_human(attr, val)}")

    def _print_human(self, results, action):
        """Print 'results' in the "human" format."""

        for idx, res in enumerate(results):
            if idx:
                self._print(SEPARATOR)
            self._print_policy_human(res, action)

    @staticmethod
    def _format_value_yaml(val):
        """Format value 'val' for YAML output."""

        if isinstance(val, Frequency):
            return val.to_khz().value
        return val

    def _print_yaml(self, results):
        """Print 'results' in YAML format."""

        yaml_info = {}
        for res in results:
            name = f"{PolicyVars.POLICY_PREFIX}{res.pnum}"
            pinfo = yaml_info.setdefault(name, {})
            for attr, val in res.values.items():
                pinfo[attr] = self._format_value_yaml(val)

        fobj = self._fobj
        if not fobj:
            fobj = sys.stdout

        YAML.dump(yaml_info, fobj)

    def print_results(self, results, action="get"):
        """
        Print command results. The arguments are as follows.
          * results - a list of 'PolicyResult' objects (refer to 'Dispatcher.PolicyResult').
          * action - the command the results are for: "get", "list", or "set".

        Return the number of printed policy blocks.
        """

        if not results:
            return 0

        if self._fmt == "human":
            self._print_human(results, action)
        else:
            self._print_yaml(results)

        return len(results)
