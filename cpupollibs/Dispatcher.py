# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause
#
# Authors: Artem Bityutskiy <artem.bityutskiy@linux.intel.com>
#          Antti Laakso <antti.laakso@intel.com>

"""
Route 'set', 'get' and 'list' commands to cpufreq policy objects.

A command operates on a target-set of policies (see 'PolicyTarget') and, except for 'list', on an
attribute kind: "freq", "gov" or "perf" ("speed" is also accepted by 'set').

Batches are fail-fast: the first policy which fails aborts the command, and changes already made to
the preceding policies are not rolled back.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import typing
from typing import NamedTuple, cast
from cpupollibs import PolicyVars, PolicyTarget
from cpupollibs.Frequency import parse_freq, parse_freq_pair
from cpupollibs.helperlibs import Logging, ClassHelpers, DamerauLevenshtein
from cpupollibs.helperlibs.Exceptions import ErrorBadFormat

if typing.TYPE_CHECKING:
    from typing import Any, Callable, Iterable
    from cpupollibs.Frequency import Frequency, FreqPairType
    from cpupollibs.Policy import PolicyDirectory, AttrValueType
    from cpupollibs.PolicyVars import KindType

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.cpupol.{__name__}")

# The supported command verbs.
VERBS = ("set", "get", "list")

class PolicyResult(NamedTuple):
    """
    The result of a command for a single policy.

    Attributes:
        pnum: The policy number.
        values: The attribute name to value dictionary. For 'set', the values that were written.
                'None' values stand for unsupported attributes.
    """

    pnum: int
    values: dict[str, AttrValueType]

def _bad_name(what: str, name: str, names: Iterable[str]) -> ErrorBadFormat:
    """Return an exception object for a bad 'name', including the closest valid name."""

    names = list(names)
    msg = f"Bad {what} '{name}', use one of: {', '.join(names)}"
    suggestion = DamerauLevenshtein.closest_match(name, names)
    if suggestion:
        msg += f"\nThe most similar {what} is '{suggestion}'"
    return ErrorBadFormat(msg)

class CommandDispatcher(ClassHelpers.SimpleCloseContext):
    """
    Run commands on cpufreq policy objects.

    Public methods overview.
        * 'dispatch()' - run a command by its verb name.
        * 'set()' - change an attribute of the target policies.
        * 'get()' - read an attribute of the target policies.
        * 'list()' - read all attributes of the target policies.
    """

    def __init__(self, policies: Iterable[PolicyDirectory]):
        """
        Initialize a class instance.

        Args:
            policies: The policy objects to operate on, in store enumeration order. The order
                      defines the order of the "all" target-set.
        """

        self._policies: dict[int, PolicyDirectory] = {}
        for policy in policies:
            self._policies[policy.policy_number] = policy

        # The attribute kind to value parser and setter method maps. The value is parsed once per
        # command, and the setter is called for every target policy.
        self._parsers: dict[str, Callable[[str], Any]] = {
            "freq": parse_freq_pair,
            "gov": str.strip,
            "perf": str.strip,
            "speed": parse_freq,
        }
        self._setters: dict[str, Callable[[PolicyDirectory, Any], dict[str, AttrValueType]]] = {
            "freq": self._set_freq,
            "gov": self._set_governor,
            "perf": self._set_perf_profile,
            "speed": self._set_speed,
        }

    def close(self):
        """Uninitialize the class object."""
        ClassHelpers.close(self, unref_attrs=("_policies",))

    def _resolve(self, token: str) -> list[PolicyDirectory]:
        """Resolve a target-set token to the list of policy objects."""

        pnums = PolicyTarget.resolve(token, self._policies)
        if not pnums:
            _LOG.notice("Target-set '%s' does not match any cpufreq policy", token)
        return [self._policies[pnum] for pnum in pnums]

    @staticmethod
    def _set_freq(policy: PolicyDirectory, pair: FreqPairType) -> dict[str, AttrValueType]:
        """Set the min. and then the max. scaling frequency of a policy."""

        minfreq, maxfreq = pair

        result: dict[str, AttrValueType] = {}
        if minfreq is not None:
            policy.set_scaling_min_freq(minfreq)
            result["scaling_min_freq"] = minfreq.to_khz()
        if maxfreq is not None:
            policy.set_scaling_max_freq(maxfreq)
            result["scaling_max_freq"] = maxfreq.to_khz()

        return result

    @staticmethod
    def _set_governor(policy: PolicyDirectory, name: str) -> dict[str, AttrValueType]:
        """Set the governor of a policy."""

        policy.set_governor(name)
        return {"scaling_governor": policy.get_governor()}

    @staticmethod
    def _set_perf_profile(policy: PolicyDirectory, name: str) -> dict[str, AttrValueType]:
        """Set the EPP of a policy."""

        policy.set_perf_profile(name)
        return {"energy_performance_preference": policy.get_perf_profile()}

    @staticmethod
    def _set_speed(policy: PolicyDirectory, freq: Frequency) -> dict[str, AttrValueType]:
        """Set the 'userspace' governor frequency of a policy."""

        policy.set_scaling_setspeed(freq)
        return {"scaling_setspeed": freq.to_khz()}

    def set(self, token: str, kind: str, value: str) -> list[PolicyResult]:
        """
        Change an attribute of the target policies.

        Args:
            token: The target-set token, e.g., "all" or "0,2".
            kind: The attribute kind: "freq", "gov", "perf", or "speed". Case-insensitive.
            value: The value to set. A '<min>:<max>' frequency pair for "freq", a frequency for
                   "speed", or a governor or EPP name.

        Returns:
            The written values per policy, in target-set resolution order.

        Notes:
            For "freq", the value is parsed once and the min. frequency is set before the max.
            frequency. Each of them is validated against the currently stored opposite bound.
        """

        kind = kind.lower()
        if kind not in self._setters:
            raise _bad_name("attribute", kind, self._setters)

        policies = self._resolve(token)
        parsed = self._parsers[kind](value)

        results = []
        for policy in policies:
            _LOG.debug("Policy %d: setting '%s' to '%s'", policy.policy_number, kind, value)
            values = self._setters[kind](policy, parsed)
            results.append(PolicyResult(policy.policy_number, values))

        return results

    def get(self, token: str, kind: str, selector: str | None = None) -> list[PolicyResult]:
        """
        Read an attribute of the target policies.

        Args:
            token: The target-set token, e.g., "all" or "0:3".
            kind: The attribute kind: "freq", "gov" or "perf". Case-insensitive.
            selector: The attribute selector, e.g., "min" for "freq", or "avail" for "gov". Defaults
                      to "current".

        Returns:
            The attribute value per policy, in target-set resolution order. An unknown
            (kind, selector) pair results in an empty list and a warning message.
        """

        kind = kind.lower()
        if selector is None:
            selector = "current"
        selector = selector.lower()

        if kind not in PolicyVars.SELECTORS:
            msg = f"Unknown attribute '{kind}', nothing to print"
            suggestion = DamerauLevenshtein.closest_match(kind, PolicyVars.SELECTORS)
            if suggestion:
                msg += f", did you mean '{suggestion}'?"
            _LOG.warning(msg)
            return []

        selectors = PolicyVars.SELECTORS[cast("KindType", kind)]
        if selector not in selectors:
            msg = f"Unknown '{kind}' selector '{selector}', nothing to print"
            suggestion = DamerauLevenshtein.closest_match(selector, selectors)
            if suggestion:
                msg += f", did you mean '{suggestion}'?"
            _LOG.warning(msg)
            return []

        attr = selectors[selector]
        results = []
        for policy in self._resolve(token):
            results.append(PolicyResult(policy.policy_number, {attr: policy.get_attr(attr)}))

        return results

    def list(self, token: str = "all") -> list[PolicyResult]:
        """
        Read all attributes of the target policies.

        Args:
            token: The target-set token. Defaults to "all".

        Returns:
            The attribute values per policy, in target-set resolution order. Unsupported attributes
            have the 'None' value, and empty lists are returned as empty lists.
        """

        results = []
        for policy in self._resolve(token):
            values: dict[str, AttrValueType] = {}
            for attr in PolicyVars.ATTRS:
                if not policy.is_supported(attr):
                    values[attr] = None
                elif PolicyVars.ATTRS[attr]["type"] == "list":
                    values[attr] = policy.read(attr).split()
                else:
                    values[attr] = policy.get_attr(attr)
            results.append(PolicyResult(policy.policy_number, values))

        return results

    def dispatch(self, verb: str, *args: str | None) -> list[PolicyResult]:
        """
        Run a command.

        Args:
            verb: The command verb: "set", "get", or "list". Case-insensitive.
            *args: The command arguments, refer to 'set()', 'get()', and 'list()'.

        Returns:
            The command results, refer to 'set()', 'get()', and 'list()'.
        """

        verb = verb.lower()
        if verb not in VERBS:
            raise _bad_name("command", verb, VERBS)

        _LOG.debug("Running command: %s %s", verb, " ".join(str(arg) for arg in args))

        method = getattr(self, verb)
        return method(*[arg for arg in args if arg is not None])
