# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause
#
# Author: Artem Bityutskiy <artem.bityutskiy@linux.intel.com>

"""
Provide API for reading and changing Linux cpufreq policy attributes.

Every cpufreq policy is represented by a 'policyN' directory in the cpufreq sysfs directory
('/sys/devices/system/cpu/cpufreq' by default). The directory includes attribute files, for example
'scaling_max_freq' or 'scaling_governor'. Frequency attributes are in KHz.

Attribute values are not cached, every read goes to the attribute file.

Frequency setters validate the new value against the currently stored opposite bound. Therefore,
changing both min. and max. frequencies is order-dependent: setting the min. frequency first may
fail where setting the max. frequency first would succeed, and vice versa. Use the
'set_scaling_min_freq()' and 'set_scaling_max_freq()' in the order which keeps the
'min <= max' relation true after every step.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import re
import typing
from pathlib import Path
from cpupollibs import PolicyVars, _SysfsIO
from cpupollibs.Frequency import Frequency, KHz
from cpupollibs.helperlibs import Logging, ClassHelpers, LocalProcessManager, ProcessManager
from cpupollibs.helperlibs.Exceptions import Error, ErrorBadFormat, ErrorConstruction
from cpupollibs.helperlibs.Exceptions import ErrorValidation, ErrorOutOfRange, ErrorBadOrder

if typing.TYPE_CHECKING:
    from typing import Callable, Union
    from cpupollibs.helperlibs.ProcessManager import ProcessManagerType

    AttrValueType = Union[Frequency, int, str, list[str], list[int], None]

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.cpupol.{__name__}")

_POLICY_NAME_REGEX = re.compile(rf"{PolicyVars.POLICY_PREFIX}([0-9]+)")
_CPU_NUM_REGEX = re.compile(r"[0-9]+")

def _fmt_freq(freq: Frequency) -> str:
    """Format a KHz frequency for error messages, e.g., '800000 KHz (0.80 GHz)'."""
    return f"{freq} ({freq.to_ghz()})"

class PolicyDirectory(ClassHelpers.SimpleCloseContext):
    """
    A cpufreq policy directory.

    Public methods overview.

    1. Raw attribute access.
        * 'read()' - read an attribute file as a string.
        * 'write()' - replace the contents of an attribute file.
        * 'is_supported()' - check if an attribute is supported.
        * 'check_attrs()' - verify that all attribute files exist.
    2. Typed attribute access.
        * 'get_attr()' - read an attribute and convert it according to its type.
        * 'get_freq()' - read a frequency attribute.
        * 'get_governor()', 'get_perf_profile()' - read the current governor or EPP.
        * 'read_available_governors()', 'read_available_perf_profiles()' - read the lists of
          available governors and EPPs.
    3. Validated setters.
        * 'set_governor()', 'set_perf_profile()'.
        * 'set_scaling_min_freq()', 'set_scaling_max_freq()', 'set_scaling_setspeed()'.

    Attributes:
        path: Path to the policy directory.
        policy_number: The policy number ('N' in 'policyN').
    """

    def __init__(self, path: str | Path, pman: ProcessManagerType | None = None):
        """
        Initialize a class instance.

        Args:
            path: Path to the policy directory.
            pman: The process manager object that defines the target host. Use a local process
                  manager if not provided.

        Raises:
            ErrorConstruction: If the path does not exist, is not a directory, or its name is not
                               'policy' followed by a decimal number.
        """

        self.path = Path(path)

        self._close_pman = pman is None

        self._pman: ProcessManagerType
        if not pman:
            self._pman = LocalProcessManager.LocalProcessManager()
        else:
            self._pman = pman

        self._sysfs_io = _SysfsIO.SysfsIO(pman=self._pman)

        # The attribute type to the typed reader method map.
        self._readers: dict[str, Callable[[str], AttrValueType]] = {
            "freq": self.get_freq,
            "int": self._get_int,
            "str": self.read,
            "list": self._get_list,
            "cpus": self._get_cpus,
        }

        try:
            self.policy_number = self._parse_path()
        except Error:
            self.close()
            raise

    def close(self):
        """Uninitialize the class object."""
        ClassHelpers.close(self, close_attrs=("_sysfs_io", "_pman"))

    def _parse_path(self) -> int:
        """Validate the policy directory path and return the policy number."""

        hostmsg = self._pman.hostmsg
        if not self._pman.exists(self.path):
            raise ErrorConstruction(f"Policy directory '{self.path}' does not exist{hostmsg}")
        if not self._pman.is_dir(self.path):
            raise ErrorConstruction(f"Policy path '{self.path}' is not a directory{hostmsg}")

        mobj = _POLICY_NAME_REGEX.fullmatch(self.path.name)
        if not mobj:
            raise ErrorConstruction(f"Bad policy directory name '{self.path.name}' in "
                                    f"'{self.path.parent}'{hostmsg}: should be "
                                    f"'{PolicyVars.POLICY_PREFIX}' followed by a non-negative "
                                    f"integer number")
        return int(mobj.group(1))

    def _attr_path(self, attr: str) -> Path:
        """Return path to the 'attr' attribute file."""

        if attr not in PolicyVars.ATTRS:
            attrs = ", ".join(PolicyVars.ATTRS)
            raise Error(f"BUG: unknown cpufreq policy attribute '{attr}', use one of: {attrs}")
        return self.path / attr

    def check_attrs(self):
        """
        Verify that the policy directory includes all the cpufreq policy attribute files.

        Raises:
            ErrorConstruction: If an attribute file is missing.
        """

        for attr in PolicyVars.ATTRS:
            if not self._pman.is_file(self._attr_path(attr)):
                raise ErrorConstruction(f"The '{attr}' file is missing from the policy directory "
                                        f"'{self.path}'{self._pman.hostmsg}")

    def read(self, attr: str) -> str:
        """
        Read an attribute file.

        Args:
            attr: Name of the attribute to read, e.g., "scaling_governor".

        Returns:
            The attribute value with surrounding white-spaces stripped.

        Raises:
            ErrorAttributeIO: If the attribute file does not exist or cannot be read.
        """

        return self._sysfs_io.read(self._attr_path(attr), attr)

    def write(self, attr: str, text: str):
        """
        Replace the contents of an attribute file with 'text'.

        Args:
            attr: Name of the attribute to write, e.g., "scaling_governor".
            text: The new attribute value.

        Raises:
            ErrorAttributeIO: If the attribute file does not exist or cannot be written.
        """

        self._sysfs_io.write(self._attr_path(attr), text, attr)

    def is_supported(self, attr: str) -> bool:
        """
        Check if an attribute is supported: its file exists and it does not contain a placeholder
        value like '<unsupported>'.

        Args:
            attr: Name of the attribute to check.

        Returns:
            True if the attribute is supported, False otherwise.
        """

        path = self._attr_path(attr)
        if not self._pman.is_file(path):
            return False

        special_vals = PolicyVars.ATTRS[attr].get("special_vals")
        if special_vals and self.read(attr) in special_vals:
            return False

        return True

    def get_attr(self, attr: str) -> AttrValueType:
        """
        Read an attribute and convert it according to its type (see 'PolicyVars.ATTRS').

        Args:
            attr: Name of the attribute to read.

        Returns:
            The attribute value: a 'Frequency' object for frequency attributes (or 'None' if the
            attribute contains a placeholder value), an integer, a string, a list of strings, or
            a list of CPU numbers.
        """

        self._attr_path(attr)
        return self._readers[PolicyVars.ATTRS[attr]["type"]](attr)

    def get_freq(self, attr: str) -> Frequency | None:
        """
        Read a frequency attribute.

        Args:
            attr: Name of the frequency attribute to read, e.g., "scaling_min_freq".

        Returns:
            The frequency in KHz, or 'None' if the attribute contains a placeholder value.
        """

        path = self._attr_path(attr)
        if PolicyVars.ATTRS[attr]["type"] != "freq":
            raise Error(f"BUG: '{attr}' is not a frequency attribute")

        special_vals = PolicyVars.ATTRS[attr].get("special_vals")
        if special_vals:
            val = self.read(attr)
            if val in special_vals:
                return None

        return KHz(self._sysfs_io.read_int(path, attr))

    def _get_freq(self, attr: str) -> Frequency:
        """Read a frequency attribute which does not have placeholder values."""

        freq = self.get_freq(attr)
        if freq is None:
            raise ErrorValidation(f"'{attr}' is not supported by policy {self.policy_number}"
                                  f"{self._pman.hostmsg}")
        return freq

    def _get_int(self, attr: str) -> int:
        """Read an integer attribute."""
        return self._sysfs_io.read_int(self._attr_path(attr), attr)

    def _get_list(self, attr: str) -> list[str]:
        """Read a whitespace-separated list attribute, fail if the list is empty."""

        tokens = self.read(attr).split()
        if not tokens:
            raise ErrorBadFormat(f"The '{attr}' list is empty in policy directory '{self.path}'"
                                 f"{self._pman.hostmsg}")
        return tokens

    def _get_cpus(self, attr: str) -> list[int]:
        """Read a whitespace-separated CPU numbers list attribute."""

        cpus = []
        for token in self.read(attr).split():
            if not _CPU_NUM_REGEX.fullmatch(token):
                raise ErrorBadFormat(f"Bad CPU number '{token}' in '{attr}' of policy directory "
                                     f"'{self.path}'{self._pman.hostmsg}")
            cpus.append(int(token))

        return cpus

    def read_available_governors(self) -> list[str]:
        """
        Read the available governors list.

        Returns:
            The list of available governor names.

        Raises:
            ErrorAttributeIO: If the 'scaling_available_governors' file cannot be read.
            ErrorBadFormat: If the list is empty.
        """

        return self._get_list("scaling_available_governors")

    def read_available_perf_profiles(self) -> list[str]:
        """
        Read the available EPP (performance profile) list.

        Returns:
            The list of available EPP names.

        Raises:
            ErrorAttributeIO: If the 'energy_performance_available_preferences' file cannot be read.
            ErrorBadFormat: If the list is empty.
        """

        return self._get_list("energy_performance_available_preferences")

    def get_governor(self) -> str:
        """Return the current governor name."""
        return self.read("scaling_governor")

    def get_perf_profile(self) -> str:
        """Return the current EPP (performance profile) name."""
        return self.read("energy_performance_preference")

    def _set_choice(self, attr: str, available: list[str], name: str, what: str):
        """
        Write 'name' to 'attr' if it is in the 'available' list. The comparison is
        case-insensitive, and the matching name from the 'available' list is written.
        """

        for avail in available:
            if avail.lower() == name.strip().lower():
                _LOG.debug("Policy %d: setting %s to '%s'", self.policy_number, what, avail)
                self.write(attr, avail)
                return

        avail_str = ", ".join(available)
        raise ErrorValidation(f"Bad {what} '{name}' for policy {self.policy_number}"
                              f"{self._pman.hostmsg}, use one of: {avail_str}")

    def set_governor(self, name: str):
        """
        Set the governor.

        Args:
            name: Name of the governor to set. The name is case-insensitive.

        Raises:
            ErrorValidation: If the governor is not in the available governors list.
        """

        self._set_choice("scaling_governor", self.read_available_governors(), name, "governor")

    def set_perf_profile(self, name: str):
        """
        Set the EPP (performance profile).

        Args:
            name: Name of the EPP to set. The name is case-insensitive.

        Raises:
            ErrorValidation: If the EPP is not in the available EPP list.
        """

        self._set_choice("energy_performance_preference", self.read_available_perf_profiles(),
                         name, "EPP")

    def _write_freq(self, attr: str, freq: Frequency):
        """Write a KHz frequency to a frequency attribute."""

        _LOG.debug("Policy %d: setting '%s' to %s", self.policy_number, attr, freq)
        self.write(attr, str(freq.value))

    def set_scaling_max_freq(self, freq: Frequency):
        """
        Set the max. scaling frequency. The new value is validated against the current min.
        scaling frequency and the rated frequency limits.

        Args:
            freq: The new max. scaling frequency.

        Raises:
            ErrorBadOrder: If the new value is below the current min. scaling frequency.
            ErrorOutOfRange: If the new value is outside of the rated frequency limits.
        """

        new_max = freq.to_khz()
        pfx = f"Cannot set max. frequency of policy {self.policy_number}{self._pman.hostmsg} " \
              f"to {_fmt_freq(new_max)}"

        cur_min = self._get_freq("scaling_min_freq")
        if new_max.value < cur_min.value:
            raise ErrorBadOrder(f"{pfx}: below current min. frequency {_fmt_freq(cur_min)}")

        rated_max = self._get_freq("cpuinfo_max_freq")
        if new_max.value > rated_max.value:
            raise ErrorOutOfRange(f"{pfx}: exceeds rated max. frequency {_fmt_freq(rated_max)}")

        rated_min = self._get_freq("cpuinfo_min_freq")
        if new_max.value < rated_min.value:
            raise ErrorOutOfRange(f"{pfx}: below rated min. frequency {_fmt_freq(rated_min)}")

        self._write_freq("scaling_max_freq", new_max)

    def set_scaling_min_freq(self, freq: Frequency):
        """
        Set the min. scaling frequency. The new value is validated against the current max.
        scaling frequency and the rated frequency limits.

        Args:
            freq: The new min. scaling frequency.

        Raises:
            ErrorBadOrder: If the new value exceeds the current max. scaling frequency.
            ErrorOutOfRange: If the new value is outside of the rated frequency limits.
        """

        new_min = freq.to_khz()
        pfx = f"Cannot set min. frequency of policy {self.policy_number}{self._pman.hostmsg} " \
              f"to {_fmt_freq(new_min)}"

        cur_max = self._get_freq("scaling_max_freq")
        if new_min.value > cur_max.value:
            raise ErrorBadOrder(f"{pfx}: exceeds current max. frequency {_fmt_freq(cur_max)}")

        rated_min = self._get_freq("cpuinfo_min_freq")
        if new_min.value < rated_min.value:
            raise ErrorOutOfRange(f"{pfx}: below rated min. frequency {_fmt_freq(rated_min)}")

        rated_max = self._get_freq("cpuinfo_max_freq")
        if new_min.value > rated_max.value:
            raise ErrorOutOfRange(f"{pfx}: exceeds rated max. frequency {_fmt_freq(rated_max)}")

        self._write_freq("scaling_min_freq", new_min)

    def set_scaling_setspeed(self, freq: Frequency):
        """
        Set the frequency for the 'userspace' governor.

        Args:
            freq: The new frequency.

        Raises:
            ErrorValidation: If the current governor is not 'userspace'.
            ErrorOutOfRange: If the new value is outside of the current scaling frequency limits.
        """

        new_freq = freq.to_khz()
        pfx = f"Cannot set frequency of policy {self.policy_number}{self._pman.hostmsg} " \
              f"to {_fmt_freq(new_freq)}"

        governor = self.get_governor()
        if governor != PolicyVars.USERSPACE_GOVERNOR:
            raise ErrorValidation(f"{pfx}: requires the '{PolicyVars.USERSPACE_GOVERNOR}' "
                                  f"governor, but the current governor is '{governor}'")

        cur_min = self._get_freq("scaling_min_freq")
        cur_max = self._get_freq("scaling_max_freq")
        if new_freq.value < cur_min.value or new_freq.value > cur_max.value:
            raise ErrorOutOfRange(f"{pfx}: outside of the current frequency limits "
                                  f"[{_fmt_freq(cur_min)}, {_fmt_freq(cur_max)}]")

        self._write_freq("scaling_setspeed", new_freq)

def get_policies(root: str | Path = PolicyVars.SYSFS_ROOT,
                 pman: ProcessManagerType | None = None,
                 check_attrs: bool = True) -> list[PolicyDirectory]:
    """
    Build 'PolicyDirectory' objects for every 'policyN' directory in 'root'.

    Args:
        root: Path to the cpufreq policies directory.
        pman: The process manager object that defines the target host. Use a local process manager
              if not provided.
        check_attrs: If True, require every policy directory to include all the attribute files.

    Returns:
        A list of 'PolicyDirectory' objects sorted by policy number. The caller is responsible for
        closing them.

    Raises:
        ErrorConstruction: If 'root' is not a directory, or any of the policy directories is bad.
            No policy objects are returned in this case.
    """

    root = Path(root)
    policies: list[PolicyDirectory] = []

    with ProcessManager.pman_or_local(pman) as wpman:
        if not wpman.is_dir(root):
            raise ErrorConstruction(f"Bad cpufreq policies directory '{root}'{wpman.hostmsg}: "
                                    f"does not exist or is not a directory")

        try:
            for entry in wpman.lsdir(root):
                if not _POLICY_NAME_REGEX.fullmatch(entry["name"]):
                    continue

                policy = PolicyDirectory(entry["path"], pman=pman)
                policies.append(policy)
                if check_attrs:
                    policy.check_attrs()
        except Error:
            for policy in policies:
                policy.close()
            raise

        _LOG.debug("Found %d cpufreq policies in '%s'%s", len(policies), root, wpman.hostmsg)

    policies.sort(key=lambda policy: policy.policy_number)
    return policies
