# -*- coding: utf-8 -*
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause
#
# Author: Artem Bityutskiy <artem.bityutskiy@linux.intel.com>

"""
Implement the 'cpupol set', 'cpupol get', and 'cpupol list' commands.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import typing
import contextlib
import argparse
from typing import NamedTuple
from cpupollibs import Policy, Dispatcher
from cpupollibs.helperlibs import Logging
from cpupollibs.helperlibs.Exceptions import ErrorConstruction
from cpupoltool import _Cpupol, _CpupolPrinter

if typing.TYPE_CHECKING:
    from cpupollibs.helperlibs.ProcessManager import ProcessManagerType

class _CmdlineArgsType(NamedTuple):
    """
    A type for command-line arguments of the 'cpupol' commands.

    Attributes:
        sysfs_root: Path to the cpufreq policies directory.
        check_attrs: Whether to require every policy directory to include all attribute files.
        yaml: Whether to output results in YAML format.
        unit: The unit to print frequencies in.
        targets: The target-set token.
        kind: The attribute kind ('freq', 'gov', etc), not used by the 'list' command.
        value: The value to set for the 'set' command, or the selector for the 'get' command.
    """

    sysfs_root: str
    check_attrs: bool
    yaml: bool
    unit: str
    targets: str
    kind: str | None
    value: str | None

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.cpupol.{__name__}")

def _get_cmdline_args(args: argparse.Namespace) -> _CmdlineArgsType:
    """
    Format command-line arguments into a named tuple.

    Args:
        args: Command-line arguments namespace.

    Returns:
        The parsed command-line arguments.
    """

    value = getattr(args, "value", None)
    if value is None:
        value = getattr(args, "selector", None)

    return _CmdlineArgsType(sysfs_root=_Cpupol.get_sysfs_root(args),
                            check_attrs=not getattr(args, "skip_attr_check", False),
                            yaml=getattr(args, "yaml", False),
                            unit=getattr(args, "unit", "GHz"),
                            targets=getattr(args, "targets", "all"),
                            kind=getattr(args, "kind", None),
                            value=value)

def _run_command(verb: str,
                 args: argparse.Namespace,
                 pman: ProcessManagerType) -> list[Dispatcher.PolicyResult]:
    """
    Run a command and print the results.

    Args:
        verb: The command to run: "set", "get", or "list".
        args: Parsed command-line arguments.
        pman: Process manager object for the target host.

    Returns:
        The command results.
    """

    cmdl = _get_cmdline_args(args)

    fmt = "yaml" if cmdl.yaml else "human"

    with contextlib.ExitStack() as stack:
        policies = Policy.get_policies(cmdl.sysfs_root, pman=pman, check_attrs=cmdl.check_attrs)
        for policy in policies:
            stack.enter_context(policy)

        if not policies:
            raise ErrorConstruction(f"No cpufreq policies found in '{cmdl.sysfs_root}'"
                                    f"{pman.hostmsg}")

        dispatcher = Dispatcher.CommandDispatcher(policies)
        stack.enter_context(dispatcher)

        printer = _CpupolPrinter.PolicyPrinter(fmt=fmt, unit=cmdl.unit)
        stack.enter_context(printer)

        if verb == "list":
            results = dispatcher.dispatch(verb, cmdl.targets)
        else:
            results = dispatcher.dispatch(verb, cmdl.targets, cmdl.kind, cmdl.value)

        if not printer.print_results(results, action=verb):
            _LOG.debug("Nothing to print for target-set '%s'", cmdl.targets)

    return results

def set_command(args: argparse.Namespace,
                pman: ProcessManagerType) -> list[Dispatcher.PolicyResult]:
    """
    Implement the 'set' command: change an attribute of the target policies.

    Args:
        args: Parsed command-line arguments.
        pman: Process manager object for the target host.

    Returns:
        The values that were set, per policy.
    """

    return _run_command("set", args, pman)

def get_command(args: argparse.Namespace,
                pman: ProcessManagerType) -> list[Dispatcher.PolicyResult]:
    """
    Implement the 'get' command: print an attribute of the target policies.

    Args:
        args: Parsed command-line arguments.
        pman: Process manager object for the target host.

    Returns:
        The values that were read, per policy.
    """

    return _run_command("get", args, pman)

def list_command(args: argparse.Namespace,
                 pman: ProcessManagerType) -> list[Dispatcher.PolicyResult]:
    """
    Implement the 'list' command: print all attributes of the target policies.

    Args:
        args: Parsed command-line arguments.
        pman: Process manager object for the target host.

    Returns:
        The values that were read, per policy.
    """

    return _run_command("list", args, pman)
