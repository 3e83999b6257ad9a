# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2023-2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause
#
# Authors: Antti Laakso <antti.laakso@intel.com>
#          Artem Bityutskiy <artem.bityutskiy@linux.intel.com>

"""Helper functions for running command-line tools from tests."""

from __future__ import annotations # Remove when switching to Python 3.10+.

import sys
import shlex
import types
import typing
from cpupollibs.helperlibs import Logging

if typing.TYPE_CHECKING:
    from typing import Any
    from cpupollibs.helperlibs.ProcessManager import ProcessManagerType

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.cpupol.{__name__}")

def run_tool(tool: types.ModuleType,
             toolname: str,
             arguments: str,
             pman: ProcessManagerType | None = None,
             exp_exc: type[Exception] | None = None) -> Any:
    """
    Run a tool command in-process and verify the outcome.

    Args:
        tool: The main Python module of the tool to run. Must provide 'parse_arguments()'.
        toolname: The name of the tool to run, used in error messages.
        arguments: The arguments to run the command with, e.g. 'get all gov avail'.
        pman: The process manager object to pass to the command.
        exp_exc: The expected exception type. By default, any exception is a failure. If set, the
                 command is expected to raise an exception of this type.

    Returns:
        The value returned by the command function, or None if the expected exception was raised.
    """

    cmd = f"{tool.__file__} {arguments}"
    _LOG.debug("running: %s", cmd)
    sys.argv = shlex.split(cmd)
    try:
        args = tool.parse_arguments()
        if pman:
            ret = args.func(args, pman)
        else:
            ret = args.func(args)
    except Exception as err: # pylint: disable=broad-except
        msg = f"command '{toolname} {arguments}' raised the following exception:\n" \
              f"- {type(err).__name__}({err})"
        if exp_exc is None:
            assert False, msg

        if isinstance(err, exp_exc):
            return None

        assert False, f"{msg}\nbut it was expected to raise the following exception:\n" \
                      f"- {exp_exc.__name__}"

    if exp_exc is not None:
        assert False, f"command '{toolname} {arguments}' did not raise the following " \
                      f"exception type:\n- {exp_exc.__name__}"

    return ret
