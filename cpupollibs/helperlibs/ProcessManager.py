# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause
#
# Author: Artem Bityutskiy <artem.bityutskiy@linux.intel.com>

"""
Create process managers. The cpufreq policy code does not care which host it operates on, it gets
a process manager object and does all the file I/O through it.
"""

from  __future__ import annotations # Remove when switching to Python 3.10+.

import typing
import contextlib
from typing import cast
from pathlib import Path
from cpupollibs.helperlibs import LocalProcessManager, SSHProcessManager

if typing.TYPE_CHECKING:
    from typing import Union

    ProcessManagerType = Union[LocalProcessManager.LocalProcessManager,
                               SSHProcessManager.SSHProcessManager]

def get_pman(hostname: str,
             username: str = "",
             privkeypath: str | Path | None = None,
             timeout: int | float | None = None) -> ProcessManagerType:
    """
    Return a process manager for a host: the local one for "localhost" without a user name, and an
    SSH one connected to the host otherwise.

    Args:
         hostname: Name of the host.
         username: Name of the SSH user.
         privkeypath: Path to the private SSH key.
         timeout: The SSH connection timeout in seconds.

    Example:
        with get_pman("localhost") as pman:
            governor = pman.read_file("/sys/devices/system/cpu/cpufreq/policy0/scaling_governor")
    """

    if hostname == "localhost" and not username:
        return LocalProcessManager.LocalProcessManager()

    return SSHProcessManager.SSHProcessManager(hostname, username=username,
                                               privkeypath=privkeypath, timeout=timeout)

def pman_or_local(pman: ProcessManagerType | None) -> ProcessManagerType:
    """
    Return a context manager yielding 'pman', or a new local process manager if 'pman' is None.
    On exit, the new local process manager is closed, while 'pman' is left open, since it belongs to
    the caller.
    """

    if not pman:
        return LocalProcessManager.LocalProcessManager()

    return cast("ProcessManagerType", contextlib.nullcontext(enter_result=pman))
