# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause
#
# Author: Artem Bityutskiy <artem.bityutskiy@linux.intel.com>

"""
The process manager for the local host: cpufreq policy files are accessed directly.
"""

from  __future__ import annotations # Remove when switching to Python 3.10+.

import os
import typing
from pathlib import Path
from typing import IO, cast
from cpupollibs.helperlibs import _ProcessManagerBase, ClassHelpers, Exceptions
from cpupollibs.helperlibs.Exceptions import ErrorNotFound

if typing.TYPE_CHECKING:
    from typing import Generator
    from cpupollibs.helperlibs._ProcessManagerBase import LsdirTypedDict

class LocalProcessManager(_ProcessManagerBase.ProcessManagerBase):
    """The process manager for the local host."""

    def open(self, path: str | Path, mode: str) -> IO:
        """Refer to 'ProcessManagerBase.open()'."""

        # pylint: disable=consider-using-with
        encoding = None if "b" in mode else "utf-8"
        try:
            fobj = open(path, mode, encoding=encoding)
        except OSError as err:
            errmsg = f"Failed to open file '{path}' with mode '{mode}':"
            raise Exceptions.translate(err, errmsg) from None

        wfobj = ClassHelpers.WrapExceptions(fobj, get_err_prefix=_ProcessManagerBase.get_err_prefix)
        return cast(IO, wfobj)

    def lsdir(self, path: str | Path) -> Generator[LsdirTypedDict, None, None]:
        """Refer to 'ProcessManagerBase.lsdir()'."""

        path = Path(path)

        try:
            with os.scandir(path) as it:
                entries = sorted(it, key=lambda entry: entry.name)
        except FileNotFoundError:
            raise ErrorNotFound(f"Directory '{path}' does not exist") from None
        except OSError as err:
            errmsg = f"Failed to list directory '{path}':"
            raise Exceptions.translate(err, errmsg) from None

        for entry in entries:
            try:
                mode = entry.stat(follow_symlinks=False).st_mode
            except OSError as err:
                errmsg = f"Failed to get the mode of '{entry.path}':"
                raise Exceptions.translate(err, errmsg) from None

            yield {"name": entry.name, "path": path / entry.name, "mode": mode}

    def _get_mode(self, path: str | Path) -> int | None:
        """Refer to 'ProcessManagerBase._get_mode()'."""

        try:
            return os.stat(path).st_mode
        except (FileNotFoundError, NotADirectoryError):
            return None
        except OSError as err:
            raise Exceptions.translate(err, f"Failed to check '{path}':") from None
