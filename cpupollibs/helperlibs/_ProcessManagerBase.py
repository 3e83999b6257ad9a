# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause
#
# Author: Artem Bityutskiy <artem.bityutskiy@linux.intel.com>

"""
The base class for process managers. A process manager provides the file access API used for
reading and changing cpufreq policy attributes, and the API is the same for the local host and for
a remote host.

Sub-classes implement 'open()', 'lsdir()' and '_get_mode()'. The rest of the methods are
implemented on top of them.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import stat
import typing
from pathlib import Path
from cpupollibs.helperlibs import ClassHelpers
from cpupollibs.helperlibs.Exceptions import ErrorNotFound

if typing.TYPE_CHECKING:
    from typing import IO, Generator, TypedDict

    class LsdirTypedDict(TypedDict):
        """
        A directory entry.

        Attributes:
            name: Name of the entry.
            path: Full path to the entry.
            mode: The entry mode ('st_mode'), includes the entry type and permissions.
        """

        name: str
        path: Path
        mode: int

def get_err_prefix(fobj: IO, method_name: str) -> str:
    """
    Return the exception message prefix for a failed method of a file object, used with
    'ClassHelpers.WrapExceptions'.
    """

    return f"Method '{method_name}()' failed for '{fobj.name}'"

class ProcessManagerBase(ClassHelpers.SimpleCloseContext):
    """
    The base class for process managers.

    Public methods overview.
        * 'open()' - open a file.
        * 'read_file()', 'write_file()' - read or replace the contents of a file.
        * 'lsdir()' - list a directory.
        * 'exists()', 'is_file()', 'is_dir()' - check a path.

    Attributes:
        is_remote: Whether the host is a remote host.
        hostname: Name of the host.
        hostmsg: A " on host '<hostname>'" string for error messages, empty for the local host.
    """

    def __init__(self):
        """Initialize the class instance."""

        self.is_remote = False
        self.hostname = "localhost"
        self.hostmsg = ""

    def open(self, path: str | Path, mode: str) -> IO:
        """
        Open a file.

        Args:
            path: Path to the file to open.
            mode: The mode to open the file in, same as in the built-in 'open()' function. Text
                  mode files use the "utf-8" encoding.

        Returns:
            A file object, its methods raise only 'Error' exceptions.
        """

        raise NotImplementedError("ProcessManagerBase.open()")

    def lsdir(self, path: str | Path) -> Generator[LsdirTypedDict, None, None]:
        """
        Yield the entries of a directory, sorted by name.

        Args:
            path: Path to the directory to list.

        Raises:
            ErrorNotFound: If the directory does not exist.
        """

        raise NotImplementedError("ProcessManagerBase.lsdir()")

    def _get_mode(self, path: str | Path) -> int | None:
        """Return the 'st_mode' of a path, or None if the path does not exist."""

        raise NotImplementedError("ProcessManagerBase._get_mode()")

    def read_file(self, path: str | Path) -> str:
        """
        Read a text file.

        Args:
            path: Path to the file to read.

        Returns:
            The contents of the file.

        Raises:
            ErrorNotFound: If the file does not exist.
        """

        try:
            with self.open(path, "r") as fobj:
                return fobj.read()
        except ErrorNotFound as err:
            raise ErrorNotFound(f"File '{path}' does not exist{self.hostmsg}") from err

    def write_file(self, path: str | Path, data: str):
        """
        Replace the contents of a text file.

        Args:
            path: Path to the file to write to.
            data: The new contents of the file.
        """

        with self.open(path, "w") as fobj:
            fobj.write(data)

    def exists(self, path: str | Path) -> bool:
        """Return True if 'path' exists, False otherwise."""
        return self._get_mode(path) is not None

    def is_file(self, path: str | Path) -> bool:
        """Return True if 'path' exists and it is a regular file, False otherwise."""

        mode = self._get_mode(path)
        return mode is not None and stat.S_ISREG(mode)

    def is_dir(self, path: str | Path) -> bool:
        """Return True if 'path' exists and it is a directory, False otherwise."""

        mode = self._get_mode(path)
        return mode is not None and stat.S_ISDIR(mode)
