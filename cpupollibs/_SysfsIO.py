# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2023-2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause
#
# Authors: Artem Bityutskiy <artem.bityutskiy@linux.intel.com>
#          Antti Laakso <antti.laakso@linux.intel.com>

"""
Provide API for reading and writing sysfs attribute files. There is no caching: every read goes to
the file.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import typing
from cpupollibs.helperlibs import Logging, LocalProcessManager, ClassHelpers, Trivial
from cpupollibs.helperlibs.Exceptions import Error, ErrorBadFormat, ErrorAttributeIO

if typing.TYPE_CHECKING:
    from pathlib import Path
    from cpupollibs.helperlibs.ProcessManager import ProcessManagerType

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.cpupol.{__name__}")

class SysfsIO(ClassHelpers.SimpleCloseContext):
    """
    Provide API for reading and writing sysfs attribute files.

    Public methods overview.
        * 'read()' - read a string.
        * 'read_int()' - read an integer.
        * 'write()' - replace the file contents with a string.
    """

    def __init__(self, pman: ProcessManagerType | None = None):
        """
        Initialize a class instance.

        Args:
            pman: The process manager object that defines the target host. Use a local process
                  manager if not provided.
        """

        self._close_pman = pman is None

        self._pman: ProcessManagerType
        if not pman:
            self._pman = LocalProcessManager.LocalProcessManager()
        else:
            self._pman = pman

    def close(self):
        """Uninitialize the class object."""
        ClassHelpers.close(self, close_attrs=("_pman",))

    def read(self, path: Path, what: str) -> str:
        """
        Read the contents of a sysfs file.

        Args:
            path: Path to the sysfs file to read.
            what: Name of the attribute being read, included in exception messages.

        Returns:
            The contents of the file with the surrounding white-spaces stripped.

        Raises:
            ErrorAttributeIO: If the file does not exist or cannot be read.
        """

        _LOG.debug("Reading '%s' from '%s'%s", what, path, self._pman.hostmsg)

        if not self._pman.is_file(path):
            raise ErrorAttributeIO(f"Cannot read '{what}': file '{path}' does not "
                                   f"exist{self._pman.hostmsg}", attr=what, path=path)

        try:
            val = self._pman.read_file(path)
        except Error as err:
            raise ErrorAttributeIO(f"Failed to read '{what}' from '{path}'{self._pman.hostmsg}:\n"
                                   f"{err.indent(2)}", attr=what, path=path) from err

        return val.strip()

    def read_int(self, path: Path, what: str) -> int:
        """
        Read a sysfs file and return its contents as an integer.

        Args:
            path: Path to the sysfs file to read.
            what: Name of the attribute being read, included in exception messages.

        Returns:
            The integer value read from the file.

        Raises:
            ErrorAttributeIO: If the file does not exist or cannot be read.
            ErrorBadFormat: If the file contents is not a non-negative integer.
        """

        val = self.read(path, what)

        try:
            ival = Trivial.str_to_int(val, what=f"'{what}' value")
        except Error as err:
            raise ErrorBadFormat(f"Bad contents of '{what}' sysfs file '{path}'"
                                 f"{self._pman.hostmsg}:\n{err.indent(2)}") from err

        if ival < 0:
            raise ErrorBadFormat(f"Bad contents of '{what}' sysfs file '{path}'"
                                 f"{self._pman.hostmsg}: negative value '{val}'")
        return ival

    def write(self, path: Path, val: str, what: str):
        """
        Replace the contents of a sysfs file with a value.

        Args:
            path: Path to the sysfs file to write to.
            val: The value to write.
            what: Name of the attribute being written, included in exception messages.

        Raises:
            ErrorAttributeIO: If the file does not exist or cannot be written.
        """

        _LOG.debug("Writing value '%s' to '%s' sysfs file '%s'%s",
                   val, what, path, self._pman.hostmsg)

        if not self._pman.is_file(path):
            raise ErrorAttributeIO(f"Cannot write '{what}': file '{path}' does not "
                                   f"exist{self._pman.hostmsg}", attr=what, path=path)

        try:
            self._pman.write_file(path, val)
        except Error as err:
            if len(val) > 24:
                val = f"{val[:23]}...snip..."
            raise ErrorAttributeIO(f"Failed to write value '{val}' to '{what}' sysfs file '{path}'"
                                   f"{self._pman.hostmsg}:\n{err.indent(2)}",
                                   attr=what, path=path) from err
