# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause
#
# Author: Artem Bityutskiy <artem.bityutskiy@linux.intel.com>

"""
Exception types used in this project.

The 'Error' class is the base of every exception raised by 'cpupol'. The sub-classes map to the
following failure categories.
  * 'ErrorBadFormat' - a malformed frequency value, target-set token, or file contents.
  * 'ErrorConstruction' - a bad policies root, policy directory name, or missing attribute file.
  * 'ErrorAttributeIO' - an attribute file is absent, unreadable, or unwritable.
  * 'ErrorValidation' - a value is not allowed. Frequency ordering violations are reported with the
    'ErrorOutOfRange' and 'ErrorBadOrder' sub-classes.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

from typing import Any, Match
import re

class Error(Exception):
    """The base class for all exceptions raised by this project."""

    def __init__(self, msg: str, *args: Any, **kwargs: Any):
        """
        Initialize the exception object.

        Args:
            msg: The exception message.
            *args: Positional arguments for the message.
            **kwargs: Additional keyword arguments, stored as attributes of the exception object.
        """

        msg = str(msg)
        super().__init__(msg)

        for key, val in kwargs.items():
            setattr(self, key, val)

        if args:
            self.msg = msg % tuple(args)
        else:
            self.msg = msg

    def indent(self, indent: int | str, capitalize: bool = True) -> str:
        """
        Indent/prefix each line in the error message.

        Args:
            indent: Number of white spaces or a string to prefix each line of the message with.
            capitalize: If True, ensures the message starts with a capital letter.

        Returns:
            The modified error message.
        """

        def _capitalize(mobj: Match[str]) -> str:
            """Capitalize the first non-white-space character of the message."""
            return mobj.group(1) + mobj.group(2).capitalize()

        if isinstance(indent, int):
            pfx = " " * indent
        else:
            pfx = indent

        msg = pfx + self.msg.replace("\n", f"\n{pfx}")
        if capitalize:
            msg = re.sub(r"^(\s*)(\S)", _capitalize, msg)

        return msg

    def __str__(self):
        """The string representation of the exception."""
        return self.msg

class ErrorNotFound(Error):
    """Something was not found."""

class ErrorPermissionDenied(Error):
    """Permission denied."""

class ErrorBadFormat(Error):
    """Bad format of something, e.g., a frequency value or file contents."""

class ErrorConstruction(Error):
    """Failed to construct an object, e.g., a policy directory object."""

class ErrorAttributeIO(Error):
    """
    Failed to read or write a policy attribute file.

    Attributes:
        attr: Name of the attribute the failed operation was about.
        path: Path to the attribute file.
    """

class ErrorValidation(Error):
    """A value was rejected, e.g., a governor name which is not in the available governors list."""

class ErrorOutOfRange(ErrorValidation):
    """A frequency value is outside of the rated (hardware) limits."""

class ErrorBadOrder(ErrorValidation):
    """A min. frequency would become greater than the max. frequency, or vice versa."""

class ErrorConnect(Error):
    """Failed to connect to a remote host."""

    def __init__(self, msg: str, *args: Any, host: str | None = None, **kwargs: Any):
        """
        Initialize the exception object.

        Args:
            msg: The exception message.
            *args: Positional arguments for the message.
            host: The host the connection failed to.
            **kwargs: Additional keyword arguments.
        """

        if host:
            msg = f"Cannot connect to host '{host}'\n{msg}"

        super().__init__(msg, *args, **kwargs)

def translate(err: Exception, errmsg: str) -> Error:
    """
    Translate a standard exception into an 'Error' exception.

    Args:
        err: The exception to translate.
        errmsg: The first line of the new exception message, the message of 'err' follows it.

    Returns:
        'ErrorPermissionDenied' for 'PermissionError', 'ErrorNotFound' for 'FileNotFoundError', and
        'Error' for the rest.
    """

    exc_type: type[Error] = Error
    if isinstance(err, PermissionError):
        exc_type = ErrorPermissionDenied
    elif isinstance(err, FileNotFoundError):
        exc_type = ErrorNotFound

    return exc_type(f"{errmsg}\n{Error(str(err)).indent(2)}")
