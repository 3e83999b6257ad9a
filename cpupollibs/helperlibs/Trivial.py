# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause
#
# Author: Artem Bityutskiy <artem.bityutskiy@linux.intel.com>

"""
Small helpers for converting strings to numbers and formatting lists of numbers.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import os
import pwd
import typing
from cpupollibs.helperlibs.Exceptions import Error, ErrorBadFormat

if typing.TYPE_CHECKING:
    from typing import Iterable

def get_username(uid: int | None = None) -> str:
    """
    Return the name of the user with ID 'uid' (the current process user by default).
    """

    if uid is None:
        uid = os.getuid()

    try:
        return pwd.getpwuid(uid).pw_name
    except KeyError:
        raise Error(f"No user with UID {uid}") from None

def str_to_int(snum: str | int, what: str = "value") -> int:
    """
    Convert a decimal string to an integer.

    Args:
        snum: The string to convert.
        what: Description of the value for the error message.

    Raises:
        ErrorBadFormat: If 'snum' is not a decimal integer.
    """

    try:
        return int(str(snum), 10)
    except (ValueError, TypeError):
        raise ErrorBadFormat(f"Bad {what} '{snum}': should be an integer") from None

def str_to_num(snum: str | int | float, what: str = "value") -> int | float:
    """
    Convert a string to an integer (any base with a '0x', '0o' or '0b' prefix), or to a floating
    point number if it is not an integer.

    Args:
        snum: The string to convert.
        what: Description of the value for the error message.

    Raises:
        ErrorBadFormat: If 'snum' is not a number.
    """

    for convert in (lambda val: int(val, 0), float):
        try:
            return convert(str(snum))
        except (ValueError, TypeError):
            continue

    raise ErrorBadFormat(f"Bad {what} '{snum}': should be an integer or floating point number")

def rangify(numbers: Iterable[int]) -> str:
    """
    Format integers as a comma-separated string of ranges, for example '0-3,5,7,8' for
    '[0, 1, 2, 3, 5, 7, 8]'. Duplicates are dropped and the numbers are sorted. A run of two
    consecutive numbers is not collapsed into a range.
    """

    runs: list[list[int]] = []
    for num in sorted(set(numbers)):
        if runs and runs[-1][-1] == num - 1:
            runs[-1].append(num)
        else:
            runs.append([num])

    parts = []
    for run in runs:
        if len(run) > 2:
            parts.append(f"{run[0]}-{run[-1]}")
        else:
            parts += [str(num) for num in run]

    return ",".join(parts)
