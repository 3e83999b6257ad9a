# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause
#
# Author: Artem Bityutskiy <artem.bityutskiy@linux.intel.com>

"""
Parse policy target-set tokens and resolve them to policy numbers.

Target-set token syntax:
  * "all" (case-insensitive) or "*" - all policies.
  * "<start>:<end>" - an inclusive range of policy numbers, 'end' must not be smaller than 'start'.
  * "<n1>,<n2>,..." - a list of policy numbers. Duplicates are allowed and the order is kept.
  * "<n>" - a single policy number.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import re
import typing
from cpupollibs.helperlibs.Exceptions import ErrorBadFormat

if typing.TYPE_CHECKING:
    from typing import Literal, Iterable, Sequence

    TargetKindType = Literal["all", "single", "range", "list"]

_NUM_REGEX = re.compile(r"[0-9]+")

def _parse_num(text: str, token: str) -> int:
    """
    Parse a policy number in a target-set token.

    Args:
        text: The policy number sub-string to parse.
        token: The whole target-set token, for the possible error message.

    Returns:
        The policy number.
    """

    val = text.strip()
    if not _NUM_REGEX.fullmatch(val):
        if token == text:
            raise ErrorBadFormat(f"Bad policy number '{text}': should be a non-negative integer, "
                                 f"a range like '0:3', a list like '0,2', or 'all'")
        raise ErrorBadFormat(f"Bad target-set '{token}': error in '{text}': should be a "
                             f"non-negative integer")
    return int(val)

class TargetExpression:
    """
    A parsed target-set token.

    Attributes:
        kind: The target-set kind: "all", "single", "range", or "list".
        nums: The policy numbers in the order they should be resolved in. Empty for "all", a
              'range' object for "range".
    """

    def __init__(self, kind: TargetKindType, nums: Sequence[int] = ()):
        """
        Initialize a class instance.

        Args:
            kind: The target-set kind.
            nums: The policy numbers of the target-set (ignored for "all").
        """

        self.kind: TargetKindType = kind
        self.nums: Sequence[int] = []
        if kind == "range":
            self.nums = nums
        elif kind != "all":
            self.nums = list(nums)

    def resolve(self, known: Iterable[int]) -> list[int]:
        """
        Resolve the target-set against the known policy numbers.

        Args:
            known: The known policy numbers, in store enumeration order.

        Returns:
            The policy numbers to operate on. Numbers which are not in 'known' are dropped. The
            result may be empty, which is not an error.
        """

        known = list(known)
        if self.kind == "all":
            return known

        if self.kind == "range":
            return [num for num in sorted(set(known)) if num in self.nums]

        known_set = set(known)
        return [num for num in self.nums if num in known_set]

    def __repr__(self) -> str:
        """Return the target-set representation."""
        return f"TargetExpression({self.kind!r}, {self.nums!r})"

def parse_target(token: str) -> TargetExpression:
    """
    Parse a target-set token.

    Args:
        token: The target-set token to parse, e.g., "all", "0:3", "1,5", or "2".

    Returns:
        The 'TargetExpression' object.

    Raises:
        ErrorBadFormat: If the token or any part of it cannot be parsed.
    """

    tok = token.strip()

    if tok == "*" or tok.lower() == "all":
        return TargetExpression("all")

    if ":" in tok:
        parts = tok.split(":")
        if len(parts) != 2:
            raise ErrorBadFormat(f"Bad target-set range '{token}': should be two policy numbers "
                                 f"separated by ':'")

        start = _parse_num(parts[0], token)
        end = _parse_num(parts[1], token)
        if end < start:
            raise ErrorBadFormat(f"Bad target-set range '{token}': the end policy number {end} is "
                                 f"smaller than the start policy number {start}")

        return TargetExpression("range", range(start, end + 1))

    if "," in tok:
        return TargetExpression("list", [_parse_num(part, token) for part in tok.split(",")])

    return TargetExpression("single", [_parse_num(tok, tok)])

def resolve(token: str, known: Iterable[int]) -> list[int]:
    """
    Parse a target-set token and resolve it against the known policy numbers. Refer to
    'TargetExpression.resolve()' for details.

    Args:
        token: The target-set token to resolve.
        known: The known policy numbers, in store enumeration order.

    Returns:
        The resolved policy numbers.
    """

    return parse_target(token).resolve(known)
