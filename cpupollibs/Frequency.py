# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause
#
# Author: Artem Bityutskiy <artem.bityutskiy@linux.intel.com>

"""
Provide the 'Frequency' value type: a non-negative frequency value tagged with its unit, plus
parsing of user-provided frequency values.

Frequency value syntax:
  * Comma separators are ignored ("2,500,000k" is the same as "2500000k").
  * A trailing 'g', 'm', 'k' or 'h' letter (case-insensitive) selects GHz, MHz, KHz or Hz.
  * Without a unit letter, a value with a decimal point is in GHz, a value without it is in KHz.
  * Only GHz values may be fractional.

Frequency pair syntax is '<min>:<max>', where one of the sides may be empty.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import re
import typing
from decimal import Decimal
from cpupollibs.helperlibs.Exceptions import Error, ErrorBadFormat

if typing.TYPE_CHECKING:
    from typing import Literal, Union

    UnitType = Literal["Hz", "KHz", "MHz", "GHz"]
    FreqPairType = tuple[Union["Frequency", None], Union["Frequency", None]]

# Amount of Hz in every supported unit.
UNITS: dict[UnitType, int] = {"Hz": 1, "KHz": 1000, "MHz": 1000 * 1000, "GHz": 1000 * 1000 * 1000}

# Unit letters in frequency values.
_SUFFIXES: dict[str, UnitType] = {"g": "GHz", "m": "MHz", "k": "KHz", "h": "Hz"}

_INT_REGEX = re.compile(r"[0-9]+")
_FLOAT_REGEX = re.compile(r"[0-9]+\.?[0-9]*|\.[0-9]+")

class Frequency:
    """
    A non-negative frequency value with a unit. GHz values are floating point numbers, values in
    other units are integers.

    Two frequencies are equal only if both the unit and the value are equal, e.g., 'KHz(1000)' is
    not equal to 'MHz(1)'. Convert to a common unit to compare frequencies by magnitude.
    """

    def __init__(self, value: int | float, unit: UnitType):
        """
        Initialize a class instance.

        Args:
            value: The frequency value.
            unit: The frequency unit.
        """

        if unit not in UNITS:
            units = ", ".join(UNITS)
            raise Error(f"BUG: bad frequency unit '{unit}', use one of: {units}")

        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise Error(f"BUG: bad frequency value '{value}' of type '{type(value).__name__}'")

        if unit == "GHz":
            value = float(value)
        elif not isinstance(value, int):
            raise Error(f"BUG: bad frequency value '{value}': {unit} values must be integers")

        if value < 0:
            raise ErrorBadFormat(f"Bad frequency value '{value} {unit}': must not be negative")

        self.value = value
        self.unit: UnitType = unit

    def get_hz(self) -> int:
        """
        Return the frequency value in Hz as an integer. GHz values are truncated toward zero.

        The decimal representation of GHz values is used, so that, for example, 2.3 GHz results in
        exactly 2300000000 Hz.
        """

        if self.unit == "GHz":
            return int(Decimal(repr(self.value)) * UNITS["GHz"])
        return int(self.value) * UNITS[self.unit]

    def to_unit(self, unit: UnitType) -> Frequency:
        """
        Convert the frequency to a different unit. Conversion to integer units integer-divides the
        value in Hz, discarding the remainder.

        Args:
            unit: The unit to convert to.

        Returns:
            A new 'Frequency' object.
        """

        if unit == self.unit:
            return Frequency(self.value, unit)

        if unit == "GHz":
            return Frequency(self.get_hz() / UNITS["GHz"], "GHz")
        return Frequency(self.get_hz() // UNITS[unit], unit)

    def to_hz(self) -> Frequency:
        """Convert the frequency to Hz."""
        return self.to_unit("Hz")

    def to_khz(self) -> Frequency:
        """Convert the frequency to KHz."""
        return self.to_unit("KHz")

    def to_mhz(self) -> Frequency:
        """Convert the frequency to MHz."""
        return self.to_unit("MHz")

    def to_ghz(self) -> Frequency:
        """Convert the frequency to GHz."""
        return self.to_unit("GHz")

    def __eq__(self, other: object) -> bool:
        """Return 'True' if 'other' is a frequency with the same unit and value."""

        if not isinstance(other, Frequency):
            return NotImplemented
        return self.unit == other.unit and self.value == other.value

    def __hash__(self) -> int:
        """Return the hash of the frequency."""
        return hash((self.unit, self.value))

    def __str__(self) -> str:
        """Return the human-readable frequency string, e.g., '2.50 GHz' or '800000 KHz'."""

        if self.unit == "GHz":
            return f"{self.value:.2f} GHz"
        return f"{self.value} {self.unit}"

    def __repr__(self) -> str:
        """Return the frequency representation, e.g., 'GHz(2.5)'."""
        return f"{self.unit}({self.value!r})"

def Hz(value: int) -> Frequency: # pylint: disable=invalid-name
    """Create a frequency object in Hz."""
    return Frequency(value, "Hz")

def KHz(value: int) -> Frequency: # pylint: disable=invalid-name
    """Create a frequency object in KHz."""
    return Frequency(value, "KHz")

def MHz(value: int) -> Frequency: # pylint: disable=invalid-name
    """Create a frequency object in MHz."""
    return Frequency(value, "MHz")

def GHz(value: float) -> Frequency: # pylint: disable=invalid-name
    """Create a frequency object in GHz."""
    return Frequency(value, "GHz")

def parse_freq(text: str) -> Frequency:
    """
    Parse a frequency value string.

    Args:
        text: The frequency value string to parse, e.g., "2.5", "2,500,000", or "800m".

    Returns:
        The parsed 'Frequency' object.

    Raises:
        ErrorBadFormat: If the frequency value is malformed or has an unknown unit letter.
    """

    val = text.replace(",", "").strip()
    if not val:
        raise ErrorBadFormat(f"Bad frequency value '{text}': the value is empty")

    suffix = val[-1]
    unit: UnitType
    if suffix.isalpha():
        if suffix.lower() not in _SUFFIXES:
            letters = ", ".join(_SUFFIXES)
            raise ErrorBadFormat(f"Bad frequency value '{text}': invalid unit suffix '{suffix}', "
                                 f"use one of: {letters}")
        unit = _SUFFIXES[suffix.lower()]
        val = val[:-1].strip()
    elif "." in val:
        unit = "GHz"
    else:
        unit = "KHz"

    if unit == "GHz":
        if not _FLOAT_REGEX.fullmatch(val):
            raise ErrorBadFormat(f"Bad frequency value '{text}': should be a non-negative number")
        return Frequency(float(val), unit)

    if not _INT_REGEX.fullmatch(val):
        raise ErrorBadFormat(f"Bad frequency value '{text}': should be a non-negative integer "
                             f"number of {unit} (only GHz values may be fractional)")
    return Frequency(int(val), unit)

def parse_freq_pair(text: str) -> FreqPairType:
    """
    Parse a '<min>:<max>' frequency pair string.

    Args:
        text: The frequency pair string to parse, e.g., "1.2:3.5", ":3.5g" or "800000:".

    Returns:
        A '(min, max)' tuple of 'Frequency' objects. An empty side of the pair is 'None', which
        means "leave unchanged".

    Raises:
        ErrorBadFormat: If the pair is malformed or both sides are empty.
    """

    if text.count(":") != 1:
        raise ErrorBadFormat(f"Bad frequency pair '{text}': should be '<min>:<max>', separated "
                             f"by exactly one ':'")

    smin, smax = (val.strip() for val in text.split(":"))
    if not smin and not smax:
        raise ErrorBadFormat(f"Bad frequency pair '{text}': both min. and max. frequencies are "
                             f"empty")

    minfreq = parse_freq(smin) if smin else None
    maxfreq = parse_freq(smax) if smax else None

    return (minfreq, maxfreq)
