# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause
#
# Author: Artem Bityutskiy <artem.bityutskiy@linux.intel.com>

"""
Provide YAML dumping capabilities.
"""

from  __future__ import annotations # Remove when switching to Python 3.10+.

from pathlib import Path, PosixPath
from typing import Any, IO
import yaml
from cpupollibs.helperlibs import Logging
from cpupollibs.helperlibs.Exceptions import Error

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.cpupol.{__name__}")

class _Dumper(yaml.SafeDumper):
    """A YAML dumper representing 'None' as an empty value and paths as strings."""

def _represent_none(dumper: yaml.SafeDumper, _: None) -> yaml.ScalarNode:
    """Represent 'None' values as empty values."""
    return dumper.represent_scalar("tag:yaml.org,2002:null", "")

def _represent_posixpath(dumper: yaml.SafeDumper, value: PosixPath) -> yaml.ScalarNode:
    """Represent a 'PosixPath' object as a string."""
    return dumper.represent_scalar("tag:yaml.org,2002:str", str(value))

_Dumper.add_representer(type(None), _represent_none)
_Dumper.add_representer(PosixPath, _represent_posixpath)

def dump(data: dict[str, Any], path: Path | IO[str]):
    """
    Dump a dictionary in YAML format, keeping the order of the keys.

    Args:
        data: The dictionary to dump.
        path: The file path or file object to write the YAML data to.
    """

    try:
        if hasattr(path, "write"):
            yaml.dump(data, path, Dumper=_Dumper, default_flow_style=False, sort_keys=False)
        else:
            with open(path, "w", encoding="utf-8") as fobj:
                yaml.dump(data, fobj, Dumper=_Dumper, default_flow_style=False, sort_keys=False)
            _LOG.debug("wrote YAML file at '%s'", path)
    except OSError as err:
        msg = Error(str(err)).indent(2)
        raise Error(f"Failed to write YAML file '{path}':\n{msg}") from err
