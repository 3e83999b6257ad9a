#!/usr/bin/python
#
# Copyright (C) 2020-2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause
#
# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Author: Antti Laakso <antti.laakso@intel.com>

"""
The main entry point for the 'cpupol' tool, used when the project is packaged as a zipapp archive
(e.g., 'python3 -m zipapp . -o cpupol.pyz').
"""

import sys
from cpupoltool._Cpupol import main

if __name__ == "__main__":
    sys.exit(main())
