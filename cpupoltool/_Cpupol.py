# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause
#
# Authors: Artem Bityutskiy <artem.bityutskiy@linux.intel.com>
#          Niklas Neronin <niklas.neronin@intel.com>

"""
cpupol - a tool for reading and changing Linux cpufreq policy settings.
"""

import os
import sys
import argcomplete
from cpupollibs.helperlibs import ArgParse, Logging, ProcessManager
from cpupollibs.helperlibs.Exceptions import Error
from cpupollibs import PolicyVars, Dispatcher
from cpupollibs.Frequency import UNITS

if sys.version_info < (3, 8):
    raise SystemExit("this tool requires python version 3.8 or higher")

_VERSION = "1.0.0"
TOOLNAME = "cpupol"

# The environment variable for specifying the cpufreq policies directory.
SYSFS_ROOT_ENVVAR = "CPUPOL_SYSFS_ROOT"

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.cpupol").configure(prefix=TOOLNAME)

_SYSFS_ROOT_OPTION = {
    "short": None,
    "long":  "--sysfs-root",
    "argcomplete": "DirectoriesCompleter",
    "kwargs": {
        "dest": "sysfs_root",
        "default": None,
        "help": f"""Path to the cpufreq policies directory. This option is mostly for debugging and
                    testing. By default, the '{SYSFS_ROOT_ENVVAR}' environment variable value is
                    used, or '{PolicyVars.SYSFS_ROOT}' if it is not set.""",
    },
}

_SKIP_ATTR_CHECK_OPTION = {
    "short": None,
    "long":  "--skip-attr-check",
    "argcomplete": None,
    "kwargs": {
        "dest": "skip_attr_check",
        "action": "store_true",
        "help": """Do not require every policy directory to include all the cpufreq attribute
                   files. Useful for drivers which do not provide some of them (e.g., no EPP
                   files).""",
    },
}

# The options that may be specified before or after the command.
_GLOBAL_OPTIONS = ArgParse.SSH_OPTIONS + [_SYSFS_ROOT_OPTION, _SKIP_ATTR_CHECK_OPTION]

def _add_output_options(subpars, yaml=True):
    """Add the output format options to the 'subpars' sub-parser."""

    units = ", ".join(UNITS)
    text = f"""The unit to print frequencies in. Supported units are: {units}. The default unit is
               GHz."""
    subpars.add_argument("--unit", default="GHz", choices=list(UNITS), metavar="UNIT", help=text)

    if yaml:
        text = "Print information in YAML format. Frequencies are printed in KHz."
        subpars.add_argument("--yaml", action="store_true", help=text)

_TARGETS_HELP = """Target-set of cpufreq policies: a policy number (e.g., '2'), a comma-separated
                   list of policy numbers (e.g., '0,2,5'), an inclusive range of policy numbers
                   (e.g., '0:3'), or 'all' (also '*') for all policies."""

def build_arguments_parser():
    """Build and return the the command-line arguments parser object."""

    text = "cpupol - a tool for reading and changing Linux cpufreq policy settings."
    parser = ArgParse.ArgsParser(description=text, prog=TOOLNAME, ver=_VERSION,
                                 global_opts=_GLOBAL_OPTIONS)

    subparsers = parser.add_subparsers(title="commands", dest="a command")
    subparsers.required = True

    #
    # Create parser for the 'set' command.
    #
    text = "Change a cpufreq policy attribute."
    descr = """Change scaling frequency limits ('freq'), the governor ('gov'), the energy
               performance preference ('perf'), or the 'userspace' governor frequency ('speed') of
               cpufreq policies. The first failing policy aborts the command, and changes already
               made to the preceding policies are not rolled back."""
    subpars = subparsers.add_parser("set", help=text, description=descr)
    subpars.set_defaults(func=_set_command)

    subpars.add_argument("targets", help=_TARGETS_HELP)
    text = "The attribute to change: 'freq', 'gov', 'perf', or 'speed'."
    subpars.add_argument("kind", metavar="attribute", help=text)
    text = """The new value. For 'freq', use a '<min>:<max>' pair, where one of the frequencies
              may be omitted (e.g., '1.2:3.5', ':3g', or '800000k:'). Frequencies without a unit
              are in GHz if they include a decimal point, and in KHz otherwise. Use the 'g', 'm',
              'k' or 'h' suffix to specify GHz, MHz, KHz or Hz. For 'gov' and 'perf', use a name
              from the list of available governors or EPPs (case-insensitive)."""
    subpars.add_argument("value", help=text)
    _add_output_options(subpars, yaml=False)

    #
    # Create parser for the 'get' command.
    #
    text = "Read a cpufreq policy attribute."
    descr = """Read scaling frequencies ('freq'), the governor ('gov'), or the energy performance
               preference ('perf') of cpufreq policies."""
    subpars = subparsers.add_parser("get", help=text, description=descr)
    subpars.set_defaults(func=_get_command)

    subpars.add_argument("targets", help=_TARGETS_HELP)
    text = "The attribute to read: 'freq', 'gov', or 'perf'."
    subpars.add_argument("kind", metavar="attribute", help=text)
    text = """What to read. For 'freq': 'current' (or 'curr'), 'min', 'max', 'rmin' (min. rated
              frequency), 'rmax' (max. rated frequency), 'base', or 'speed'. For 'gov' and
              'perf': 'current' (or 'curr'), or 'available' (or 'avail'). The default is
              'current'."""
    subpars.add_argument("selector", nargs="?", default=None, help=text)
    _add_output_options(subpars)

    #
    # Create parser for the 'list' command.
    #
    text = "Print all cpufreq policy attributes."
    descr = """Print all attributes of cpufreq policies. Attributes which are not provided by the
               driver are printed as 'not supported'."""
    subpars = subparsers.add_parser("list", help=text, description=descr)
    subpars.set_defaults(func=_list_command)

    text = f"{_TARGETS_HELP} The default is 'all'."
    subpars.add_argument("targets", nargs="?", default="all", help=text)
    _add_output_options(subpars)

    argcomplete.autocomplete(parser)

    return parser

def _normalize_verb(argv):
    """
    Lower-case the command verb in the 'argv' command line arguments list ('argv[0]' is the program
    name), so that commands are case-insensitive.
    """

    valued_opts = set()
    for opt in _GLOBAL_OPTIONS:
        if opt["kwargs"].get("action") == "store_true":
            continue
        valued_opts.add(opt["long"])
        if opt["short"]:
            valued_opts.add(opt["short"])

    idx = 1
    while idx < len(argv):
        arg = argv[idx]
        if arg in valued_opts:
            idx += 2
            continue
        if arg.startswith("-"):
            idx += 1
            continue
        if arg.lower() in Dispatcher.VERBS:
            argv[idx] = arg.lower()
        break

def parse_arguments():
    """Parse command-line arguments."""

    _normalize_verb(sys.argv)

    parser = build_arguments_parser()
    args = parser.parse_args()

    return args

def get_sysfs_root(args):
    """
    Return the cpufreq policies directory path: the '--sysfs-root' option value, the
    'CPUPOL_SYSFS_ROOT' environment variable value, or the default path.
    """

    sysfs_root = getattr(args, "sysfs_root", None)
    if not sysfs_root:
        sysfs_root = os.getenv(SYSFS_ROOT_ENVVAR)
    if not sysfs_root:
        sysfs_root = PolicyVars.SYSFS_ROOT

    return sysfs_root

# pylint: disable=import-outside-toplevel

def _set_command(args, pman):
    """Implement the 'set' command."""

    from cpupoltool import _CpupolPolicies

    return _CpupolPolicies.set_command(args, pman)

def _get_command(args, pman):
    """Implement the 'get' command."""

    from cpupoltool import _CpupolPolicies

    return _CpupolPolicies.get_command(args, pman)

def _list_command(args, pman):
    """Implement the 'list' command."""

    from cpupoltool import _CpupolPolicies

    return _CpupolPolicies.list_command(args, pman)

def main():
    """Script entry point."""

    try:
        args = parse_arguments()

        if not getattr(args, "func", None):
            _LOG.error("please, run '%s -h' for help", TOOLNAME)
            return -1

        sshargs = ArgParse.format_ssh_args(args)
        with ProcessManager.get_pman(sshargs["hostname"], username=sshargs["username"],
                                     privkeypath=sshargs["privkey"],
                                     timeout=sshargs["timeout"]) as pman:
            args.func(args, pman)
    except KeyboardInterrupt:
        _LOG.info("\nInterrupted, exiting")
        return -1
    except Error as err:
        _LOG.error_out(err)

    return 0

if __name__ == "__main__":
    sys.exit(main())
