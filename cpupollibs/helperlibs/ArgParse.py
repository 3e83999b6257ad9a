# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause
#
# Author: Artem Bityutskiy <artem.bityutskiy@linux.intel.com>

"""
Command-line parsing helpers built on top of 'argparse':
  * option definition dictionaries and 'add_options()' for adding them to a parser,
  * the SSH options shared by tools which can operate on a remote host,
  * 'ArgsParser' - an 'argparse.ArgumentParser' with the standard options, "global" options which
    may be placed before or after the sub-command, and 'Error' exceptions instead of exiting.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import re
import types
import typing
import argparse
import argcomplete
from cpupollibs.helperlibs import DamerauLevenshtein, Trivial
from cpupollibs.helperlibs.Exceptions import Error

if typing.TYPE_CHECKING:
    from typing import TypedDict, Iterable, Any

    # The type of the object returned by 'add_subparsers()'. The class is private, but documented.
    SubParsersType = argparse._SubParsersAction # pylint: disable=protected-access

    class ArgKwargsTypedDict(TypedDict, total=False):
        """
        Keyword arguments of an option, passed as is to 'add_argument()'.

        Attributes:
            dest: Name of the namespace attribute to store the option value in.
            default: The value to use when the option is not specified.
            metavar: The option value name in the help text.
            action: The 'argparse' action, e.g., "store_true".
            help: The option description.
        """

        dest: str
        default: str | int | None
        metavar: str
        action: str
        help: str

    class ArgTypedDict(TypedDict):
        """
        A command-line option definition.

        Attributes:
            short: The short option name, e.g. "-H", or None.
            long: The long option name, e.g. "--host".
            argcomplete: Name of the 'argcomplete.completers' class for tab completion, or None.
            kwargs: The 'add_argument()' keyword arguments.
        """

        short: str | None
        long: str
        argcomplete: str | None
        kwargs: ArgKwargsTypedDict

    class SSHArgsTypedDict(TypedDict):
        """
        Validated SSH options.

        Attributes:
            hostname: Name of the host to operate on, "localhost" for the local host.
            username: Name of the SSH user, "root" by default for a remote host, and an empty string
                      for the local host.
            privkey: Path to the SSH private key, an empty string to use the default keys.
            timeout: SSH connection timeout in seconds, None for the local host.
        """

        hostname: str
        username: str
        privkey: str
        timeout: int | float | None

# SSH connection timeout used when the '--timeout' option is not specified.
SSH_TIMEOUT = 8

SSH_OPTIONS: list[ArgTypedDict] = [
    {
        "short": "-H",
        "long": "--host",
        "argcomplete": None,
        "kwargs": {
            "dest": "hostname",
            "default": "localhost",
            "help": """Name or IP address of the host to operate on. The cpufreq policies of a
                       remote host are accessed over SSH. By default, the local host is used.""",
        },
    },
    {
        "short": "-U",
        "long": "--username",
        "argcomplete": None,
        "kwargs": {
            "dest": "username",
            "default": "",
            "help": """Name of the SSH user for logging into the remote host. Changing cpufreq
                       policy attributes usually requires superuser privileges, so the default
                       user name is 'root'.""",
        },
    },
    {
        "short": "-K",
        "long": "--priv-key",
        "argcomplete": "FilesCompleter",
        "kwargs": {
            "dest": "privkey",
            "default": "",
            "help": """Path to the SSH private key for logging into the remote host. By default,
                       the keys in the standard locations (e.g., '$HOME/.ssh') are used.""",
        },
    },
    {
        "short": "-T",
        "long": "--timeout",
        "argcomplete": None,
        "kwargs": {
            "dest": "timeout",
            "default": "",
            "help": f"""SSH connection timeout in seconds. The default is {SSH_TIMEOUT}
                        seconds.""",
        },
    },
]

def add_options(parser: argparse.ArgumentParser, options: Iterable[ArgTypedDict]):
    """
    Add options described by option definition dictionaries to a parser.

    Args:
        parser: The parser to add the options to.
        options: The option definitions.
    """

    for opt in options:
        names = [opt["long"]]
        if opt["short"]:
            names.insert(0, opt["short"])

        arg = parser.add_argument(*names, **opt["kwargs"])
        if opt["argcomplete"]:
            setattr(arg, "completer", getattr(argcomplete.completers, opt["argcomplete"]))

def format_ssh_args(args: argparse.Namespace) -> SSHArgsTypedDict:
    """
    Validate the SSH options and apply the defaults.

    Args:
        args: The parsed command-line arguments.

    Returns:
        The SSH options dictionary.

    Raises:
        Error: If an SSH-only option is used without the '--host' option, or the timeout value is
               not a number.
    """

    hostname: str = getattr(args, "hostname", "localhost")
    username: str = getattr(args, "username", "")
    privkey: str = getattr(args, "privkey", "")
    timeout: int | float | None = None

    if hostname == "localhost":
        for name, val in (("--username", username), ("--priv-key", privkey),
                          ("--timeout", getattr(args, "timeout", None))):
            if val:
                raise Error(f"The '{name}' option requires the '--host' option")
    else:
        username = username or "root"
        timeout = SSH_TIMEOUT
        if getattr(args, "timeout", None):
            timeout = Trivial.str_to_num(args.timeout, what="'--timeout' option value")

    return {"hostname": hostname, "username": username, "privkey": privkey, "timeout": timeout}

def _add_parser(subparsers: SubParsersType, *args: Any, **kwargs: Any) -> argparse.ArgumentParser:
    """
    A replacement for the 'add_parser()' method of subparsers objects, which collapses white-spaces
    in the 'description' argument and calls the original method.
    """

    if "description" in kwargs:
        kwargs["description"] = " ".join(kwargs["description"].split())

    return getattr(subparsers, "__orig_add_parser")(*args, **kwargs)

# Extracts the offending value and the choices from an "invalid choice" error message. Older
# Python versions quote the choices, newer ones do not.
_INVALID_CHOICE_REGEX = re.compile(r"invalid choice: '?(?P<val>[^']*)'? \(choose from (?P<opts>.*)\)")

class ArgsParser(argparse.ArgumentParser):
    """
    An 'argparse.ArgumentParser' with the following additions.
      - The '-h', '-q', '-d', '--force-color' and (optionally) '--version' options.
      - Global options: options of the main parser which may also be placed after the sub-command.
      - Sub-command descriptions with white-spaces collapsed.
      - Errors are raised as 'Error' exceptions with a "most similar argument" suggestion, instead
        of exiting.
    """

    def __init__(self, *args: Any, ver: str | None = None,
                 global_opts: Iterable[ArgTypedDict] = (), **kwargs: Any):
        """
        Initialize a class instance.

        Args:
            *args: Positional arguments for 'argparse.ArgumentParser'.
            ver: The tool version. The '--version' option is added if provided.
            global_opts: Definitions of the options which may be placed after the sub-command. The
                         options are added to the parser.
            **kwargs: Keyword arguments for 'argparse.ArgumentParser'.
        """

        kwargs["add_help"] = False
        super().__init__(*args, **kwargs)

        self._global_opts = list(global_opts)

        self.add_argument("-h", "--help", dest="help", action="help",
                          help="Show this help message and exit.")
        self.add_argument("-q", "--quiet", dest="quiet", action="store_true",
                          help="Be quiet, print only warnings and errors.")
        self.add_argument("--force-color", action="store_true",
                          help="""Use colors in the output even if it is not a terminal (adds ANSI
                                  escape codes).""")
        self.add_argument("-d", "--debug", dest="debug", action="store_true",
                          help="Print debugging information.")
        if ver:
            self.add_argument("--version", action="version", version=ver,
                              help="Print the version number and exit.")

        add_options(self, self._global_opts)

    def _parse_global_opts(self, args: argparse.Namespace, uargs: list[str]):
        """
        Move global options found among the unrecognized arguments 'uargs' to the 'args'
        namespace.
        """

        for opt in self._global_opts:
            names = [name for name in (opt["short"], opt["long"]) if name]
            optname = next((name for name in names if name in uargs), None)
            if not optname:
                continue

            idx = uargs.index(optname)
            if opt["kwargs"].get("action") == "store_true":
                setattr(args, opt["kwargs"]["dest"], True)
                del uargs[idx]
                continue

            if idx + 1 >= len(uargs) or uargs[idx + 1].startswith("-"):
                raise Error(f"Value required for argument '{optname}'")

            setattr(args, opt["kwargs"]["dest"], uargs[idx + 1])
            del uargs[idx:idx + 2]

    def parse_args(self, *args: Any, **kwargs: Any) -> argparse.Namespace: # type: ignore[override]
        """
        Parse the command-line arguments, including the global options placed after the
        sub-command.

        Args:
            *args: Positional arguments for 'parse_known_args()'.
            **kwargs: Keyword arguments for 'parse_known_args()'.

        Returns:
            The parsed arguments namespace.

        Raises:
            Error: If an argument is not recognized, or '-q' and '-d' are used together.
        """

        _args, uargs = super().parse_known_args(*args, **kwargs)
        self._parse_global_opts(_args, uargs)
        if uargs:
            raise Error(f"Unrecognized option(s): {' '.join(uargs)}")

        if getattr(_args, "quiet", False) and getattr(_args, "debug", False):
            raise Error("The '-q' and '-d' options cannot be used together")

        return _args

    def add_subparsers(self, *args: Any, **kwargs: Any) -> SubParsersType:
        """Create a subparsers object with the customized 'add_parser()' method."""

        subparsers = super().add_subparsers(*args, **kwargs)
        setattr(subparsers, "__orig_add_parser", subparsers.add_parser)
        setattr(subparsers, "add_parser", types.MethodType(_add_parser, subparsers))

        return subparsers

    def error(self, message: str):
        """
        Raise an 'Error' exception instead of printing the message and exiting.

        Args:
            message: The 'argparse' error message.
        """

        mobj = _INVALID_CHOICE_REGEX.search(message)
        if not mobj:
            raise Error(f"{message}\nUse -h for help.")

        offending = mobj.group("val")
        choices = [opt.strip(" '") for opt in mobj.group("opts").split(",")]
        suggestion = DamerauLevenshtein.closest_match(offending, choices)
        if suggestion:
            message = f"bad argument '{offending}', use '{self.prog} -h'.\n\nThe most similar " \
                      f"argument is\n  {suggestion}"

        raise Error(message)
