# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause
#
# Author: Artem Bityutskiy <artem.bityutskiy@linux.intel.com>

"""
The process manager for a remote host: cpufreq policy files are accessed over SSH (SFTP).

SECURITY NOTICE: this module and any part of it should only be used for debugging and development
purposes. No security audit had been done. Not for production use.
"""

from  __future__ import annotations # Remove when switching to Python 3.10+.

import os
import glob
import stat
import typing
import logging
from pathlib import Path
from typing import IO, cast
import paramiko
from cpupollibs.helperlibs import Logging, _ProcessManagerBase, ClassHelpers, Exceptions, Trivial
from cpupollibs.helperlibs.Exceptions import Error, ErrorConnect, ErrorNotFound

if typing.TYPE_CHECKING:
    from typing import Generator
    from cpupollibs.helperlibs._ProcessManagerBase import LsdirTypedDict

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.cpupol.{__name__}")

# Paramiko is a bit too noisy, lower its log level.
logging.getLogger("paramiko").setLevel(logging.WARNING)

# The default SSH port and connection timeout (seconds).
_SSH_PORT = 22
_SSH_TIMEOUT = 60

# The SSH configuration files to look up the host options in.
_SSH_CFGFILES = ("/etc/ssh/ssh_config", "~/.ssh/config")

class _SFTPFile:
    """
    An SFTP file object with text mode support. Paramiko SFTP files are always binary, text mode
    files are encoded and decoded as "utf-8".
    """

    def __init__(self, fobj: paramiko.SFTPFile, path: str, mode: str):
        """
        Initialize a class instance.

        Args:
            fobj: The paramiko SFTP file object.
            path: Path to the file on the remote host.
            mode: The mode the file was opened in.
        """

        self.name = path
        self._fobj = fobj
        self._binary = "b" in mode

    def read(self, size: int | None = None) -> str | bytes:
        """Read from the file, return a string in text mode."""

        data = self._fobj.read(size)
        if self._binary:
            return data
        return data.decode("utf-8")

    def write(self, data: str | bytes) -> int:
        """Write to the file, a string is expected in text mode."""

        if not self._binary:
            if not isinstance(data, str):
                raise Error(f"Cannot write to '{self.name}': expected a string, got "
                            f"'{type(data).__name__}'")
            data = data.encode("utf-8")

        self._fobj.write(data)
        return len(data)

    def close(self):
        """Close the file."""
        self._fobj.close()

    def __enter__(self):
        """Enter the runtime context."""
        return self

    def __exit__(self, *_: typing.Any):
        """Exit the runtime context."""
        self.close()

def _check_privkey(privkeypath: str):
    """
    Verify that a private SSH key file is a regular file, inaccessible to "others".

    Args:
        privkeypath: Path to the private SSH key file.
    """

    try:
        mode = os.stat(privkeypath).st_mode
    except OSError as err:
        errmsg = f"Cannot access private SSH key '{privkeypath}':"
        raise Exceptions.translate(err, errmsg) from None

    if not stat.S_ISREG(mode):
        raise Error(f"Private SSH key '{privkeypath}' is not a regular file")

    if mode & stat.S_IRWXO:
        raise Error(f"Private SSH key '{privkeypath}' is accessible to 'others', restrict its "
                    f"permissions")

def _cfg_lookup(optname: str, hostname: str, username: str,
                cfgfiles: typing.Iterable[str] = _SSH_CFGFILES) -> str | list[str] | None:
    """
    Look up an SSH configuration option value for a host and user.

    Args:
        optname: Name of the option (e.g., "identityfile").
        hostname: The host to look the option up for.
        username: The user the option should be defined for.
        cfgfiles: The SSH configuration files to look in. The "Include" directives are followed.

    Returns:
        The option value, or None if it was not found.
    """

    for cfgfile in cfgfiles:
        cfgfile = os.path.expanduser(cfgfile)
        if not os.path.exists(cfgfile):
            continue

        try:
            cfg = paramiko.SSHConfig().from_path(cfgfile).lookup(hostname)
        except (paramiko.ConfigParseError, OSError) as err:
            _LOG.debug("Skipping SSH config file '%s':\n%s", cfgfile, Error(str(err)).indent(2))
            continue

        if optname in cfg and cfg.get("user") == username:
            return cfg[optname]

        if "include" in cfg:
            optval = _cfg_lookup(optname, hostname, username,
                                 cfgfiles=sorted(glob.glob(cfg["include"])))
            if optval:
                return optval

    return None

class SSHProcessManager(_ProcessManagerBase.ProcessManagerBase):
    """The process manager for a remote host, accessed over SSH."""

    def __init__(self,
                 hostname: str,
                 port: int | None = None,
                 username: str = "",
                 privkeypath: str | Path | None = None,
                 timeout: int | float | None = None):
        """
        Initialize a class instance and connect to the remote host.

        Args:
            hostname: Name of the host to connect to.
            port: The SSH port number, 22 by default.
            username: Name of the SSH user, the current user by default.
            privkeypath: Path to the private SSH key. By default, the key from the SSH configuration
                         files is used, or the standard keys if there is none.
            timeout: The connection timeout in seconds, 60 by default.

        Raises:
            ErrorConnect: If the connection cannot be established.
        """

        super().__init__()

        self.is_remote = True
        self.hostname = hostname
        self.hostmsg = f" on host '{hostname}'"

        self.port = port or _SSH_PORT
        self.username = username or os.getenv("USER") or Trivial.get_username()
        self.connection_timeout = float(timeout or _SSH_TIMEOUT)

        self._sftp: paramiko.SFTPClient | None = None

        connhost = _cfg_lookup("hostname", hostname, self.username)
        if isinstance(connhost, str) and connhost:
            self._vhostname = f"{hostname} ({connhost})"
        else:
            connhost = self._vhostname = hostname

        if not privkeypath:
            privkeypath = _cfg_lookup("identityfile", hostname, self.username)
            if isinstance(privkeypath, list):
                privkeypath = privkeypath[0]

        self.privkeypath = str(privkeypath) if privkeypath else None
        if self.privkeypath:
            _check_privkey(self.privkeypath)

        _LOG.debug("Connecting to %s, port %d, username '%s', timeout %s sec, priv. key '%s'",
                   self._vhostname, self.port, self.username, self.connection_timeout,
                   self.privkeypath)

        self.ssh = paramiko.SSHClient()
        self.ssh.set_missing_host_key_policy(paramiko.AutoAddPolicy())
        try:
            self.ssh.connect(username=self.username, hostname=connhost, port=self.port,
                             key_filename=self.privkeypath, timeout=self.connection_timeout,
                             allow_agent=True, look_for_keys=True)
        except paramiko.AuthenticationException as err:
            raise ErrorConnect(f"SSH authentication as '{self.username}' failed:\n"
                               f"{Error(str(err)).indent(2)}", host=self._vhostname) from err
        except (paramiko.SSHException, OSError) as err:
            raise ErrorConnect(f"Connection failed ({self.connection_timeout} sec time-out):\n"
                               f"{Error(str(err)).indent(2)}", host=self._vhostname) from err

    def close(self):
        """Close the SSH connection."""

        _LOG.debug("Closing the SSH connection to %s", self._vhostname)
        ClassHelpers.close(self, close_attrs=("_sftp", "ssh"))
        super().close()

    def _get_sftp(self) -> paramiko.SFTPClient:
        """Return the SFTP session, open it on first use."""

        if not self._sftp:
            try:
                self._sftp = self.ssh.open_sftp()
            except (paramiko.SSHException, OSError) as err:
                errmsg = f"Failed to open an SFTP session{self.hostmsg}:"
                raise Exceptions.translate(err, errmsg) from err

        return self._sftp

    def open(self, path: str | Path, mode: str) -> IO:
        """Refer to 'ProcessManagerBase.open()'."""

        path = str(path)
        try:
            fobj = self._get_sftp().file(path, mode)
        except OSError as err:
            errmsg = f"Failed to open file '{path}' with mode '{mode}'{self.hostmsg}:"
            raise Exceptions.translate(err, errmsg) from None

        sfobj = _SFTPFile(fobj, path, mode)
        wfobj = ClassHelpers.WrapExceptions(sfobj, get_err_prefix=_ProcessManagerBase.get_err_prefix)
        return cast(IO, wfobj)

    def lsdir(self, path: str | Path) -> Generator[LsdirTypedDict, None, None]:
        """Refer to 'ProcessManagerBase.lsdir()'."""

        path = Path(path)

        try:
            attrs = self._get_sftp().listdir_attr(str(path))
        except FileNotFoundError:
            raise ErrorNotFound(f"Directory '{path}' does not exist{self.hostmsg}") from None
        except OSError as err:
            errmsg = f"Failed to list directory '{path}'{self.hostmsg}:"
            raise Exceptions.translate(err, errmsg) from None

        for attr in sorted(attrs, key=lambda attr: attr.filename):
            yield {"name": attr.filename, "path": path / attr.filename, "mode": attr.st_mode or 0}

    def _get_mode(self, path: str | Path) -> int | None:
        """Refer to 'ProcessManagerBase._get_mode()'."""

        try:
            return self._get_sftp().stat(str(path)).st_mode or 0
        except FileNotFoundError:
            return None
        except OSError as err:
            errmsg = f"Failed to check '{path}'{self.hostmsg}:"
            raise Exceptions.translate(err, errmsg) from None
