# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause
#
# Author: Artem Bityutskiy <artem.bityutskiy@linux.intel.com>

"""
Miscellaneous common helpers for class objects.
"""

from  __future__ import annotations # Remove when switching to Python 3.10+.

from typing import Any, Callable, Sequence
from cpupollibs.helperlibs import Logging, Exceptions
from cpupollibs.helperlibs.Exceptions import Error

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.cpupol.{__name__}")

class SimpleCloseContext:
    """
    A context manager base class which calls the 'close()' method when exiting the runtime context.
    """

    def close(self):
        """Uninitialize the class object. Supposed to be implemented by the subclass."""

    def __enter__(self):
        """Enter the runtime context."""
        return self

    def __exit__(self, *_: Any):
        """Exit the runtime context."""
        self.close()

class WrapExceptions:
    """
    Wrap an object and translate exceptions raised by its public methods into 'Error' exceptions.

    Exceptions derived from 'Error' are not translated, the rest are translated with
    'Exceptions.translate()'.
    """

    def __init__(self, obj: Any, get_err_prefix: Callable[[Any, str], str] | None = None):
        """
        Initialize the wrapper.

        Args:
            obj: The object to translate exceptions for.
            get_err_prefix: A callable returning the exception message prefix. The arguments are the
                            wrapped object and the name of the method that raised the exception.
        """

        self._obj = obj
        self._get_err_prefix = get_err_prefix

    def _translate(self, name: str, err: Exception) -> Error:
        """
        Translate an exception raised by a method of the wrapped object.

        Args:
            name: Name of the method that raised the exception.
            err: The exception to translate.

        Returns:
            The translated exception object.
        """

        if self._get_err_prefix:
            pfx = self._get_err_prefix(self._obj, name)
        else:
            pfx = f"Method '{name}()' failed"

        return Exceptions.translate(err, f"{pfx}:")

    def _wrap(self, name: str, method: Callable) -> Callable:
        """
        Return a version of 'method' that raises only 'Error' exceptions.

        Args:
            name: Name of the method to wrap.
            method: The method to wrap.

        Returns:
            The wrapped method.
        """

        def wrapper(*args: Any, **kwargs: Any) -> Any:
            """Call the method and translate the exceptions."""

            try:
                return method(*args, **kwargs)
            except Error:
                raise
            except Exception as err: # pylint: disable=broad-except
                raise self._translate(name, err) from err

        return wrapper

    def __getattr__(self, name: str) -> Any:
        """
        Return an attribute of the wrapped object, wrap it if it is a public method.

        Args:
            name: The name of the attribute.

        Returns:
            The attribute value or the wrapped method.
        """

        attr = getattr(self._obj, name)

        if name.startswith("_") or not callable(attr):
            return attr

        return self._wrap(name, attr)

    def __enter__(self):
        """Enter the runtime context."""

        self._wrap("__enter__", self._obj.__enter__)()
        return self

    def __exit__(self, *args: Any):
        """Exit the runtime context."""
        return self._wrap("__exit__", self._obj.__exit__)(*args)

def close(cls_obj: Any, close_attrs: Sequence[str] = (), unref_attrs: Sequence[str] = ()):
    """
    Release the objects referred to by attributes of 'cls_obj'. Meant to be called from 'close()'
    methods.

    Args:
        cls_obj: The object being closed.
        close_attrs: Names of attributes referring to objects owned by 'cls_obj'. The objects are
                     closed and the attributes are set to None. An object is only unreferenced if
                     'cls_obj' has the '_close_<name>' attribute ('<name>' being the attribute name
                     without the leading underscore) set to False, which means that it does not
                     own the object.
        unref_attrs: Names of attributes referring to objects not owned by 'cls_obj'. The
                     attributes are set to None.
    """

    for attr in close_attrs:
        obj = getattr(cls_obj, attr, None)
        if obj is None:
            continue

        if getattr(cls_obj, f"_close_{attr.lstrip('_')}", True):
            if callable(getattr(obj, "close", None)):
                obj.close()
            else:
                _LOG.debug("Cannot close '%s' attribute: no 'close()' method in '%s'", attr, obj)
                _LOG.debug_print_stacktrace()

        setattr(cls_obj, attr, None)

    for attr in unref_attrs:
        setattr(cls_obj, attr, None)
