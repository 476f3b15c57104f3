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

from typing import Any, Callable
from cpufreqlibs.helperlibs import Logging
from cpufreqlibs.helperlibs.Exceptions import Error, ErrorIO, ErrorPermissionDenied, ErrorNotFound
from cpufreqlibs.helperlibs.Exceptions import ErrorBadEncoding

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.cpufreqctl.{__name__}")

class SimpleCloseContext:
    """
    Provide a simple context manager implementation for classes.

    This class can be subclassed to avoid duplicating the implementation of the
    '__enter__()' and '__exit__()' methods. It ensures that the 'close()' method
    is called automatically when exiting the runtime context.
    """

    def close(self):
        """Uninitialize the class object. Supposed to be implemented by the subclass."""

    def __enter__(self):
        """Enter the run-time context."""
        return self

    def __exit__(self, *_: Any):
        """Exit from the runtime context."""

        self.close()

class WrapExceptions:
    """
    A class to wrap objects, intercept their exceptions and translate them into custom exceptions.

    Exception Translation:
        - PermissionError -> ErrorPermissionDenied
        - FileNotFoundError -> ErrorNotFound
        - UnicodeDecodeError -> ErrorBadEncoding
        - Other 'OSError' exceptions -> ErrorIO
        - Other exceptions derived from 'Exception' -> Error
        - Exceptions not derived from 'Exception' are not translated.
    """

    def __init__(self, obj: Any, get_err_prefix: Callable[[Any, str], str] | None = None):
        """
        Initialize the instance and set up exception interception and translation.

        Args:
            obj: The object to intercept and translate exceptions for.
            get_err_prefix: A callable that generates a prefix for exception messages. The arguments
                            are the object and the object method name where the exception
                            occurred.
        """

        self._obj = obj
        self._get_err_prefix = get_err_prefix

    def _format_exception(self, name: str, err: Exception, exc_type: type[Error]) -> Error:
        """
        Format and return a custom exception object for an exception raised by a method of the
        wrapped object.

        Args:
            name: Name of the wrapped object method where the exception occurred.
            err: The original exception that was raised by the method.
            exc_type: The type of the custom exception to format and return.

        Returns:
            A formatted exception object of the specified type.
        """

        errmsg = Error(str(err)).indent(2)
        if self._get_err_prefix:
            msg = f"{self._get_err_prefix(self._obj, name)}:\n{errmsg}"
        else:
            msg = f"method '{name}()' failed:\n{errmsg}"

        kwargs: dict[str, Any] = {}
        if hasattr(err, "errno"):
            kwargs["errno"] = getattr(err, "errno", None)

        return exc_type(msg, **kwargs)

    def _handle_exception(self, name: str, err: Exception):
        """
        Translate an exception from a method of the wrapped object and raise the result.

        Args:
            name: The name of the method that raised the exception.
            err: The exception object raised by the method.
        """

        exc_type: type[Error]
        if isinstance(err, PermissionError):
            exc_type = ErrorPermissionDenied
        elif isinstance(err, FileNotFoundError):
            exc_type = ErrorNotFound
        elif isinstance(err, UnicodeDecodeError):
            exc_type = ErrorBadEncoding
        elif isinstance(err, OSError):
            exc_type = ErrorIO
        else:
            exc_type = Error

        raise self._format_exception(name, err, exc_type) from err

    def _get_wrapper(self, name: str, method: Callable) -> Callable:
        """
        Wrap exceptions for a method.

        Args:
            name: The name of the method to wrap exceptions for.
            method: The method to wrap exceptions for.

        Returns:
            The wrapped version of the method.
        """

        def wrapper(*args: Any, **kwargs: Any) -> Any:
            """Wrap the exceptions."""

            try:
                return method(*args, **kwargs)
            except Error:
                # Do not translate exceptions that are already based on 'Error'.
                raise
            except Exception as err: # pylint: disable=broad-except
                self._handle_exception(name, err)

            return None

        return wrapper

    def __getattr__(self, name: str) -> Any:
        """
        Override attribute access to wrap method calls with exception handling.

        Args:
            name: The name of the attribute to access.

        Returns:
            The attribute value or a wrapped callable method.
        """

        attr = getattr(self._obj, name)

        if name.startswith("_") or not callable(attr):
            # A private method or not a method, do not wrap exceptions.
            return attr

        return self._get_wrapper(name, attr)

    def __enter__(self):
        """Enter the run-time context."""

        self._get_wrapper("__enter__", self._obj.__enter__)()
        return self

    def __exit__(self, *args: Any):
        """Exit from the runtime context."""

        return self._get_wrapper("__exit__", self._obj.__exit__)(*args)

def close(cls_obj: Any,
          close_attrs: list[str] | tuple[str, ...] = tuple(),
          unref_attrs: list[str] | tuple[str, ...] = tuple()):
    """
    Uninitialize a class object by freeing objects referred to by its attributes.

    Args:
        cls_obj: The class object to uninitialize.
        close_attrs: Attribute names referring to objects created by the class object. These objects
                     will be closed by calling their 'close()' method, and then set to 'None' to
                     remove references. Note, calling the 'close()' can be influenced by an
                     additional attribute named '_close_{attr}' in the class object.
        unref_attrs: Attribute names referring to objects created outside the class object. These
                     attributes will be set to 'None' to remove references.
    """

    for attr in close_attrs:
        if not hasattr(cls_obj, attr):
            _LOG.warning("close(close_attrs=<attrs>): non-existing attribute '%s' in '%s'",
                         attr, cls_obj)

        obj = getattr(cls_obj, attr, None)
        if not obj:
            continue

        if attr.startswith("_"):
            name = f"_close{attr}"
        else:
            name = f"_close_{attr}"

        run_close = True
        if hasattr(cls_obj, name):
            run_close = getattr(cls_obj, name)
            if run_close not in (True, False):
                _LOG.warning("Bad value of attribute '%s' in '%s'", attr, cls_obj)
                _LOG.debug_print_stacktrace()
                setattr(cls_obj, attr, None)
                continue

        if run_close:
            if hasattr(obj, "close"):
                getattr(obj, "close")()
            else:
                _LOG.debug("No 'close()' method in '%s'", obj)
                _LOG.debug_print_stacktrace()

        setattr(cls_obj, attr, None)

    for attr in unref_attrs:
        if not hasattr(cls_obj, attr):
            _LOG.warning("close(unref_attrs=<list>): non-existing attribute '%s' in '%s'",
                         attr, cls_obj)

        if getattr(cls_obj, attr, None):
            setattr(cls_obj, attr, None)
