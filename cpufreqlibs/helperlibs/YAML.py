# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause
#
# Author: Artem Bityutskiy <artem.bityutskiy@linux.intel.com>

"""
Provide YAML file reading capabilities with extended functionality: support "include" statements.
"""

from  __future__ import annotations # Remove when switching to Python 3.10+.

import io
from pathlib import Path
from typing import Any, IO, cast
import yaml
from cpufreqlibs.helperlibs import Logging
from cpufreqlibs.helperlibs.Exceptions import Error

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.cpufreqctl.{__name__}")

def _dict_constructor(loader: yaml.SafeLoader, node: yaml.MappingNode) -> dict[str, Any]:
    """
    Process a YAML mapping node and rename 'include' keys to ensure uniqueness.

    Args:
        loader: The YAML loader instance.
        node: The YAML node representing the mapping.

    Returns:
        A dictionary with modified "include" keys.
    """

    # Rename 'include' keys to be unique so they don't overwrite each other in the dictionary.
    includes = 0
    pairs = loader.construct_pairs(node)
    for idx, pair in enumerate(pairs):
        if pair[0] == "include":
            pairs[idx] = (f"__include_{includes}", pair[1])
            includes += 1
        elif str(pair[0]).startswith("__include_"):
            raise Error(f"illegal key '{pair[0]}', keys beginning with '__include_' are reserved "
                        f"for internal functions")
    return dict(pairs)

class _Loader(yaml.SafeLoader): # pylint: disable=too-many-ancestors
    """The safe YAML loader with support for the "include" statement."""

_Loader.add_constructor(yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG, _dict_constructor)

def _load(path: Path | IO[str], included: dict[Path, Path]) -> dict[str, Any]:
    """
    Load and parse a YAML file.

    Args:
        path: Path to the YAML file or a file-like object to read from.
        included: Dictionary tracking files that have already been included to prevent circular
                  includes.

    Returns:
        A dictionary representing the loaded YAML content.
    """

    fobj: IO[str]

    if isinstance(path, io.IOBase):
        fobj = cast(IO[str], path)
    else:
        try:
            fobj = open(path, "r", encoding="utf-8") # pylint: disable=consider-using-with
        except OSError as err:
            msg = Error(str(err)).indent(2)
            raise Error(f"Failed to open YAML file '{path}':\n{msg}") from None

    try:
        loaded = yaml.load(fobj, Loader=_Loader)
    except (TypeError, ValueError, yaml.YAMLError) as err:
        msg = Error(str(err)).indent(2)
        raise Error(f"Failed to parse YAML file '{path}':\n{msg}") from None
    except OSError as err:
        msg = Error(str(err)).indent(2)
        raise Error(f"Failed to read YAML file '{path}':\n{msg}") from None
    finally:
        if fobj is not path:
            fobj.close()

    if not loaded:
        return {}

    if not isinstance(loaded, dict):
        raise Error(f"Bad YAML file '{path}': the top-level object must be a mapping")

    result: dict[str, Any] = {}

    for key, value in loaded.items():
        # Keep in mind that "include" keys are renamed to "__include_0", "__include_1", etc, because
        # there may be multiple of them in the same file.
        if not str(key).startswith("__include_"):
            result[key] = value
            continue

        if isinstance(path, io.IOBase):
            raise Error("File-like objects are not supported for YAML files that contain the "
                        "'include' statement, provide the path instead")

        try:
            incpath = Path(value)
        except TypeError as err:
            msg = Error(str(err)).indent(2)
            raise Error(f"Bad 'include' statement in YAML file at '{path}':\n{msg}") from None

        if not incpath.is_absolute():
            incpath = path.parent / incpath

        if incpath in included:
            raise Error(f"Circular dependency found: Include path '{incpath}' in YAML file "
                        f"'{path}' was already included from '{included[incpath]}'")

        included[incpath] = path
        result.update(_load(incpath, included))

    if not isinstance(path, io.IOBase):
        _LOG.debug("Loaded YAML file at '%s'", path)

    return result

def load(path: str | Path | IO[str]) -> dict[str, Any]:
    """
    Load a YAML file. Extend the standard YAML loader by adding support for the 'include' statement,
    which allows including other YAML files.

    Args:
        path: Path to the YAML file to load or a file-like object to read the YAML contents from.

    Returns:
        A dictionary representing the contents of the loaded YAML file.
    """

    if isinstance(path, str):
        path = Path(path)

    return _load(path, {})
