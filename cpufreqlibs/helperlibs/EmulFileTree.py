# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2022-2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause
#
# Authors: Antti Laakso <antti.laakso@linux.intel.com>
#          Niklas Neronin <niklas.neronin@intel.com>
#          Artem Bityutskiy <artem.bityutskiy@linux.intel.com>

"""
A file tree that emulates the CPU sysfs tree for testing purposes.

Provide the 'EmulFileTree' class, a subclass of 'LocalFileTree' which keeps the files in a temporary
directory and emulates the behavior of sysfs files: writes replace the file contents, read-only
files cannot be written regardless of user privileges, and the global 'online' file reflects the
per-CPU 'cpu<N>/online' files.

Terminology:
    - Data Set: A directory containing emulation data for a single system. Data are divided into
      categories, each described by a '<category>.yaml' file.
    - Inline files: A text file with '<path><separator><value>' lines, each line describes an
      emulated file.
"""

from  __future__ import annotations # Remove when switching to Python 3.10+.

import shutil
import typing
import tempfile
import contextlib
from pathlib import Path
from cpufreqlibs.helperlibs import Logging, Trivial, YAML, ClassHelpers, FileTree
from cpufreqlibs.helperlibs.Exceptions import Error
from cpufreqlibs.helperlibs.emul import _EmulFile

if typing.TYPE_CHECKING:
    from typing import IO, TypedDict, Mapping, cast
    from cpufreqlibs.helperlibs.emul._EmulFile import EmulFileType

    class _InlineFilesTypedDict(TypedDict, total=False):
        """
        The "inline files" emulation data description.

        Attributes:
            filename: Name of the inline files text file, relative to the category YAML file.
            separator: The separator between the path and the value in the text file lines.
            readonly: Whether the emulated files are read-only.
        """

        filename: str
        separator: str
        readonly: bool

    class _CategoryYAMLTypedDict(TypedDict, total=False):
        """
        The emulation data category YAML file contents.

        Attributes:
            inlinefiles: List of inline files descriptions.
            directories: List of directories to create.
        """

        inlinefiles: list[_InlineFilesTypedDict]
        directories: list[str]

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.cpufreqctl.{__name__}")

class EmulFileTree(FileTree.LocalFileTree):
    """
    A file tree emulating the CPU sysfs tree.

    Public methods overview.
        * 'init_emul_data()' - load a data set.
        * 'add_file()' - add an emulated file.
        * 'add_files()' - add multiple emulated files.
        * 'read_emul_file()' - read an emulated file directly, bypassing the emulation.
        * 'close()' - remove the emulation data.

    Note, emulated files are stored in a temporary directory, which is removed by 'close()'.
    """

    def __init__(self, name: str | None = None):
        """
        Initialize a class instance.

        Args:
            name: Name of the emulated system to use in messages.
        """

        pid = Trivial.get_pid()

        try:
            base = Path(tempfile.mkdtemp(prefix=f"cpufreqctl_emul_{pid}_"))
        except OSError as err:
            errmsg = Error(str(err)).indent(2)
            raise Error(f"Failed to create a temporary directory:\n{errmsg}") from None

        super().__init__(base=base)

        if name:
            self.name = name
        else:
            self.name = "emulated system"

        self.basemsg = f" on '{self.name}'"
        self._base_removed = False

        # The emulated files, indexed by the path relative to the root directory.
        self._files: dict[str, EmulFileType] = {}

    def __del__(self):
        """The class destructor."""

        if getattr(self, "_base_removed", True):
            return

        self._base_removed = True
        with contextlib.suppress(OSError):
            shutil.rmtree(self.base)

    def close(self):
        """Stop emulation and remove the emulation data."""

        if self._base_removed:
            return

        self._base_removed = True
        try:
            shutil.rmtree(self.base)
        except OSError as err:
            errmsg = Error(str(err)).indent(2)
            _LOG.warning("Failed to remove emulation data directory '%s':\n%s", self.base, errmsg)

    @staticmethod
    def _normpath(path: str | Path) -> str:
        """Return the normalized form of file tree path 'path', used as the emulated files key."""

        return str(path).strip().strip("/")

    def add_file(self, path: str | Path, data: str | bytes, readonly: bool = False):
        """
        Add an emulated file to the file tree. Replace the existing file, if any.

        Args:
            path: Path to the file, relative to the root directory.
            data: The initial contents of the file. A 'bytes' value is written as is, which allows
                  for emulating files with contents that are not valid text.
            readonly: Whether the file is read-only.
        """

        path = self._normpath(path)
        _LOG.debug("Adding emulated file '%s'%s", path, " (read-only)" if readonly else "")
        self._files[path] = _EmulFile.get_emul_file(path, self.base, data=data, readonly=readonly)

    def add_files(self, files: Mapping[str, str | bytes], readonly: bool = False):
        """
        Add multiple emulated files to the file tree.

        Args:
            files: A dictionary with file paths (relative to the root directory) as keys and initial
                   file contents as values.
            readonly: Whether the files are read-only.
        """

        for path, data in files.items():
            self.add_file(path, data, readonly=readonly)

    def add_dir(self, path: str | Path):
        """
        Add an emulated directory to the file tree.

        Args:
            path: Path to the directory, relative to the root directory.
        """

        dirpath = self.abspath(path)
        try:
            dirpath.mkdir(parents=True, exist_ok=True)
        except OSError as err:
            errmsg = Error(str(err)).indent(2)
            raise Error(f"Failed to create emulated directory '{dirpath}':\n{errmsg}") from err

    def read_emul_file(self, path: str | Path) -> str:
        """
        Read an emulated file directly, bypassing the emulation. Useful for checking what was
        written to a file which has emulated read behavior.

        Args:
            path: Path to the file, relative to the root directory.

        Returns:
            The file contents.
        """

        try:
            return self.abspath(path).read_text(encoding="utf-8")
        except OSError as err:
            errmsg = Error(str(err)).indent(2)
            raise Error(f"Failed to read emulated file '{path}':\n{errmsg}") from err

    def _process_inlinefiles(self, infos: list[_InlineFilesTypedDict], dspath: Path):
        """
        Create emulated files from "inline files" emulation data.

        Args:
            infos: A collection of inline files configuration dictionaries.
            dspath: The data set path.
        """

        for info in infos:
            filepath = dspath / info["filename"]

            try:
                with open(filepath, "r", encoding="utf-8") as fobj:
                    lines = fobj.readlines()
            except OSError as err:
                errmsg = Error(str(err)).indent(2)
                raise Error(f"Failed to read inline files configuration file '{filepath}':\n"
                            f"{errmsg}") from err

            sep = info.get("separator", "|")
            readonly = info.get("readonly", False)

            for line in lines:
                line = line.rstrip("\n")
                if not line or line.startswith("#"):
                    continue

                split = line.split(sep, 1)
                if len(split) != 2:
                    raise Error(f"Unexpected line format in '{filepath}':\n"
                                f"  Expected <path>{sep}<value>, received '{line}'")

                path, data = split
                # Sysfs files end with a newline.
                self.add_file(path, data + "\n", readonly=readonly)

    def _process_category(self, yaml_path: Path):
        """
        Process an emulation data category YAML file and create the related emulated files.

        Args:
            yaml_path: Path to the YAML file describing the emulation data category.
        """

        yaml = YAML.load(yaml_path)
        if typing.TYPE_CHECKING:
            yaml = cast(_CategoryYAMLTypedDict, yaml)

        if "directories" in yaml:
            for path in yaml["directories"]:
                self.add_dir(path)

        if "inlinefiles" in yaml:
            self._process_inlinefiles(yaml["inlinefiles"], yaml_path.parent)

    def init_emul_data(self, dspath: Path):
        """
        Load a data set and initialize the emulation data.

        Args:
            dspath: Path to the data set directory to load.

        The data set directory contains one or more '<category>.yaml' files, and the inline files
        text files they refer to. Categories are processed in alphabetical order. For example:
            - dataset/
              - cpufreq.yaml
              - cpufreq.txt
              - topology.yaml
              - topology.txt
        """

        if not dspath.is_dir():
            raise Error(f"Emulation data set directory '{dspath}' does not exist")

        yaml_paths = sorted(path for path in dspath.iterdir() if path.suffix in (".yaml", ".yml"))
        if not yaml_paths:
            raise Error(f"No YAML files found in emulation data set directory '{dspath}'")

        for yaml_path in yaml_paths:
            self._process_category(yaml_path)

    def open(self, path: str | Path, mode: str) -> IO:
        """Same as 'LocalFileTree.open()', but emulate the sysfs file behavior."""

        _LOG.debug("Opening emulated file '%s' with mode '%s'", path, mode)

        normpath = self._normpath(path)
        if normpath in self._files:
            emul = self._files[normpath]
        else:
            emul = _EmulFile.get_emul_file(normpath, self.base)

        fobj = emul.open(mode)
        return typing.cast("IO", ClassHelpers.WrapExceptions(fobj,
                                                            get_err_prefix=FileTree.get_err_prefix))
