"""Configuration file loaders.

Purpose
-------
Convert on-disk artifacts into Python mappings that the merge step understands.
Adapters are small wrappers around the ini line parser, ``json`` and
``yaml.safe_load`` so error handling and observability live in one place.

Contents
--------
* :class:`BaseFileLoader` – shared helpers for reading files and validating
  mapping outputs.
* :class:`IniFileLoader` – loader for ``.ini`` and ``.env`` files.
* :class:`JSONFileLoader` – loader for JSON documents.
* :class:`YAMLFileLoader` – loader for YAML documents.
* :func:`loader_for` – select the loader for a format tag.

System Role
-----------
Invoked by :class:`lib_getconfig.core.ConfigResolver` while draining its file
list. Loaders return the raw (possibly nested) mapping; flattening happens in
:mod:`lib_getconfig.application.flatten`.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping

import yaml

from ...application.ports import FileLoader
from ...domain.errors import InvalidFormat, NotFound
from ...observability import log_debug, log_error
from .ini import parse_ini


class BaseFileLoader:
    """Common utilities shared by the file loaders."""

    def _read(self, path: str) -> bytes:
        """Read *path* as bytes, raising :class:`NotFound` when the file is missing.

        Why
        ----
        Every call opens the file afresh; nothing about the file is cached
        between attempts, which is what the resolver's retry loop relies on.

        Side Effects
        ------------
        Emits ``config_file_read`` debug events.
        """

        file_path = Path(path)
        try:
            payload = file_path.read_bytes()
        except (FileNotFoundError, IsADirectoryError, PermissionError) as exc:
            raise NotFound(f"Configuration file not readable: {path}") from exc
        log_debug("config_file_read", path=path, layer="file", size=len(payload))
        return payload

    @staticmethod
    def _ensure_mapping(data: object, *, path: str) -> Mapping[str, object]:
        """Ensure *data* behaves like a mapping, otherwise raise ``InvalidFormat``.

        Examples
        --------
        >>> BaseFileLoader._ensure_mapping({"key": 1}, path="demo")
        {'key': 1}
        >>> BaseFileLoader._ensure_mapping([1, 2], path="demo")
        Traceback (most recent call last):
        ...
        lib_getconfig.domain.errors.InvalidFormat: File demo did not produce a mapping
        """

        if not isinstance(data, Mapping):
            raise InvalidFormat(f"File {path} did not produce a mapping")
        return data


class IniFileLoader(BaseFileLoader):
    """Load flat ``key = value`` files (``.ini`` and ``.env``)."""

    def load(self, path: str) -> Mapping[str, object]:
        """Return the flat mapping parsed from the ini/env file at *path*.

        Examples
        --------
        >>> from tempfile import NamedTemporaryFile
        >>> tmp = NamedTemporaryFile('w', suffix='.ini', delete=False, encoding='utf-8')
        >>> _ = tmp.write('test.string = example')
        >>> tmp.close()
        >>> IniFileLoader().load(tmp.name)["test.string"]
        'example'
        >>> Path(tmp.name).unlink()
        """

        try:
            text = self._read(path).decode("utf-8")
        except UnicodeDecodeError as exc:
            log_error("config_file_invalid", layer="file", path=path, format="ini", error=str(exc))
            raise InvalidFormat(f"Invalid ini in {path}: {exc}") from exc
        try:
            data = parse_ini(text, path=path)
        except InvalidFormat as exc:
            log_error("config_file_invalid", layer="file", path=path, format="ini", error=str(exc))
            raise
        log_debug("config_file_loaded", layer="file", path=path, format="ini", keys=len(data))
        return data


class JSONFileLoader(BaseFileLoader):
    """Load JSON documents."""

    def load(self, path: str) -> Mapping[str, object]:
        """Return mapping extracted from JSON file at *path*."""

        try:
            data = json.loads(self._read(path))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            log_error("config_file_invalid", layer="file", path=path, format="json", error=str(exc))
            raise InvalidFormat(f"Invalid JSON in {path}: {exc}") from exc
        result = self._ensure_mapping(data, path=path)
        log_debug("config_file_loaded", layer="file", path=path, format="json", keys=len(result))
        return result


class YAMLFileLoader(BaseFileLoader):
    """Load YAML documents with ``yaml.safe_load``."""

    def load(self, path: str) -> Mapping[str, object]:
        """Return mapping extracted from YAML file at *path*.

        An empty document yields an empty mapping; the resolver decides whether
        that is acceptable.
        """

        try:
            data = yaml.safe_load(self._read(path))
        except yaml.YAMLError as exc:
            log_error("config_file_invalid", layer="file", path=path, format="yaml", error=str(exc))
            raise InvalidFormat(f"Invalid YAML in {path}: {exc}") from exc
        if data is None:
            data = {}
        result = self._ensure_mapping(data, path=path)
        log_debug("config_file_loaded", layer="file", path=path, format="yaml", keys=len(result))
        return result


_INI_LOADER = IniFileLoader()
_YAML_LOADER = YAMLFileLoader()

#: Loaders keyed by the format tag of :class:`lib_getconfig.domain.config.CandidateFile`.
FILE_LOADERS: dict[str, FileLoader] = {
    "ini": _INI_LOADER,
    "env": _INI_LOADER,
    "yaml": _YAML_LOADER,
    "json": JSONFileLoader(),
}


def loader_for(format_tag: str) -> FileLoader | None:
    """Return the loader registered for *format_tag* or ``None``.

    Examples
    --------
    >>> type(loader_for("env")).__name__
    'IniFileLoader'
    >>> loader_for("toml") is None
    True
    """

    return FILE_LOADERS.get(format_tag)
