"""Filesystem discovery of configuration files.

Purpose
-------
Implement the :class:`lib_getconfig.application.ports.PathResolver` protocol.
The adapter is the only component that knows the directory conventions: where
the primary file lives, which directory holds additional files, and which
environment variables override either.

Contents
--------
* :class:`DefaultPathResolver` – resolves the primary file, the multi-file
  directory, and named files.
* :func:`default_etc_dir` – compiled-in base directory per platform.
* :func:`_collect_directory` – sorted listing of supported files in a
  directory.

System Role
-----------
Runs eagerly when :class:`lib_getconfig.core.ConfigResolver` is constructed so
a mistyped explicit file fails before any lookup happens. Parsing of the
discovered files stays lazy.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Iterable, Mapping

from ...domain.config import FORMAT_BY_SUFFIX, CandidateFile
from ...domain.errors import InvalidArgument
from ...observability import log_debug
from ..env.default import DEFAULT_ENV_PREFIX, override_names

#: Name of the primary file looked up inside the base directory.
DEFAULT_FILE_NAME = "config.ini"
#: Name of the multi-file directory inside the base directory.
DEFAULT_DIR_NAME = "config.d"
#: Directory name used below the platform configuration root.
DEFAULT_SLUG = "getconfig"


def default_etc_dir(platform: str | None = None, env: Mapping[str, str] | None = None) -> Path:
    """Return the compiled-in base directory for *platform*.

    Examples
    --------
    >>> default_etc_dir("linux").as_posix()
    '/etc/getconfig'
    >>> default_etc_dir("win32", {"ProgramData": "D:/Data"}).as_posix()
    'D:/Data/getconfig'
    """

    platform = platform or sys.platform
    if platform.startswith("win"):
        environ = os.environ if env is None else env
        return Path(environ.get("ProgramData", r"C:\ProgramData")) / DEFAULT_SLUG
    return Path("/etc") / DEFAULT_SLUG


class DefaultPathResolver:
    """Resolve the ordered list of configuration files to load.

    Why
    ----
    Keep discovery rules (explicit argument, override variable, compiled-in
    default) in one place so the resolver stays platform-agnostic and easy to
    test.
    """

    def __init__(
        self,
        file: str | os.PathLike[str] | None = None,
        directory: str | os.PathLike[str] | None = None,
        *,
        env: Mapping[str, str] | None = None,
        env_prefix: str = DEFAULT_ENV_PREFIX,
        platform: str | None = None,
    ) -> None:
        """Resolve base directory, primary file and multi-file directory.

        Parameters
        ----------
        file:
            Explicit primary file. Must exist and be readable.
        directory:
            Explicit multi-file directory. May be missing or empty.
        env:
            Mapping consulted for the override variables instead of
            :data:`os.environ` (useful for deterministic tests).
        env_prefix:
            Prefix of the override variables (``DN`` gives ``DN_INI_FILE``,
            ``DN_ETC_DIR`` and ``DN_INI_DIR``).
        platform:
            Platform identifier (``sys.platform`` clone) selecting the
            compiled-in default directory.

        Raises
        ------
        InvalidArgument
            When *file*, or the primary-file override, names a file that does
            not exist or cannot be read.
        """

        self.env = dict(os.environ if env is None else env)
        self.names = override_names(env_prefix)
        self.platform = platform or sys.platform

        explicit_file = os.fspath(file) if file else None
        self.etc_dir = self._resolve_etc_dir(explicit_file)
        self.primary_file = self._resolve_primary(explicit_file)
        self.ini_dir = self._resolve_ini_dir(os.fspath(directory) if directory else None)

    def candidates(self) -> list[CandidateFile]:
        """Return the primary file followed by the sorted directory files.

        Examples
        --------
        >>> from tempfile import TemporaryDirectory
        >>> tmp = TemporaryDirectory()
        >>> root = Path(tmp.name)
        >>> for name in ("b.json", "a.yaml", "c.ini", "notes.txt"):
        ...     _ = (root / name).write_text("k: v", encoding="utf-8")
        >>> resolver = DefaultPathResolver(directory=root, env={"DN_ETC_DIR": tmp.name})
        >>> [Path(c.path).name for c in resolver.candidates()]
        ['a.yaml', 'b.json', 'c.ini']
        >>> tmp.cleanup()
        """

        files: list[CandidateFile] = []
        if self.primary_file is not None:
            files.append(CandidateFile.from_path(self.primary_file))
        files.extend(CandidateFile.from_path(path) for path in _collect_directory(self.ini_dir))
        log_debug("config_files_discovered", layer="file", path=str(self.ini_dir), count=len(files))
        return files

    def find_file(self, name: str) -> str | None:
        """Return the first existing ``<etc dir>/<name>`` or ``<ini dir>/<name>``.

        Why
        ----
        Collaborators sometimes need a path rather than a value, e.g. a
        credentials file referenced by a configuration entry.
        """

        for base in (self.etc_dir, self.ini_dir):
            candidate = base / name
            if candidate.exists():
                log_debug("config_file_located", layer="file", path=str(candidate), name=name)
                return str(candidate)
        return None

    def _resolve_etc_dir(self, explicit_file: str | None) -> Path:
        """Explicit file's directory, else the base-directory override, else the default."""

        if explicit_file:
            return Path(explicit_file).parent
        override = self._override(self.names.etc_dir)
        if override:
            return Path(override)
        return default_etc_dir(self.platform, self.env)

    def _resolve_primary(self, explicit_file: str | None) -> str | None:
        """Validate the explicit or overridden primary file; fall back to the optional default."""

        requested = explicit_file or self._override(self.names.ini_file)
        if requested:
            if not _is_readable(Path(requested)):
                raise InvalidArgument(f"File not found or is not readable: {requested}")
            return requested
        default = self.etc_dir / DEFAULT_FILE_NAME
        if default.is_file():
            return str(default)
        return None

    def _resolve_ini_dir(self, explicit_dir: str | None) -> Path:
        """Explicit directory, else the multi-file override, else ``<etc dir>/config.d``."""

        if explicit_dir:
            return Path(explicit_dir)
        override = self._override(self.names.ini_dir)
        if override:
            return Path(override)
        return self.etc_dir / DEFAULT_DIR_NAME

    def _override(self, name: str) -> str | None:
        """Return the override variable *name* when set to a non-empty value."""

        return self.env.get(name) or None


def _is_readable(path: Path) -> bool:
    """Return ``True`` for an existing regular file the process may read."""

    return path.is_file() and os.access(path, os.R_OK)


def _collect_directory(directory: Path) -> Iterable[str]:
    """Return supported files in *directory* sorted by full path across all extensions.

    A missing directory yields nothing.

    Examples
    --------
    >>> list(_collect_directory(Path("/definitely/not/here")))
    []
    """

    if not directory.is_dir():
        return []
    matches = [
        str(path)
        for path in directory.iterdir()
        if path.is_file() and path.suffix.lower().lstrip(".") in FORMAT_BY_SUFFIX
    ]
    return sorted(matches)
