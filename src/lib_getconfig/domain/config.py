"""Domain-level configuration value objects.

Purpose
-------
Anchor the small immutable types that flow between discovery, parsing, and
resolution. This module contains no I/O.

Contents
--------
* :data:`ConfigValue` – alias for a resolved value (``str`` or ``None``).
* :data:`FORMAT_BY_SUFFIX` – mapping of supported file suffixes to format tags.
* :class:`SourceInfo` – typed metadata describing where a value came from.
* :class:`CandidateFile` – a discovered file plus its inferred format.

System Role
-----------
:class:`CandidateFile` objects are produced by the path resolver and consumed
by :class:`lib_getconfig.core.ConfigResolver` when it drains its file list.
:class:`SourceInfo` backs :meth:`lib_getconfig.core.ConfigResolver.origin`.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal, TypedDict

ConfigValue = str | None
"""A resolved configuration value; ``None`` marks an absent key."""

#: Supported suffixes (lower-case, without dot) mapped to the format tag used
#: to select a loader. ``env`` shares the ini parser and ``yml`` the YAML one.
FORMAT_BY_SUFFIX: dict[str, str] = {
    "ini": "ini",
    "env": "env",
    "yaml": "yaml",
    "yml": "yaml",
    "json": "json",
}


class SourceInfo(TypedDict):
    """Describe the origin of a resolved configuration key.

    Attributes
    ----------
    layer:
        ``"env"`` for process environment variables, ``"file"`` for values
        read from a configuration file.
    path:
        Filesystem path that supplied the value; ``None`` for the environment.
    key:
        The exact spelling that matched (environment variable name or file
        key).
    """

    layer: Literal["env", "file"]
    path: str | None
    key: str


@dataclass(frozen=True, slots=True)
class CandidateFile:
    """A configuration file scheduled for lazy parsing.

    Examples
    --------
    >>> CandidateFile.from_path("/etc/getconfig/config.d/10-db.yml")
    CandidateFile(path='/etc/getconfig/config.d/10-db.yml', format='yaml')
    >>> CandidateFile.from_path("settings.TOML").format
    'toml'
    """

    path: str
    format: str

    @classmethod
    def from_path(cls, path: str | Path) -> CandidateFile:
        """Infer the format tag from the suffix of *path*.

        Unsupported suffixes keep their lower-cased name as the tag so the
        parse step can report them.
        """

        suffix = Path(path).suffix.lower().lstrip(".")
        return cls(str(path), FORMAT_BY_SUFFIX.get(suffix, suffix))
