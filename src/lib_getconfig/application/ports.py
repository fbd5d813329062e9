"""Application-layer ports describing adapter responsibilities.

Purpose
-------
Define the structural contracts that adapters must satisfy so the resolver can
orchestrate behaviour without depending on concrete implementations.

Contents
--------
* :class:`PathResolver` – discovers candidate files and locates named files.
* :class:`FileLoader` – parses one configuration file into a mapping.
* :class:`EnvProbe` – looks key spellings up in the process environment.

System Role
-----------
:class:`lib_getconfig.core.ConfigResolver` accepts any object satisfying these
protocols, which keeps tests free to substitute in-memory fakes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Mapping, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..domain.config import CandidateFile


@runtime_checkable
class PathResolver(Protocol):
    """Discover configuration files and resolve named files.

    Methods
    -------
    :meth:`candidates`
        Ordered files to load: the primary file, then the sorted directory set.
    :meth:`find_file`
        First existing ``<base dir>/<name>`` or ``<ini dir>/<name>``.
    """

    def candidates(self) -> list[CandidateFile]:
        """Return the ordered candidate files."""

    def find_file(self, name: str) -> str | None:
        """Return the path of *name* inside the configured directories, if any."""


@runtime_checkable
class FileLoader(Protocol):
    """Parse a configuration file into a (possibly nested) mapping."""

    def load(self, path: str) -> Mapping[str, object]:
        """Read *path* and return a mapping or raise ``InvalidFormat``/``NotFound``."""


@runtime_checkable
class EnvProbe(Protocol):
    """Find the first key spelling that is set in the environment."""

    def lookup(self, variants: Iterable[str]) -> tuple[str, str] | None:
        """Return ``(name, value)`` for the first set variant or ``None``."""
