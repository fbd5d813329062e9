"""Composition root for ``lib_getconfig``.

Purpose
-------
Provide the resolver that answers ``get("service.timeout")`` by consulting the
process environment first and the discovered configuration files second. The
module wires the path resolver, file loaders, flattener, and environment probe
together and owns the lazily populated caches.

Contents
--------
* :data:`MAX_PARSE_ATTEMPTS` – attempts made per file before giving up.
* :class:`FileLoadError` – error raised when a file cannot be parsed.
* :class:`ConfigResolver` – the resolver (``get``, ``origin``, ``find_file``).
* :func:`default_config` / :func:`set_default_config` /
  :func:`reset_default_config` – process-wide shared instance.
* :func:`find_file` – locate a named file using the shared instance.

System Role
-----------
Application code depends on :class:`ConfigResolver` (passed explicitly or via
:func:`default_config`) and never on adapters directly. Precedence rules and
the drain-once policy live here and nowhere else.
"""

from __future__ import annotations

import os
import threading
from collections import deque
from typing import Final, Mapping

from .adapters.env.default import DEFAULT_ENV_PREFIX, DefaultEnvProbe
from .adapters.file_loaders.structured import loader_for
from .adapters.path_resolvers.default import DefaultPathResolver
from .application.flatten import flatten
from .application.merge import merge_file, probe
from .application.ports import EnvProbe, PathResolver
from .domain.config import CandidateFile, ConfigValue, SourceInfo
from .domain.errors import ConfigError, InvalidArgument, InvalidFormat, NotFound
from .domain.keys import key_variants
from .observability import log_debug, log_info, make_event

#: Attempts made to parse one file before the lookup fails. Shared or network
#: file systems can expose a file before its contents are fully readable.
MAX_PARSE_ATTEMPTS: Final[int] = 3


class FileLoadError(InvalidFormat):
    """Raised when a discovered file cannot be parsed into a non-empty mapping.

    Why
    ----
    Callers need the failing path and the retry count to fix the file; the
    original parser error is chained as ``__cause__``.
    """


class ConfigResolver:
    """Resolve dotted keys from the environment and configuration files.

    Why
    ----
    Application code reads configuration without knowing whether a setting
    comes from the deployment environment or from on-disk defaults, and an
    operator can override any single setting with an environment variable.

    What
    ----
    * Files are discovered at construction; a missing explicit file raises
      :class:`InvalidArgument` immediately.
    * Files are parsed on the first lookup the environment cannot answer, all
      at once, in discovery order; later files overwrite earlier keys.
    * Every outcome, including "absent", is cached under all spellings of the
      key for the lifetime of the instance.

    Examples
    --------
    >>> from pathlib import Path
    >>> from tempfile import TemporaryDirectory
    >>> tmp = TemporaryDirectory()
    >>> ini = Path(tmp.name) / "app.ini"
    >>> _ = ini.write_text("service.timeout = 30\\n", encoding="utf-8")
    >>> config = ConfigResolver(ini, environ={"SERVICE_NAME": "demo"})
    >>> config.get("service.timeout"), config.get("service.name"), config.get("missing")
    ('30', 'demo', None)
    >>> config.origin("service.timeout")["layer"]
    'file'
    >>> tmp.cleanup()
    """

    def __init__(
        self,
        file: str | os.PathLike[str] | None = None,
        directory: str | os.PathLike[str] | None = None,
        *,
        env_prefix: str = DEFAULT_ENV_PREFIX,
        environ: Mapping[str, str] | None = None,
        platform: str | None = None,
        path_resolver: PathResolver | None = None,
        env_probe: EnvProbe | None = None,
    ) -> None:
        """Discover configuration files and prepare the empty caches.

        Parameters
        ----------
        file:
            Explicit primary file; overrides ``<PREFIX>_INI_FILE``.
        directory:
            Explicit multi-file directory; overrides ``<PREFIX>_INI_DIR``.
        env_prefix:
            Prefix of the discovery override variables.
        environ:
            Mapping used for both discovery overrides and key lookups instead
            of :data:`os.environ`.
        platform:
            Platform identifier selecting the compiled-in default directory.
        path_resolver / env_probe:
            Replacement adapters; the defaults are built from the arguments
            above.

        Raises
        ------
        InvalidArgument
            When an explicitly named primary file is missing or unreadable.
        """

        self._paths = path_resolver or DefaultPathResolver(
            file, directory, env=environ, env_prefix=env_prefix, platform=platform
        )
        self._env = env_probe or DefaultEnvProbe(environ=environ)
        self._files: tuple[CandidateFile, ...] = tuple(self._paths.candidates())
        self._pending: deque[CandidateFile] = deque(self._files)
        self._merged: dict[str, ConfigValue] = {}
        self._merged_meta: dict[str, SourceInfo] = {}
        self._parsed: dict[str, dict[str, ConfigValue]] = {}
        self._resolved: dict[str, ConfigValue] = {}
        self._origins: dict[str, SourceInfo | None] = {}
        self._lock = threading.RLock()

    @property
    def files(self) -> tuple[CandidateFile, ...]:
        """Files discovered at construction, in load order."""

        return self._files

    @property
    def pending(self) -> int:
        """Number of discovered files not parsed yet."""

        return len(self._pending)

    def get(self, key: str) -> ConfigValue:
        """Return the value for *key*, or ``None`` when no source sets it.

        Raises
        ------
        InvalidFormat
            When a file that must be drained to answer the lookup is malformed
            or has an unsupported extension.
        """

        with self._lock:
            if key not in self._resolved:
                self._resolve(key)
            return self._resolved[key]

    def origin(self, key: str) -> SourceInfo | None:
        """Return where the value of *key* came from, or ``None`` when absent.

        Examples
        --------
        >>> config = ConfigResolver(directory="/nonexistent", environ={"DN_ETC_DIR": "/nonexistent", "A_B": "1"})
        >>> config.origin("a.b")
        {'layer': 'env', 'path': None, 'key': 'A_B'}
        """

        with self._lock:
            if key not in self._resolved:
                self._resolve(key)
            return self._origins[key]

    def find_file(self, name: str) -> str | None:
        """Return the path of *name* in the base directory, else the multi-file directory."""

        return self._paths.find_file(name)

    def _resolve(self, key: str) -> None:
        """Resolve *key* and cache the outcome under every spelling."""

        variants = key_variants(key)
        value: ConfigValue = None
        source: SourceInfo | None = None

        matched = self._env.lookup(variants)
        if matched is not None:
            name, value = matched
            source = {"layer": "env", "path": None, "key": name}
        else:
            self._drain()
            name = probe(self._merged, variants)
            if name is not None:
                value = self._merged[name]
                source = self._merged_meta[name]

        for variant in variants:
            self._resolved[variant] = value
            self._origins[variant] = source
        log_debug(
            "config_key_resolved",
            **make_event(source["layer"] if source else "none", source["path"] if source else None, {"key": key}),
        )

    def _drain(self) -> None:
        """Parse and merge every pending file, in order.

        A file leaves the queue only after it merged successfully, so a failed
        drain is retried by the next lookup instead of silently skipping data.
        A path listed twice is merged at both positions but parsed once.
        """

        if not self._pending:
            return
        while self._pending:
            candidate = self._pending[0]
            identity = os.path.abspath(candidate.path)
            payload = self._parsed.get(identity)
            if payload is None:
                payload = self._parsed[identity] = flatten(self._parse(candidate))
            merge_file(self._merged, self._merged_meta, payload, candidate.path)
            self._pending.popleft()
            log_debug("config_file_merged", **make_event("file", candidate.path, {"keys": len(payload)}))
        log_info("configuration_drained", layer="file", path=None, files=len(self._files), keys=len(self._merged))

    def _parse(self, candidate: CandidateFile) -> Mapping[str, object]:
        """Load *candidate*, retrying up to :data:`MAX_PARSE_ATTEMPTS` times.

        An attempt fails when the loader raises or returns an empty mapping.
        Every attempt re-reads the file from disk.
        """

        loader = loader_for(candidate.format)
        if loader is None:
            raise InvalidFormat(f"Unsupported configuration file format '{candidate.format}': {candidate.path}")

        last_error: ConfigError | None = None
        for attempt in range(1, MAX_PARSE_ATTEMPTS + 1):
            try:
                data = loader.load(candidate.path)
            except (InvalidFormat, NotFound) as exc:
                last_error = exc
            else:
                if data:
                    return data
                last_error = InvalidFormat(f"File {candidate.path} produced no configuration values")
            log_debug(
                "config_file_retry",
                **make_event("file", candidate.path, {"attempt": attempt, "error": str(last_error)}),
            )
        raise FileLoadError(
            f"File is not a valid {candidate.format} file after {MAX_PARSE_ATTEMPTS} attempts: {candidate.path}"
        ) from last_error


_DEFAULT: ConfigResolver | None = None
_DEFAULT_LOCK = threading.Lock()


def default_config() -> ConfigResolver:
    """Return the process-wide resolver, building it on first use.

    The shared instance uses environment-driven defaults. Code that wants a
    different setup should construct a :class:`ConfigResolver` and pass it
    along explicitly, or install it with :func:`set_default_config`.
    """

    global _DEFAULT
    with _DEFAULT_LOCK:
        if _DEFAULT is None:
            _DEFAULT = ConfigResolver()
        return _DEFAULT


def set_default_config(resolver: ConfigResolver) -> None:
    """Install *resolver* as the process-wide instance."""

    global _DEFAULT
    with _DEFAULT_LOCK:
        _DEFAULT = resolver


def reset_default_config() -> None:
    """Drop the process-wide instance so the next access builds a fresh one."""

    global _DEFAULT
    with _DEFAULT_LOCK:
        _DEFAULT = None


def find_file(name: str) -> str | None:
    """Locate *name* in the directories configured for the shared resolver."""

    return default_config().find_file(name)


__all__ = [
    "ConfigError",
    "ConfigResolver",
    "FileLoadError",
    "InvalidArgument",
    "InvalidFormat",
    "MAX_PARSE_ATTEMPTS",
    "NotFound",
    "default_config",
    "find_file",
    "reset_default_config",
    "set_default_config",
]
