"""Domain-level exception hierarchy.

Purpose
-------
Expose the stable error taxonomy shared by adapters, the composition root, and
consuming applications. The hierarchy lives in the domain layer so adapters can
raise it without importing the composition root.

Contents
--------
* :class:`ConfigError` – umbrella base class for all configuration-related
  issues.
* :class:`InvalidArgument` – an explicitly named configuration file is missing
  or unreadable.
* :class:`InvalidFormat` – a configuration file could not be parsed into a
  usable mapping.
* :class:`NotFound` – a file disappeared between discovery and reading.

System Role
-----------
Construction fails fast with :class:`InvalidArgument`; lookups fail lazily with
:class:`InvalidFormat` when a file is first drained. Callers catch
:class:`ConfigError` to handle all library failures uniformly.
"""

from __future__ import annotations


class ConfigError(Exception):
    """Base type for all exceptions emitted by ``lib_getconfig``.

    Why
    ----
    Provide a single catch-all type for consumers that do not need fine-grained
    handling.
    """


class InvalidArgument(ConfigError, ValueError):
    """Raised when an explicitly requested configuration file is unusable.

    Why
    ----
    An operator who names a file (constructor argument or the primary-file
    override variable) expects it to be read. Silently ignoring a typo would
    hide configuration drift, so construction aborts instead.

    Typical Sources
    ---------------
    :class:`lib_getconfig.adapters.path_resolvers.default.DefaultPathResolver`.
    """


class InvalidFormat(ConfigError):
    """Raised when an input artifact cannot be parsed into structured data.

    Why
    ----
    Distinguish between missing files and malformed content.

    Typical Sources
    ---------------
    Structured file loaders (ini/env line parser, :mod:`json`, :mod:`yaml`)
    and the retry loop in :mod:`lib_getconfig.core`.
    """


class NotFound(ConfigError):
    """Represents a file that vanished after discovery.

    Why
    ----
    Shared or network file systems may briefly report a file that cannot be
    opened yet. The composition root treats this as a failed read attempt and
    retries.
    """
