"""Environment variable adapter.

Purpose
-------
Probe the process environment for the spellings produced by
:func:`lib_getconfig.domain.keys.key_variants`. The environment is the highest
precedence source, so the resolver consults this adapter before touching any
file.

Key behaviours
--------------
* Reads the live mapping at lookup time, so variables exported after the
  resolver was constructed are still seen (until the key is cached).
* A variable set to the empty string is a match; only unset variables are
  skipped.
* Values are returned verbatim; no type coercion.
* :func:`override_names` derives the three discovery override variables from a
  prefix.
"""

from __future__ import annotations

import os
from typing import Iterable, Mapping, NamedTuple

from ...observability import log_debug

#: Prefix used for the discovery override variables when none is supplied.
DEFAULT_ENV_PREFIX = "DN"


class OverrideNames(NamedTuple):
    """Names of the environment variables that steer file discovery."""

    ini_file: str
    etc_dir: str
    ini_dir: str


def override_names(prefix: str = DEFAULT_ENV_PREFIX) -> OverrideNames:
    """Return the override variable names for *prefix*.

    Examples
    --------
    >>> override_names()
    OverrideNames(ini_file='DN_INI_FILE', etc_dir='DN_ETC_DIR', ini_dir='DN_INI_DIR')
    >>> override_names('my-app').ini_dir
    'MY_APP_INI_DIR'
    """

    stem = prefix.replace("-", "_").upper().rstrip("_")
    return OverrideNames(f"{stem}_INI_FILE", f"{stem}_ETC_DIR", f"{stem}_INI_DIR")


class DefaultEnvProbe:
    """Look up configuration keys in the process environment."""

    def __init__(self, *, environ: Mapping[str, str] | None = None) -> None:
        """Initialise the probe with a specific ``environ`` mapping for testability.

        Parameters
        ----------
        environ:
            Mapping to read from. Defaults to :data:`os.environ` (the live
            mapping, not a copy).
        """

        self._environ = os.environ if environ is None else environ

    def lookup(self, variants: Iterable[str]) -> tuple[str, str] | None:
        """Return ``(name, value)`` for the first variant present in the environment.

        Examples
        --------
        >>> probe = DefaultEnvProbe(environ={'service_timeout': '', 'SERVICE.TIMEOUT': '9'})
        >>> probe.lookup(['SERVICE_TIMEOUT', 'service_timeout', 'SERVICE.TIMEOUT'])
        ('service_timeout', '')
        >>> probe.lookup(['missing']) is None
        True
        """

        for name in variants:
            value = self._environ.get(name)
            if value is not None:
                log_debug("env_variable_matched", layer="env", path=None, key=name)
                return name, value
        return None
