"""Public package surface for ``lib_getconfig``.

Exports the resolver, the process-wide instance helpers, the error taxonomy,
and the observability hooks applications use to attach log handlers.

Example::

    from lib_getconfig import default_config

    timeout = default_config().get("service.timeout")
"""

from __future__ import annotations

from .core import (
    ConfigResolver,
    FileLoadError,
    MAX_PARSE_ATTEMPTS,
    default_config,
    find_file,
    reset_default_config,
    set_default_config,
)
from .domain.config import CandidateFile, SourceInfo
from .domain.errors import ConfigError, InvalidArgument, InvalidFormat, NotFound
from .domain.keys import key_variants
from .observability import bind_trace_id, get_logger

__all__ = [
    "CandidateFile",
    "ConfigError",
    "ConfigResolver",
    "FileLoadError",
    "InvalidArgument",
    "InvalidFormat",
    "MAX_PARSE_ATTEMPTS",
    "NotFound",
    "SourceInfo",
    "bind_trace_id",
    "default_config",
    "find_file",
    "get_logger",
    "key_variants",
    "reset_default_config",
    "set_default_config",
]
