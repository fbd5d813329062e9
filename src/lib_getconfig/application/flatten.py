"""Nested-to-flat conversion for structured configuration files.

Purpose
-------
YAML and JSON documents nest arbitrarily, while lookups use dotted keys. This
module joins nested keys with ``.`` and renders scalar leaves as strings so the
merged file map only ever holds ``str`` or ``None`` values.

Contents
    - ``flatten``: public entry point.
    - ``render_scalar``: string rendering used for every leaf.

System Role
-----------
Applied by :class:`lib_getconfig.core.ConfigResolver` to every parsed file
before :func:`lib_getconfig.application.merge.merge_file` runs. Flat ini/env
mappings pass through unchanged.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def flatten(data: Mapping[Any, Any], prefix: str = "") -> dict[str, str | None]:
    """Return a flat mapping whose keys are the dot-joined paths of *data*.

    Why
    ----
    The resolver probes one flat map with each key spelling; nested documents
    must be reduced to the same shape as ini files.

    What
    ----
    Mappings recurse with ``parent.child`` keys, lists recurse with their index
    as the segment, and leaves pass through :func:`render_scalar`. Empty
    containers contribute no keys.

    Examples
    --------
    >>> flatten({"db": {"host": "localhost", "port": 5432}, "debug": False})
    {'db.host': 'localhost', 'db.port': '5432', 'debug': 'false'}
    >>> flatten({"hosts": ["a", "b"], "empty": {}, "unset": None})
    {'hosts.0': 'a', 'hosts.1': 'b', 'unset': None}
    """

    flat: dict[str, str | None] = {}
    for key, value in data.items():
        _flatten_into(flat, _join(prefix, key), value)
    return flat


def _flatten_into(flat: dict[str, str | None], dotted: str, value: Any) -> None:
    """Write *value* (recursively) into *flat* under *dotted*."""

    if isinstance(value, Mapping):
        for key, child in value.items():
            _flatten_into(flat, _join(dotted, key), child)
    elif isinstance(value, (list, tuple)):
        for index, child in enumerate(value):
            _flatten_into(flat, _join(dotted, index), child)
    else:
        flat[dotted] = render_scalar(value)


def render_scalar(value: Any) -> str | None:
    """Render a leaf value as the string a caller receives.

    Examples
    --------
    >>> render_scalar(0), render_scalar(True), render_scalar(2.5), render_scalar("")
    ('0', 'true', '2.5', '')
    >>> render_scalar(None) is None
    True
    """

    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    return str(value)


def _join(prefix: str, key: Any) -> str:
    """Join *prefix* and *key* with a dot, skipping an empty prefix.

    Non-string keys render like leaf values, so a YAML 1.1 ``on:`` key becomes
    ``true`` rather than ``True``.
    """

    segment = key if isinstance(key, str) else str(render_scalar(key))
    return f"{prefix}.{segment}" if prefix else segment
