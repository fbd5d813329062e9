"""Application-layer merge policy.

Purpose
-------
Fold flattened file payloads into the resolver's merged file map. Files are
merged in discovery order and a later file overwrites identical keys from an
earlier one; provenance follows the winning file. The module is free of I/O.

Contents
    - ``merge_file``: merge one flat payload into the shared map.
    - ``probe``: return the first variant present in the merged map.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Iterable

from ..domain.config import SourceInfo


def merge_file(
    target: dict[str, str | None],
    meta: dict[str, SourceInfo],
    payload: Mapping[str, str | None],
    path: str,
) -> None:
    """Merge *payload* from *path* into *target*, overwriting existing keys.

    Examples
    --------
    >>> merged, meta = {}, {}
    >>> merge_file(merged, meta, {"k": "1", "a": "x"}, "/etc/app/config.ini")
    >>> merge_file(merged, meta, {"k": "2"}, "/etc/app/config.d/01-x.ini")
    >>> merged
    {'k': '2', 'a': 'x'}
    >>> meta["k"]["path"]
    '/etc/app/config.d/01-x.ini'
    """

    for key, value in payload.items():
        target[key] = value
        meta[key] = {"layer": "file", "path": path, "key": key}


def probe(target: Mapping[str, str | None], variants: Iterable[str]) -> str | None:
    """Return the first of *variants* present in *target*, or ``None``.

    Presence, not truthiness, decides: an entry holding ``""`` or ``None``
    still matches.

    Examples
    --------
    >>> probe({"a.b": ""}, ["A_B", "a_b", "a.b"])
    'a.b'
    >>> probe({}, ["x"]) is None
    True
    """

    for name in variants:
        if name in target:
            return name
    return None
