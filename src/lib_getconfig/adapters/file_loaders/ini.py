"""Line parser shared by ``.ini`` and ``.env`` files.

Purpose
-------
Turn ``key = value`` text into a flat mapping of strings. Both formats are read
by the same rules so a deployment can ship ``10-db.ini`` or ``10-db.env``
interchangeably.

Contents
--------
* :func:`parse_ini` – parse text into ``dict[str, str]``.
* Helpers (`_section_name`, `_split_assignment`, `_strip_quotes`) that keep
  the per-line rules readable.

Syntax
------
* blank lines and lines starting with ``#`` or ``;`` are ignored
* ``[section]`` prefixes the keys that follow with ``section.``
* ``export KEY=value`` is accepted for shell-style ``.env`` files
* values may be wrapped in single or double quotes; an unquoted value ends at
  an inline `` #`` or `` ;`` comment
* values are never coerced: ``0`` stays the string ``"0"``
"""

from __future__ import annotations

from ...domain.errors import InvalidFormat

_COMMENT_PREFIXES = ("#", ";")
_INLINE_COMMENTS = (" #", " ;")


def parse_ini(text: str, *, path: str) -> dict[str, str]:
    """Parse ini/env *text* into a flat mapping, raising ``InvalidFormat`` on malformed lines.

    Parameters
    ----------
    text:
        File contents.
    path:
        Originating file path used for error messages.

    Examples
    --------
    >>> body = "[service]\\ntimeout = 5\\nname = 'demo' ; quoted\\n"
    >>> parse_ini("debug=0\\n" + body, path="demo.ini")
    {'debug': '0', 'service.timeout': '5', 'service.name': 'demo'}
    >>> parse_ini("export TOKEN=\\"\\"", path=".env")
    {'TOKEN': ''}
    """

    result: dict[str, str] = {}
    section: str | None = None
    for line_number, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith(_COMMENT_PREFIXES):
            continue
        if line.startswith("["):
            section = _section_name(line, path=path, line_number=line_number)
            continue
        key, value = _split_assignment(line, path=path, line_number=line_number)
        if section:
            key = f"{section}.{key}"
        result[key] = value
    return result


def _section_name(line: str, *, path: str, line_number: int) -> str:
    """Return the name inside a ``[section]`` header."""

    if not line.endswith("]"):
        raise InvalidFormat(f"Malformed section header on line {line_number} in {path}")
    return line[1:-1].strip()


def _split_assignment(line: str, *, path: str, line_number: int) -> tuple[str, str]:
    """Split ``key = value`` into a stripped key and an unquoted value."""

    if "=" not in line:
        raise InvalidFormat(f"Malformed line {line_number} in {path}")
    key, value = line.split("=", 1)
    key = key.strip()
    if key.startswith("export "):
        key = key[len("export ") :].strip()
    if not key:
        raise InvalidFormat(f"Missing key on line {line_number} in {path}")
    return key, _strip_quotes(value.strip())


def _strip_quotes(value: str) -> str:
    """Trim surrounding quotes and inline comments from ``value``.

    Examples
    --------
    >>> _strip_quotes('"token"')
    'token'
    >>> _strip_quotes("value # comment")
    'value'
    >>> _strip_quotes("; nothing")
    ''
    """

    if value.startswith(_COMMENT_PREFIXES):
        return ""
    if value[:1] in {'"', "'"}:
        closing = value.find(value[0], 1)
        if closing > 0:
            return value[1:closing]
    for marker in _INLINE_COMMENTS:
        if marker in value:
            value = value.split(marker, 1)[0].strip()
    return value
