"""Key normalisation rules.

Purpose
-------
Translate a dotted configuration key into the ordered list of spellings probed
against the environment and the merged file map.

Contents
--------
* :func:`key_variants` – pure function returning the probe order.

System Role
-----------
The order returned here decides which entry wins when several spellings of the
same logical key are set at once: the first match in the list wins.
"""

from __future__ import annotations


def key_variants(key: str) -> list[str]:
    """Return the spellings of *key* to probe, in priority order.

    Why
    ----
    Operators override ``service.timeout`` with ``SERVICE_TIMEOUT`` in the
    environment while files keep the dotted form. Probing a fixed list lets
    either spelling satisfy a lookup.

    What
    ----
    1. dots replaced with underscores, upper-cased
    2. dots replaced with underscores, lower-cased
    3. the key unchanged
    4. the key upper-cased
    5. the key lower-cased

    Duplicates are kept; probing the same spelling twice is harmless.

    Examples
    --------
    >>> key_variants("service.timeout")
    ['SERVICE_TIMEOUT', 'service_timeout', 'service.timeout', 'SERVICE.TIMEOUT', 'service.timeout']
    >>> key_variants("Api.Key")[2]
    'Api.Key'
    """

    underscored = key.replace(".", "_")
    return [
        underscored.upper(),
        underscored.lower(),
        key,
        key.upper(),
        key.lower(),
    ]
