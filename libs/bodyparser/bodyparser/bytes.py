"""Human-readable byte sizes (``"100kb"``, ``"1.5mb"``) to integers."""

from __future__ import annotations

import re

_UNITS = {
    "b": 1,
    "kb": 1 << 10,
    "mb": 1 << 20,
    "gb": 1 << 30,
    "tb": 1 << 40,
    "pb": 1 << 50,
}

_SIZE_RE = re.compile(r"^\s*([-+]?\d+(?:\.\d+)?)\s*(b|kb|mb|gb|tb|pb)?\s*$", re.IGNORECASE)


def parse(value: int | str) -> int:
    """Return *value* as a number of bytes.

    Integers pass through; strings take an optional unit (1024-based).
    Raises ``ValueError`` for anything else.
    """
    if isinstance(value, bool):
        raise ValueError(f"invalid byte size: {value!r}")
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        raise ValueError(f"invalid byte size: {value!r}")

    match = _SIZE_RE.match(value)
    if match is None:
        raise ValueError(f"invalid byte size: {value!r}")

    number, unit = match.groups()
    return int(float(number) * _UNITS[(unit or "b").lower()])
