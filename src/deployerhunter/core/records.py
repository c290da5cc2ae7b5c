"""Helpers for reading loosely shaped upstream JSON records."""

import math
from typing import Any


def dig(record: Any, path: str) -> Any:
    """Read a dotted path from nested dicts/lists, None when any hop is missing."""
    current = record
    for part in path.split("."):
        if isinstance(current, dict):
            current = current.get(part)
        elif isinstance(current, list) and part.isdigit() and int(part) < len(current):
            current = current[int(part)]
        else:
            return None
        if current is None:
            return None
    return current


def to_number(value: Any) -> float | None:
    """Finite float of a number or numeric string; None for anything else, bools included."""
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None
