"""Normalization helpers.

Centralizes lenient parsing of loosely-typed values (remote payloads,
legacy storage, form input).
"""

from __future__ import annotations

import math
import time
from typing import Any


def safe_float(value: Any) -> float | None:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def safe_str(value: Any) -> str | None:
    """Return *value* as text, rendering integral numbers without a fraction."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    text = str(value).strip()
    return text if text else None


def numeric_or_zero(value: Any) -> float:
    """Coerce an aggregation input to a number.

    Missing, boolean and non-numeric values count as ``0``.
    """
    parsed = safe_float(value)
    return 0.0 if parsed is None else parsed


def compact_number(value: float) -> int | float:
    """Return integral floats as ``int`` so counters stay whole numbers."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def numeric_sort_key(value: str) -> tuple[int, float, str]:
    """Sort key for free-form identifiers that are usually numbers.

    Numeric identifiers sort by value; anything else sorts after them,
    lexicographically.
    """
    parsed = safe_float(value)
    if parsed is None:
        return (1, 0.0, value)
    return (0, parsed, value)


def now_ms() -> int:
    """Current epoch timestamp in milliseconds."""
    return int(time.time() * 1000)
