"""Normalization helpers.

Centralizes defensive parsing of provider payloads.
"""

from __future__ import annotations

import math
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


def unwrap(values: Any, *keys: str) -> Any:
    """Return the first nested dict found under *keys*, else *values* itself."""
    if not isinstance(values, dict):
        return values
    for key in keys:
        nested = values.get(key)
        if isinstance(nested, dict):
            return nested
    return values
