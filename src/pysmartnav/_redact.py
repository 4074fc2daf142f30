"""Helpers for safe debug logging.

Provider URLs carry API keys in their query strings. This module redacts
them (and any other sensitive fields) before they reach a log record.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any

_SENSITIVE_VALUE_KEYS: frozenset[str] = frozenset(
    {
        "key",
        "apikey",
        "api_key",
        "tomtom_api_key",
        "token",
        "accesstoken",
        "access_token",
        "authorization",
        "password",
        "cookie",
    }
)

_QUERY_SECRET = re.compile(r"(?i)\b(key|apikey|api_key|token|access_token)=([^&\s'\"]+)")
_DICT_SECRET = re.compile(r"(?i)(['\"](?:key|apikey|api_key|token|access_token)['\"]\s*:\s*['\"])([^'\"]*)")


def redact_url(url: str) -> str:
    """Replace secret query parameters (``key=...`` and friends) with ``<redacted>``."""
    url = _QUERY_SECRET.sub(lambda m: f"{m.group(1)}=<redacted>", url)
    return _DICT_SECRET.sub(lambda m: f"{m.group(1)}<redacted>", url)


def redact_for_log(value: Any, *, max_string: int = 512, _depth: int = 0) -> Any:
    """Return a redacted copy of *value* suitable for debug logs."""
    if _depth > 20:
        return "<max-depth>"

    if value is None:
        return None

    if isinstance(value, str):
        value = redact_url(value)
        if len(value) > max_string:
            return f"{value[:max_string]}…<truncated>"
        return value

    if isinstance(value, (int, float, bool)):
        return value

    if isinstance(value, bytes):
        return f"<bytes:{len(value)}b>"

    if isinstance(value, Mapping):
        redacted: dict[str, Any] = {}
        for k, v in value.items():
            key = str(k)
            if key.lower() in _SENSITIVE_VALUE_KEYS:
                redacted[key] = "<redacted>"
            else:
                redacted[key] = redact_for_log(v, max_string=max_string, _depth=_depth + 1)
        return redacted

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return [redact_for_log(v, max_string=max_string, _depth=_depth + 1) for v in value]

    # Fallback: represent unknown objects without dumping internals.
    return repr(value)
