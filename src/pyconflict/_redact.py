"""Redaction for DEBUG log output.

Filter parameters can carry long facet lists, response bodies can hold
thousands of events, and Power BI embed URLs carry the tenant id. Values
are passed through :func:`redact_for_log` before they reach a log line.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any

_REDACTED = "<redacted>"

_SENSITIVE_KEYS: frozenset[str] = frozenset(
    {
        "ctid",
        "tenantid",
        "tenant_id",
        "authorization",
        "cookie",
        "set-cookie",
        "token",
        "accesstoken",
        "access_token",
    }
)

# ctid=... inside an already-built embed URL
_TENANT_IN_URL = re.compile(r"(?i)([?&]ctid=)[^&#]*")


def _is_sensitive(key: str) -> bool:
    return key.lower() in _SENSITIVE_KEYS


def _shorten(text: str, limit: int) -> str:
    text = _TENANT_IN_URL.sub(rf"\1{_REDACTED}", text)
    if len(text) <= limit:
        return text
    return f"{text[:limit]}…<truncated>"


def redact_for_log(value: Any, *, max_string: int = 512, max_items: int = 20, _depth: int = 0) -> Any:
    """Return a copy of *value* that is safe to log.

    Sensitive keys are masked at any depth, strings are cut to
    ``max_string`` characters and sequences to ``max_items`` entries.
    """
    if _depth > 20:
        return "<max-depth>"

    def _child(item: Any) -> Any:
        return redact_for_log(item, max_string=max_string, max_items=max_items, _depth=_depth + 1)

    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, str):
        return _shorten(value, max_string)
    if isinstance(value, (bytes, bytearray)):
        return f"<bytes:{len(value)}b>"
    if isinstance(value, Mapping):
        return {str(key): _REDACTED if _is_sensitive(str(key)) else _child(item) for key, item in value.items()}
    if isinstance(value, (Sequence, set, frozenset)):
        items = list(value) if isinstance(value, Sequence) else sorted(value, key=str)
        shown = [_child(item) for item in items[:max_items]]
        if len(items) > max_items:
            shown.append(f"<+{len(items) - max_items} more>")
        return shown
    return repr(value)
