"""Normalization helpers.

Centralizes defensive parsing of query-string and payload values.
"""

from __future__ import annotations

import math
from datetime import date
from typing import Any


def safe_float(value: Any) -> float | None:
    if value is None or value == "" or value == "--":
        return None
    if isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(result):
        return None
    return result


def safe_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    # Floats and strings like "5.0" or "1e3".
    parsed = safe_float(value)
    if parsed is None:
        return None
    if not parsed.is_integer():
        return None
    return int(parsed)


def safe_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text if text else None


def safe_date(value: Any) -> date | None:
    """Parse an ISO ``YYYY-MM-DD`` date, tolerating a trailing time part."""
    if isinstance(value, date):
        return value
    text = safe_str(value)
    if text is None:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def safe_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    text = safe_str(value)
    if text is None:
        return None
    normalized = text.lower()
    if normalized == "true":
        return True
    if normalized == "false":
        return False
    return None


def split_csv(value: str | None) -> list[str]:
    """Split a comma-joined facet value, dropping blank items."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]
