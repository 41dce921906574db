"""Display formatting for dates, periods, counts and category codes."""

from __future__ import annotations

from datetime import date

from pyconflict._normalize import safe_date

_VIOLENCE_TYPE_LABELS: dict[int, str] = {
    1: "State-based violence",
    2: "Non-state violence",
    3: "One-sided violence",
}

_CLARITY_LABELS: dict[int, str] = {
    1: "High precision",
    2: "Medium precision",
    3: "Low precision",
}


def violence_type_label(code: int) -> str:
    return _VIOLENCE_TYPE_LABELS.get(int(code), f"Violence type {int(code)}")


def clarity_label(code: int) -> str:
    return _CLARITY_LABELS.get(int(code), f"Clarity {int(code)}")


def format_date(value: date | str) -> str:
    """Format as ``Dec 1, 2024``; unparseable input is returned unchanged."""
    parsed = safe_date(value)
    if parsed is None:
        return str(value)
    return f"{parsed:%b} {parsed.day}, {parsed.year}"


def format_period(period: str) -> str:
    """Format a ``YYYY-MM`` period as ``Jan 2024``."""
    try:
        year_text, month_text = period.split("-")[:2]
        parsed = date(int(year_text), int(month_text), 1)
    except ValueError:
        return period
    return f"{parsed:%b} {parsed.year}"


def format_number(value: int | float) -> str:
    if isinstance(value, float) and not value.is_integer():
        return f"{value:,.2f}".rstrip("0").rstrip(".")
    return f"{int(value):,}"


def format_deaths(deaths: int) -> str:
    if deaths == 0:
        return "No casualties"
    if deaths == 1:
        return "1 casualty"
    return f"{format_number(deaths)} casualties"
