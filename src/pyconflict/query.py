"""Query-string codec for :class:`~pyconflict.models.filters.FilterState`.

``encode`` emits one key per non-empty field, comma-joining facet sets;
``decode`` is its left inverse and never raises on malformed input.
Both are pure: neither schedules a fetch nor touches the address bar.

Keys::

    from, to                  YYYY-MM-DD
    countries, regions, adm1  comma-joined names
    violenceTypes             comma-joined codes
    sidesA, sidesB            comma-joined actor names
    minDeaths, maxDeaths      integers
    hasCivilians              true | false
    clarityMin, clarityMax    integers on the 1..3 scale
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date
from typing import Any
from urllib.parse import parse_qsl, urlencode

from pyconflict._constants import CLARITY_MAX, CLARITY_MIN
from pyconflict._normalize import safe_bool, safe_date, safe_int, split_csv
from pyconflict.models.filters import DateRange, FilterState, IntRange, default_date_range, facet_values

_logger = logging.getLogger(__name__)

_FACET_KEYS: dict[str, str] = {
    "countries": "countries",
    "regions": "regions",
    "adm1": "adm1",
    "sidesA": "sides_a",
    "sidesB": "sides_b",
}


def to_query_params(state: FilterState, **extra: Any) -> dict[str, str]:
    """Flatten *state* into ordered query parameters.

    ``extra`` values (for example ``page`` and ``pageSize``) are appended
    after the filter keys; ``None`` values are dropped.
    """
    params: dict[str, str] = {
        "from": state.date_range.start.isoformat(),
        "to": state.date_range.end.isoformat(),
    }
    for key in ("countries", "regions", "adm1"):
        values = getattr(state, _FACET_KEYS[key])
        if values:
            params[key] = ",".join(facet_values(values))
    if state.violence_types:
        params["violenceTypes"] = ",".join(str(code) for code in sorted(state.violence_types))
    for key in ("sidesA", "sidesB"):
        values = getattr(state, _FACET_KEYS[key])
        if values:
            params[key] = ",".join(facet_values(values))
    if state.deaths is not None:
        if state.deaths.min is not None:
            params["minDeaths"] = str(state.deaths.min)
        if state.deaths.max is not None:
            params["maxDeaths"] = str(state.deaths.max)
    if state.has_civilians is not None:
        params["hasCivilians"] = "true" if state.has_civilians else "false"
    if state.clarity is not None:
        if state.clarity.min is not None:
            params["clarityMin"] = str(state.clarity.min)
        if state.clarity.max is not None:
            params["clarityMax"] = str(state.clarity.max)

    for key, value in extra.items():
        if value is None:
            continue
        params[key] = str(value).lower() if isinstance(value, bool) else str(value)
    return params


def encode(state: FilterState, **extra: Any) -> str:
    """Encode *state* as a query string (without the leading ``?``)."""
    return urlencode(to_query_params(state, **extra), safe=",")


def _decode_range(
    low: int | None,
    high: int | None,
    *,
    floor: int | None = None,
    ceiling: int | None = None,
) -> IntRange | None:
    def _bounded(value: int | None) -> int | None:
        if value is None:
            return None
        if floor is not None and value < floor:
            return None
        if ceiling is not None and value > ceiling:
            return None
        return value

    low, high = _bounded(low), _bounded(high)
    if low is None and high is None:
        return None
    if low is not None and high is not None and low > high:
        low, high = high, low
    return IntRange(min=low, max=high)


def _decode_date_range(raw_from: str | None, raw_to: str | None, today: date | None) -> DateRange:
    default = default_date_range(today)
    start = safe_date(raw_from) or default.start
    end = safe_date(raw_to) or default.end
    if start > end:
        _logger.debug("Swapping inverted date range from=%s to=%s", start, end)
        start, end = end, start
    return DateRange(start=start, end=end)


def decode(query: str | Mapping[str, str], *, today: date | None = None) -> FilterState:
    """Decode a query string (or already-parsed mapping) into a state.

    Absent keys decode to defaults, malformed numbers to ``None`` and
    malformed facet codes are dropped. Never raises.
    """
    if isinstance(query, str):
        # Last occurrence wins for repeated keys.
        params: Mapping[str, str] = dict(parse_qsl(query.lstrip("?")))
    else:
        params = query

    facets = {field: split_csv(params.get(key)) for key, field in _FACET_KEYS.items()}
    codes = (safe_int(item) for item in split_csv(params.get("violenceTypes")))

    return FilterState(
        date_range=_decode_date_range(params.get("from"), params.get("to"), today),
        violence_types=frozenset(code for code in codes if code is not None and code >= 1),
        deaths=_decode_range(
            safe_int(params.get("minDeaths")),
            safe_int(params.get("maxDeaths")),
            floor=0,
        ),
        has_civilians=safe_bool(params.get("hasCivilians")),
        clarity=_decode_range(
            safe_int(params.get("clarityMin")),
            safe_int(params.get("clarityMax")),
            floor=CLARITY_MIN,
            ceiling=CLARITY_MAX,
        ),
        **facets,
    )
