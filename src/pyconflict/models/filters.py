"""Filter state model.

:class:`FilterState` is the query the user is building. Snapshots are
frozen: every update produces a new instance, so consumers may hold on
to a reference without it changing underneath them.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date, timedelta
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from pyconflict._constants import CLARITY_MAX, CLARITY_MIN, DEFAULT_WINDOW_DAYS


def default_date_range(today: date | None = None) -> DateRange:
    """Return the default window: the 365 days ending *today*."""
    end = today or date.today()
    return DateRange(start=end - timedelta(days=DEFAULT_WINDOW_DAYS), end=end)


class DateRange(BaseModel):
    """Inclusive calendar date range."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    start: date
    end: date

    @model_validator(mode="after")
    def _ordered(self) -> DateRange:
        if self.start > self.end:
            raise ValueError(f"date range start {self.start} is after end {self.end}")
        return self


class IntRange(BaseModel):
    """Integer range with optional bounds."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    min: int | None = None
    max: int | None = None

    @model_validator(mode="after")
    def _ordered(self) -> IntRange:
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError(f"range min {self.min} is greater than max {self.max}")
        return self

    @property
    def is_empty(self) -> bool:
        return self.min is None and self.max is None


def _clean_facet(values: Any) -> frozenset[str]:
    if values is None:
        return frozenset()
    if isinstance(values, str):
        values = [values]
    items: set[str] = set()
    for value in values:
        text = str(value).strip()
        if not text:
            continue
        if "," in text:
            raise ValueError(f"facet value {text!r} must not contain a comma")
        items.add(text)
    return frozenset(items)


class FilterState(BaseModel):
    """Active query constraints.

    Parameters
    ----------
    date_range : DateRange
        Inclusive date window.
    countries, regions, adm1 : frozenset of str
        Selected location facets.
    violence_types : frozenset of int
        Selected violence category codes (``>= 1``).
    sides_a, sides_b : frozenset of str
        Selected actor facets.
    deaths : IntRange or None
        Best-estimate death count bounds.
    has_civilians : bool or None
        ``True`` requires civilian deaths, ``False`` excludes them,
        ``None`` does not filter.
    clarity : IntRange or None
        Location clarity bounds on the 1..3 scale.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    date_range: DateRange = Field(default_factory=default_date_range)
    countries: frozenset[str] = frozenset()
    regions: frozenset[str] = frozenset()
    adm1: frozenset[str] = frozenset()
    violence_types: frozenset[int] = frozenset()
    sides_a: frozenset[str] = frozenset()
    sides_b: frozenset[str] = frozenset()
    deaths: IntRange | None = None
    has_civilians: bool | None = None
    clarity: IntRange | None = None

    @field_validator("countries", "regions", "adm1", "sides_a", "sides_b", mode="before")
    @classmethod
    def _normalize_facets(cls, value: Any) -> frozenset[str]:
        return _clean_facet(value)

    @field_validator("violence_types")
    @classmethod
    def _positive_codes(cls, value: frozenset[int]) -> frozenset[int]:
        for code in value:
            if code < 1:
                raise ValueError(f"violence type codes must be positive, got {code}")
        return value

    @field_validator("deaths")
    @classmethod
    def _non_negative_deaths(cls, value: IntRange | None) -> IntRange | None:
        if value is None or value.is_empty:
            return None
        for bound in (value.min, value.max):
            if bound is not None and bound < 0:
                raise ValueError(f"death bounds must not be negative, got {bound}")
        return value

    @field_validator("clarity")
    @classmethod
    def _clarity_scale(cls, value: IntRange | None) -> IntRange | None:
        if value is None or value.is_empty:
            return None
        for bound in (value.min, value.max):
            if bound is not None and not CLARITY_MIN <= bound <= CLARITY_MAX:
                raise ValueError(f"clarity bounds must be within {CLARITY_MIN}..{CLARITY_MAX}, got {bound}")
        return value

    @classmethod
    def default(cls, today: date | None = None) -> FilterState:
        """Default date window with every other constraint cleared."""
        return cls(date_range=default_date_range(today))

    def merged(self, changes: Mapping[str, Any]) -> FilterState:
        """Return a new snapshot with *changes* shallow-merged over this one.

        Raises
        ------
        ValueError
            If a key is not a field or the merged state fails validation.
        """
        unknown = set(changes) - set(type(self).model_fields)
        if unknown:
            raise ValueError(f"unknown filter fields: {sorted(unknown)}")
        # Shallow merge: top-level field objects are reused, not copied.
        values = {name: getattr(self, name) for name in type(self).model_fields}
        values.update(changes)
        return type(self).model_validate(values)


def facet_values(values: Iterable[str]) -> list[str]:
    """Stable ordering used whenever a facet set is serialised."""
    return sorted(values)
