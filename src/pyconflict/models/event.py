"""Conflict event records and paginated event lists."""

from __future__ import annotations

import math
from typing import Any

from pydantic import AliasChoices, Field, field_validator

from pyconflict.models._base import ApiDate, ConflictBaseModel, ConflictEnum


class ViolenceType(ConflictEnum):
    """Nature of the conflict an event belongs to."""

    UNKNOWN = -1
    STATE_BASED = 1
    NON_STATE = 2
    ONE_SIDED = 3


class LocationClarity(ConflictEnum):
    """Ordinal precision of an event's recorded location."""

    UNKNOWN = -1
    HIGH = 1
    MEDIUM = 2
    LOW = 3


class ConflictEvent(ConflictBaseModel):
    """A single conflict event.

    Only ``id`` is required; every other field is ``None`` (or ``0`` for
    death counts) when the API omits it.
    """

    id: str
    relid: str | None = None
    year: int | None = None
    conflict_name: str | None = None
    dyad_name: str | None = None
    side_a: str | None = None
    side_b: str | None = None
    country: str | None = None
    country_id: int | None = None
    region: str | None = None
    adm_1: str | None = None
    adm_2: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    type_of_violence: ViolenceType = ViolenceType.UNKNOWN
    event_clarity: LocationClarity = Field(
        default=LocationClarity.UNKNOWN,
        validation_alias=AliasChoices("event_clarity", "clarity_of_location"),
    )
    where_prec: int | None = None
    where_description: str | None = None
    date_prec: int | None = None
    date_start: ApiDate = None
    date_end: ApiDate = None
    best: int = 0
    low: int = 0
    high: int = 0
    deaths_a: int = 0
    deaths_b: int = 0
    deaths_civilians: int = 0
    deaths_unknown: int = 0
    number_of_sources: int | None = None
    source_article: str | None = None
    source_headline: str | None = None
    source_office: str | None = None
    source_date: str | None = None

    @field_validator("id", "relid", mode="before")
    @classmethod
    def _coerce_identifier(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("latitude", "longitude")
    @classmethod
    def _finite_coordinate(cls, value: float | None) -> float | None:
        if value is None or not math.isfinite(value):
            return None
        return value

    @property
    def has_location(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @property
    def has_civilian_deaths(self) -> bool:
        return self.deaths_civilians > 0


class EventPage(ConflictBaseModel):
    """One page of events.

    Accepts both ``{items, totalCount, page, pageSize}`` and the older
    ``{data, total, page, pageSize, totalPages}`` payload shape.
    """

    items: list[ConflictEvent] = Field(default_factory=list, validation_alias=AliasChoices("items", "data"))
    total_count: int = Field(default=0, validation_alias=AliasChoices("totalCount", "total", "total_count"))
    page: int = 1
    page_size: int = Field(default=0, validation_alias=AliasChoices("pageSize", "page_size"))

    @property
    def total_pages(self) -> int:
        if self.page_size <= 0:
            return 1 if self.items else 0
        return math.ceil(self.total_count / self.page_size)

    @property
    def first_index(self) -> int:
        """1-based index of the first item on this page (0 when empty)."""
        if not self.items:
            return 0
        return (self.page - 1) * self.page_size + 1

    @property
    def last_index(self) -> int:
        if not self.items:
            return 0
        return min(self.page * self.page_size, self.total_count)
