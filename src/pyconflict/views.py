"""Pure helpers behind the table, regions and statistics surfaces."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date, timedelta
from enum import StrEnum
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pyconflict._constants import STATS_WINDOW_DAYS, TABLE_PAGE_SIZE
from pyconflict.models.event import ConflictEvent, EventPage
from pyconflict.models.filters import DateRange, FilterState
from pyconflict.models.stats import RegionAggregate, TimePoint

_T = TypeVar("_T")


class SortDirection(StrEnum):
    ASC = "asc"
    DESC = "desc"

    def toggled(self) -> SortDirection:
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC


class EventSortField(StrEnum):
    DATE_START = "date_start"
    COUNTRY = "country"
    ADM_1 = "adm_1"
    TYPE_OF_VIOLENCE = "type_of_violence"
    BEST = "best"
    DEATHS_CIVILIANS = "deaths_civilians"


class RegionSortField(StrEnum):
    REGION_KEY = "region_key"
    EVENT_COUNT = "event_count"
    DEATH_COUNT = "death_count"
    CIVILIAN_DEATH_COUNT = "civilian_death_count"


class EventsTableQuery(BaseModel):
    """Everything the events table fetches for.

    Two queries compare equal only when filters, paging, sorting and
    search all match, which is what stale-result checks rely on.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    filters: FilterState
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=TABLE_PAGE_SIZE, ge=1)
    sort_field: EventSortField = EventSortField.DATE_START
    sort_direction: SortDirection = SortDirection.DESC
    search: str = ""

    @field_validator("search")
    @classmethod
    def _strip_search(cls, value: str) -> str:
        return value.strip()

    def with_filters(self, filters: FilterState) -> EventsTableQuery:
        """New filters always restart from the first page."""
        return self.model_copy(update={"filters": filters, "page": 1})

    def with_page(self, page: int) -> EventsTableQuery:
        if page < 1:
            raise ValueError(f"page must be >= 1, got {page}")
        return self.model_copy(update={"page": page})

    def with_sort(self, field: EventSortField) -> EventsTableQuery:
        """Toggle direction on the active field, else sort the new field descending."""
        if field is self.sort_field:
            direction = self.sort_direction.toggled()
        else:
            direction = SortDirection.DESC
        return self.model_copy(update={"sort_field": field, "sort_direction": direction, "page": 1})

    def with_search(self, search: str) -> EventsTableQuery:
        return self.model_copy(update={"search": search.strip(), "page": 1})


_SEARCH_FIELDS = ("country", "adm_1", "side_a", "side_b", "conflict_name")


def matches_search(event: ConflictEvent, term: str) -> bool:
    needle = term.strip().lower()
    if not needle:
        return True
    for field in _SEARCH_FIELDS:
        value = getattr(event, field)
        if value and needle in value.lower():
            return True
    return False


def _sort_key(value: Any) -> Any:
    return value.lower() if isinstance(value, str) else value


def _sorted_missing_last(items: Sequence[_T], field: str, direction: SortDirection) -> list[_T]:
    # Missing values go last in both directions.
    present = [item for item in items if getattr(item, field) is not None]
    missing = [item for item in items if getattr(item, field) is None]
    present.sort(key=lambda item: _sort_key(getattr(item, field)), reverse=direction is SortDirection.DESC)
    return present + missing


def sort_events(
    events: Iterable[ConflictEvent],
    field: EventSortField,
    direction: SortDirection = SortDirection.DESC,
) -> list[ConflictEvent]:
    return _sorted_missing_last(list(events), field.value, direction)


def apply_table_view(page: EventPage, query: EventsTableQuery) -> EventPage:
    """Search and sort the fetched page.

    Search is applied to the fetched page only; when a term is active the
    total becomes the number of matches on that page.
    """
    items: list[ConflictEvent] = list(page.items)
    total = page.total_count
    if query.search:
        items = [event for event in items if matches_search(event, query.search)]
        total = len(items)
    items = sort_events(items, query.sort_field, query.sort_direction)
    return page.model_copy(update={"items": items, "total_count": total})


def sort_regions(
    regions: Iterable[RegionAggregate],
    field: RegionSortField = RegionSortField.EVENT_COUNT,
    direction: SortDirection = SortDirection.DESC,
) -> list[RegionAggregate]:
    return _sorted_missing_last(list(regions), field.value, direction)


def top_regions(regions: Iterable[RegionAggregate], limit: int = 10) -> list[RegionAggregate]:
    """Regions with the most events, for the bar chart."""
    return sort_regions(regions)[:limit]


class StatsSummary(BaseModel):
    """Totals shown on the landing-page statistics card."""

    model_config = ConfigDict(frozen=True)

    total_events: int = 0
    total_deaths: int = 0
    total_civilians: int = 0

    @classmethod
    def from_series(cls, points: Sequence[TimePoint]) -> StatsSummary:
        return cls(
            total_events=sum(point.event_count for point in points),
            total_deaths=sum(point.death_count for point in points),
            total_civilians=sum(point.civilian_death_count for point in points),
        )


def recent_stats_filters(today: date | None = None, days: int = STATS_WINDOW_DAYS) -> FilterState:
    """Filters for the statistics card: the last *days* days, nothing else."""
    end = today or date.today()
    return FilterState(date_range=DateRange(start=end - timedelta(days=days), end=end))
