from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from pyconflict.models.event import ConflictEvent, EventPage
from pyconflict.models.filters import DateRange, FilterState
from pyconflict.models.stats import RegionAggregate, TimePoint
from pyconflict.views import (
    EventSortField,
    EventsTableQuery,
    RegionSortField,
    SortDirection,
    StatsSummary,
    apply_table_view,
    matches_search,
    recent_stats_filters,
    sort_events,
    sort_regions,
    top_regions,
)

TODAY = date(2025, 6, 1)


def _events() -> list[ConflictEvent]:
    return [
        ConflictEvent(id="1", country="Mali", adm_1="Gao", side_b="JNIM", best=5, date_start=date(2024, 3, 1)),
        ConflictEvent(id="2", country="Niger", adm_1="Tahoua", best=20, date_start=date(2024, 5, 1)),
        ConflictEvent(id="3", country="Burkina Faso", conflict_name="Burkina Faso: JNIM", best=0),
    ]


def test_same_field_toggles_direction_new_field_starts_descending() -> None:
    query = EventsTableQuery(filters=FilterState.default(TODAY)).with_page(4)

    toggled = query.with_sort(EventSortField.DATE_START)
    assert toggled.sort_direction is SortDirection.ASC
    assert toggled.page == 1

    switched = toggled.with_sort(EventSortField.COUNTRY)
    assert switched.sort_field is EventSortField.COUNTRY
    assert switched.sort_direction is SortDirection.DESC


def test_page_must_be_positive() -> None:
    query = EventsTableQuery(filters=FilterState.default(TODAY))

    with pytest.raises(ValueError):
        query.with_page(0)
    with pytest.raises(ValidationError):
        EventsTableQuery(filters=FilterState.default(TODAY), page=0)


def test_queries_compare_by_value() -> None:
    filters = FilterState.default(TODAY)

    assert EventsTableQuery(filters=filters, search=" gao ") == EventsTableQuery(filters=filters, search="gao")
    assert EventsTableQuery(filters=filters) != EventsTableQuery(filters=filters).with_page(2)


def test_search_matches_location_actor_and_conflict_fields() -> None:
    mali, niger, burkina = _events()

    assert matches_search(mali, "gao")
    assert matches_search(mali, "jnim")
    assert matches_search(burkina, "JNIM")
    assert not matches_search(niger, "jnim")
    assert matches_search(niger, "  ")


def test_missing_values_sort_last_in_both_directions() -> None:
    events = _events()

    ascending = sort_events(events, EventSortField.DATE_START, SortDirection.ASC)
    descending = sort_events(events, EventSortField.DATE_START, SortDirection.DESC)

    assert [event.id for event in ascending] == ["1", "2", "3"]
    assert [event.id for event in descending] == ["2", "1", "3"]


def test_apply_table_view_searches_then_sorts() -> None:
    page = EventPage(items=_events(), total_count=120, page=1, page_size=25)
    query = EventsTableQuery(
        filters=FilterState.default(TODAY),
        sort_field=EventSortField.BEST,
        sort_direction=SortDirection.ASC,
    )

    unfiltered = apply_table_view(page, query)
    assert [event.id for event in unfiltered.items] == ["3", "1", "2"]
    assert unfiltered.total_count == 120

    searched = apply_table_view(page, query.with_search("jnim"))
    assert [event.id for event in searched.items] == ["3", "1"]
    assert searched.total_count == 2


def test_region_sorting_and_top_regions() -> None:
    regions = [
        RegionAggregate(region_key=f"Region {index}", event_count=index, death_count=100 - index)
        for index in range(12)
    ]

    top = top_regions(regions, limit=3)
    assert [region.event_count for region in top] == [11, 10, 9]

    by_name = sort_regions(regions, RegionSortField.REGION_KEY, SortDirection.ASC)
    assert by_name[0].region_key == "Region 0"
    assert by_name[-1].region_key == "Region 9"


def test_stats_summary_sums_series() -> None:
    points = [
        TimePoint(period="2025-05", event_count=3, death_count=10, civilian_death_count=2),
        TimePoint(period="2025-06", event_count=1, death_count=4, civilian_death_count=0),
    ]

    summary = StatsSummary.from_series(points)

    assert summary == StatsSummary(total_events=4, total_deaths=14, total_civilians=2)
    assert StatsSummary.from_series([]) == StatsSummary()


def test_recent_stats_filters_cover_last_thirty_days_only() -> None:
    filters = recent_stats_filters(TODAY)

    assert filters.date_range == DateRange(start=date(2025, 5, 2), end=TODAY)
    assert filters == FilterState(date_range=filters.date_range)
