"""Labelled demo datasets.

Used only when no API URL is configured, so a fresh checkout still shows
something. Every record is obviously synthetic ("Demo ...") and results
built from them carry :data:`DEMO_NOTICE`.
"""

from __future__ import annotations

from pyconflict.models.event import ConflictEvent, EventPage
from pyconflict.models.filters import FilterState
from pyconflict.models.lookups import LookupVocabulary
from pyconflict.models.stats import HeatCell, RegionAggregate, TimePoint

DEMO_NOTICE = "Showing demo data: no conflict API is configured (set CONFLICT_API_URL)."

_DEMO_EVENTS: tuple[dict[str, object], ...] = (
    {
        "id": "demo-1",
        "conflict_name": "Demo Conflict A",
        "date_start": "2024-12-01",
        "date_end": "2024-12-01",
        "country": "Demo Country",
        "adm_1": "Demo Region",
        "latitude": 40.7128,
        "longitude": -74.006,
        "type_of_violence": 1,
        "side_a": "Government Forces",
        "side_b": "Armed Group Alpha",
        "best": 15,
        "low": 10,
        "high": 20,
        "deaths_civilians": 3,
        "event_clarity": 1,
    },
    {
        "id": "demo-2",
        "conflict_name": "Demo Conflict B",
        "date_start": "2024-12-02",
        "date_end": "2024-12-02",
        "country": "Demo Country",
        "adm_1": "Demo Region",
        "latitude": 51.5074,
        "longitude": -0.1278,
        "type_of_violence": 2,
        "side_a": "Militia Group Beta",
        "side_b": "Local Forces",
        "best": 8,
        "low": 5,
        "high": 12,
        "deaths_civilians": 2,
        "event_clarity": 2,
    },
)

_DEMO_SERIES: tuple[tuple[str, int, int, int], ...] = (
    ("2024-01", 45, 234, 67),
    ("2024-02", 52, 289, 89),
    ("2024-03", 38, 198, 45),
    ("2024-04", 61, 345, 123),
    ("2024-05", 47, 267, 78),
    ("2024-06", 55, 312, 94),
    ("2024-07", 42, 223, 56),
    ("2024-08", 58, 334, 112),
    ("2024-09", 49, 278, 83),
    ("2024-10", 53, 298, 91),
    ("2024-11", 46, 245, 69),
    ("2024-12", 51, 287, 87),
)

_DEMO_HEAT: tuple[tuple[float, float, float], ...] = (
    (40.7128, -74.006, 15),
    (51.5074, -0.1278, 8),
    (48.8566, 2.3522, 12),
    (35.6762, 139.6503, 6),
    (-33.8688, 151.2093, 9),
)

_DEMO_REGIONS: tuple[tuple[str, int, int, int], ...] = (
    ("Demo Region A", 45, 234, 67),
    ("Demo Region B", 38, 198, 45),
    ("Demo Region C", 52, 289, 89),
)


def demo_events() -> list[ConflictEvent]:
    return [ConflictEvent.model_validate(record) for record in _DEMO_EVENTS]


def demo_event_page(page: int = 1, page_size: int = 50) -> EventPage:
    events = demo_events()
    start = (page - 1) * page_size
    return EventPage(
        items=events[start : start + page_size],
        total_count=len(events),
        page=page,
        page_size=page_size,
    )


def demo_series(_filters: FilterState | None = None) -> list[TimePoint]:
    return [
        TimePoint(period=period, event_count=events, death_count=deaths, civilian_death_count=civilians)
        for period, events, deaths, civilians in _DEMO_SERIES
    ]


def demo_region_aggregates(_filters: FilterState | None = None) -> list[RegionAggregate]:
    return [
        RegionAggregate(region_key=key, event_count=events, death_count=deaths, civilian_death_count=civilians)
        for key, events, deaths, civilians in _DEMO_REGIONS
    ]


def demo_heat(_filters: FilterState | None = None) -> list[HeatCell]:
    return [HeatCell(latitude=lat, longitude=lng, weight=weight) for lat, lng, weight in _DEMO_HEAT]


def demo_lookups() -> LookupVocabulary:
    return LookupVocabulary(
        countries=["Demo Country A", "Demo Country B", "Demo Country C"],
        regions=["Demo Region A", "Demo Region B", "Demo Region C"],
        adm1=["Demo Admin 1", "Demo Admin 2", "Demo Admin 3"],
        sides_a=["Government Forces", "Militia Group Alpha", "Armed Group Beta"],
        sides_b=["Armed Group Alpha", "Local Forces", "Rebel Group Gamma"],
        violence_types=[1, 2, 3],
    )
