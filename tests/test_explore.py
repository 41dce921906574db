from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Any

import pytest

from pyconflict._demo import DEMO_NOTICE
from pyconflict.client import ConflictClient
from pyconflict.config import ConflictConfig
from pyconflict.exceptions import ConflictNotFoundError, ConflictTransportError
from pyconflict.explore import ExploreSession, fetch_stats_summary
from pyconflict.models.filters import FilterState
from pyconflict.models.result import FetchErrorKind, FetchStatus
from pyconflict.query import encode
from pyconflict.state.events import ResetMapView
from pyconflict.views import EventSortField, SortDirection

TODAY = date(2025, 6, 1)
DELAY = 0.01


def _responses() -> dict[str, Any]:
    return {
        "/api/events": {
            "items": [
                {"id": 1, "country": "Mali", "adm_1": "Gao", "date_start": "2024-05-01", "best": 3},
                {"id": 2, "country": "Niger", "adm_1": "Tillaberi", "date_start": "2024-06-01", "best": 12},
                {"id": 3, "country": "Mali", "adm_1": "Mopti", "date_start": "2024-04-01", "best": 7},
            ],
            "totalCount": 3,
            "page": 1,
            "pageSize": 25,
        },
        "/api/stats/series": [
            {"period": "2024-05", "eventCount": 2, "deathCount": 10, "civilianDeathCount": 1},
            {"period": "2024-04", "eventCount": 1, "deathCount": 7, "civilianDeathCount": 4},
        ],
        "/api/stats/by-region": [{"regionKey": "Africa", "eventCount": 3, "deathCount": 22}],
        "/api/stats/heat": [{"lat": 16.27, "lng": -0.04, "count": 2}],
        "/api/lookups": {"countries": ["Mali", "Niger"], "violenceTypes": [1, 2, 3]},
    }


@dataclass
class _FakeTransport:
    responses: dict[str, Any] = field(default_factory=_responses)
    calls: list[tuple[str, dict[str, str]]] = field(default_factory=list)

    async def get_json(self, endpoint: str, params: Mapping[str, str] | None = None) -> Any:
        self.calls.append((endpoint, dict(params or {})))
        response = self.responses[endpoint]
        if isinstance(response, Exception):
            raise response
        return response

    async def check_health(self, _endpoint: str) -> bool:
        return True

    def calls_to(self, endpoint: str) -> list[dict[str, str]]:
        return [params for called, params in self.calls if called == endpoint]


def _client(transport: _FakeTransport | None = None, *, configured: bool = True) -> ConflictClient:
    config = ConflictConfig(
        api_url="http://api.test" if configured else None,
        debounce_delay=DELAY,
        request_timeout=1.0,
    )
    return ConflictClient(config, transport=transport or _FakeTransport())


async def _settle() -> None:
    await asyncio.sleep(DELAY * 8)


@pytest.mark.asyncio
async def test_mount_loads_every_view_and_normalises_address() -> None:
    transport = _FakeTransport()
    client = _client(transport)

    async with ExploreSession(client, query="countries=Mali&minDeaths=abc", today=lambda: TODAY) as session:
        await _settle()

        state = session.filters.get()
        assert state.countries == frozenset({"Mali"})
        assert session.address.query == encode(state)
        assert "minDeaths" not in session.address.query

        assert session.map.result.status is FetchStatus.SUCCESS
        assert len(session.map.result.data.events) == 3
        assert len(session.map.result.data.heat) == 1
        assert session.table.result.data.total_count == 3
        assert [point.period for point in session.series.result.data] == ["2024-04", "2024-05"]
        assert session.regions.result.data[0].region_key == "Africa"
        assert session.lookups.vocabulary is not None
        assert session.lookups.vocabulary.countries == ["Mali", "Niger"]

    map_calls = [params for params in transport.calls_to("/api/events") if params["pageSize"] == "1000"]
    table_calls = [params for params in transport.calls_to("/api/events") if params["pageSize"] == "25"]
    assert len(map_calls) == 1
    assert len(table_calls) == 1
    assert table_calls[0]["countries"] == "Mali"


@pytest.mark.asyncio
async def test_filter_burst_is_fetched_once_with_final_state() -> None:
    transport = _FakeTransport()
    async with ExploreSession(_client(transport), today=lambda: TODAY) as session:
        await _settle()
        transport.calls.clear()

        session.set_filters(countries={"Mali"})
        session.set_filters(deaths={"min": 5})
        session.set_filters(has_civilians=True)
        await _settle()

        series_calls = transport.calls_to("/api/stats/series")
        assert len(series_calls) == 1
        assert series_calls[0]["countries"] == "Mali"
        assert series_calls[0]["minDeaths"] == "5"
        assert series_calls[0]["hasCivilians"] == "true"
        assert len(transport.calls_to("/api/stats/by-region")) == 1
        assert len(transport.calls_to("/api/stats/heat")) == 1
        assert session.address.query == encode(session.filters.get())
        assert session.address.history_length == 1


@pytest.mark.asyncio
async def test_changing_filters_returns_table_to_first_page() -> None:
    transport = _FakeTransport()
    async with ExploreSession(_client(transport), today=lambda: TODAY) as session:
        session.set_table_page(3)
        assert session.table_query.page == 3

        session.set_filters(countries={"Niger"})

        assert session.table_query.page == 1
        assert session.table_query.filters.countries == frozenset({"Niger"})
        await _settle()
        assert transport.calls_to("/api/events")[-1]["page"] == "1"


@pytest.mark.asyncio
async def test_table_sort_and_search_apply_to_fetched_page() -> None:
    async with ExploreSession(_client(), today=lambda: TODAY) as session:
        session.sort_table(EventSortField.BEST)
        assert session.table_query.sort_direction is SortDirection.DESC
        await _settle()
        assert [event.id for event in session.table.result.data.items] == ["2", "3", "1"]

        session.sort_table(EventSortField.BEST)
        assert session.table_query.sort_direction is SortDirection.ASC
        session.search_table("mali")
        await _settle()

        page = session.table.result.data
        assert [event.id for event in page.items] == ["1", "3"]
        assert page.total_count == 2


@pytest.mark.asyncio
async def test_failed_read_keeps_previous_data_and_retry_recovers() -> None:
    transport = _FakeTransport()
    async with ExploreSession(_client(transport), today=lambda: TODAY) as session:
        await _settle()
        previous = session.series.result.data

        transport.responses["/api/stats/series"] = ConflictTransportError(
            "HTTP 502 from /api/stats/series", status_code=502
        )
        session.set_filters(countries={"Chad"})
        await _settle()

        assert session.series.result.status is FetchStatus.ERROR
        assert session.series.result.error_kind is FetchErrorKind.STATUS
        assert session.series.result.data == previous

        transport.responses["/api/stats/series"] = _responses()["/api/stats/series"]
        session.retry()
        await _settle()

        assert session.series.result.status is FetchStatus.SUCCESS
        assert session.series.result.fetched_for == session.filters.get()


@pytest.mark.asyncio
async def test_unconfigured_deployment_shows_labelled_demo_data() -> None:
    transport = _FakeTransport()
    async with ExploreSession(_client(transport, configured=False), today=lambda: TODAY) as session:
        await _settle()

        for fetcher in (session.map, session.table, session.series, session.regions):
            assert fetcher.result.status is FetchStatus.SUCCESS
            assert fetcher.result.is_demo
            assert fetcher.result.notice == DEMO_NOTICE
        assert session.lookups.state.is_demo
        assert session.lookups.vocabulary is not None

    assert transport.calls == []


@pytest.mark.asyncio
async def test_results_are_relayed_per_view() -> None:
    seen: list[tuple[str, FetchStatus]] = []
    session = ExploreSession(
        _client(),
        today=lambda: TODAY,
        on_result=lambda view, result: seen.append((view, result.status)),
    )
    async with session:
        await _settle()

    views = {view for view, status in seen if status is FetchStatus.SUCCESS}
    assert views == {"map", "table", "series", "regions"}


@pytest.mark.asyncio
async def test_closed_session_ignores_filter_changes() -> None:
    transport = _FakeTransport()
    session = ExploreSession(_client(transport), today=lambda: TODAY)
    session.mount()
    await session.aclose()
    transport.calls.clear()

    session.set_filters(countries={"Mali"})
    await _settle()

    assert not session.mounted
    assert transport.calls == []
    assert session.address.query == encode(session.filters.get())


@pytest.mark.asyncio
async def test_unmounted_session_does_not_fetch() -> None:
    transport = _FakeTransport()
    session = ExploreSession(_client(transport), today=lambda: TODAY)

    session.set_filters(countries={"Mali"})
    await _settle()

    assert transport.calls == []
    assert session.filters.get().countries == frozenset({"Mali"})


@pytest.mark.asyncio
async def test_reset_filters_and_reset_view() -> None:
    async with ExploreSession(_client(), query="countries=Mali", today=lambda: TODAY) as session:
        resets: list[ResetMapView] = []
        session.bus.subscribe(ResetMapView, resets.append)

        state = session.reset_filters()
        session.reset_view()

        assert state == FilterState.default(TODAY)
        assert session.address.query == encode(FilterState.default(TODAY))
        assert len(resets) == 1


@pytest.mark.asyncio
async def test_open_event_pushes_history_and_reads_record() -> None:
    transport = _FakeTransport()
    transport.responses["/api/events/42"] = {"id": 42, "country": "Mali", "clarity_of_location": 2}
    async with ExploreSession(_client(transport), today=lambda: TODAY) as session:
        result = await session.open_event("42")

        assert result.status is FetchStatus.SUCCESS
        assert result.data is not None
        assert result.data.country == "Mali"
        assert session.address.path == "/event/42"
        assert session.address.history_length == 2
        assert session.address.back() is True
        assert session.address.path == "/explore"


@pytest.mark.asyncio
async def test_filter_edit_after_opening_event_leaves_detail_entry_alone() -> None:
    transport = _FakeTransport()
    transport.responses["/api/events/42"] = {"id": 42, "country": "Mali"}
    async with ExploreSession(_client(transport), today=lambda: TODAY) as session:
        await _settle()
        explore_query = session.address.query

        await session.open_event("42")
        transport.calls.clear()
        session.set_filters(countries={"Niger"})
        await _settle()

        assert not session.mounted
        assert session.address.url == "/event/42"
        assert transport.calls == []
        assert session.filters.get().countries == frozenset({"Niger"})
        assert session.address.back() is True
        assert session.address.path == "/explore"
        assert session.address.query == explore_query


@pytest.mark.asyncio
async def test_unexpected_lookup_failure_is_reported_not_raised() -> None:
    transport = _FakeTransport()
    transport.responses["/api/lookups"] = RuntimeError("decoder bug")
    session = ExploreSession(_client(transport), today=lambda: TODAY)

    result = await session.load_lookups()

    assert result.status is FetchStatus.ERROR
    assert result.error_kind is FetchErrorKind.TRANSPORT

    transport.responses["/api/lookups"] = _responses()["/api/lookups"]
    result = await session.load_lookups()

    assert result.status is FetchStatus.SUCCESS
    assert result.data is not None
    assert result.data.countries == ["Mali", "Niger"]


@pytest.mark.asyncio
async def test_open_event_reports_missing_record() -> None:
    transport = _FakeTransport()
    transport.responses["/api/events/nope"] = ConflictNotFoundError("Not found", status_code=404)
    async with ExploreSession(_client(transport), today=lambda: TODAY) as session:
        result = await session.open_event("nope")

    assert result.status is FetchStatus.ERROR
    assert result.error_kind is FetchErrorKind.STATUS


@pytest.mark.asyncio
async def test_open_event_without_api_uses_demo_record() -> None:
    async with ExploreSession(_client(configured=False), today=lambda: TODAY) as session:
        result = await session.open_event("demo-2")

    assert result.is_demo
    assert result.data is not None
    assert result.data.id == "demo-2"


@pytest.mark.asyncio
async def test_stats_summary_totals_last_thirty_days() -> None:
    transport = _FakeTransport()

    result = await fetch_stats_summary(_client(transport), today=TODAY)

    assert result.status is FetchStatus.SUCCESS
    assert result.data is not None
    assert result.data.total_events == 3
    assert result.data.total_deaths == 17
    assert result.data.total_civilians == 5
    params = transport.calls_to("/api/stats/series")[0]
    assert params == {"from": "2025-05-02", "to": "2025-06-01"}


@pytest.mark.asyncio
async def test_stats_summary_without_api_is_demo_and_errors_are_reported() -> None:
    demo = await fetch_stats_summary(_client(configured=False), today=TODAY)
    assert demo.is_demo
    assert demo.notice == DEMO_NOTICE
    assert demo.data is not None
    assert demo.data.total_events > 0

    transport = _FakeTransport()
    transport.responses["/api/stats/series"] = ConflictTransportError("connection refused")
    failed = await fetch_stats_summary(_client(transport), today=TODAY)
    assert failed.status is FetchStatus.ERROR
    assert failed.data is None
    assert not failed.is_demo
