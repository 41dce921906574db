"""Explore session: filter state, address bar and debounced views.

An :class:`ExploreSession` is the Python counterpart of the explore
page. It decodes the initial filters from a query string, mirrors every
change back into its :class:`~pyconflict.state.address.AddressBar`, and
keeps one :class:`~pyconflict.fetcher.DebouncedFetcher` per view (map,
events table, time series, regions) in sync with the filters.

Usage::

    async with ConflictClient(config) as client:
        async with ExploreSession(client, query="countries=Mali") as session:
            session.set_filters(deaths={"min": 5})
            ...
            print(session.map.result.data)
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from pyconflict._cache import LookupCache
from pyconflict._constants import MAP_PAGE_SIZE
from pyconflict._demo import (
    DEMO_NOTICE,
    demo_event_page,
    demo_events,
    demo_heat,
    demo_lookups,
    demo_region_aggregates,
    demo_series,
)
from pyconflict.client import ConflictClient
from pyconflict.exceptions import ConflictConfigError, ConflictError
from pyconflict.fetcher import DebouncedFetcher
from pyconflict.models.event import ConflictEvent, EventPage
from pyconflict.models.filters import FilterState
from pyconflict.models.lookups import LookupVocabulary
from pyconflict.models.result import FetchResult
from pyconflict.models.stats import HeatCell, RegionAggregate, TimePoint
from pyconflict.query import decode
from pyconflict.state.address import AddressBar
from pyconflict.state.bus import MessageBus
from pyconflict.state.events import FiltersChanged, ResetMapView
from pyconflict.state.store import FilterStore
from pyconflict.views import EventSortField, EventsTableQuery, StatsSummary, apply_table_view, recent_stats_filters

_logger = logging.getLogger(__name__)

ResultCallback = Callable[[str, FetchResult[Any, Any]], None]


@dataclass(frozen=True, slots=True)
class MapData:
    """Markers and heat cells drawn by the map surface."""

    events: list[ConflictEvent] = field(default_factory=list)
    heat: list[HeatCell] = field(default_factory=list)


def _demo_map(_filters: FilterState) -> MapData:
    return MapData(events=demo_events(), heat=demo_heat())


def _demo_table(query: EventsTableQuery) -> EventPage:
    return apply_table_view(demo_event_page(query.page, query.page_size), query)


class ExploreSession:
    """Stateful explore view over a :class:`ConflictClient`.

    The session must be mounted (``async with`` or :meth:`mount`) inside
    a running event loop; closing it cancels pending timers and in-flight
    reads so no view is updated afterwards.
    """

    def __init__(
        self,
        client: ConflictClient,
        *,
        query: str = "",
        path: str = "/explore",
        bus: MessageBus | None = None,
        today: Callable[[], date] = date.today,
        on_result: ResultCallback | None = None,
    ) -> None:
        config = client.config
        self._client = client
        self._on_result = on_result
        self._mounted = False
        self._lookups_task: asyncio.Task[FetchResult[None, LookupVocabulary]] | None = None

        self.bus = bus or MessageBus()
        self.address = AddressBar(path, query)
        self.filters = FilterStore(
            decode(query, today=today()),
            address=self.address,
            bus=self.bus,
            today=today,
        )
        self._table_query = EventsTableQuery(filters=self.filters.get())

        fetcher_options: dict[str, Any] = {
            "delay": config.debounce_delay,
            "timeout": config.request_timeout,
            "fallback_notice": DEMO_NOTICE,
        }
        self.map: DebouncedFetcher[FilterState, MapData] = DebouncedFetcher(
            self._read_map,
            fallback=_demo_map,
            on_result=self._relay("map"),
            name="map",
            **fetcher_options,
        )
        self.table: DebouncedFetcher[EventsTableQuery, EventPage] = DebouncedFetcher(
            self._read_table,
            fallback=_demo_table,
            on_result=self._relay("table"),
            name="table",
            **fetcher_options,
        )
        self.series: DebouncedFetcher[FilterState, list[TimePoint]] = DebouncedFetcher(
            client.get_series,
            fallback=demo_series,
            on_result=self._relay("series"),
            name="series",
            **fetcher_options,
        )
        self.regions: DebouncedFetcher[FilterState, list[RegionAggregate]] = DebouncedFetcher(
            client.get_region_aggregates,
            fallback=demo_region_aggregates,
            on_result=self._relay("regions"),
            name="regions",
            **fetcher_options,
        )
        self.lookups = LookupCache(client.get_lookups, fallback=demo_lookups, fallback_notice=DEMO_NOTICE)
        self.detail: FetchResult[str, ConflictEvent] = FetchResult()

        self._unsubscribe = self.bus.subscribe(FiltersChanged, self._on_filters_changed)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> ExploreSession:
        self.mount()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()

    @property
    def mounted(self) -> bool:
        return self._mounted

    def mount(self) -> None:
        """Normalise the address bar, schedule every view, start loading lookups."""
        if self._mounted:
            return
        self._mounted = True
        self.filters.sync_address()
        self._schedule_all(self.filters.get())
        self._lookups_task = asyncio.get_running_loop().create_task(
            self.load_lookups(),
            name="pyconflict-session-lookups",
        )

    def close(self) -> None:
        """Unmount: cancel timers and in-flight reads, stop listening."""
        self._mounted = False
        self._unsubscribe()
        for fetcher in self._fetchers():
            fetcher.close()
        self.lookups.close()
        if self._lookups_task is not None and not self._lookups_task.done():
            self._lookups_task.cancel()

    async def aclose(self) -> None:
        self.close()
        await asyncio.gather(*(fetcher.aclose() for fetcher in self._fetchers()))
        if self._lookups_task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await self._lookups_task
            self._lookups_task = None

    # ------------------------------------------------------------------
    # Filter actions
    # ------------------------------------------------------------------

    def set_filters(self, partial: Mapping[str, Any] | None = None, **changes: Any) -> FilterState:
        return self.filters.set(partial, **changes)

    def reset_filters(self) -> FilterState:
        return self.filters.reset()

    def reset_view(self) -> None:
        """Ask map surfaces to return to their initial viewport."""
        self.bus.publish(ResetMapView())

    def retry(self) -> None:
        """Re-issue every view's latest read (explicit user retry)."""
        for fetcher in self._fetchers():
            fetcher.retry()

    # ------------------------------------------------------------------
    # Events table actions
    # ------------------------------------------------------------------

    @property
    def table_query(self) -> EventsTableQuery:
        return self._table_query

    def set_table_page(self, page: int) -> None:
        self._update_table(self._table_query.with_page(page))

    def sort_table(self, field: EventSortField) -> None:
        self._update_table(self._table_query.with_sort(field))

    def search_table(self, term: str) -> None:
        self._update_table(self._table_query.with_search(term))

    def _update_table(self, query: EventsTableQuery) -> None:
        self._table_query = query
        if self._mounted:
            self.table.schedule(query)

    # ------------------------------------------------------------------
    # One-off reads
    # ------------------------------------------------------------------

    async def load_lookups(self) -> FetchResult[None, LookupVocabulary]:
        """Load the facet vocabulary; failures are reported, not raised."""
        try:
            await self.lookups.load()
        except Exception:
            _logger.debug("Lookup vocabulary unavailable", exc_info=True)
        return self.lookups.state

    async def open_event(self, event_id: str) -> FetchResult[str, ConflictEvent]:
        """Leave the explore page for an event detail page and read the record.

        Navigating away unmounts the views: pending and in-flight reads
        are cancelled and later filter edits no longer touch the address
        bar entry of the detail page.
        """
        self.close()
        self.address.navigate(f"/event/{event_id}")
        self.detail = self.detail.pending(event_id)
        try:
            event = await self._client.get_event(event_id)
        except ConflictConfigError:
            demo = next((item for item in demo_events() if item.id == event_id), demo_events()[0])
            self.detail = self.detail.succeeded(event_id, demo, is_demo=True, notice=DEMO_NOTICE)
        except (ConflictError, TimeoutError) as exc:
            self.detail = self.detail.failed(event_id, exc)
        else:
            self.detail = self.detail.succeeded(event_id, event)
        return self.detail

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _fetchers(self) -> tuple[DebouncedFetcher[Any, Any], ...]:
        return (self.map, self.table, self.series, self.regions)

    def _relay(self, view: str) -> Callable[[FetchResult[Any, Any]], None]:
        def _callback(result: FetchResult[Any, Any]) -> None:
            if self._on_result is not None:
                self._on_result(view, result)

        return _callback

    def _on_filters_changed(self, message: FiltersChanged) -> None:
        self._table_query = self._table_query.with_filters(message.state)
        if self._mounted:
            self._schedule_all(message.state)

    def _schedule_all(self, state: FilterState) -> None:
        self.map.schedule(state)
        self.series.schedule(state)
        self.regions.schedule(state)
        self.table.schedule(self._table_query)

    async def _read_map(self, state: FilterState) -> MapData:
        page, heat = await asyncio.gather(
            self._client.get_events(state, page=1, page_size=MAP_PAGE_SIZE),
            self._client.get_heat(state),
        )
        return MapData(events=list(page.items), heat=heat)

    async def _read_table(self, query: EventsTableQuery) -> EventPage:
        page = await self._client.get_events(query.filters, page=query.page, page_size=query.page_size)
        return apply_table_view(page, query)


async def fetch_stats_summary(
    client: ConflictClient,
    *,
    today: date | None = None,
) -> FetchResult[FilterState, StatsSummary]:
    """Totals for the last 30 days, as shown on the statistics card.

    A deployment without an API gets demo totals with a notice; any other
    failure is reported as an error with no substitute data.
    """
    filters = recent_stats_filters(today)
    result: FetchResult[FilterState, StatsSummary] = FetchResult()
    try:
        series = await client.get_series(filters)
    except ConflictConfigError:
        return result.succeeded(filters, StatsSummary.from_series(demo_series()), is_demo=True, notice=DEMO_NOTICE)
    except (ConflictError, TimeoutError) as exc:
        _logger.debug("Unable to load statistics", exc_info=True)
        return result.failed(filters, exc)
    return result.succeeded(filters, StatsSummary.from_series(series))
