"""High-level async client for the conflict-events API."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from pyconflict._api import events as _events_api
from pyconflict._api import lookups as _lookups_api
from pyconflict._api import stats as _stats_api
from pyconflict._constants import DEFAULT_PAGE_SIZE, HEALTH_ENDPOINT
from pyconflict._transport import HttpTransport, Transport
from pyconflict.config import ConflictConfig
from pyconflict.exceptions import ConflictError
from pyconflict.models.event import ConflictEvent, EventPage
from pyconflict.models.filters import FilterState
from pyconflict.models.lookups import LookupVocabulary
from pyconflict.models.stats import HeatCell, RegionAggregate, TimePoint

_logger = logging.getLogger(__name__)


class ConflictClient:
    """Async client for the conflict-events REST API.

    Usage::

        async with ConflictClient(ConflictConfig.from_env()) as client:
            page = await client.get_events(FilterState.default())

    Every read checks the configuration first and raises
    :class:`~pyconflict.exceptions.ConflictConfigError` without touching
    the network when no API URL is set.
    """

    def __init__(
        self,
        config: ConflictConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport: Transport | None = transport
        self._external_transport = transport is not None

    @property
    def config(self) -> ConflictConfig:
        return self._config

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> ConflictClient:
        if self._external_transport:
            return self
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = HttpTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        if not self._external_transport:
            self._transport = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_transport(self) -> Transport:
        self._config.require_api_url()
        if self._transport is None:
            raise ConflictError("Client not initialized. Use 'async with ConflictClient(...) as client:'")
        return self._transport

    # ------------------------------------------------------------------
    # Read endpoints
    # ------------------------------------------------------------------

    async def is_available(self) -> bool:
        """Probe the API health endpoint. Never raises."""
        if not self._config.is_configured or self._transport is None:
            return False
        return await self._transport.check_health(HEALTH_ENDPOINT)

    async def get_events(
        self,
        filters: FilterState | None = None,
        *,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> EventPage:
        """Fetch one page of events matching *filters* (defaults if omitted)."""
        transport = self._require_transport()
        return await _events_api.fetch_events(
            transport,
            filters if filters is not None else FilterState.default(),
            page=page,
            page_size=page_size,
        )

    async def get_event(self, event_id: str) -> ConflictEvent:
        """Fetch one event; raises ``ConflictNotFoundError`` if it does not exist."""
        transport = self._require_transport()
        return await _events_api.fetch_event(transport, event_id)

    async def get_lookups(self) -> LookupVocabulary:
        transport = self._require_transport()
        return await _lookups_api.fetch_lookups(transport)

    async def get_series(self, filters: FilterState | None = None) -> list[TimePoint]:
        """Time series ordered by period."""
        transport = self._require_transport()
        return await _stats_api.fetch_series(transport, filters if filters is not None else FilterState.default())

    async def get_region_aggregates(self, filters: FilterState | None = None) -> list[RegionAggregate]:
        transport = self._require_transport()
        return await _stats_api.fetch_region_aggregates(
            transport,
            filters if filters is not None else FilterState.default(),
        )

    async def get_heat(self, filters: FilterState | None = None) -> list[HeatCell]:
        transport = self._require_transport()
        return await _stats_api.fetch_heat(transport, filters if filters is not None else FilterState.default())
