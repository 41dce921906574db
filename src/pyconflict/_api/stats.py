"""Aggregate statistics endpoints.

Endpoints:
  - /api/stats/series (ordered time series)
  - /api/stats/by-region (unordered region totals)
  - /api/stats/heat (heatmap cells)
"""

from __future__ import annotations

from pyconflict._api._common import parse_list
from pyconflict._constants import HEAT_ENDPOINT, REGIONS_ENDPOINT, SERIES_ENDPOINT
from pyconflict._transport import Transport
from pyconflict.models.filters import FilterState
from pyconflict.models.stats import HeatCell, RegionAggregate, TimePoint
from pyconflict.query import to_query_params


async def fetch_series(transport: Transport, filters: FilterState) -> list[TimePoint]:
    payload = await transport.get_json(SERIES_ENDPOINT, to_query_params(filters))
    points = parse_list(TimePoint, payload, SERIES_ENDPOINT)
    # Periods are YYYY-MM strings, so lexical order is chronological.
    return sorted(points, key=lambda point: point.period)


async def fetch_region_aggregates(transport: Transport, filters: FilterState) -> list[RegionAggregate]:
    payload = await transport.get_json(REGIONS_ENDPOINT, to_query_params(filters))
    return parse_list(RegionAggregate, payload, REGIONS_ENDPOINT)


async def fetch_heat(transport: Transport, filters: FilterState) -> list[HeatCell]:
    payload = await transport.get_json(HEAT_ENDPOINT, to_query_params(filters))
    return parse_list(HeatCell, payload, HEAT_ENDPOINT)
