"""Event endpoints.

Endpoints:
  - /api/events (paginated, filtered list)
  - /api/events/{id} (single record)
"""

from __future__ import annotations

import logging
from urllib.parse import quote

from pyconflict._api._common import parse_model
from pyconflict._constants import EVENTS_ENDPOINT
from pyconflict._transport import Transport
from pyconflict.models.event import ConflictEvent, EventPage
from pyconflict.models.filters import FilterState
from pyconflict.query import to_query_params

_logger = logging.getLogger(__name__)


async def fetch_events(
    transport: Transport,
    filters: FilterState,
    *,
    page: int,
    page_size: int,
) -> EventPage:
    """Fetch one page of events matching *filters*."""
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")

    params = to_query_params(filters, page=page, pageSize=page_size)
    payload = await transport.get_json(EVENTS_ENDPOINT, params)
    result = parse_model(EventPage, payload, EVENTS_ENDPOINT)
    _logger.debug(
        "Events page=%d size=%d items=%d total=%d",
        result.page,
        result.page_size,
        len(result.items),
        result.total_count,
    )
    return result


async def fetch_event(transport: Transport, event_id: str) -> ConflictEvent:
    """Fetch a single event by identifier.

    Raises
    ------
    ConflictNotFoundError
        If the API has no event with this identifier.
    """
    event_id = event_id.strip()
    if not event_id:
        raise ValueError("event_id must be non-empty")
    endpoint = f"{EVENTS_ENDPOINT}/{quote(event_id, safe='')}"
    payload = await transport.get_json(endpoint)
    return parse_model(ConflictEvent, payload, endpoint)
