"""Messages exchanged over the :class:`~pyconflict.state.bus.MessageBus`.

Views never reach into each other; they publish one of these and let
subscribers react.
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field

from pyconflict.models.filters import FilterState


class BusMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    published_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class FiltersChanged(BusMessage):
    """A new filter snapshot was committed (by ``set`` or ``reset``)."""

    state: FilterState
    reset: bool = False


class ResetMapView(BusMessage):
    """Ask the map surface to return to its initial viewport."""
