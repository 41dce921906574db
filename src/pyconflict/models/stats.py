"""Aggregate statistics models."""

from __future__ import annotations

from pydantic import AliasChoices, Field

from pyconflict.models._base import ConflictBaseModel


class TimePoint(ConflictBaseModel):
    """Event and death totals for one period (``YYYY-MM``)."""

    period: str
    event_count: int = Field(default=0, validation_alias=AliasChoices("eventCount", "events", "event_count"))
    death_count: int = Field(default=0, validation_alias=AliasChoices("deathCount", "deaths", "death_count"))
    civilian_death_count: int = Field(
        default=0,
        validation_alias=AliasChoices("civilianDeathCount", "civilians", "civilian_death_count"),
    )


class RegionAggregate(ConflictBaseModel):
    """Event and death totals for one region."""

    region_key: str = Field(validation_alias=AliasChoices("regionKey", "key", "region", "region_key"))
    event_count: int = Field(default=0, validation_alias=AliasChoices("eventCount", "events", "event_count"))
    death_count: int = Field(default=0, validation_alias=AliasChoices("deathCount", "deaths", "death_count"))
    civilian_death_count: int = Field(
        default=0,
        validation_alias=AliasChoices("civilianDeathCount", "civilians", "civilian_death_count"),
    )


class HeatCell(ConflictBaseModel):
    """Weighted point of the heatmap layer, usually one geohash bucket."""

    latitude: float = Field(validation_alias=AliasChoices("latitude", "lat"))
    longitude: float = Field(validation_alias=AliasChoices("longitude", "lng", "lon"))
    weight: float = Field(default=0.0, validation_alias=AliasChoices("weight", "count"))
    geohash: str | None = Field(default=None, validation_alias=AliasChoices("geohash", "geohash6"))
