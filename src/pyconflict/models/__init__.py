"""Data models for filter state and conflict API responses."""

from pyconflict.models._base import ApiDate, ConflictBaseModel, ConflictEnum, parse_api_date
from pyconflict.models.event import ConflictEvent, EventPage, LocationClarity, ViolenceType
from pyconflict.models.filters import DateRange, FilterState, IntRange, default_date_range
from pyconflict.models.lookups import FacetOption, LookupVocabulary
from pyconflict.models.result import FetchErrorKind, FetchResult, FetchStatus
from pyconflict.models.stats import HeatCell, RegionAggregate, TimePoint

__all__ = [
    "ApiDate",
    "ConflictBaseModel",
    "ConflictEnum",
    "ConflictEvent",
    "DateRange",
    "EventPage",
    "FacetOption",
    "FetchErrorKind",
    "FetchResult",
    "FetchStatus",
    "FilterState",
    "HeatCell",
    "IntRange",
    "LocationClarity",
    "LookupVocabulary",
    "RegionAggregate",
    "TimePoint",
    "ViolenceType",
    "default_date_range",
    "parse_api_date",
]
