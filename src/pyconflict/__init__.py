"""pyconflict - Async Python client for exploring conflict-event records."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyconflict")
except PackageNotFoundError:
    __version__ = "0+local"
from pyconflict.analytics import AnalyticsPanel, EmbedTarget, analytics_panels
from pyconflict.client import ConflictClient
from pyconflict.config import AnalyticsConfig, ConflictConfig
from pyconflict.exceptions import (
    ConflictConfigError,
    ConflictError,
    ConflictNotFoundError,
    ConflictResponseError,
    ConflictTimeoutError,
    ConflictTransportError,
)
from pyconflict.explore import ExploreSession, MapData, fetch_stats_summary
from pyconflict.fetcher import DebouncedFetcher
from pyconflict.models import (
    ConflictEvent,
    DateRange,
    EventPage,
    FetchErrorKind,
    FetchResult,
    FetchStatus,
    FilterState,
    HeatCell,
    IntRange,
    LocationClarity,
    LookupVocabulary,
    RegionAggregate,
    TimePoint,
    ViolenceType,
)
from pyconflict.query import decode, encode

__all__ = [
    "__version__",
    "AnalyticsConfig",
    "AnalyticsPanel",
    "ConflictClient",
    "ConflictConfig",
    "ConflictConfigError",
    "ConflictError",
    "ConflictEvent",
    "ConflictNotFoundError",
    "ConflictResponseError",
    "ConflictTimeoutError",
    "ConflictTransportError",
    "DateRange",
    "DebouncedFetcher",
    "EmbedTarget",
    "EventPage",
    "ExploreSession",
    "FetchErrorKind",
    "FetchResult",
    "FetchStatus",
    "FilterState",
    "HeatCell",
    "IntRange",
    "LocationClarity",
    "LookupVocabulary",
    "MapData",
    "RegionAggregate",
    "TimePoint",
    "ViolenceType",
    "analytics_panels",
    "decode",
    "encode",
    "fetch_stats_summary",
]
