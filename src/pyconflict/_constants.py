"""Internal constants shared across the library."""

USER_AGENT = "pyconflict/1"

EVENTS_ENDPOINT = "/api/events"
LOOKUPS_ENDPOINT = "/api/lookups"
SERIES_ENDPOINT = "/api/stats/series"
REGIONS_ENDPOINT = "/api/stats/by-region"
HEAT_ENDPOINT = "/api/stats/heat"
HEALTH_ENDPOINT = "/api/health"

#: Seconds a filter burst must be quiet before a fetch is issued.
DEFAULT_DEBOUNCE_DELAY: float = 0.3
#: Upper bound for a single remote read.
DEFAULT_REQUEST_TIMEOUT: float = 10.0
#: The health check is cheaper and gets a shorter bound.
HEALTH_TIMEOUT: float = 5.0

#: Length of the default date window, ending today.
DEFAULT_WINDOW_DAYS = 365
#: Window used for the summary statistics card.
STATS_WINDOW_DAYS = 30

DEFAULT_PAGE_SIZE = 50
TABLE_PAGE_SIZE = 25
#: Markers are drawn from a single large page.
MAP_PAGE_SIZE = 1000

# ------------------------------------------------------------------
# Location clarity scale (1 = high precision, 3 = low precision)
# ------------------------------------------------------------------

CLARITY_MIN = 1
CLARITY_MAX = 3

POWERBI_EMBED_URL = "https://app.powerbi.com/reportEmbed"
