"""Embedded Power BI analytics panels.

The panels are iframes served by Power BI; this module only builds the
embed targets. A missing tenant or report identifier degrades to a panel
without a URL and a visible notice.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from urllib.parse import urlencode

from pyconflict._constants import POWERBI_EMBED_URL
from pyconflict._redact import redact_for_log
from pyconflict.config import AnalyticsConfig

_logger = logging.getLogger(__name__)


class AnalyticsPanel(StrEnum):
    TIMELINE = "timeline"
    REGIONS = "regions"
    ACTORS = "actors"
    CASUALTIES = "casualties"


_PANEL_TEXT: dict[AnalyticsPanel, tuple[str, str]] = {
    AnalyticsPanel.TIMELINE: (
        "Conflict Events Timeline",
        "Temporal analysis of conflict events, deaths, and patterns over time",
    ),
    AnalyticsPanel.REGIONS: (
        "Regional Breakdown",
        "Geographic distribution of events and casualties by region",
    ),
    AnalyticsPanel.ACTORS: (
        "Conflict Actors",
        "Activity of the actors involved on each side of the conflicts",
    ),
    AnalyticsPanel.CASUALTIES: (
        "Casualty Analysis",
        "Breakdown of deaths by side, civilians and estimate ranges",
    ),
}

_REPORT_FIELDS: dict[AnalyticsPanel, str] = {
    AnalyticsPanel.TIMELINE: "timeline_report_id",
    AnalyticsPanel.REGIONS: "regions_report_id",
    AnalyticsPanel.ACTORS: "actors_report_id",
    AnalyticsPanel.CASUALTIES: "casualties_report_id",
}


@dataclass(frozen=True, slots=True)
class EmbedTarget:
    """What an analytics panel should render."""

    panel: AnalyticsPanel
    title: str
    description: str
    height: int
    url: str | None
    notice: str | None = None

    @property
    def is_configured(self) -> bool:
        return self.url is not None


def build_embed_url(report_id: str, tenant_id: str) -> str:
    query = urlencode({"reportId": report_id, "autoAuth": "true", "ctid": tenant_id})
    return f"{POWERBI_EMBED_URL}?{query}"


def embed_target(config: AnalyticsConfig, panel: AnalyticsPanel, *, height: int = 700) -> EmbedTarget:
    title, description = _PANEL_TEXT[panel]
    report_id = getattr(config, _REPORT_FIELDS[panel])
    missing = [
        name
        for name, value in (("report id", report_id), ("tenant id", config.tenant_id))
        if not value
    ]
    if missing:
        _logger.debug("Analytics panel %s not configured: missing %s", panel, ", ".join(missing))
        return EmbedTarget(
            panel=panel,
            title=title,
            description=description,
            height=height,
            url=None,
            notice=f"{title} is not configured (missing Power BI {' and '.join(missing)}).",
        )
    url = build_embed_url(report_id, config.tenant_id)  # type: ignore[arg-type]
    _logger.debug("Analytics panel %s: %s", panel, redact_for_log({"reportId": report_id, "ctid": config.tenant_id}))
    return EmbedTarget(panel=panel, title=title, description=description, height=height, url=url)


def analytics_panels(config: AnalyticsConfig) -> list[EmbedTarget]:
    """All panels, in tab order."""
    return [embed_target(config, panel) for panel in AnalyticsPanel]
