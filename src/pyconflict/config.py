"""Client configuration for pyconflict."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pyconflict._constants import DEFAULT_DEBOUNCE_DELAY, DEFAULT_REQUEST_TIMEOUT
from pyconflict.exceptions import ConflictConfigError


def _env_float(value: str | None, default: float) -> float:
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise ConflictConfigError(f"expected a number, got {value!r}") from exc


def _env_str(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


@dataclasses.dataclass(frozen=True)
class AnalyticsConfig:
    """Power BI embedding identifiers.

    Every field is optional. Panels whose report id (or the tenant id)
    is missing render a "not configured" notice instead of an embed.
    """

    tenant_id: str | None = None
    timeline_report_id: str | None = None
    regions_report_id: str | None = None
    actors_report_id: str | None = None
    casualties_report_id: str | None = None


@dataclasses.dataclass(frozen=True)
class ConflictConfig:
    """Client configuration.

    Parameters
    ----------
    api_url : str or None
        Base URL of the conflict-events REST API, without a trailing
        slash. ``None`` means the deployment is not configured; reads
        raise :class:`~pyconflict.exceptions.ConflictConfigError` and the
        explore session falls back to labelled demo data.
    request_timeout : float
        Upper bound in seconds for a single remote read.
    debounce_delay : float
        Quiescence window in seconds before a filter change is fetched.
    analytics : AnalyticsConfig
        Power BI embedding identifiers.
    """

    api_url: str | None = None
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    debounce_delay: float = DEFAULT_DEBOUNCE_DELAY
    analytics: AnalyticsConfig = dataclasses.field(default_factory=AnalyticsConfig)

    def __post_init__(self) -> None:
        if self.api_url is not None:
            object.__setattr__(self, "api_url", self.api_url.strip().rstrip("/") or None)
        if self.request_timeout <= 0:
            raise ConflictConfigError(f"request_timeout must be positive, got {self.request_timeout}")
        if self.debounce_delay < 0:
            raise ConflictConfigError(f"debounce_delay must not be negative, got {self.debounce_delay}")

    @property
    def is_configured(self) -> bool:
        """Whether a remote API is available to read from."""
        return self.api_url is not None

    def require_api_url(self) -> str:
        """Return the API base URL or raise if it was never set."""
        if self.api_url is None:
            raise ConflictConfigError("CONFLICT_API_URL is not set; no remote API is configured")
        return self.api_url

    @classmethod
    def from_env(cls, **overrides: Any) -> ConflictConfig:
        """Create configuration from environment variables.

        Reads ``CONFLICT_API_URL``, ``CONFLICT_REQUEST_TIMEOUT``,
        ``CONFLICT_DEBOUNCE_DELAY`` and the ``CONFLICT_POWERBI_*``
        identifiers. Explicit keyword arguments override environment
        values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        ConflictConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_ANALYTICS_MAP = {
            "CONFLICT_POWERBI_TENANT_ID": "tenant_id",
            "CONFLICT_POWERBI_TIMELINE_REPORT_ID": "timeline_report_id",
            "CONFLICT_POWERBI_REGIONS_REPORT_ID": "regions_report_id",
            "CONFLICT_POWERBI_ACTORS_REPORT_ID": "actors_report_id",
            "CONFLICT_POWERBI_CASUALTIES_REPORT_ID": "casualties_report_id",
        }
        analytics_kwargs: dict[str, str | None] = {}
        for env_key, field_name in _ENV_ANALYTICS_MAP.items():
            val = _env_str(env.get(env_key))
            if val is not None:
                analytics_kwargs[field_name] = val

        # Allow overriding analytics fields via a nested dict
        analytics_overrides = overrides.pop("analytics", None)
        if isinstance(analytics_overrides, dict):
            analytics_kwargs.update(analytics_overrides)
        elif isinstance(analytics_overrides, AnalyticsConfig):
            analytics_kwargs = dataclasses.asdict(analytics_overrides)

        config_kwargs: dict[str, Any] = {"analytics": AnalyticsConfig(**analytics_kwargs)}

        api_url = _env_str(env.get("CONFLICT_API_URL"))
        if api_url is not None:
            config_kwargs["api_url"] = api_url

        if "request_timeout" not in overrides:
            config_kwargs["request_timeout"] = _env_float(
                env.get("CONFLICT_REQUEST_TIMEOUT"),
                DEFAULT_REQUEST_TIMEOUT,
            )
        if "debounce_delay" not in overrides:
            config_kwargs["debounce_delay"] = _env_float(
                env.get("CONFLICT_DEBOUNCE_DELAY"),
                DEFAULT_DEBOUNCE_DELAY,
            )

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
