"""HTTP transport for the conflict-events REST API."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from pyconflict._constants import HEALTH_TIMEOUT, USER_AGENT
from pyconflict._redact import redact_for_log
from pyconflict.config import ConflictConfig
from pyconflict.exceptions import (
    ConflictNotFoundError,
    ConflictResponseError,
    ConflictTimeoutError,
    ConflictTransportError,
)

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """What the ``_api`` endpoint functions need from a transport.

    ``HttpTransport`` is the aiohttp implementation; tests pass fakes.
    """

    async def get_json(self, endpoint: str, params: Mapping[str, str] | None = None) -> Any:
        ...

    async def check_health(self, endpoint: str) -> bool:
        ...


class HttpTransport:
    """aiohttp transport with a bounded wait on every read."""

    def __init__(
        self,
        config: ConflictConfig,
        http_session: aiohttp.ClientSession,
    ) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    def _url(self, endpoint: str) -> str:
        return f"{self._config.require_api_url()}{endpoint}"

    async def get_json(self, endpoint: str, params: Mapping[str, str] | None = None) -> Any:
        """GET *endpoint* and return the decoded JSON body.

        Raises
        ------
        ConflictConfigError
            If no API URL is configured (checked before any I/O).
        ConflictTimeoutError
            If the read exceeds ``config.request_timeout``.
        ConflictNotFoundError
            On HTTP 404.
        ConflictTransportError
            On network failures and other non-success statuses.
        ConflictResponseError
            If the body is not UTF-8 encoded JSON.
        """
        url = self._url(endpoint)
        headers = {"accept": "application/json", "user-agent": USER_AGENT}

        _logger.debug("GET %s params=%s", url, redact_for_log(dict(params or {}), max_string=128))

        try:
            async with self._http.get(url, params=params, headers=headers, timeout=self._timeout) as resp:
                body = await resp.read()
                if resp.status == 404:
                    raise ConflictNotFoundError(
                        f"Not found: {endpoint}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
                if not 200 <= resp.status < 300:
                    raise ConflictTransportError(
                        f"HTTP {resp.status} from {endpoint}: {resp.reason or body[:200]!r}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except ConflictTransportError:
            raise
        except TimeoutError as exc:
            raise ConflictTimeoutError(
                f"Request to {endpoint} timed out after {self._config.request_timeout:g}s",
                endpoint=endpoint,
            ) from exc
        except aiohttp.ClientError as exc:
            raise ConflictTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        try:
            return json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ConflictResponseError(
                f"Invalid JSON from {endpoint}: {body[:200]!r}",
                endpoint=endpoint,
            ) from exc

    async def check_health(self, endpoint: str) -> bool:
        """HEAD *endpoint*; ``True`` only for a success status. Never raises."""
        if not self._config.is_configured:
            return False
        try:
            async with self._http.head(
                self._url(endpoint),
                headers={"user-agent": USER_AGENT},
                timeout=aiohttp.ClientTimeout(total=HEALTH_TIMEOUT),
            ) as resp:
                return 200 <= resp.status < 300
        except (TimeoutError, aiohttp.ClientError):
            _logger.debug("Health check %s failed", endpoint, exc_info=True)
            return False
