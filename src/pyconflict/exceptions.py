"""Custom exception hierarchy for pyconflict."""

from __future__ import annotations


class ConflictError(Exception):
    """Base exception for all pyconflict errors."""


class ConflictConfigError(ConflictError):
    """Invalid or missing configuration.

    Raised before a remote read is issued, so callers can tell a
    deployment that was never configured apart from a transient failure
    and substitute demo content instead of an error message.
    """


class ConflictTransportError(ConflictError):
    """HTTP-level failure (network error or non-success status)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class ConflictTimeoutError(ConflictTransportError):
    """A remote read did not complete within the configured bound."""


class ConflictNotFoundError(ConflictTransportError):
    """The requested record does not exist (HTTP 404)."""


class ConflictResponseError(ConflictError):
    """Response body could not be parsed or failed validation."""

    def __init__(self, message: str, *, endpoint: str = "") -> None:
        self.endpoint = endpoint
        super().__init__(message)
