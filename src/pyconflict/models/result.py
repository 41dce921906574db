"""Fetch outcome snapshots shared by the fetcher and the lookup cache."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Generic, TypeVar

from pyconflict.exceptions import (
    ConflictConfigError,
    ConflictError,
    ConflictResponseError,
    ConflictTimeoutError,
    ConflictTransportError,
)

Q = TypeVar("Q")
T = TypeVar("T")


class FetchStatus(StrEnum):
    IDLE = "idle"
    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"


class FetchErrorKind(StrEnum):
    TRANSPORT = "transport"
    STATUS = "status"
    MALFORMED = "malformed"
    TIMEOUT = "timeout"
    NOT_CONFIGURED = "not_configured"


def classify_error(exc: BaseException) -> FetchErrorKind:
    """Map an exception raised by a read onto the error taxonomy."""
    if isinstance(exc, (ConflictTimeoutError, TimeoutError)):
        return FetchErrorKind.TIMEOUT
    if isinstance(exc, ConflictConfigError):
        return FetchErrorKind.NOT_CONFIGURED
    if isinstance(exc, ConflictResponseError):
        return FetchErrorKind.MALFORMED
    if isinstance(exc, ConflictTransportError) and exc.status_code is not None:
        return FetchErrorKind.STATUS
    return FetchErrorKind.TRANSPORT


def describe_error(exc: BaseException) -> str:
    """Human-readable message for an error indicator."""
    kind = classify_error(exc)
    if kind is FetchErrorKind.TIMEOUT:
        return "The request timed out"
    if isinstance(exc, ConflictError) and str(exc):
        return str(exc)
    return f"Request failed ({type(exc).__name__})"


@dataclass(frozen=True, slots=True)
class FetchResult(Generic[Q, T]):
    """Outcome of the latest fetch for a request snapshot.

    ``data`` keeps the last successful payload while a new read is
    pending or after it failed, so consumers never lose what they were
    showing.
    """

    status: FetchStatus = FetchStatus.IDLE
    fetched_for: Q | None = None
    data: T | None = None
    error_kind: FetchErrorKind | None = None
    error_message: str | None = None
    is_demo: bool = False
    notice: str | None = None

    @property
    def is_loading(self) -> bool:
        return self.status is FetchStatus.PENDING

    @property
    def has_error(self) -> bool:
        return self.status is FetchStatus.ERROR

    def pending(self, request: Q) -> FetchResult[Q, T]:
        return replace(self, status=FetchStatus.PENDING, fetched_for=request, error_kind=None, error_message=None)

    def succeeded(self, request: Q, data: T, *, is_demo: bool = False, notice: str | None = None) -> FetchResult[Q, T]:
        return FetchResult(
            status=FetchStatus.SUCCESS,
            fetched_for=request,
            data=data,
            is_demo=is_demo,
            notice=notice,
        )

    def failed(self, request: Q, exc: BaseException) -> FetchResult[Q, T]:
        return replace(
            self,
            status=FetchStatus.ERROR,
            fetched_for=request,
            error_kind=classify_error(exc),
            error_message=describe_error(exc),
        )
