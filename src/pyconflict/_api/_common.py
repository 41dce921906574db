"""Shared helpers for endpoint modules.

This module centralizes the repeated patterns:
- unwrapping list payloads that may arrive inside an envelope
- validating payloads into models, mapping failures to
  :class:`~pyconflict.exceptions.ConflictResponseError`

It is internal to pyconflict and may change at any time.
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from pyconflict.exceptions import ConflictResponseError

M = TypeVar("M", bound=BaseModel)

_LIST_ENVELOPE_KEYS = ("data", "items", "results")


def unwrap_list(payload: Any, endpoint: str) -> list[Any]:
    """Return the record list from a bare list or ``{"data": [...]}``."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in _LIST_ENVELOPE_KEYS:
            value = payload.get(key)
            if isinstance(value, list):
                return value
    raise ConflictResponseError(
        f"Expected a list from {endpoint}, got {type(payload).__name__}",
        endpoint=endpoint,
    )


def parse_model(model: type[M], payload: Any, endpoint: str) -> M:
    if not isinstance(payload, dict):
        raise ConflictResponseError(
            f"Expected an object from {endpoint}, got {type(payload).__name__}",
            endpoint=endpoint,
        )
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise ConflictResponseError(
            f"Malformed {model.__name__} from {endpoint}: {exc.error_count()} validation error(s)",
            endpoint=endpoint,
        ) from exc


def parse_list(model: type[M], payload: Any, endpoint: str) -> list[M]:
    records = unwrap_list(payload, endpoint)
    try:
        return TypeAdapter(list[model]).validate_python(records)  # type: ignore[valid-type]
    except ValidationError as exc:
        raise ConflictResponseError(
            f"Malformed {model.__name__} list from {endpoint}: {exc.error_count()} validation error(s)",
            endpoint=endpoint,
        ) from exc
