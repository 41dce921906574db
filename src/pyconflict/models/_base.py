"""Shared base classes for API records.

Records inherit from :class:`ConflictBaseModel`. The API is loose about
missing values: it may omit a key, send ``null``, an empty string, a
``"--"`` placeholder or ``NaN``. All of those are treated as "absent" and
the field default applies. The untouched payload is kept on ``raw`` for
debugging and for fields this library does not model yet.

Categorical codes use :class:`ConflictEnum`, which maps codes that have
no member (new categories added server-side) to ``UNKNOWN``.
"""

from __future__ import annotations

import enum
import math
from datetime import date
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator

from pyconflict._normalize import safe_date

_PLACEHOLDERS = frozenset({"", "--", "NaN", "nan", "null"})


def _is_absent(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() in _PLACEHOLDERS
    return isinstance(value, float) and math.isnan(value)


def parse_api_date(value: Any) -> date | None:
    """Coerce ``YYYY-MM-DD`` (optionally followed by a time) to a date."""
    return None if value is None else safe_date(value)


ApiDate = Annotated[date | None, BeforeValidator(parse_api_date)]


class ConflictEnum(enum.IntEnum):
    """Integer category code with an ``UNKNOWN = -1`` member.

    Subclasses must declare ``UNKNOWN``.
    """

    @classmethod
    def _missing_(cls, value: object) -> ConflictEnum:
        # pylint: disable=no-member
        return cls["UNKNOWN"]


class ConflictBaseModel(BaseModel):
    """Frozen API record that ignores unknown keys."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    raw: dict[str, Any] = Field(default_factory=dict, repr=False)

    @model_validator(mode="before")
    @classmethod
    def _drop_absent_values(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        present = {key: value for key, value in values.items() if not _is_absent(value)}
        # raw= passed explicitly (keyword construction) wins.
        present.setdefault("raw", dict(values))
        return present
