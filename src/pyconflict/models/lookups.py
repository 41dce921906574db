"""Facet vocabularies used to populate filter selectors."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from pyconflict.formatting import violence_type_label
from pyconflict.models._base import ConflictBaseModel


class FacetOption(BaseModel):
    """A selectable facet value with a display label."""

    model_config = ConfigDict(frozen=True)

    id: int
    label: str


def _string_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    seen: dict[str, None] = {}
    for item in value:
        text = str(item).strip()
        if text:
            seen.setdefault(text, None)
    return list(seen)


class LookupVocabulary(ConflictBaseModel):
    """Facet option lists, read once per session."""

    countries: list[str] = Field(default_factory=list)
    regions: list[str] = Field(default_factory=list)
    adm1: list[str] = Field(default_factory=list)
    sides_a: list[str] = Field(default_factory=list, validation_alias=AliasChoices("sidesA", "sides_a"))
    sides_b: list[str] = Field(default_factory=list, validation_alias=AliasChoices("sidesB", "sides_b"))
    years: list[int] = Field(default_factory=list)
    violence_types: list[FacetOption] = Field(
        default_factory=list,
        validation_alias=AliasChoices("violenceTypes", "violence_types"),
    )

    @field_validator("countries", "regions", "adm1", "sides_a", "sides_b", mode="before")
    @classmethod
    def _clean_strings(cls, value: Any) -> list[str]:
        return _string_list(value)

    @field_validator("violence_types", mode="before")
    @classmethod
    def _coerce_options(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return value
        options: list[Any] = []
        for item in value:
            if isinstance(item, int) and not isinstance(item, bool):
                options.append({"id": item, "label": violence_type_label(item)})
            elif isinstance(item, dict) and "label" not in item and "id" in item:
                options.append({"id": item["id"], "label": item.get("name") or violence_type_label(int(item["id"]))})
            else:
                options.append(item)
        return options

    def option_label(self, violence_type: int) -> str:
        for option in self.violence_types:
            if option.id == violence_type:
                return option.label
        return violence_type_label(violence_type)
