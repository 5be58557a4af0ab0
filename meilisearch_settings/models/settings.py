from __future__ import annotations

from typing import Any

import pydantic
from camel_converter import to_camel
from camel_converter.pydantic_base import CamelBase
from pydantic import Field

from meilisearch_settings.synonyms import normalize_synonyms

DEFAULT_RANKING_RULES: tuple[str, ...] = (
    "words",
    "typo",
    "proximity",
    "attribute",
    "sort",
    "exactness",
)
WILDCARD_ATTRIBUTES: tuple[str, ...] = ("*",)


class MeilisearchSettings(CamelBase):
    """All of the settings of an index.

    When read from Meilisearch every facet is filled in, falling back to the Meilisearch default
    for facets the server did not send. When used to update settings only the facets explicitly
    set are sent, and a facet explicitly set to `None` is reset to its default.

    Values of the wrong type raise `pydantic.ValidationError` when the model is built.
    """

    ranking_rules: list[str] | None = Field(default_factory=lambda: list(DEFAULT_RANKING_RULES))
    distinct_attribute: str | None = None
    searchable_attributes: list[str] | None = Field(
        default_factory=lambda: list(WILDCARD_ATTRIBUTES)
    )
    displayed_attributes: list[str] | None = Field(
        default_factory=lambda: list(WILDCARD_ATTRIBUTES)
    )
    stop_words: list[str] | None = Field(default_factory=list)
    synonyms: dict[str, list[str]] | None = Field(default_factory=dict)
    filterable_attributes: list[str] | None = Field(default_factory=list)
    sortable_attributes: list[str] | None = Field(default_factory=list)

    @pydantic.field_validator("synonyms", mode="before")  # type: ignore[attr-defined]
    @classmethod
    def validate_synonyms(cls, v: Any) -> Any:
        if isinstance(v, dict):
            return normalize_synonyms(v)

        return v

    @pydantic.field_validator("stop_words", mode="before")  # type: ignore[attr-defined]
    @classmethod
    def validate_stop_words(cls, v: Any) -> Any:
        if isinstance(v, str):
            return [v]

        return v

    @classmethod
    def from_response(cls, response_json: dict[str, Any] | None) -> MeilisearchSettings:
        """Builds the settings, treating missing or null facets as their defaults."""
        if not response_json:
            return cls()

        return cls(**{k: v for k, v in response_json.items() if v is not None})

    def to_update_payload(self) -> dict[str, Any]:
        """Only the facets that were explicitly set, keyed by their camelCase names."""
        return self.model_dump(by_alias=True, exclude_unset=True)


SETTINGS_FIELDS: frozenset[str] = frozenset(MeilisearchSettings.model_fields)
SETTINGS_ALIASES: dict[str, str] = {to_camel(name): name for name in SETTINGS_FIELDS}
