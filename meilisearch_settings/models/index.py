from __future__ import annotations

from datetime import datetime

import pydantic
from camel_converter.pydantic_base import CamelBase

from meilisearch_settings._utils import iso_to_date_time


class IndexBase(CamelBase):
    uid: str
    primary_key: str | None = None


class IndexInfo(IndexBase):
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @pydantic.field_validator("created_at", mode="before")  # type: ignore[attr-defined]
    @classmethod
    def validate_created_at(cls, v: str) -> datetime | None:
        return iso_to_date_time(v)

    @pydantic.field_validator("updated_at", mode="before")  # type: ignore[attr-defined]
    @classmethod
    def validate_updated_at(cls, v: str) -> datetime | None:
        return iso_to_date_time(v)
