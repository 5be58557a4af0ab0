from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

import pydantic
from camel_converter.pydantic_base import CamelBase
from pydantic import AliasChoices, ConfigDict, Field

from meilisearch_settings._utils import iso_to_date_time
from meilisearch_settings.types import JsonDict

_TASK_UID_ALIASES = AliasChoices("taskUid", "updateId", "uid", "task_uid")


class TaskStatus(str, Enum):
    ENQUEUED = "enqueued"
    PROCESSING = "processing"
    PROCESSED = "processed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (TaskStatus.PROCESSED, TaskStatus.FAILED)


class TaskInfo(CamelBase):
    """Handle on an update Meilisearch accepted but may not have applied yet."""

    model_config = ConfigDict(frozen=True)

    task_uid: int = Field(..., validation_alias=_TASK_UID_ALIASES)
    index_uid: str

    @classmethod
    def from_response(cls, index_uid: str, response_json: JsonDict) -> TaskInfo:
        return cls(**{"indexUid": index_uid, **response_json})


class TaskError(CamelBase):
    message: str = ""
    code: str | None = None
    error_type: str | None = Field(None, alias="type")
    link: str | None = None


class TaskResult(CamelBase):
    task_uid: int = Field(..., validation_alias=_TASK_UID_ALIASES)
    index_uid: str | None = None
    status: TaskStatus
    task_type: str | JsonDict | None = Field(None, alias="type")
    duration: float | str | None = None
    enqueued_at: datetime | None = None
    processed_at: datetime | None = None
    error: TaskError | None = None

    @pydantic.model_validator(mode="before")
    @classmethod
    def collect_error(cls, data: Any) -> Any:
        """Older Meilisearch versions report errors as top level keys instead of an object."""
        if not isinstance(data, dict) or data.get("error") is not None:
            return data

        code = data.get("errorCode") or data.get("code")
        if code is None and data.get("message") is None:
            return data

        return {
            **data,
            "error": {
                "message": data.get("message") or "",
                "code": code,
                "type": data.get("errorType"),
                "link": data.get("errorLink"),
            },
        }

    @pydantic.field_validator("enqueued_at", mode="before")  # type: ignore[attr-defined]
    @classmethod
    def validate_enqueued_at(cls, v: str) -> datetime | None:
        return iso_to_date_time(v)

    @pydantic.field_validator("processed_at", mode="before")  # type: ignore[attr-defined]
    @classmethod
    def validate_processed_at(cls, v: str) -> datetime | None:
        return iso_to_date_time(v)

    @property
    def is_failed(self) -> bool:
        return self.status is TaskStatus.FAILED
