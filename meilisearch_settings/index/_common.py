from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from camel_converter import to_camel

from meilisearch_settings._facets import get_facet
from meilisearch_settings._utils import iso_to_date_time
from meilisearch_settings.models.settings import SETTINGS_ALIASES, MeilisearchSettings
from meilisearch_settings.models.task import TaskInfo
from meilisearch_settings.types import JsonDict


class BaseIndex:
    def __init__(
        self,
        uid: str,
        primary_key: str | None = None,
        created_at: str | datetime | None = None,
        updated_at: str | datetime | None = None,
    ):
        self.uid = uid
        self.primary_key = primary_key
        self.created_at: datetime | None = iso_to_date_time(created_at)
        self.updated_at: datetime | None = iso_to_date_time(updated_at)
        self._base_url = "indexes/"
        self._base_url_with_uid = f"{self._base_url}{self.uid}"
        self._settings_url = f"{self._base_url_with_uid}/settings"
        self._updates_url = f"{self._base_url_with_uid}/updates"

    def __str__(self) -> str:
        return f"{type(self).__name__}(uid={self.uid}, primary_key={self.primary_key}, created_at={self.created_at}, updated_at={self.updated_at})"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(uid={self.uid!r}, primary_key={self.primary_key!r}, created_at={self.created_at!r}, updated_at={self.updated_at!r})"

    def _set_fetch_info(self, index_dict: JsonDict) -> None:
        self.primary_key = index_dict.get("primaryKey")
        self.created_at = iso_to_date_time(index_dict.get("createdAt"))
        self.updated_at = iso_to_date_time(index_dict.get("updatedAt"))

    def _task_info(self, task: TaskInfo | int) -> TaskInfo:
        if isinstance(task, TaskInfo):
            return task

        return TaskInfo(task_uid=task, index_uid=self.uid)


def settings_payload(body: MeilisearchSettings | Mapping[str, Any]) -> JsonDict:
    """Build the body of a partial settings update.

    Only the facets present in `body` are included. A facet set to `None` is sent as null which
    resets it. Mapping keys can be either the snake_case or the camelCase facet name.
    """
    if isinstance(body, MeilisearchSettings):
        return body.to_update_payload()

    payload: JsonDict = {}
    for key, value in body.items():
        facet = get_facet(SETTINGS_ALIASES.get(key, key))
        payload[to_camel(facet.name)] = facet.encode(value)

    return payload
