from meilisearch_settings._client import AsyncClient, Client
from meilisearch_settings._task import (
    async_get_task,
    async_get_tasks,
    async_wait_for_task,
    async_wait_for_tasks,
    get_task,
    get_tasks,
    wait_for_task,
    wait_for_tasks,
)
from meilisearch_settings._version import VERSION
from meilisearch_settings.index import AsyncIndex, Index
from meilisearch_settings.models.settings import MeilisearchSettings
from meilisearch_settings.models.task import TaskInfo, TaskResult, TaskStatus
from meilisearch_settings.synonyms import normalize_synonyms, synonyms_equal

__version__ = VERSION


__all__ = [
    "AsyncClient",
    "AsyncIndex",
    "Client",
    "Index",
    "MeilisearchSettings",
    "TaskInfo",
    "TaskResult",
    "TaskStatus",
    "async_get_task",
    "async_get_tasks",
    "async_wait_for_task",
    "async_wait_for_tasks",
    "get_task",
    "get_tasks",
    "normalize_synonyms",
    "synonyms_equal",
    "wait_for_task",
    "wait_for_tasks",
]
