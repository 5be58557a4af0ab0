from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import TYPE_CHECKING, Any, TypeVar

from httpx import AsyncClient

from meilisearch_settings._facets import (
    DISPLAYED_ATTRIBUTES,
    DISTINCT_ATTRIBUTE,
    FILTERABLE_ATTRIBUTES,
    RANKING_RULES,
    SEARCHABLE_ATTRIBUTES,
    SORTABLE_ATTRIBUTES,
    STOP_WORDS,
    SYNONYMS,
    AsyncSettingAccessor,
    Facet,
    get_facet,
)
from meilisearch_settings._http_requests import AsyncHttpRequests
from meilisearch_settings._task import (
    DEFAULT_INTERVAL_IN_MS,
    DEFAULT_TIMEOUT_IN_MS,
    async_get_task,
    async_get_tasks,
    async_wait_for_task,
    async_wait_for_tasks,
)
from meilisearch_settings._utils import validate_index_uid
from meilisearch_settings.index._common import BaseIndex, settings_payload
from meilisearch_settings.models.settings import MeilisearchSettings
from meilisearch_settings.models.task import TaskInfo, TaskResult

T = TypeVar("T")

if TYPE_CHECKING:  # pragma: no cover
    import sys

    if sys.version_info >= (3, 11):
        from typing import Self
    else:
        from typing_extensions import Self


class AsyncIndex(BaseIndex):
    """AsyncIndex class gives access to an index and its settings.

    Each setting is available as an attribute with `get`, `update`, and `reset` methods, for
    example `await index.stop_words.update(["the", "a"])`. All settings can also be read and
    changed together with `get_settings`, `update_settings`, and `reset_settings`.

    https://docs.meilisearch.com/reference/api/settings.html
    """

    def __init__(
        self,
        http_client: AsyncClient,
        uid: str,
        primary_key: str | None = None,
        created_at: str | datetime | None = None,
        updated_at: str | datetime | None = None,
    ):
        """Class initializer.

        Args:
            http_client: An instance of the AsyncClient. This automatically gets passed by the
                AsyncClient when creating and AsyncIndex instance.
            uid: The index's unique identifier.
            primary_key: The primary key of the documents. Defaults to None.
            created_at: The date and time the index was created. Defaults to None.
            updated_at: The date and time the index was last updated. Defaults to None.
        """
        super().__init__(
            uid=uid, primary_key=primary_key, created_at=created_at, updated_at=updated_at
        )
        self.http_client = http_client
        self._http_requests = AsyncHttpRequests(http_client)

        self.ranking_rules = self._accessor(RANKING_RULES)
        self.distinct_attribute = self._accessor(DISTINCT_ATTRIBUTE)
        self.searchable_attributes = self._accessor(SEARCHABLE_ATTRIBUTES)
        self.displayed_attributes = self._accessor(DISPLAYED_ATTRIBUTES)
        self.stop_words = self._accessor(STOP_WORDS)
        self.synonyms = self._accessor(SYNONYMS)
        self.filterable_attributes = self._accessor(FILTERABLE_ATTRIBUTES)
        self.sortable_attributes = self._accessor(SORTABLE_ATTRIBUTES)

    def _accessor(self, facet: Facet[T]) -> AsyncSettingAccessor[T]:
        return AsyncSettingAccessor(self._http_requests, self.uid, self._settings_url, facet)

    @classmethod
    async def create(
        cls, http_client: AsyncClient, uid: str, primary_key: str | None = None
    ) -> Self:
        """Creates a new index.

        In general this method should not be used directly and instead the index should be created
        through the `AsyncClient`.

        Args:
            http_client: An instance of the AsyncClient. This automatically gets passed by the
                AsyncClient when creating an AsyncIndex instance.
            uid: The index's unique identifier.
            primary_key: The primary key of the documents. Defaults to None.

        Returns:
            An instance of AsyncIndex containing the information of the newly created index.

        Raises:
            InvalidIndexUidError: If the uid contains characters Meilisearch does not allow.
            MeilisearchConflictError: If an index with this uid already exists.
            MeilisearchCommunicationError: If there was an error communicating with the server.
            MeilisearchApiError: If the Meilisearch API returned an error.

        Examples
            >>> from meilisearch_settings import AsyncClient
            >>> async with AsyncClient("http://localhost.com", "masterKey") as client:
            >>>     index = await AsyncIndex.create(client.http_client, "movies")
        """
        validate_index_uid(uid)
        if not primary_key:
            payload = {"uid": uid}
        else:
            payload = {"primaryKey": primary_key, "uid": uid}

        http_request = AsyncHttpRequests(http_client)
        response = await http_request.post("indexes", payload)
        index_dict = http_request.parse_json(response) or {}

        return cls(
            http_client=http_client,
            uid=uid,
            primary_key=index_dict.get("primaryKey", primary_key),
            created_at=index_dict.get("createdAt"),
            updated_at=index_dict.get("updatedAt"),
        )

    async def delete(self) -> None:
        """Deletes the index.

        Raises:
            MeilisearchNotFoundError: If the index does not exist.
            MeilisearchCommunicationError: If there was an error communicating with the server.
            MeilisearchApiError: If the Meilisearch API returned an error.

        Examples
            >>> from meilisearch_settings import AsyncClient
            >>> async with AsyncClient("http://localhost.com", "masterKey") as client:
            >>>     index = client.index("movies")
            >>>     await index.delete()
        """
        await self._http_requests.delete(self._base_url_with_uid)

    async def fetch_info(self) -> Self:
        """Gets the information about the index.

        Returns:
            An instance of the AsyncIndex containing the retrieved information.

        Raises:
            MeilisearchNotFoundError: If the index does not exist.
            MeilisearchCommunicationError: If there was an error communicating with the server.
            MeilisearchApiError: If the Meilisearch API returned an error.
        """
        response = await self._http_requests.get(self._base_url_with_uid)
        self._set_fetch_info(response.json())

        return self

    async def fetch_primary_key(self) -> str | None:
        """Get the primary key from Meilisearch.

        The value cached in `primary_key` is only what this instance has seen. This always asks
        Meilisearch and refreshes the cached value.

        Returns:
            The primary key for the documents in the index.

        Raises:
            MeilisearchNotFoundError: If the index does not exist.
            MeilisearchCommunicationError: If there was an error communicating with the server.
            MeilisearchApiError: If the Meilisearch API returned an error.

        Examples
            >>> from meilisearch_settings import AsyncClient
            >>> async with AsyncClient("http://localhost.com", "masterKey") as client:
            >>>     index = client.index("movies")
            >>>     primary_key = await index.fetch_primary_key()
        """
        info = await self.fetch_info()
        return info.primary_key

    get_primary_key = fetch_primary_key

    async def get_settings(self) -> MeilisearchSettings:
        """Get settings of the index.

        Settings that were never changed are returned with their default values.

        Returns:
            Settings of the index.

        Raises:
            MeilisearchCommunicationError: If there was an error communicating with the server.
            MeilisearchApiError: If the Meilisearch API returned an error.

        Examples
            >>> from meilisearch_settings import AsyncClient
            >>> async with AsyncClient("http://localhost.com", "masterKey") as client:
            >>>     index = client.index("movies")
            >>>     settings = await index.get_settings()
        """
        response = await self._http_requests.get(self._settings_url)

        return MeilisearchSettings.from_response(self._http_requests.parse_json(response))

    async def update_settings(self, body: MeilisearchSettings | Mapping[str, Any]) -> TaskInfo:
        """Update settings of the index.

        Only the settings included in `body` are changed, everything else is left as is. Setting a
        value to `None` resets it to the default. All of the changes are applied by one task.

        Args:
            body: Settings of the index, either as MeilisearchSettings or as a mapping of setting
                names to values.

        Returns:
            The details of the task.

        Raises:
            MeilisearchValidationError: If `body` is a mapping containing an unknown setting.
            pydantic.ValidationError: If `body` is MeilisearchSettings built with values of the
                wrong type, this is raised when the model is created rather than by this method.
                Values passed in a mapping are not checked locally, a wrong one makes the task
                fail instead.
            MeilisearchCommunicationError: If there was an error communicating with the server.
            MeilisearchApiError: If the Meilisearch API returned an error.

        Examples
            >>> from meilisearch_settings import AsyncClient, MeilisearchSettings
            >>> new_settings = MeilisearchSettings(
            >>>     synonyms={"wolverine": ["xmen", "logan"], "logan": ["wolverine"]},
            >>>     stop_words=["the", "a", "an"],
            >>>     ranking_rules=["words", "typo", "proximity", "attribute", "sort", "exactness"],
            >>>     distinct_attribute=None,
            >>> )
            >>> async with AsyncClient("http://localhost.com", "masterKey") as client:
            >>>     index = client.index("movies")
            >>>     task = await index.update_settings(new_settings)
            >>>     await index.wait_for_task(task)
        """
        response = await self._http_requests.patch(self._settings_url, settings_payload(body))

        return TaskInfo.from_response(self.uid, response.json())

    async def reset_settings(self) -> TaskInfo:
        """Reset settings of the index to default values.

        Returns:
            The details of the task.

        Raises:
            MeilisearchCommunicationError: If there was an error communicating with the server.
            MeilisearchApiError: If the Meilisearch API returned an error.
        """
        response = await self._http_requests.delete(self._settings_url)

        return TaskInfo.from_response(self.uid, response.json())

    def setting(self, name: str) -> AsyncSettingAccessor:
        """The accessor for a setting looked up by its snake_case name."""
        return getattr(self, get_facet(name).name)

    async def get_setting(self, name: str) -> Any:
        return await self.setting(name).get()

    async def update_setting(self, name: str, value: Any) -> TaskInfo:
        return await self.setting(name).update(value)

    async def reset_setting(self, name: str) -> TaskInfo:
        return await self.setting(name).reset()

    async def get_task(self, task: TaskInfo | int) -> TaskResult:
        """Get the current status of one of this index's tasks."""
        return await async_get_task(self.http_client, self._task_info(task))

    get_update_status = get_task

    async def get_tasks(self) -> list[TaskResult]:
        """Get the status of every task of the index."""
        return await async_get_tasks(self.http_client, self.uid)

    async def wait_for_task(
        self,
        task: TaskInfo | int,
        *,
        timeout_in_ms: int | None = DEFAULT_TIMEOUT_IN_MS,
        interval_in_ms: int = DEFAULT_INTERVAL_IN_MS,
        raise_for_status: bool = True,
    ) -> TaskResult:
        """Wait until Meilisearch processes one of this index's tasks.

        See `meilisearch_settings.async_wait_for_task` for the arguments.
        """
        return await async_wait_for_task(
            self.http_client,
            self._task_info(task),
            timeout_in_ms=timeout_in_ms,
            interval_in_ms=interval_in_ms,
            raise_for_status=raise_for_status,
        )

    wait_for_pending_update = wait_for_task

    async def wait_for_tasks(
        self,
        tasks: Sequence[TaskInfo | int],
        *,
        timeout_in_ms: int | None = DEFAULT_TIMEOUT_IN_MS,
        interval_in_ms: int = DEFAULT_INTERVAL_IN_MS,
        raise_for_status: bool = True,
    ) -> list[TaskResult]:
        return await async_wait_for_tasks(
            self.http_client,
            [self._task_info(x) for x in tasks],
            timeout_in_ms=timeout_in_ms,
            interval_in_ms=interval_in_ms,
            raise_for_status=raise_for_status,
        )
