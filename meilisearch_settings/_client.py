from __future__ import annotations

import logging
from collections.abc import Sequence
from ssl import SSLContext
from typing import TYPE_CHECKING

from httpx import AsyncBaseTransport, BaseTransport
from httpx import AsyncClient as HttpxAsyncClient
from httpx import Client as HttpxClient

from meilisearch_settings import _task
from meilisearch_settings._http_requests import AsyncHttpRequests, HttpRequests
from meilisearch_settings._utils import validate_index_uid
from meilisearch_settings.errors import MeilisearchConflictError, MeilisearchNotFoundError
from meilisearch_settings.index import AsyncIndex, Index
from meilisearch_settings.models.index import IndexInfo
from meilisearch_settings.models.task import TaskInfo, TaskResult
from meilisearch_settings.types import JsonDict

if TYPE_CHECKING:  # pragma: no cover
    import sys
    from types import TracebackType

    if sys.version_info >= (3, 11):
        from typing import Self
    else:
        from typing_extensions import Self

logger = logging.getLogger(__name__)


class BaseClient:
    def __init__(
        self,
        api_key: str | None = None,
        custom_headers: dict[str, str] | None = None,
    ) -> None:
        self._headers: dict[str, str] | None = None
        if api_key:
            self._headers = {"Authorization": f"Bearer {api_key}"}

        if custom_headers:
            if self._headers:
                self._headers.update(custom_headers)
            else:
                self._headers = custom_headers


class AsyncClient(BaseClient):
    """Async client to connect to the Meilisearch API."""

    def __init__(
        self,
        url: str,
        api_key: str | None = None,
        *,
        timeout: int | None = None,
        verify: bool | SSLContext = True,
        custom_headers: dict[str, str] | None = None,
        transport: AsyncBaseTransport | None = None,
    ) -> None:
        """Class initializer.

        Args:
            url: The url to the Meilisearch API (ex: http://localhost:7700)
            api_key: The optional API key for Meilisearch. Defaults to None.
            timeout: The amount of time in seconds that the client will wait for a response before
                timing out. Defaults to None.
            verify: SSL certificates (a.k.a CA bundle) used to
                verify the identity of requested hosts. Either `True` (default CA bundle),
                a path to an SSL certificate file, or `False` (disable verification)
            custom_headers: Custom headers to add when sending data to Meilisearch. Defaults to
                None.
            transport: An httpx transport to send the requests through instead of the network.
                Defaults to None.
        """
        super().__init__(api_key, custom_headers)

        self.http_client = HttpxAsyncClient(
            base_url=url,
            timeout=timeout,
            headers=self._headers,
            verify=verify,
            transport=transport,
        )
        self._http_requests = AsyncHttpRequests(self.http_client)

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        et: type[BaseException] | None,
        ev: type[BaseException] | None,
        traceback: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Closes the client.

        This only needs to be used if the client was not created with a context manager.
        """
        await self.http_client.aclose()

    async def create_index(self, uid: str, primary_key: str | None = None) -> AsyncIndex:
        """Creates a new index.

        Args:
            uid: The index's unique identifier.
            primary_key: The primary key of the documents. Defaults to None.

        Returns:
            An instance of AsyncIndex containing the information of the newly created index.

        Raises:
            InvalidIndexUidError: If the uid contains characters Meilisearch does not allow. No
                request is sent in this case.
            MeilisearchConflictError: If an index with this uid already exists.
            MeilisearchCommunicationError: If there was an error communicating with the server.
            MeilisearchApiError: If the Meilisearch API returned an error.

        Examples
            >>> from meilisearch_settings import AsyncClient
            >>> async with AsyncClient("http://localhost.com", "masterKey") as client:
            >>>     index = await client.create_index("movies")
        """
        return await AsyncIndex.create(self.http_client, uid, primary_key)

    async def delete_index(self, uid: str) -> None:
        """Deletes an index.

        Args:
            uid: The index's unique identifier.

        Raises:
            MeilisearchNotFoundError: If the index does not exist.
            MeilisearchCommunicationError: If there was an error communicating with the server.
            MeilisearchApiError: If the Meilisearch API returned an error.

        Examples
            >>> from meilisearch_settings import AsyncClient
            >>> async with AsyncClient("http://localhost.com", "masterKey") as client:
            >>>     await client.delete_index("movies")
        """
        await self.index(uid).delete()

    async def delete_index_if_exists(self, uid: str) -> bool:
        """Deletes an index if it already exists.

        Args:
            uid: The index's unique identifier.

        Returns:
            True if an index was deleted for False if not.

        Raises:
            MeilisearchCommunicationError: If there was an error communicating with the server.
            MeilisearchApiError: If the Meilisearch API returned an error.

        Examples:
            >>> from meilisearch_settings import AsyncClient
            >>> async with AsyncClient("http://localhost.com", "masterKey") as client:
            >>>     await client.delete_index_if_exists("movies")
        """
        try:
            await self.delete_index(uid)
        except MeilisearchNotFoundError:
            return False

        return True

    async def get_indexes(self) -> list[AsyncIndex]:
        """Get all indexes.

        Returns:
            A list of all indexes.

        Raises:
            MeilisearchCommunicationError: If there was an error communicating with the server.
            MeilisearchApiError: If the Meilisearch API returned an error.

        Examples:
            >>> from meilisearch_settings import AsyncClient
            >>> async with AsyncClient("http://localhost.com", "masterKey") as client:
            >>>     indexes = await client.get_indexes()
        """
        return [
            AsyncIndex(
                http_client=self.http_client,
                uid=x.uid,
                primary_key=x.primary_key,
                created_at=x.created_at,
                updated_at=x.updated_at,
            )
            for x in await self.get_raw_indexes()
        ]

    async def get_raw_indexes(self) -> list[IndexInfo]:
        """Gets all the indexes.

        Returns:
            A list of the Index information rather than an AsyncIndex instances.

        Raises:
            MeilisearchCommunicationError: If there was an error communicating with the server.
            MeilisearchApiError: If the Meilisearch API returned an error.
        """
        response = await self._http_requests.get("indexes")

        return [IndexInfo(**x) for x in _index_results(response.json())]

    async def get_index(self, uid: str) -> AsyncIndex:
        """Gets a single index based on the uid of the index.

        Args:
            uid: The index's unique identifier.

        Returns:
            An AsyncIndex instance containing the information of the fetched index.

        Raises:
            InvalidIndexUidError: If the uid contains characters Meilisearch does not allow. No
                request is sent in this case.
            MeilisearchNotFoundError: If the index does not exist.
            MeilisearchCommunicationError: If there was an error communicating with the server.
            MeilisearchApiError: If the Meilisearch API returned an error.

        Examples:
            >>> from meilisearch_settings import AsyncClient
            >>> async with AsyncClient("http://localhost.com", "masterKey") as client:
            >>>     index = await client.get_index("movies")
        """
        return await self.index(uid).fetch_info()

    def index(self, uid: str) -> AsyncIndex:
        """Create a local reference to an index identified by UID, without making an HTTP call.

        Because no network call is made this method is not awaitable, and the primary key of the
        returned index is `None` until it is fetched.

        Args:
            uid: The index's unique identifier.

        Returns:
            An AsyncIndex instance.

        Raises:
            InvalidIndexUidError: If the uid contains characters Meilisearch does not allow.

        Examples:
            >>> from meilisearch_settings import AsyncClient
            >>> async with AsyncClient("http://localhost.com", "masterKey") as client:
            >>>     index = client.index("movies")
        """
        validate_index_uid(uid)

        return AsyncIndex(self.http_client, uid=uid)

    async def get_or_create_index(self, uid: str, primary_key: str | None = None) -> AsyncIndex:
        """Get an index, or create it if it doesn't exist.

        If another client creates the index between the lookup and the creation, the index it
        created is returned.

        Args:
            uid: The index's unique identifier.
            primary_key: The primary key of the documents. Defaults to None.

        Returns:
            An instance of AsyncIndex containing the information of the retrieved or newly created index.

        Raises:
            InvalidIndexUidError: If the uid contains characters Meilisearch does not allow.
            MeilisearchCommunicationError: If there was an error communicating with the server.
            MeilisearchApiError: If the Meilisearch API returned an error.

        Examples
            >>> from meilisearch_settings import AsyncClient
            >>> async with AsyncClient("http://localhost.com", "masterKey") as client:
            >>>     index = await client.get_or_create_index("movies")
        """
        try:
            return await self.get_index(uid)
        except MeilisearchNotFoundError:
            pass

        try:
            return await self.create_index(uid, primary_key)
        except MeilisearchConflictError:
            logger.debug("Index %s was created concurrently, fetching it", uid)
            return await self.get_index(uid)

    async def wait_for_task(
        self,
        task: TaskInfo,
        *,
        timeout_in_ms: int | None = _task.DEFAULT_TIMEOUT_IN_MS,
        interval_in_ms: int = _task.DEFAULT_INTERVAL_IN_MS,
        raise_for_status: bool = True,
    ) -> TaskResult:
        """Wait until Meilisearch processes a task, and get its status.

        Args:
            task: The handle returned when the task was created.
            timeout_in_ms: Amount of time in milliseconds to wait before raising a
                MeilisearchTimeoutError. `None` can also be passed to wait indefinitely. Be aware that
                if the `None` option is used the wait time could be very long. Defaults to 5000.
            interval_in_ms: Time interval in miliseconds to sleep between requests. Defaults to 50.
            raise_for_status: When set to `True` a MeilisearchTaskFailedError will be raised if the
                task ends in the failed status. Defaults to True.

        Returns:
            Details of the processed task status.

        Raises:
            MeilisearchCommunicationError: If there was an error communicating with the server.
            MeilisearchApiError: If the Meilisearch API returned an error.
            MeilisearchTimeoutError: If the task did not finish in time.
            MeilisearchTaskFailedError: If `raise_for_status` is `True` and the task failed.

        Examples
            >>> from meilisearch_settings import AsyncClient
            >>> async with AsyncClient("http://localhost.com", "masterKey") as client:
            >>>     task = await client.index("movies").reset_settings()
            >>>     await client.wait_for_task(task)
        """
        return await _task.async_wait_for_task(
            self.http_client,
            task,
            timeout_in_ms=timeout_in_ms,
            interval_in_ms=interval_in_ms,
            raise_for_status=raise_for_status,
        )

    async def wait_for_tasks(
        self,
        tasks: Sequence[TaskInfo],
        *,
        timeout_in_ms: int | None = _task.DEFAULT_TIMEOUT_IN_MS,
        interval_in_ms: int = _task.DEFAULT_INTERVAL_IN_MS,
        raise_for_status: bool = True,
    ) -> list[TaskResult]:
        return await _task.async_wait_for_tasks(
            self.http_client,
            tasks,
            timeout_in_ms=timeout_in_ms,
            interval_in_ms=interval_in_ms,
            raise_for_status=raise_for_status,
        )

    async def get_task(self, task: TaskInfo) -> TaskResult:
        return await _task.async_get_task(self.http_client, task)


class Client(BaseClient):
    """client to connect to the Meilisearch API."""

    def __init__(
        self,
        url: str,
        api_key: str | None = None,
        *,
        timeout: int | None = None,
        verify: bool | SSLContext = True,
        custom_headers: dict[str, str] | None = None,
        transport: BaseTransport | None = None,
    ) -> None:
        """Class initializer.

        Args:
            url: The url to the Meilisearch API (ex: http://localhost:7700)
            api_key: The optional API key for Meilisearch. Defaults to None.
            timeout: The amount of time in seconds that the client will wait for a response before
                timing out. Defaults to None.
            verify: SSL certificates (a.k.a CA bundle) used to
                verify the identity of requested hosts. Either `True` (default CA bundle),
                a path to an SSL certificate file, or `False` (disable verification)
            custom_headers: Custom headers to add when sending data to Meilisearch. Defaults to
                None.
            transport: An httpx transport to send the requests through instead of the network.
                Defaults to None.
        """
        super().__init__(api_key, custom_headers)

        self.http_client = HttpxClient(
            base_url=url,
            timeout=timeout,
            headers=self._headers,
            verify=verify,
            transport=transport,
        )
        self._http_requests = HttpRequests(self.http_client)

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        et: type[BaseException] | None,
        ev: type[BaseException] | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        self.http_client.close()

    def create_index(self, uid: str, primary_key: str | None = None) -> Index:
        """Creates a new index.

        Args:
            uid: The index's unique identifier.
            primary_key: The primary key of the documents. Defaults to None.

        Returns:
            An instance of Index containing the information of the newly created index.

        Raises:
            InvalidIndexUidError: If the uid contains characters Meilisearch does not allow. No
                request is sent in this case.
            MeilisearchConflictError: If an index with this uid already exists.
            MeilisearchCommunicationError: If there was an error communicating with the server.
            MeilisearchApiError: If the Meilisearch API returned an error.

        Examples
            >>> from meilisearch_settings import Client
            >>> client = Client("http://localhost.com", "masterKey")
            >>> index = client.create_index("movies")
        """
        return Index.create(self.http_client, uid, primary_key)

    def delete_index(self, uid: str) -> None:
        """Deletes an index.

        Raises:
            MeilisearchNotFoundError: If the index does not exist.
        """
        self.index(uid).delete()

    def delete_index_if_exists(self, uid: str) -> bool:
        try:
            self.delete_index(uid)
        except MeilisearchNotFoundError:
            return False

        return True

    def get_indexes(self) -> list[Index]:
        return [
            Index(
                http_client=self.http_client,
                uid=x.uid,
                primary_key=x.primary_key,
                created_at=x.created_at,
                updated_at=x.updated_at,
            )
            for x in self.get_raw_indexes()
        ]

    def get_raw_indexes(self) -> list[IndexInfo]:
        response = self._http_requests.get("indexes")

        return [IndexInfo(**x) for x in _index_results(response.json())]

    def get_index(self, uid: str) -> Index:
        """Gets a single index based on the uid of the index.

        Raises:
            InvalidIndexUidError: If the uid contains characters Meilisearch does not allow.
            MeilisearchNotFoundError: If the index does not exist.
        """
        return self.index(uid).fetch_info()

    def index(self, uid: str) -> Index:
        """Create a local reference to an index identified by UID, without making an HTTP call."""
        validate_index_uid(uid)

        return Index(self.http_client, uid=uid)

    def get_or_create_index(self, uid: str, primary_key: str | None = None) -> Index:
        """Get an index, or create it if it doesn't exist.

        If another client creates the index between the lookup and the creation, the index it
        created is returned.
        """
        try:
            return self.get_index(uid)
        except MeilisearchNotFoundError:
            pass

        try:
            return self.create_index(uid, primary_key)
        except MeilisearchConflictError:
            logger.debug("Index %s was created concurrently, fetching it", uid)
            return self.get_index(uid)

    def wait_for_task(
        self,
        task: TaskInfo,
        *,
        timeout_in_ms: int | None = _task.DEFAULT_TIMEOUT_IN_MS,
        interval_in_ms: int = _task.DEFAULT_INTERVAL_IN_MS,
        raise_for_status: bool = True,
    ) -> TaskResult:
        return _task.wait_for_task(
            self.http_client,
            task,
            timeout_in_ms=timeout_in_ms,
            interval_in_ms=interval_in_ms,
            raise_for_status=raise_for_status,
        )

    def wait_for_tasks(
        self,
        tasks: Sequence[TaskInfo],
        *,
        timeout_in_ms: int | None = _task.DEFAULT_TIMEOUT_IN_MS,
        interval_in_ms: int = _task.DEFAULT_INTERVAL_IN_MS,
        raise_for_status: bool = True,
    ) -> list[TaskResult]:
        return _task.wait_for_tasks(
            self.http_client,
            tasks,
            timeout_in_ms=timeout_in_ms,
            interval_in_ms=interval_in_ms,
            raise_for_status=raise_for_status,
        )

    def get_task(self, task: TaskInfo) -> TaskResult:
        return _task.get_task(self.http_client, task)


def _index_results(response_json: list[JsonDict] | JsonDict) -> list[JsonDict]:
    # Older Meilisearch versions return a bare list, newer ones wrap it in "results".
    if isinstance(response_json, dict):
        return response_json.get("results", [])

    return response_json
