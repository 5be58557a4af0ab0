from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Sequence
from typing import TYPE_CHECKING

from httpx import AsyncClient as HttpxAsyncClient
from httpx import Client as HttpxClient

from meilisearch_settings._http_requests import AsyncHttpRequests, HttpRequests
from meilisearch_settings._utils import get_async_client, get_client
from meilisearch_settings.errors import (
    MeilisearchTaskFailedError,
    MeilisearchTaskValidationError,
    MeilisearchTimeoutError,
    is_invalid_request,
)
from meilisearch_settings.models.task import TaskInfo, TaskResult

if TYPE_CHECKING:
    from meilisearch_settings._client import AsyncClient, Client  # pragma: no cover

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_IN_MS = 5000
DEFAULT_INTERVAL_IN_MS = 50


async def async_get_task(client: HttpxAsyncClient | AsyncClient, task: TaskInfo) -> TaskResult:
    """Get the current status of a task.

    Args:

        client: An httpx AsyncClient or meilisearch_settings AsyncClient instance.
        task: The handle returned when the task was created.

    Returns:

        The status of the task.

    Raises:

        MeilisearchCommunicationError: If there was an error communicating with the server.
        MeilisearchApiError: If the Meilisearch API returned an error.
    """
    http_requests = AsyncHttpRequests(get_async_client(client))
    response = await http_requests.get(_task_url(task))

    return TaskResult(**{"indexUid": task.index_uid, **response.json()})


async def async_get_tasks(
    client: HttpxAsyncClient | AsyncClient, index_uid: str
) -> list[TaskResult]:
    """Get the status of every task of an index."""
    http_requests = AsyncHttpRequests(get_async_client(client))
    response = await http_requests.get(f"indexes/{index_uid}/updates")

    return [TaskResult(**{"indexUid": index_uid, **x}) for x in _results(response.json())]


async def async_wait_for_task(
    client: HttpxAsyncClient | AsyncClient,
    task: TaskInfo,
    *,
    timeout_in_ms: int | None = DEFAULT_TIMEOUT_IN_MS,
    interval_in_ms: int = DEFAULT_INTERVAL_IN_MS,
    raise_for_status: bool = True,
) -> TaskResult:
    """Wait until Meilisearch processes a task, and get its status.

    Giving up on waiting does not stop the task, Meilisearch keeps processing it.

    Args:

        client: An httpx AsyncClient or meilisearch_settings AsyncClient instance.
        task: The handle returned when the task was created.
        timeout_in_ms: Amount of time in milliseconds to wait before raising a
            MeilisearchTimeoutError. `None` can also be passed to wait indefinitely. Be aware that
            if the `None` option is used the wait time could be very long. Defaults to 5000.
        interval_in_ms: Time interval in miliseconds to sleep between requests. Defaults to 50.
        raise_for_status: When set to `True` a MeilisearchTaskFailedError will be raised if the
            task ends in the failed status. When `False` the failed status is returned instead.
            Defaults to True.

    Returns:

        Details of the processed task status.

    Raises:

        MeilisearchCommunicationError: If there was an error communicating with the server.
        MeilisearchApiError: If the Meilisearch API returned an error.
        MeilisearchTimeoutError: If the task did not finish in time.
        MeilisearchTaskFailedError: If `raise_for_status` is `True` and the task failed.
            MeilisearchTaskValidationError is raised when it failed because of invalid data.

    Examples:

        >>> from meilisearch_settings import AsyncClient
        >>> from meilisearch_settings import async_wait_for_task
        >>>
        >>> async with AsyncClient("http://localhost.com", "masterKey") as client:
        >>>     index = client.index("movies")
        >>>     task = await index.stop_words.update(["the", "a"])
        >>>     await async_wait_for_task(client, task)
    """
    http_requests = AsyncHttpRequests(get_async_client(client))
    url = _task_url(task)
    start_time = time.monotonic()

    while True:
        response = await http_requests.get(url)
        status = TaskResult(**{"indexUid": task.index_uid, **response.json()})
        logger.debug(
            "Task %s of index %s is %s", task.task_uid, task.index_uid, status.status.value
        )
        if status.status.is_terminal:
            return _check_status(status, raise_for_status)
        if _timed_out(start_time, timeout_in_ms):
            _raise_timeout(task, timeout_in_ms)
        await asyncio.sleep(interval_in_ms / 1000)


async def async_wait_for_tasks(
    client: HttpxAsyncClient | AsyncClient,
    tasks: Sequence[TaskInfo],
    *,
    timeout_in_ms: int | None = DEFAULT_TIMEOUT_IN_MS,
    interval_in_ms: int = DEFAULT_INTERVAL_IN_MS,
    raise_for_status: bool = True,
) -> list[TaskResult]:
    """Wait for several tasks at once.

    The tasks are polled concurrently so the total wait is bounded by the slowest task rather
    than the sum of all of them. The results are in the same order as `tasks`.

    As soon as one of the waits raises, the others are cancelled before the error is passed on
    so nothing keeps polling after this returns.
    """
    pollers = [
        asyncio.ensure_future(
            async_wait_for_task(
                client,
                task,
                timeout_in_ms=timeout_in_ms,
                interval_in_ms=interval_in_ms,
                raise_for_status=raise_for_status,
            )
        )
        for task in tasks
    ]
    try:
        return list(await asyncio.gather(*pollers))
    except BaseException:
        for poller in pollers:
            poller.cancel()
        await asyncio.gather(*pollers, return_exceptions=True)
        raise


def get_task(client: HttpxClient | Client, task: TaskInfo) -> TaskResult:
    http_requests = HttpRequests(get_client(client))
    response = http_requests.get(_task_url(task))

    return TaskResult(**{"indexUid": task.index_uid, **response.json()})


def get_tasks(client: HttpxClient | Client, index_uid: str) -> list[TaskResult]:
    http_requests = HttpRequests(get_client(client))
    response = http_requests.get(f"indexes/{index_uid}/updates")

    return [TaskResult(**{"indexUid": index_uid, **x}) for x in _results(response.json())]


def wait_for_task(
    client: HttpxClient | Client,
    task: TaskInfo,
    *,
    timeout_in_ms: int | None = DEFAULT_TIMEOUT_IN_MS,
    interval_in_ms: int = DEFAULT_INTERVAL_IN_MS,
    raise_for_status: bool = True,
) -> TaskResult:
    http_requests = HttpRequests(get_client(client))
    url = _task_url(task)
    start_time = time.monotonic()

    while True:
        response = http_requests.get(url)
        status = TaskResult(**{"indexUid": task.index_uid, **response.json()})
        logger.debug(
            "Task %s of index %s is %s", task.task_uid, task.index_uid, status.status.value
        )
        if status.status.is_terminal:
            return _check_status(status, raise_for_status)
        if _timed_out(start_time, timeout_in_ms):
            _raise_timeout(task, timeout_in_ms)
        time.sleep(interval_in_ms / 1000)


def wait_for_tasks(
    client: HttpxClient | Client,
    tasks: Sequence[TaskInfo],
    *,
    timeout_in_ms: int | None = DEFAULT_TIMEOUT_IN_MS,
    interval_in_ms: int = DEFAULT_INTERVAL_IN_MS,
    raise_for_status: bool = True,
) -> list[TaskResult]:
    return [
        wait_for_task(
            client,
            task,
            timeout_in_ms=timeout_in_ms,
            interval_in_ms=interval_in_ms,
            raise_for_status=raise_for_status,
        )
        for task in tasks
    ]


def _task_url(task: TaskInfo) -> str:
    return f"indexes/{task.index_uid}/updates/{task.task_uid}"


def _results(response_json: list | dict) -> list:
    if isinstance(response_json, dict):
        return response_json.get("results", [])

    return response_json


def _timed_out(start_time: float, timeout_in_ms: int | None) -> bool:
    if timeout_in_ms is None:
        return False

    return (time.monotonic() - start_time) * 1000 >= timeout_in_ms


def _raise_timeout(task: TaskInfo, timeout_in_ms: int | None) -> None:
    logger.warning(
        "Gave up waiting on task %s of index %s after %sms",
        task.task_uid,
        task.index_uid,
        timeout_in_ms,
    )
    raise MeilisearchTimeoutError(
        f"timeout of {timeout_in_ms}ms has exceeded on process {task.task_uid} when waiting for pending update to resolve."
    )


def _check_status(status: TaskResult, raise_for_status: bool) -> TaskResult:
    if not raise_for_status or not status.is_failed:
        return status

    message = f"Task {status.task_uid} of index {status.index_uid} failed"
    if status.error is not None and is_invalid_request(status.error.code, status.error.error_type):
        raise MeilisearchTaskValidationError(message, status)

    raise MeilisearchTaskFailedError(message, status)
