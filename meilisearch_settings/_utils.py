from __future__ import annotations

import re
from datetime import datetime
from typing import TYPE_CHECKING

from httpx import AsyncClient as HttpxAsyncClient
from httpx import Client as HttpxClient

from meilisearch_settings.errors import InvalidIndexUidError

if TYPE_CHECKING:
    from meilisearch_settings._client import AsyncClient, Client  # pragma: no cover

INDEX_UID_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


def get_async_client(
    client: AsyncClient | HttpxAsyncClient,
) -> HttpxAsyncClient:
    if isinstance(client, HttpxAsyncClient):
        return client

    return client.http_client


def get_client(
    client: Client | HttpxClient,
) -> HttpxClient:
    if isinstance(client, HttpxClient):
        return client

    return client.http_client


def iso_to_date_time(iso_date: datetime | str | None) -> datetime | None:
    """Handle conversion of iso string to datetime.

    The microseconds from Meilisearch are sometimes too long for python to convert so this
    strips off the last digits to shorten it when that happens.
    """
    if not iso_date:
        return None

    if isinstance(iso_date, datetime):
        return iso_date

    try:
        return datetime.strptime(iso_date, "%Y-%m-%dT%H:%M:%S.%fZ")
    except ValueError:
        split = iso_date.split(".")
        if len(split) < 2:
            raise
        reduce = len(split[1]) - 6
        reduced = f"{split[0]}.{split[1][:-reduce]}Z"
        return datetime.strptime(reduced, "%Y-%m-%dT%H:%M:%S.%fZ")


def validate_index_uid(uid: str) -> None:
    """Raise before any request is sent if the uid could never be accepted by Meilisearch."""
    if not isinstance(uid, str) or not INDEX_UID_PATTERN.match(uid):
        raise InvalidIndexUidError(
            f"{uid!r} is not a valid index uid. Only alphanumeric characters, hyphens (-) and "
            "underscores (_) are allowed"
        )
