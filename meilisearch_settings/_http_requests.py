from __future__ import annotations

import json
import logging
from functools import lru_cache
from typing import Any, Callable, Final

from httpx import (
    AsyncClient,
    Client,
    ConnectError,
    ConnectTimeout,
    HTTPError,
    RemoteProtocolError,
    Response,
)

from meilisearch_settings._version import VERSION
from meilisearch_settings.errors import (
    MeilisearchCommunicationError,
    MeilisearchError,
    api_error_from_response,
)

logger = logging.getLogger(__name__)


class _JsonNull:
    def __repr__(self) -> str:
        return "JSON_NULL"


# Sent as a literal `null` body. A body of `None` means no body at all.
JSON_NULL: Final = _JsonNull()


class AsyncHttpRequests:
    def __init__(self, http_client: AsyncClient) -> None:
        self.http_client = http_client

    async def _send_request(
        self,
        http_method: Callable,
        path: str,
        body: Any | None = None,
    ) -> Response:
        logger.debug("Sending %s request to %s", http_method.__name__.upper(), path)
        try:
            if body is None:
                response = await http_method(path)
            else:
                response = await http_method(
                    path, content=encode_body(body), headers=build_headers()
                )

            response.raise_for_status()
            return response

        except (ConnectError, ConnectTimeout, RemoteProtocolError) as err:
            raise MeilisearchCommunicationError(str(err)) from err
        except HTTPError as err:
            if "response" in locals():
                if "application/json" in response.headers.get("content-type", ""):
                    raise api_error_from_response(str(err), response) from err
                else:
                    raise
            else:
                # Fail safe just in case error happens before response is created
                raise MeilisearchError(str(err)) from err  # pragma: no cover

    async def get(self, path: str) -> Response:
        return await self._send_request(self.http_client.get, path)

    async def patch(self, path: str, body: Any | None = None) -> Response:
        return await self._send_request(self.http_client.patch, path, body)

    async def post(self, path: str, body: Any | None = None) -> Response:
        return await self._send_request(self.http_client.post, path, body)

    async def put(self, path: str, body: Any | None = None) -> Response:
        return await self._send_request(self.http_client.put, path, body)

    async def delete(self, path: str) -> Response:
        return await self._send_request(self.http_client.delete, path)

    @staticmethod
    def parse_json(response: Response) -> Any:
        return parse_json(response)


class HttpRequests:
    def __init__(self, http_client: Client) -> None:
        self.http_client = http_client

    def _send_request(
        self,
        http_method: Callable,
        path: str,
        body: Any | None = None,
    ) -> Response:
        logger.debug("Sending %s request to %s", http_method.__name__.upper(), path)
        try:
            if body is None:
                response = http_method(path)
            else:
                response = http_method(path, content=encode_body(body), headers=build_headers())

            response.raise_for_status()
            return response

        except (ConnectError, ConnectTimeout, RemoteProtocolError) as err:
            raise MeilisearchCommunicationError(str(err)) from err
        except HTTPError as err:
            if "response" in locals():
                if "application/json" in response.headers.get("content-type", ""):
                    raise api_error_from_response(str(err), response) from err
                else:
                    raise
            else:
                # Fail safe just in case error happens before response is created
                raise MeilisearchError(str(err)) from err  # pragma: no cover

    def get(self, path: str) -> Response:
        return self._send_request(self.http_client.get, path)

    def patch(self, path: str, body: Any | None = None) -> Response:
        return self._send_request(self.http_client.patch, path, body)

    def post(self, path: str, body: Any | None = None) -> Response:
        return self._send_request(self.http_client.post, path, body)

    def put(self, path: str, body: Any | None = None) -> Response:
        return self._send_request(self.http_client.put, path, body)

    def delete(self, path: str) -> Response:
        return self._send_request(self.http_client.delete, path)

    @staticmethod
    def parse_json(response: Response) -> Any:
        return parse_json(response)


def encode_body(body: Any) -> str:
    return json.dumps(None if body is JSON_NULL else body)


def parse_json(response: Response) -> Any:
    if not response.content:
        return None

    return response.json()


def build_headers() -> dict[str, str]:
    return {"user-agent": user_agent(), "Content-Type": "application/json"}


@lru_cache(maxsize=1)
def user_agent() -> str:
    return f"Meilisearch Settings (v{VERSION})"
