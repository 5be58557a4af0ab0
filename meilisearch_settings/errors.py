from __future__ import annotations

from typing import TYPE_CHECKING, Any

from httpx import Response

if TYPE_CHECKING:  # pragma: no cover
    from meilisearch_settings.models.task import TaskResult

CONFLICT_CODES = frozenset(
    ("index_already_exists", "index_primary_key_already_exists", "primary_key_already_present")
)
NOT_FOUND_CODES = frozenset(("index_not_found", "not_found", "update_not_found", "task_not_found"))
INVALID_REQUEST_TYPES = frozenset(("invalid_request", "invalid_request_error"))
INVALID_REQUEST_CODES = frozenset(
    (
        "bad_request",
        "invalid_index_uid",
        "invalid_request",
        "invalid_ranking_rule",
        "invalid_state",
        "malformed_payload",
        "missing_primary_key",
    )
)


class MeilisearchError(Exception):
    """Generic class for Meilisearch error handling."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"MeilisearchError. Error message: {self.message}."


class MeilisearchValidationError(MeilisearchError):
    """Input that Meilisearch rejects.

    Raised either immediately, when the request itself is refused, or after polling, when the
    task created by the request ends in the failed status.
    """

    code = "invalid_request"

    def __str__(self) -> str:
        return f"MeilisearchValidationError, {self.message}"


class InvalidIndexUidError(MeilisearchValidationError):
    """Error for index uids that contain characters Meilisearch does not allow."""

    code = "invalid_index_uid"

    def __str__(self) -> str:
        return f"InvalidIndexUidError, {self.message}"


class MeilisearchApiError(MeilisearchError):
    """Error sent by Meilisearch API."""

    def __init__(
        self, error: str, response: Response, body: dict[str, Any] | None = None
    ) -> None:
        self.status_code = response.status_code
        self.code = ""
        self.message = ""
        self.link = ""
        self.error_type = ""
        if body is None:
            body = error_body(response)
        if body:
            self.message = f"Error message: {body.get('message') or ''}"
            self.code = f"{body.get('code') or body.get('errorCode') or ''}"
            self.error_type = f"{body.get('type') or body.get('errorType') or ''}"
            self.link = f"Error documentation: {body.get('link') or body.get('errorLink') or ''}"
        else:
            self.message = error
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"MeilisearchApiError.{self.code} {self.message} {self.error_type} {self.link}"


class MeilisearchConflictError(MeilisearchApiError):
    """The resource already exists, for example an index with the same uid."""

    def __str__(self) -> str:
        return f"MeilisearchConflictError.{self.code} {self.message} {self.link}"


class MeilisearchNotFoundError(MeilisearchApiError):
    """The referenced index or task does not exist."""

    def __str__(self) -> str:
        return f"MeilisearchNotFoundError.{self.code} {self.message} {self.link}"


class MeilisearchInvalidRequestError(MeilisearchApiError, MeilisearchValidationError):
    """The request was refused by Meilisearch before any task was created."""

    def __str__(self) -> str:
        return f"MeilisearchInvalidRequestError.{self.code} {self.message} {self.link}"


class MeilisearchCommunicationError(MeilisearchError):
    """Error when connecting to Meilisearch."""

    def __str__(self) -> str:
        return f"MeilisearchCommunicationError, {self.message}"


class MeilisearchTaskFailedError(MeilisearchError):
    """Error when a task is in the failed status."""

    def __init__(self, message: str, task: TaskResult | None = None) -> None:
        self.task = task
        self.code = ""
        self.error_type = ""
        self.link = ""
        if task is not None and task.error is not None:
            self.code = task.error.code or ""
            self.error_type = task.error.error_type or ""
            self.link = task.error.link or ""
            message = f"{message}: {task.error.message}"
        super().__init__(message)

    def __str__(self) -> str:
        return f"MeilisearchTaskFailedError.{self.code} {self.message}"


class MeilisearchTaskValidationError(MeilisearchTaskFailedError, MeilisearchValidationError):
    """A task failed because the data it was given is invalid."""

    def __str__(self) -> str:
        return f"MeilisearchTaskValidationError.{self.code} {self.message}"


class MeilisearchTimeoutError(MeilisearchError):
    """Error when Meilisearch operation takes longer than expected."""

    def __str__(self) -> str:
        return f"MeilisearchTimeoutError, {self.message}"


def is_invalid_request(code: str | None, error_type: str | None) -> bool:
    return code in INVALID_REQUEST_CODES or error_type in INVALID_REQUEST_TYPES


def error_body(response: Response) -> dict[str, Any]:
    """The JSON object of an error response, empty when the body is missing or not an object."""
    if not response.content:
        return {}

    body = response.json()

    return body if isinstance(body, dict) else {}


def api_error_from_response(error: str, response: Response) -> MeilisearchApiError:
    """Pick the most specific MeilisearchApiError for a JSON error response."""
    body = error_body(response)
    code = body.get("code") or body.get("errorCode")
    error_type = body.get("type") or body.get("errorType")

    error_class = MeilisearchApiError
    if code in CONFLICT_CODES:
        error_class = MeilisearchConflictError
    elif code in NOT_FOUND_CODES or response.status_code == 404:
        error_class = MeilisearchNotFoundError
    elif is_invalid_request(code, error_type):
        error_class = MeilisearchInvalidRequestError

    return error_class(error, response, body)
