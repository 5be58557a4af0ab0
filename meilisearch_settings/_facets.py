from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable, Generic, TypeVar

from meilisearch_settings._http_requests import JSON_NULL, AsyncHttpRequests, HttpRequests
from meilisearch_settings.errors import MeilisearchValidationError
from meilisearch_settings.models.settings import DEFAULT_RANKING_RULES, WILDCARD_ATTRIBUTES
from meilisearch_settings.models.task import TaskInfo
from meilisearch_settings.synonyms import normalize_synonyms

T = TypeVar("T")


class Facet(Generic[T]):
    """One named setting of an index, and how to move its value to and from Meilisearch."""

    def __init__(
        self,
        name: str,
        default: Callable[[], T],
        *,
        to_wire: Callable[[Any], Any] | None = None,
        from_wire: Callable[[Any], T] | None = None,
    ) -> None:
        self.name = name
        self.path = name.replace("_", "-")
        self.default = default
        self._to_wire = to_wire
        self._from_wire = from_wire

    def __repr__(self) -> str:
        return f"Facet(name={self.name!r}, path={self.path!r})"

    def encode(self, value: Any) -> Any:
        # No client side validation, Meilisearch reports bad values through the task.
        if value is None:
            return None
        if self._to_wire:
            return self._to_wire(value)

        return value

    def request_body(self, value: Any) -> Any:
        """Body for a single setting update, where `None` has to be sent as a JSON null."""
        if value is None:
            return JSON_NULL

        return self.encode(value)

    def decode(self, value: Any) -> T:
        if value is None:
            return self.default()
        if self._from_wire:
            return self._from_wire(value)

        return value


def _wrap_string(value: Any) -> Any:
    if isinstance(value, str):
        return [value]

    return value


def _synonyms_to_wire(value: Any) -> Any:
    if isinstance(value, Mapping):
        return normalize_synonyms(value)

    return value


RANKING_RULES: Facet[list[str]] = Facet("ranking_rules", lambda: list(DEFAULT_RANKING_RULES))
DISTINCT_ATTRIBUTE: Facet[str | None] = Facet("distinct_attribute", lambda: None)
SEARCHABLE_ATTRIBUTES: Facet[list[str]] = Facet(
    "searchable_attributes", lambda: list(WILDCARD_ATTRIBUTES)
)
DISPLAYED_ATTRIBUTES: Facet[list[str]] = Facet(
    "displayed_attributes", lambda: list(WILDCARD_ATTRIBUTES)
)
STOP_WORDS: Facet[list[str]] = Facet("stop_words", list, to_wire=_wrap_string)
SYNONYMS: Facet[dict[str, list[str]]] = Facet(
    "synonyms", dict, to_wire=_synonyms_to_wire, from_wire=normalize_synonyms
)
FILTERABLE_ATTRIBUTES: Facet[list[str]] = Facet("filterable_attributes", list)
SORTABLE_ATTRIBUTES: Facet[list[str]] = Facet("sortable_attributes", list)

FACETS: dict[str, Facet[Any]] = {
    facet.name: facet
    for facet in (
        RANKING_RULES,
        DISTINCT_ATTRIBUTE,
        SEARCHABLE_ATTRIBUTES,
        DISPLAYED_ATTRIBUTES,
        STOP_WORDS,
        SYNONYMS,
        FILTERABLE_ATTRIBUTES,
        SORTABLE_ATTRIBUTES,
    )
}


def get_facet(name: str) -> Facet[Any]:
    try:
        return FACETS[name]
    except KeyError:
        raise MeilisearchValidationError(
            f"Unknown setting {name!r}. Valid settings are: {', '.join(sorted(FACETS))}"
        ) from None


class AsyncSettingAccessor(Generic[T]):
    """Read, update, and reset a single setting of an index.

    Updates and resets only enqueue a task. The returned TaskInfo needs to be waited on before the
    new value can be relied on.
    """

    def __init__(
        self, http_requests: AsyncHttpRequests, index_uid: str, settings_url: str, facet: Facet[T]
    ) -> None:
        self.facet = facet
        self.index_uid = index_uid
        self.url = f"{settings_url}/{facet.path}"
        self._http_requests = http_requests

    def __repr__(self) -> str:
        return f"{type(self).__name__}(index_uid={self.index_uid!r}, facet={self.facet.name!r})"

    async def get(self) -> T:
        """Get the current value, or the default if the setting was never changed."""
        response = await self._http_requests.get(self.url)

        return self.facet.decode(self._http_requests.parse_json(response))

    async def update(self, value: T | None) -> TaskInfo:
        """Replace the value. Passing `None` resets the setting to its default."""
        response = await self._http_requests.put(self.url, self.facet.request_body(value))

        return TaskInfo.from_response(self.index_uid, response.json())

    async def reset(self) -> TaskInfo:
        """Reset the setting to its default value."""
        response = await self._http_requests.delete(self.url)

        return TaskInfo.from_response(self.index_uid, response.json())


class SettingAccessor(Generic[T]):
    """Read, update, and reset a single setting of an index.

    Updates and resets only enqueue a task. The returned TaskInfo needs to be waited on before the
    new value can be relied on.
    """

    def __init__(
        self, http_requests: HttpRequests, index_uid: str, settings_url: str, facet: Facet[T]
    ) -> None:
        self.facet = facet
        self.index_uid = index_uid
        self.url = f"{settings_url}/{facet.path}"
        self._http_requests = http_requests

    def __repr__(self) -> str:
        return f"{type(self).__name__}(index_uid={self.index_uid!r}, facet={self.facet.name!r})"

    def get(self) -> T:
        response = self._http_requests.get(self.url)

        return self.facet.decode(self._http_requests.parse_json(response))

    def update(self, value: T | None) -> TaskInfo:
        response = self._http_requests.put(self.url, self.facet.request_body(value))

        return TaskInfo.from_response(self.index_uid, response.json())

    def reset(self) -> TaskInfo:
        response = self._http_requests.delete(self.url)

        return TaskInfo.from_response(self.index_uid, response.json())
