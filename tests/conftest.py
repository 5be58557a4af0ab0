from uuid import uuid4

import pytest

from meilisearch_settings import AsyncClient, Client

from fake_meilisearch import FakeMeilisearch

MASTER_KEY = "masterKey"
BASE_URL = "http://127.0.0.1:7700"


@pytest.fixture
def fake_meilisearch():
    return FakeMeilisearch()


@pytest.fixture
async def async_client(fake_meilisearch):
    async with AsyncClient(
        BASE_URL, MASTER_KEY, transport=fake_meilisearch.transport
    ) as client:
        yield client


@pytest.fixture
def client(fake_meilisearch):
    with Client(BASE_URL, MASTER_KEY, transport=fake_meilisearch.transport) as client:
        yield client


@pytest.fixture
def index_uid():
    return f"index-{uuid4().hex[:8]}"


@pytest.fixture
async def async_empty_index(async_client):
    async def index_maker(primary_key=None):
        return await async_client.create_index(uid=str(uuid4()), primary_key=primary_key)

    return index_maker


@pytest.fixture
def empty_index(client):
    def index_maker(primary_key=None):
        return client.create_index(uid=str(uuid4()), primary_key=primary_key)

    return index_maker


@pytest.fixture
def new_settings():
    return {
        "ranking_rules": ["typo", "words", "exactness", "desc(release_date)"],
        "distinct_attribute": "title",
        "searchable_attributes": ["title", "overview"],
        "displayed_attributes": ["title", "overview", "genre"],
        "stop_words": ["the", "a"],
        "synonyms": {"wolverine": ["logan", "xmen"], "logan": ["wolverine"]},
        "filterable_attributes": ["genre", "release_date"],
        "sortable_attributes": ["title", "release_date"],
    }
