import pytest

from meilisearch_settings import AsyncIndex, MeilisearchSettings, TaskInfo, TaskStatus
from meilisearch_settings.errors import (
    InvalidIndexUidError,
    MeilisearchConflictError,
    MeilisearchNotFoundError,
    MeilisearchTaskValidationError,
    MeilisearchValidationError,
)
from meilisearch_settings.models.settings import DEFAULT_RANKING_RULES
from meilisearch_settings.synonyms import synonyms_equal

DEFAULTS = {
    "ranking_rules": list(DEFAULT_RANKING_RULES),
    "distinct_attribute": None,
    "searchable_attributes": ["*"],
    "displayed_attributes": ["*"],
    "stop_words": [],
    "synonyms": {},
    "filterable_attributes": [],
    "sortable_attributes": [],
}


def test_str(async_client):
    index = async_client.index("movies")

    assert "uid=movies" in str(index)
    assert "AsyncIndex" in repr(index)


def test_local_index_reference_has_no_primary_key(async_client):
    index = async_client.index("movies")

    assert index.uid == "movies"
    assert index.primary_key is None
    assert index.created_at is None


async def test_create(async_client, fake_meilisearch):
    index = await AsyncIndex.create(async_client.http_client, "books", "id")

    assert index.uid == "books"
    assert index.primary_key == "id"
    assert index.created_at is not None
    assert fake_meilisearch.indexes["books"]["primaryKey"] == "id"


async def test_create_without_primary_key(async_client):
    index = await AsyncIndex.create(async_client.http_client, "books")

    assert index.primary_key is None


async def test_create_invalid_uid_sends_no_request(async_client, fake_meilisearch):
    with pytest.raises(InvalidIndexUidError) as e:
        await AsyncIndex.create(async_client.http_client, "two words")

    assert isinstance(e.value, MeilisearchValidationError)
    assert fake_meilisearch.requests == []


async def test_create_conflict(async_client):
    await AsyncIndex.create(async_client.http_client, "books")

    with pytest.raises(MeilisearchConflictError) as e:
        await AsyncIndex.create(async_client.http_client, "books")

    assert e.value.code == "index_already_exists"
    assert e.value.status_code == 400


async def test_fetch_primary_key(async_client, fake_meilisearch):
    fake_meilisearch.add_index("books", "id")
    index = async_client.index("books")

    assert index.primary_key is None
    assert await index.fetch_primary_key() == "id"
    assert index.primary_key == "id"


async def test_get_primary_key_alias(async_client, fake_meilisearch):
    fake_meilisearch.add_index("books", "isbn")
    index = async_client.index("books")

    assert await index.get_primary_key() == "isbn"


async def test_fetch_primary_key_refreshes_cache(async_client, fake_meilisearch):
    fake_meilisearch.add_index("books")
    index = await async_client.get_index("books")
    fake_meilisearch.indexes["books"]["primaryKey"] = "id"

    assert index.primary_key is None
    assert await index.fetch_primary_key() == "id"


async def test_fetch_info(async_client, fake_meilisearch):
    fake_meilisearch.add_index("books", "id")
    index = async_client.index("books")
    result = await index.fetch_info()

    assert result is index
    assert index.primary_key == "id"
    assert index.created_at is not None
    assert index.updated_at is not None


async def test_delete(async_empty_index, fake_meilisearch):
    index = await async_empty_index()
    await index.delete()

    assert index.uid not in fake_meilisearch.indexes


async def test_delete_not_found(async_client):
    with pytest.raises(MeilisearchNotFoundError) as e:
        await async_client.index("missing").delete()

    assert e.value.code == "index_not_found"


@pytest.mark.parametrize("facet, default", DEFAULTS.items())
async def test_get_setting_default(async_empty_index, facet, default):
    index = await async_empty_index()
    response = await getattr(index, facet).get()

    assert response == default


@pytest.mark.parametrize("facet", DEFAULTS)
async def test_update_setting(async_empty_index, new_settings, facet):
    index = await async_empty_index()
    accessor = getattr(index, facet)
    task = await accessor.update(new_settings[facet])

    assert isinstance(task, TaskInfo)
    assert task.index_uid == index.uid

    await index.wait_for_task(task)
    response = await accessor.get()

    assert response == new_settings[facet]


@pytest.mark.parametrize("facet", DEFAULTS)
async def test_reset_setting(async_empty_index, new_settings, facet):
    index = await async_empty_index()
    accessor = getattr(index, facet)
    await index.wait_for_task(await accessor.update(new_settings[facet]))
    await index.wait_for_task(await accessor.reset())
    response = await accessor.get()

    assert response == DEFAULTS[facet]


@pytest.mark.parametrize("facet", DEFAULTS)
async def test_update_setting_none_resets(async_empty_index, new_settings, facet):
    index = await async_empty_index()
    accessor = getattr(index, facet)
    await index.wait_for_task(await accessor.update(new_settings[facet]))
    await index.wait_for_task(await accessor.update(None))
    response = await accessor.get()

    assert response == DEFAULTS[facet]


async def test_update_setting_does_not_wait(async_empty_index, fake_meilisearch):
    index = await async_empty_index()
    await index.stop_words.update(["the"])

    assert await index.stop_words.get() == []
    assert fake_meilisearch.updates[index.uid][0]["status"] == "enqueued"


async def test_update_stop_words_single_string(async_empty_index):
    index = await async_empty_index()
    await index.wait_for_task(await index.stop_words.update("the"))

    assert await index.stop_words.get() == ["the"]


async def test_update_synonyms_normalizes_keys(async_empty_index):
    index = await async_empty_index()
    task = await index.synonyms.update(
        {"Wolverine": ["logan", "weapon x"], b"logan": ["wolverine"]}
    )
    await index.wait_for_task(task)
    response = await index.synonyms.get()

    assert response == {"wolverine": ["logan", "weapon x"], "logan": ["wolverine"]}
    assert synonyms_equal(response, {"wolverine": ["weapon x", "logan"], "logan": ["wolverine"]})


async def test_update_ranking_rules_invalid(async_empty_index):
    index = await async_empty_index()
    task = await index.ranking_rules.update(["typo", "bogus"])

    with pytest.raises(MeilisearchTaskValidationError) as e:
        await index.wait_for_task(task)

    assert e.value.code == "invalid_ranking_rule"
    assert e.value.error_type == "invalid_request_error"
    assert await index.ranking_rules.get() == list(DEFAULT_RANKING_RULES)


async def test_update_stop_words_not_a_list(async_empty_index):
    index = await async_empty_index()
    task = await index.stop_words.update({"the": 1})
    result = await index.wait_for_task(task, raise_for_status=False)

    assert result.status is TaskStatus.FAILED
    assert result.error is not None
    assert result.error.code == "invalid_request"


async def test_get_setting_by_name(async_empty_index):
    index = await async_empty_index()
    await index.wait_for_task(await index.update_setting("stop_words", ["the"]))

    assert await index.get_setting("stop_words") == ["the"]

    await index.wait_for_task(await index.reset_setting("stop_words"))

    assert await index.get_setting("stop_words") == []


async def test_get_setting_unknown_name(async_empty_index, fake_meilisearch):
    index = await async_empty_index()
    request_count = len(fake_meilisearch.requests)

    with pytest.raises(MeilisearchValidationError):
        await index.get_setting("typo_tolerance")

    assert len(fake_meilisearch.requests) == request_count


async def test_get_settings_default(async_empty_index):
    index = await async_empty_index()
    response = await index.get_settings()

    assert response.model_dump() == DEFAULTS


async def test_get_settings_missing_keys(async_client, fake_meilisearch, monkeypatch):
    fake_meilisearch.add_index("books")
    monkeypatch.setattr(
        fake_meilisearch,
        "current_settings",
        lambda uid: {"stopWords": ["the"], "rankingRules": None},
    )
    response = await async_client.index("books").get_settings()

    assert response.stop_words == ["the"]
    assert response.ranking_rules == list(DEFAULT_RANKING_RULES)
    assert response.synonyms == {}


async def test_update_settings(async_empty_index, new_settings):
    index = await async_empty_index()
    task = await index.update_settings(MeilisearchSettings(**new_settings))
    await index.wait_for_task(task)
    response = await index.get_settings()

    assert response.model_dump() == new_settings


async def test_update_settings_single_task(async_empty_index, new_settings, fake_meilisearch):
    index = await async_empty_index()
    await index.update_settings(new_settings)

    assert len(fake_meilisearch.updates[index.uid]) == 1
    assert fake_meilisearch.request_count("PATCH") == 1


async def test_update_settings_partial(async_empty_index, new_settings):
    index = await async_empty_index()
    await index.wait_for_task(await index.update_settings(new_settings))
    task = await index.update_settings(
        MeilisearchSettings(stop_words=["an"], distinct_attribute=None)
    )
    await index.wait_for_task(task)
    response = await index.get_settings()

    assert response.stop_words == ["an"]
    assert response.distinct_attribute is None
    assert response.ranking_rules == new_settings["ranking_rules"]
    assert response.synonyms == new_settings["synonyms"]
    assert response.sortable_attributes == new_settings["sortable_attributes"]


async def test_update_settings_mapping_camel_case(async_empty_index, new_settings):
    index = await async_empty_index()
    await index.wait_for_task(await index.update_settings(new_settings))
    task = await index.update_settings({"stopWords": None, "filterableAttributes": ["year"]})
    await index.wait_for_task(task)
    response = await index.get_settings()

    assert response.stop_words == []
    assert response.filterable_attributes == ["year"]
    assert response.displayed_attributes == new_settings["displayed_attributes"]


async def test_update_settings_matches_individual_updates(async_empty_index, new_settings):
    first = await async_empty_index()
    second = await async_empty_index()
    partial = {"stop_words": ["the"], "sortable_attributes": ["title"], "distinct_attribute": "id"}
    await first.wait_for_task(await first.update_settings(partial))
    await second.wait_for_tasks(
        [await getattr(second, facet).update(value) for facet, value in partial.items()]
    )

    assert await first.get_settings() == await second.get_settings()


async def test_update_settings_unknown_key(async_empty_index, fake_meilisearch):
    index = await async_empty_index()

    with pytest.raises(MeilisearchValidationError):
        await index.update_settings({"typoTolerance": {"enabled": False}})

    assert fake_meilisearch.request_count("PATCH") == 0


async def test_update_settings_invalid_value(async_empty_index, new_settings):
    index = await async_empty_index()
    task = await index.update_settings({**new_settings, "ranking_rules": ["bogus"]})

    with pytest.raises(MeilisearchTaskValidationError):
        await index.wait_for_task(task)

    # Nothing from a failed update is applied.
    assert (await index.get_settings()).model_dump() == DEFAULTS


async def test_reset_settings(async_empty_index, new_settings):
    index = await async_empty_index()
    await index.wait_for_task(await index.update_settings(new_settings))
    await index.wait_for_task(await index.reset_settings())
    response = await index.get_settings()

    assert response.model_dump() == DEFAULTS


async def test_end_to_end_books(async_client):
    index = await async_client.create_index("books", primary_key="id")
    task = await index.stop_words.update(["the"])
    await index.wait_for_task(task)
    response = await index.get_settings()

    assert response.stop_words == ["the"]
    assert response.model_dump() == {**DEFAULTS, "stop_words": ["the"]}


async def test_wait_for_task_by_uid(async_empty_index):
    index = await async_empty_index()
    task = await index.stop_words.update(["the"])
    result = await index.wait_for_task(task.task_uid)

    assert result.status is TaskStatus.PROCESSED


async def test_legacy_aliases(async_empty_index):
    index = await async_empty_index()
    task = await index.stop_words.update(["the"])
    result = await index.wait_for_pending_update(task)
    status = await index.get_update_status(task.task_uid)

    assert result.status is TaskStatus.PROCESSED
    assert status.status is TaskStatus.PROCESSED


async def test_get_tasks(async_empty_index):
    index = await async_empty_index()
    await index.stop_words.update(["the"])
    await index.synonyms.reset()
    response = await index.get_tasks()

    assert len(response) == 2
