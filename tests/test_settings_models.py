import pytest
from pydantic import ValidationError

from meilisearch_settings.errors import MeilisearchValidationError
from meilisearch_settings.index._common import settings_payload
from meilisearch_settings.models.settings import (
    DEFAULT_RANKING_RULES,
    SETTINGS_ALIASES,
    MeilisearchSettings,
)


def test_defaults():
    settings = MeilisearchSettings()

    assert settings.ranking_rules == list(DEFAULT_RANKING_RULES)
    assert settings.distinct_attribute is None
    assert settings.searchable_attributes == ["*"]
    assert settings.displayed_attributes == ["*"]
    assert settings.stop_words == []
    assert settings.synonyms == {}
    assert settings.filterable_attributes == []
    assert settings.sortable_attributes == []


def test_defaults_are_not_shared():
    first = MeilisearchSettings()
    first.ranking_rules.append("desc(year)")

    assert MeilisearchSettings().ranking_rules == list(DEFAULT_RANKING_RULES)


def test_from_response_missing_and_null_facets():
    settings = MeilisearchSettings.from_response(
        {"stopWords": ["the"], "rankingRules": None, "typoTolerance": {"enabled": True}}
    )

    assert settings.stop_words == ["the"]
    assert settings.ranking_rules == list(DEFAULT_RANKING_RULES)
    assert settings.displayed_attributes == ["*"]


@pytest.mark.parametrize("response_json", (None, {}))
def test_from_response_empty(response_json):
    assert MeilisearchSettings.from_response(response_json) == MeilisearchSettings()


def test_update_payload_only_set_fields():
    settings = MeilisearchSettings(stop_words=["the"], distinct_attribute=None)

    assert settings.to_update_payload() == {"stopWords": ["the"], "distinctAttribute": None}


def test_stop_words_string():
    assert MeilisearchSettings(stop_words="the").stop_words == ["the"]


def test_synonyms_normalized():
    settings = MeilisearchSettings(synonyms={" 'Wolverine' ": ["logan"]})

    assert settings.synonyms == {"wolverine": ["logan"]}


def test_settings_aliases():
    assert SETTINGS_ALIASES["rankingRules"] == "ranking_rules"
    assert SETTINGS_ALIASES["distinctAttribute"] == "distinct_attribute"
    assert len(SETTINGS_ALIASES) == 8


def test_settings_payload_mapping():
    payload = settings_payload(
        {
            "stop_words": "the",
            "synonyms": {b"Logan": ["wolverine"]},
            "rankingRules": None,
            "sortable_attributes": ["title"],
        }
    )

    assert payload == {
        "stopWords": ["the"],
        "synonyms": {"logan": ["wolverine"]},
        "rankingRules": None,
        "sortableAttributes": ["title"],
    }


def test_settings_payload_model():
    payload = settings_payload(MeilisearchSettings(filterable_attributes=["genre"]))

    assert payload == {"filterableAttributes": ["genre"]}


def test_settings_payload_unknown_key():
    with pytest.raises(MeilisearchValidationError) as e:
        settings_payload({"faceting": {"maxValuesPerFacet": 10}})

    assert "faceting" in str(e.value)


@pytest.mark.parametrize(
    "field, value", (("stop_words", {"the": 1}), ("ranking_rules", 42), ("synonyms", ["logan"]))
)
def test_wrong_type_raises_when_built(field, value):
    with pytest.raises(ValidationError):
        MeilisearchSettings(**{field: value})


def test_settings_payload_mapping_not_checked():
    assert settings_payload({"stop_words": {"the": 1}}) == {"stopWords": {"the": 1}}
