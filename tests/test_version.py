from meilisearch_settings import __version__
from meilisearch_settings._http_requests import user_agent


def test_user_agent():
    assert user_agent() == f"Meilisearch Settings (v{__version__})"
