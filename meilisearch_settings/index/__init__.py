from meilisearch_settings.index.async_index import AsyncIndex
from meilisearch_settings.index.index import Index

__all__ = ["AsyncIndex", "Index"]
