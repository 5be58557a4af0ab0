"""Helpers for working with synonyms dictionaries.

The same term can reach Meilisearch written in more than one way: as a `str`, as `bytes`, as a
member of a string `Enum`, quoted or not, in any case. Meilisearch treats all of these as one
term, so these helpers do too.
"""

from __future__ import annotations

from collections.abc import Hashable
from enum import Enum
from typing import Any

from meilisearch_settings.types import SynonymsInput

_QUOTES = ("'", '"')


def _to_text(value: Any) -> str:
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8")

    return str(value)


def normalize_term(term: Hashable) -> str:
    """Reduce a synonyms key to the single form Meilisearch stores."""
    text = _to_text(term).strip()
    if len(text) >= 2 and text[0] == text[-1] and text[0] in _QUOTES:
        text = text[1:-1].strip()

    return text.lower()


def normalize_synonyms(synonyms: SynonymsInput) -> dict[str, list[str]]:
    """Give every key a single textual form.

    Alternatives keep the order they were given in. If two keys normalize to the same term their
    alternatives are merged, dropping duplicates.

    Args:
        synonyms: Mapping of a term to the alternatives for that term.

    Returns:
        A new dictionary with normalized keys.

    Examples
        >>> normalize_synonyms({b"Wolverine": ["logan", "weapon x"]})
        {'wolverine': ['logan', 'weapon x']}
    """
    normalized: dict[str, list[str]] = {}
    for term, alternatives in synonyms.items():
        if isinstance(alternatives, (str, bytes)):
            alternatives = [alternatives]
        merged = normalized.setdefault(normalize_term(term), [])
        for alternative in alternatives:
            text = _to_text(alternative)
            if text not in merged:
                merged.append(text)

    return normalized


def synonyms_equal(
    a: SynonymsInput | None, b: SynonymsInput | None
) -> bool:
    """Compare two synonyms dictionaries ignoring key representation and alternative order.

    `None` is treated the same as an empty dictionary.

    Examples
        >>> synonyms_equal({"wolverine": ["logan", "weapon x"]}, {"Wolverine": ["weapon x", "logan"]})
        True
        >>> synonyms_equal({}, {"wolverine": ["logan"]})
        False
    """
    left = normalize_synonyms(a or {})
    right = normalize_synonyms(b or {})

    if left.keys() != right.keys():
        return False

    return all(sorted(alternatives) == sorted(right[term]) for term, alternatives in left.items())
