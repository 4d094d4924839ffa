"""Lexical scorers used by the fallback ranking path.

- ``lexical_similarity``: Sørensen–Dice coefficient over character bigrams
- ``word_overlap``: share of query tokens found verbatim in a candidate
- ``item_words``: the candidate token set for an item (text, tags, location)
- ``normalize_query``: the single query clean-up applied before ranking
"""

import re
import unicodedata
from collections import Counter
from typing import AbstractSet, Set

from ..models import SearchableItem

_WHITESPACE = re.compile(r"\s+")


def _bigrams(text: str) -> Counter:
    return Counter(text[i:i + 2] for i in range(len(text) - 1))


def lexical_similarity(a: str, b: str) -> float:
    """Case-insensitive string similarity in [0, 1].

    Identical strings score 1.0 and blank strings score 0.0. Otherwise the
    score is ``2 * |shared bigrams| / (|bigrams(a)| + |bigrams(b)|)`` over
    bigram multisets, which is symmetric by construction.
    """
    a = a.strip().lower()
    b = b.strip().lower()
    if not a or not b:
        return 0.0
    if a == b:
        return 1.0

    bigrams_a = _bigrams(a)
    bigrams_b = _bigrams(b)
    total = sum(bigrams_a.values()) + sum(bigrams_b.values())
    if total == 0:
        return 0.0

    shared = sum((bigrams_a & bigrams_b).values())
    return 2.0 * shared / total


def tokenize(text: str) -> list:
    """Lowercase whitespace tokens, empties dropped."""
    return text.lower().split()


def word_overlap(query: str, candidate_words: AbstractSet[str]) -> float:
    """Fraction of query tokens present in ``candidate_words``.

    Repeated query tokens each count. A query without tokens scores 0.0.
    """
    query_tokens = tokenize(query)
    if not query_tokens:
        return 0.0

    candidates = {word.lower() for word in candidate_words}
    matches = sum(1 for token in query_tokens if token in candidates)
    return matches / len(query_tokens)


def item_words(item: SearchableItem) -> Set[str]:
    """Union of the words of an item's text, tags and location."""
    words: Set[str] = set(tokenize(item.text))
    words.update(tokenize(" ".join(item.tags)))
    words.update(tokenize(item.location or ""))
    return words


def normalize_query(raw: str) -> str:
    """Strip control characters, collapse whitespace, trim and lowercase."""
    cleaned = "".join(
        " " if unicodedata.category(ch).startswith("C") else ch
        for ch in raw
    )
    return _WHITESPACE.sub(" ", cleaned).strip().lower()

