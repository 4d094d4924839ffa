"""Search scoring components.

This package contains the scorers the hybrid ranker combines.

Contents
- ``lexical``: bigram string similarity, word overlap, query normalization
- ``vector``: cosine similarity between embeddings
"""

from .lexical import item_words, lexical_similarity, normalize_query, word_overlap
from .vector import cosine_similarity

__all__ = [
    "cosine_similarity",
    "item_words",
    "lexical_similarity",
    "normalize_query",
    "word_overlap",
]
