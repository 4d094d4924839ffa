"""Embedding provider adapter.

Primary components:
- ``base``: abstract ``EmbeddingProvider`` interface and ``ProviderFailure``.
- ``providers``: OpenAI and Hugging Face HTTP providers.
- ``adapter``: ``EmbeddingAdapter``, the ordered-fallback ``embed`` function.
- ``factory``: builds the adapter from ``EmbeddingConfig``.

Guidance:
- Prefer ``factory.create_embedding_adapter`` so services stay decoupled from
  specific providers.
"""

from .adapter import EmbeddingAdapter
from .base import EmbeddingProvider, ProviderFailure
from .factory import create_embedding_adapter

__all__ = [
    "EmbeddingAdapter",
    "EmbeddingProvider",
    "ProviderFailure",
    "create_embedding_adapter",
]
