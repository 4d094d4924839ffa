"""Base embedding provider interface.

Defines the contract the embedding adapter depends on, independent of the
backing service (OpenAI, Hugging Face Inference, etc.).
"""

from abc import ABC, abstractmethod
from typing import List


class EmbeddingProvider(ABC):
    """Abstract base class for embedding providers.

    Implementations perform exactly one request per ``embed`` call and raise
    ``ProviderFailure`` for any error, including malformed payloads. Retries,
    caching and timeouts are not handled here.
    """

    name: str = "provider"

    @property
    def is_configured(self) -> bool:
        """Whether the provider has what it needs (e.g. an API key) to run."""
        return True

    @abstractmethod
    async def embed(self, text: str) -> List[float]:
        """Return the embedding vector for ``text``.

        Raises
        - ``ProviderFailure`` when the provider cannot produce a vector
        """
        pass


class ProviderFailure(Exception):
    """An embedding provider failed to produce a vector."""

    def __init__(self, provider: str, message: str):
        super().__init__(f"{provider}: {message}")
        self.provider = provider

