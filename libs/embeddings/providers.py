"""HTTP embedding providers.

Each provider wraps one hosted embedding API behind ``EmbeddingProvider``.
Providers share an ``httpx.AsyncClient`` owned by the caller and translate
every transport, status or payload problem into ``ProviderFailure``.
"""

from numbers import Real
from typing import Any, List, Optional

import httpx

from .base import EmbeddingProvider, ProviderFailure


def _as_vector(provider: str, payload: Any) -> List[float]:
    """Validate a decoded JSON value as a flat numeric vector."""
    if not isinstance(payload, list):
        raise ProviderFailure(provider, f"expected a list, got {type(payload).__name__}")
    if not all(isinstance(v, Real) and not isinstance(v, bool) for v in payload):
        raise ProviderFailure(provider, "embedding contains non-numeric values")
    return [float(v) for v in payload]


class _HTTPEmbeddingProvider(EmbeddingProvider):
    """Shared request/response handling for JSON-over-HTTP providers."""

    def __init__(self, http_client: httpx.AsyncClient, api_key: Optional[str]):
        self.http_client = http_client
        self.api_key = api_key

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def _post_json(self, url: str, body: dict) -> Any:
        try:
            response = await self.http_client.post(
                url,
                json=body,
                headers={"Authorization": f"Bearer {self.api_key}"},
            )
        except httpx.HTTPError as e:
            raise ProviderFailure(self.name, f"request failed: {e}") from e

        if response.status_code != 200:
            raise ProviderFailure(
                self.name, f"returned status {response.status_code}"
            )

        try:
            return response.json()
        except ValueError as e:
            raise ProviderFailure(self.name, "response is not valid JSON") from e


class OpenAIEmbeddingProvider(_HTTPEmbeddingProvider):
    """OpenAI ``/embeddings`` endpoint."""

    name = "openai"

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        api_key: Optional[str],
        model: str = "text-embedding-3-small",
        base_url: str = "https://api.openai.com/v1",
    ):
        super().__init__(http_client, api_key)
        self.model = model
        self.base_url = base_url.rstrip("/")

    async def embed(self, text: str) -> List[float]:
        data = await self._post_json(
            f"{self.base_url}/embeddings",
            {"model": self.model, "input": text},
        )
        try:
            vector = data["data"][0]["embedding"]
        except (KeyError, IndexError, TypeError) as e:
            raise ProviderFailure(self.name, "response has no embedding") from e
        return _as_vector(self.name, vector)


class HuggingFaceEmbeddingProvider(_HTTPEmbeddingProvider):
    """Hugging Face Inference API feature-extraction pipeline.

    The pipeline answers a single input with either a flat vector or a
    one-element list wrapping it; both shapes are accepted.
    """

    name = "huggingface"

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        api_key: Optional[str],
        model: str = "sentence-transformers/all-MiniLM-L6-v2",
        base_url: str = "https://api-inference.huggingface.co",
    ):
        super().__init__(http_client, api_key)
        self.model = model
        self.base_url = base_url.rstrip("/")

    async def embed(self, text: str) -> List[float]:
        data = await self._post_json(
            f"{self.base_url}/pipeline/feature-extraction/{self.model}",
            {"inputs": text, "options": {"wait_for_model": True}},
        )
        if isinstance(data, list) and data and isinstance(data[0], list):
            data = data[0]
        return _as_vector(self.name, data)
