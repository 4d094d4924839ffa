"""Embedding adapter factory.

Centralizes creation of the provider chain so callers depend only on
``EmbeddingConfig``. New providers are added here without changing call
sites.
"""

from enum import Enum
from typing import List, Optional

import httpx
import structlog

from libs.common.config import EmbeddingConfig
from libs.common.metrics import MetricsCollector
from .adapter import EmbeddingAdapter
from .base import EmbeddingProvider
from .providers import HuggingFaceEmbeddingProvider, OpenAIEmbeddingProvider

logger = structlog.get_logger("embeddings.factory")


class EmbeddingProviderType(Enum):
    """Supported embedding providers."""
    OPENAI = "openai"
    HUGGINGFACE = "huggingface"


def create_provider(
    provider_type: EmbeddingProviderType,
    config: EmbeddingConfig,
    http_client: httpx.AsyncClient,
) -> EmbeddingProvider:
    """Create one provider from config."""
    if provider_type == EmbeddingProviderType.OPENAI:
        return OpenAIEmbeddingProvider(
            http_client=http_client,
            api_key=config.ml_openai_api_key,
            model=config.ml_openai_embedding_model,
            base_url=config.ml_openai_base_url,
        )

    if provider_type == EmbeddingProviderType.HUGGINGFACE:
        return HuggingFaceEmbeddingProvider(
            http_client=http_client,
            api_key=config.ml_huggingface_api_key,
            model=config.ml_huggingface_model,
            base_url=config.ml_huggingface_base_url,
        )

    raise ValueError(f"Unsupported embedding provider: {provider_type}")


def create_embedding_adapter(
    config: EmbeddingConfig,
    http_client: Optional[httpx.AsyncClient] = None,
    metrics: Optional[MetricsCollector] = None,
) -> EmbeddingAdapter:
    """Build the ordered provider chain described by ``config``.

    Parameters
    - config: ``EmbeddingConfig`` (or a subclass such as ``SearchConfig``)
    - http_client: Shared client; when omitted one is created and owned by
      the returned adapter
    - metrics: Optional collector for per-attempt samples

    Raises
    - ValueError: for an unknown provider name
    """
    owned_client = None
    if http_client is None:
        # The adapter enforces its own per-call bound; this is a backstop.
        owned_client = httpx.AsyncClient(timeout=config.ml_embedding_timeout_seconds + 5.0)
        http_client = owned_client

    providers: List[EmbeddingProvider] = []
    for name in config.provider_names:
        try:
            provider_type = EmbeddingProviderType(name)
        except ValueError:
            raise ValueError(f"Unknown embedding provider: {name}") from None
        provider = create_provider(provider_type, config, http_client)
        providers.append(provider)

    logger.info(
        "Embedding adapter created",
        providers=[p.name for p in providers],
        configured=[p.name for p in providers if p.is_configured],
        timeout_seconds=config.ml_embedding_timeout_seconds
    )

    return EmbeddingAdapter(
        providers=providers,
        timeout_seconds=config.ml_embedding_timeout_seconds,
        failure_threshold=config.ml_embedding_failure_threshold,
        recovery_timeout=config.ml_embedding_recovery_timeout,
        metrics=metrics,
        http_client=owned_client,
    )
