"""Shared fixtures for search tests."""

from typing import Dict, List, Optional

import pytest
from prometheus_client import CollectorRegistry

from libs.common.metrics import MetricsCollector
from libs.embeddings.base import EmbeddingProvider, ProviderFailure
from service_search.models import SearchableItem
from service_search.retrievers.corpus import seed_items


class StaticEmbed:
    """Async embed function answering from a lookup table.

    Unknown texts get ``default``; every call is recorded.
    """

    def __init__(self, vectors: Optional[Dict[str, List[float]]] = None, default=None):
        self.vectors = vectors or {}
        self.default = default if default is not None else []
        self.calls: List[str] = []

    async def __call__(self, text: str) -> List[float]:
        self.calls.append(text)
        return list(self.vectors.get(text, self.default))


class FakeProvider(EmbeddingProvider):
    """Provider returning a fixed vector or raising ``ProviderFailure``."""

    def __init__(self, name: str, vector=None, fail: bool = False, configured: bool = True):
        self.name = name
        self.vector = vector if vector is not None else []
        self.fail = fail
        self.configured = configured
        self.calls = 0

    @property
    def is_configured(self) -> bool:
        return self.configured

    async def embed(self, text: str) -> List[float]:
        self.calls += 1
        if self.fail:
            raise ProviderFailure(self.name, "simulated outage")
        return list(self.vector)


def make_item(item_id: str, text: str, owner_id: str = "owner", **kwargs) -> SearchableItem:
    return SearchableItem(id=item_id, text=text, owner_id=owner_id, **kwargs)


@pytest.fixture
def seed_corpus() -> List[SearchableItem]:
    return seed_items()


@pytest.fixture
def metrics() -> MetricsCollector:
    return MetricsCollector("test-service", registry=CollectorRegistry())
