"""Tests for the search manager."""

import pytest

from libs.common.config import SearchConfig
from service_search.hybrid.pagination import InvalidQueryError
from service_search.hybrid.ranker import HybridRanker
from service_search.hybrid.scope import ScopeOptions
from service_search.hybrid.search_manager import SearchManager
from service_search.models import SearchQuery
from service_search.retrievers.corpus import InMemoryCorpusProvider
from tests.conftest import StaticEmbed, make_item


def build_manager(items, embed=None, metrics=None, **kwargs) -> SearchManager:
    return SearchManager(
        corpus_provider=InMemoryCorpusProvider(items),
        ranker=HybridRanker(embed=embed or StaticEmbed()),
        metrics=metrics,
        **kwargs,
    )


@pytest.mark.asyncio
async def test_empty_query_pages_through_whole_corpus(seed_corpus):
    manager = build_manager(seed_corpus)

    first = await manager.search(SearchQuery(raw="", page=1, page_size=5))
    assert len(first.items) == 5
    assert first.total_count == 15
    assert first.has_more is True
    assert [r.item.id for r in first.items] == ["1", "2", "3", "4", "5"]
    assert all(r.similarity is None for r in first.items)

    last = await manager.search(SearchQuery(raw="", page=3, page_size=5))
    assert len(last.items) == 5
    assert last.total_count == 15
    assert last.has_more is False


@pytest.mark.asyncio
async def test_text_query_is_capped_at_max_candidates(seed_corpus):
    manager = build_manager(seed_corpus)

    page = await manager.search(SearchQuery(raw="game", page=1, page_size=20))

    assert page.total_count == 10
    assert page.items[0].item.text == "Looking for a new game to play"


@pytest.mark.asyncio
async def test_exclude_owner_removes_best_lexical_match():
    items = [
        make_item("mine", "Looking for a new game to play", owner_id="me"),
        make_item("theirs", "Need an easy meal to cook", owner_id="them"),
    ]
    manager = build_manager(items)

    page = await manager.search(SearchQuery(raw="game", exclude_owner_id="me"))

    assert [r.item.id for r in page.items] == ["theirs"]


@pytest.mark.asyncio
async def test_inactive_items_hidden_by_default():
    items = [make_item("1", "game", is_active=False), make_item("2", "game")]

    page = await build_manager(items).search(SearchQuery(raw="game"))
    assert [r.item.id for r in page.items] == ["2"]

    page = await build_manager(items, active_only=False).search(SearchQuery(raw="game"))
    assert [r.item.id for r in page.items] == ["1", "2"]


@pytest.mark.asyncio
async def test_explicit_scope_overrides_default():
    items = [
        make_item("1", "game", tags=("fun",)),
        make_item("2", "game", tags=("work",)),
    ]
    page = await build_manager(items).search(
        SearchQuery(raw="game"), ScopeOptions(tags=("work",))
    )
    assert [r.item.id for r in page.items] == ["2"]


@pytest.mark.asyncio
async def test_explicit_scope_inherits_query_owner_exclusion():
    items = [
        make_item("mine", "Looking for a new game to play", owner_id="me", tags=("fun",)),
        make_item("theirs", "Need an easy meal to cook", owner_id="them", tags=("fun",)),
    ]
    manager = build_manager(items)

    page = await manager.search(
        SearchQuery(raw="game", exclude_owner_id="me"), ScopeOptions(tags=("fun",))
    )
    assert [r.item.id for r in page.items] == ["theirs"]

    # an exclusion set on the scope itself wins
    page = await manager.search(
        SearchQuery(raw="game", exclude_owner_id="me"),
        ScopeOptions(tags=("fun",), exclude_owner_id="them"),
    )
    assert [r.item.id for r in page.items] == ["mine"]


@pytest.mark.asyncio
async def test_invalid_page_raises_before_fetching():
    class ExplodingProvider(InMemoryCorpusProvider):
        async def fetch(self):
            raise AssertionError("fetch should not be called")

    manager = SearchManager(ExplodingProvider(), HybridRanker(embed=StaticEmbed()))
    with pytest.raises(InvalidQueryError):
        await manager.search(SearchQuery(raw="game", page=0))
    with pytest.raises(InvalidQueryError):
        await manager.search(SearchQuery(raw="game", page_size=-1))


@pytest.mark.asyncio
async def test_embedding_outage_still_returns_results(seed_corpus):
    async def down(text):
        raise ConnectionError("provider unreachable")

    page = await build_manager(seed_corpus, embed=down).search(SearchQuery(raw="cook a meal"))
    assert page.items[0].item.id == "2"


@pytest.mark.asyncio
async def test_search_records_mode_metric(seed_corpus, metrics):
    manager = build_manager(seed_corpus, metrics=metrics)

    await manager.search(SearchQuery(raw=""))
    await manager.search(SearchQuery(raw="game"))

    assert metrics.registry.get_sample_value("search_requests_total", {"mode": "browse"}) == 1.0
    assert metrics.registry.get_sample_value("search_requests_total", {"mode": "lexical"}) == 1.0


@pytest.mark.asyncio
async def test_from_config_uses_configured_parameters(seed_corpus, monkeypatch):
    monkeypatch.chdir("/")
    config = SearchConfig(
        ml_search_semantic_threshold=0.5,
        ml_search_max_candidates=3,
        ml_search_default_page_size=7,
        ml_search_active_only=False,
    )
    manager = SearchManager.from_config(config, InMemoryCorpusProvider(seed_corpus), StaticEmbed())

    assert manager.ranker.semantic_threshold == 0.5
    assert manager.ranker.max_candidates == 3
    assert manager.default_page_size == 7
    assert manager.active_only is False

    page = await manager.search(SearchQuery(raw="new"))
    assert page.total_count == 3
